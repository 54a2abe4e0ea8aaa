"""Block extractor: finds ``http`` code blocks and everything that belongs to them.

Single forward pass over the root's children with one block of lookahead:

* a heading is remembered until the next ``http`` block (a later heading
  replaces it) and supplies that block's title;
* prose between the heading and the ``http`` block becomes the description;
* a non-``http`` code block directly after the ``http`` block is its body.

A heading is used at most once: two ``http`` blocks in a row under one
heading give the second one no title.
"""

import logging

from reqmd.errors import MissingPositionError
from reqmd.http.request import TextBody
from reqmd.parser.base import BodyData, RequestDescriptor
from reqmd.parser.grammar import parse_http_block
from reqmd.parser.markdown import Code, Heading, Node, Root
from reqmd.parser.position import Range, slice_source

logger = logging.getLogger(__name__)

HTTP_LANG = "http"


def extract_requests(root: Root, source: str) -> list[RequestDescriptor]:
    """Collect a RequestDescriptor for every ``http`` block, in document order."""
    requests: list[RequestDescriptor] = []
    pending_heading: Heading | None = None
    children = root.children
    index = 0

    while index < len(children):
        node = children[index]
        index += 1

        if isinstance(node, Heading):
            pending_heading = node
            continue
        if not is_http_block(node):
            continue

        data = parse_http_block(node.value)
        data.position = require_position(node).model_copy(deep=True)

        following = children[index] if index < len(children) else None
        if isinstance(following, Code) and not is_http_block(following):
            index += 1
            data.body = body_from_code(following)
            data.position.extend(require_position(following))

        if pending_heading is not None:
            apply_heading(data, pending_heading, source)
            pending_heading = None

        requests.append(data)

    logger.debug("extracted %d request(s)", len(requests))
    return requests


def is_http_block(node: Node) -> bool:
    return isinstance(node, Code) and node.lang == HTTP_LANG


def require_position(node: Node) -> Range:
    if node.position is None:
        raise MissingPositionError(node.kind)
    return node.position


def body_from_code(block: Code) -> BodyData:
    return BodyData(
        content=TextBody(text=block.value),
        lang=block.lang,
        meta=block.meta,
        position=require_position(block).model_copy(deep=True),
    )


def apply_heading(data: RequestDescriptor, heading: Heading, source: str) -> None:
    """Set title and description from ``heading`` and widen the position over it."""
    position = require_position(heading)
    data.title = position.slice(source).lstrip("#").strip()

    between = position.range_between(data.position)
    if between is not None:
        description = slice_source(source, *between).strip()
        if description:
            data.description = description

    data.position.extend(position)
