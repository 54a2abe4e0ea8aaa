"""Markdown document tree.

Wraps markdown-it-py (with the front-matter plugin) and keeps only the
top-level blocks the extractor needs, each annotated with its source range.
Ranges follow the unist convention: 1-based line and column, start at the
first character of the block, end right after its last character.
"""

from markdown_it import MarkdownIt
from mdit_py_plugins.front_matter import front_matter_plugin
from pydantic import BaseModel, Field

from reqmd.parser.position import Point, Range


class Node(BaseModel):
    position: Range | None = None

    @property
    def kind(self) -> str:
        return type(self).__name__


class Heading(Node):
    depth: int = 1
    text: str = ""


class Code(Node):
    lang: str | None = None
    meta: str | None = None
    value: str = ""


class FrontMatter(Node):
    value: str = ""


class Other(Node):
    """Any block the extractor does not look at (paragraphs, lists, ...)."""

    block: str = ""


class Root(Node):
    children: list[Node] = Field(default_factory=list)


_md = MarkdownIt("commonmark").use(front_matter_plugin)


def parse_tree(source: str) -> Root:
    """Parse Markdown into a Root whose children are its top-level blocks."""
    lines = _LineIndex(source)
    tokens = _md.parse(source)
    children: list[Node] = []

    for i, token in enumerate(tokens):
        if token.level != 0 or token.nesting == -1 or token.map is None:
            continue
        position = lines.block_range(*token.map)

        if token.type == "heading_open":
            inline = tokens[i + 1] if i + 1 < len(tokens) else None
            children.append(Heading(
                depth=int(token.tag[1:]),
                text=inline.content if inline is not None and inline.type == "inline" else "",
                position=position,
            ))
        elif token.type == "fence":
            lang, meta = _split_info(token.info)
            children.append(Code(lang=lang, meta=meta, value=_strip_newline(token.content), position=position))
        elif token.type == "code_block":
            children.append(Code(value=_strip_newline(token.content), position=position))
        elif token.type == "front_matter":
            children.append(FrontMatter(value=token.content, position=position))
        else:
            children.append(Other(block=token.type.removesuffix("_open"), position=position))

    return Root(children=children, position=lines.document_range())


def _split_info(info: str) -> tuple[str | None, str | None]:
    parts = info.strip().split(None, 1)
    lang = parts[0] if parts else None
    meta = parts[1].strip() if len(parts) > 1 else None
    return lang, meta or None


def _strip_newline(text: str) -> str:
    return text[:-1] if text.endswith("\n") else text


class _LineIndex:
    """Maps 0-based line numbers to byte offsets of ``source``."""

    def __init__(self, source: str):
        self.source = source
        self.lines = source.split("\n")
        self.byte_starts: list[int] = []
        offset = 0
        for line in self.lines:
            self.byte_starts.append(offset)
            offset += len(line.encode("utf-8")) + 1

    def text(self, index: int) -> str:
        return self.lines[index].rstrip("\r")

    def point(self, index: int, column: int) -> Point:
        prefix = self.lines[index][:column]
        return Point(
            line=index + 1,
            column=column + 1,
            offset=self.byte_starts[index] + len(prefix.encode("utf-8")),
        )

    def block_range(self, start: int, end: int) -> Range:
        last = min(end, len(self.lines)) - 1
        while last > start and not self.lines[last].strip():
            last -= 1
        first_line = self.text(start)
        indent = len(first_line) - len(first_line.lstrip(" \t"))
        return Range(start=self.point(start, indent), end=self.point(last, len(self.text(last))))

    def document_range(self) -> Range:
        last = len(self.lines) - 1
        return Range(start=self.point(0, 0), end=self.point(last, len(self.lines[last])))
