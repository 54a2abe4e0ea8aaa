"""Markdown source to Document."""

from pathlib import Path

from reqmd.errors import MissingPositionError
from reqmd.parser.base import Document
from reqmd.parser.extractor import extract_requests
from reqmd.parser.frontmatter import read_meta
from reqmd.parser.markdown import parse_tree


def parse_markdown(source: str) -> Document:
    """Parse a Markdown string into a Document of request descriptors."""
    root = parse_tree(source)
    if root.position is None:
        raise MissingPositionError(root.kind)
    return Document(
        meta=read_meta(root),
        requests=extract_requests(root, source),
        position=root.position,
    )


class File:
    """A loaded Markdown source together with its parsed Document."""

    def __init__(self, source: str, path: Path | None = None):
        self.source = source
        self.path = path
        self.document = parse_markdown(source)

    @classmethod
    def read(cls, path: Path) -> "File":
        return cls(path.read_text(encoding="utf-8"), path)
