"""Source positions: points and half-open byte ranges.

Offsets are UTF-8 byte offsets into the Markdown source and are the only
comparison key. Line and column are carried for diagnostics.
"""

from functools import total_ordering

from pydantic import BaseModel, Field

from reqmd.errors import OffsetError


@total_ordering
class Point(BaseModel):
    """A location in the source (line and column start at 1)."""

    line: int = 1
    column: int = 1
    offset: int = 0

    def __eq__(self, other):
        if not isinstance(other, Point):
            return NotImplemented
        return self.offset == other.offset

    def __lt__(self, other):
        if not isinstance(other, Point):
            return NotImplemented
        return self.offset < other.offset

    def __hash__(self):
        return hash(self.offset)


class Range(BaseModel):
    """Start and end points of a node in the source."""

    start: Point = Field(default_factory=Point)
    end: Point = Field(default_factory=Point)

    def extend(self, other: "Range") -> None:
        """Grow this range in place so that it also covers ``other``."""
        if other.start < self.start:
            self.start = other.start.model_copy()
        if other.end > self.end:
            self.end = other.end.model_copy()

    def contains_line(self, line: int) -> bool:
        return self.start.line <= line <= self.end.line

    def exclusive_with(self, other: "Range") -> bool:
        """True when the two ranges do not overlap or touch."""
        return self.start > other.end or self.end < other.start

    def range_between(self, other: "Range") -> tuple[int, int] | None:
        """Byte span strictly between two exclusive ranges, else None."""
        if not self.exclusive_with(other):
            return None
        if self.end < other.start:
            return self.end.offset, other.start.offset
        return other.end.offset, self.start.offset

    def slice(self, source: str) -> str:
        return slice_source(source, self.start.offset, self.end.offset, self)


def slice_source(source: str, start: int, end: int, range: Range | None = None) -> str:
    """Return the text between two byte offsets of ``source``.

    Raises OffsetError if the offsets fall outside the source or split a
    multi-byte character, which happens when a range is applied to a
    different string than the one it was computed from.
    """
    data = source.encode("utf-8")
    if not 0 <= start <= end <= len(data):
        raise OffsetError(range or _span(start, end), len(data))
    try:
        return data[start:end].decode("utf-8")
    except UnicodeDecodeError:
        raise OffsetError(range or _span(start, end), len(data)) from None


def _span(start: int, end: int) -> Range:
    return Range(start=Point(offset=start), end=Point(offset=end))
