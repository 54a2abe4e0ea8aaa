"""Built requests and how callers pick one of them."""

import json
import re
from pathlib import Path
from typing import Iterator, Literal

from pydantic import BaseModel, ConfigDict

from reqmd.errors import SelectionError
from reqmd.http.request import Request
from reqmd.parser.base import RequestDescriptor


class MdRequest(BaseModel):
    """A request built from one ``http`` block, plus the descriptor it came from."""

    model_config = ConfigDict(frozen=True)

    title: str | None = None
    description: str | None = None
    request: Request
    data: RequestDescriptor


def request_line(md_request: MdRequest) -> str:
    """``METHOD /path`` as written in the document."""
    return f"{md_request.data.method.value} {md_request.data.path}"


class MdRequestList:
    """Built requests in document order."""

    def __init__(self, requests: list[MdRequest] | None = None):
        self._requests = list(requests or [])

    def __len__(self) -> int:
        return len(self._requests)

    def __iter__(self) -> Iterator[MdRequest]:
        return iter(self._requests)

    def is_empty(self) -> bool:
        return not self._requests

    def first(self) -> MdRequest | None:
        return self._requests[0] if self._requests else None

    def last(self) -> MdRequest | None:
        return self._requests[-1] if self._requests else None

    def nth(self, n: int) -> MdRequest | None:
        """The n-th request, counting from 1."""
        if 1 <= n <= len(self._requests):
            return self._requests[n - 1]
        return None

    def at_line(self, line: int) -> MdRequest | None:
        """The request whose source range contains ``line`` (starts at 1)."""
        for md_request in self._requests:
            if md_request.data.position.contains_line(line):
                return md_request
        return None


_LINE = re.compile(r"^line(\d+)$")


class Selection(BaseModel):
    """Which request of a file to use: ``first``, ``last``, ``<n>`` or ``line<n>``."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["first", "last", "nth", "line"]
    number: int | None = None

    @classmethod
    def parse(cls, text: str) -> "Selection":
        if text in ("first", "last"):
            return cls(kind=text)
        match = _LINE.match(text)
        if match:
            return cls(kind="line", number=_positive(match.group(1), "line number must be a non-zero number"))
        return cls(kind="nth", number=_positive(text, "selection must be a non-zero number"))

    def select(self, requests: MdRequestList) -> MdRequest | None:
        if self.kind == "first":
            return requests.first()
        if self.kind == "last":
            return requests.last()
        if self.kind == "line":
            return requests.at_line(self.number)
        return requests.nth(self.number)

    def __str__(self) -> str:
        if self.kind == "line":
            return f"line{self.number}"
        if self.kind == "nth":
            return str(self.number)
        return self.kind


def _positive(text: str, message: str) -> int:
    if not text.isdigit() or int(text) == 0:
        raise SelectionError(f"{message}: {text!r}")
    return int(text)


class Target(BaseModel):
    """``{file}:{selection}``, e.g. ``api.md:2`` or ``api.md:line42``."""

    model_config = ConfigDict(frozen=True)

    file: Path
    selection: Selection

    @classmethod
    def parse(cls, text: str) -> "Target":
        path, sep, selection = text.rpartition(":")
        if not sep or not path:
            raise SelectionError("target requires `:` delimiter")
        return cls(file=Path(path), selection=Selection.parse(selection))


def dump_requests(requests: MdRequestList) -> list[dict]:
    """Interchange form: one ``{title, description, request, position}`` per request."""
    return [
        {
            "title": md_request.title,
            "description": md_request.description,
            "request": md_request.request.model_dump(mode="json"),
            "position": md_request.data.position.model_dump(mode="json"),
        }
        for md_request in requests
    ]


def dumps_requests(requests: MdRequestList) -> str:
    return json.dumps(dump_requests(requests), indent=2, ensure_ascii=False)
