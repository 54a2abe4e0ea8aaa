"""Transport-ready HTTP request values.

``RequestFactory`` holds the per-document skeleton (address, headers, query),
``RequestBuilder`` is the mutable request handed to factory processors, and
``Request`` is the finished value a transport sends.
"""

from enum import Enum
from typing import Annotated, Iterable, Iterator, Literal, Union
from urllib.parse import urlencode

from pydantic import BaseModel, ConfigDict, Field, RootModel, field_validator

from reqmd.http.address import Address


class Method(str, Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    PATCH = "PATCH"
    HEAD = "HEAD"
    CONNECT = "CONNECT"
    OPTIONS = "OPTIONS"
    TRACE = "TRACE"

    @classmethod
    def parse(cls, text: str) -> "Method | None":
        """Exact, upper-case match of a known verb."""
        try:
            return cls(text)
        except ValueError:
            return None


class KeyValue(BaseModel):
    """A single header line or query parameter."""

    model_config = ConfigDict(extra="forbid")

    key: str
    value: str

    @field_validator("key", "value", mode="before")
    @classmethod
    def _scalar_to_str(cls, value):
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, (int, float)):
            return str(value)
        return value


class _Pairs(RootModel[list[KeyValue]]):
    """Ordered key/value pairs; duplicate keys are kept."""

    root: list[KeyValue] = Field(default_factory=list)

    @classmethod
    def from_pairs(cls, pairs: Iterable[tuple[str, str]]):
        return cls([KeyValue(key=k, value=v) for k, v in pairs])

    def _matches(self, stored: str, key: str) -> bool:
        return stored == key

    def add(self, key: str, value: str) -> None:
        self.root.append(KeyValue(key=key, value=value))

    def extend(self, other: Iterable[KeyValue]) -> None:
        self.root.extend(pair.model_copy() for pair in other)

    def values_for(self, key: str) -> list[str]:
        return [pair.value for pair in self.root if self._matches(pair.key, key)]

    def first(self, key: str) -> str | None:
        for pair in self.root:
            if self._matches(pair.key, key):
                return pair.value
        return None

    def pairs(self) -> list[tuple[str, str]]:
        return [(pair.key, pair.value) for pair in self.root]

    def is_empty(self) -> bool:
        return not self.root

    def __iter__(self) -> Iterator[KeyValue]:
        return iter(self.root)

    def __len__(self) -> int:
        return len(self.root)


class Headers(_Pairs):
    """Header lines; lookups ignore ASCII case."""

    def _matches(self, stored: str, key: str) -> bool:
        return stored.lower() == key.lower()


class QueryString(_Pairs):
    """Query parameters; lookups are case-sensitive."""


class NoBody(BaseModel):
    kind: Literal["none"] = "none"

    def as_text(self) -> str | None:
        return None


class TextBody(BaseModel):
    kind: Literal["text"] = "text"
    text: str

    def as_text(self) -> str | None:
        return self.text


class BinaryBody(BaseModel):
    model_config = ConfigDict(ser_json_bytes="base64")

    kind: Literal["binary"] = "binary"
    data: bytes

    def as_text(self) -> str | None:
        return None


RequestBody = Annotated[Union[NoBody, TextBody, BinaryBody], Field(discriminator="kind")]


class _RequestFields(BaseModel):
    address: Address = Field(default_factory=Address)
    method: Method = Method.GET
    path: str = "/"
    query: QueryString = Field(default_factory=QueryString)
    headers: Headers = Field(default_factory=Headers)
    body: RequestBody = Field(default_factory=NoBody)

    def url(self) -> str:
        """Full URL, query parameters percent-encoded in order."""
        path = self.path if self.path.startswith("/") else f"/{self.path}"
        url = self.address.base_url() + path
        if not self.query.is_empty():
            url += "?" + urlencode(self.query.pairs())
        return url


class Request(_RequestFields):
    model_config = ConfigDict(frozen=True)


class RequestBuilder(_RequestFields):
    """Mutable request, updated in place by factory processors."""

    def build(self) -> Request:
        return Request(**dict(self.model_copy(deep=True)))


class RequestFactory(BaseModel):
    """Skeleton every request of a document starts from."""

    address: Address = Field(default_factory=Address)
    headers: Headers = Field(default_factory=Headers)
    query: QueryString = Field(default_factory=QueryString)

    def builder(self) -> RequestBuilder:
        seed = self.model_copy(deep=True)
        return RequestBuilder(address=seed.address, headers=seed.headers, query=seed.query)
