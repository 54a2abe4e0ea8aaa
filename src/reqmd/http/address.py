"""Server addresses: ``scheme://host[:port]``."""

import re
from enum import Enum

from pydantic import BaseModel, Field, model_serializer, model_validator

from reqmd.errors import AddressError

_ADDRESS_RE = re.compile(
    r"^(?P<scheme>[A-Za-z][A-Za-z0-9+.-]*)://"
    r"(?P<host>\[[0-9A-Fa-f:.]+\]|[^\s/:?#\[\]@]+)"
    r"(?::(?P<port>\d{1,5}))?/?$"
)


class Scheme(str, Enum):
    HTTP = "http"
    HTTPS = "https"

    @classmethod
    def parse(cls, text: str) -> "Scheme | None":
        for scheme in cls:
            if scheme.value == text.lower():
                return scheme
        return None


class Address(BaseModel):
    """Access address of an HTTP server."""

    scheme: Scheme = Scheme.HTTP
    host: str = "localhost"
    port: int | None = None

    @classmethod
    def parse(cls, text: str) -> "Address":
        match = _ADDRESS_RE.match(text.strip())
        if not match:
            raise AddressError(f"Error Parsing AddressString: {text!r} is not scheme://host[:port]")
        scheme = Scheme.parse(match.group("scheme"))
        if scheme is None:
            raise AddressError(f"Error Parsing AddressString: unsupported scheme in {text!r}")
        port = match.group("port")
        if port is not None and not 0 < int(port) < 65536:
            raise AddressError(f"Error Parsing AddressString: invalid port in {text!r}")
        return cls(
            scheme=scheme,
            host=match.group("host").lower(),
            port=int(port) if port is not None else None,
        )

    def base_url(self) -> str:
        if self.port is None:
            return f"{self.scheme.value}://{self.host}"
        return f"{self.scheme.value}://{self.host}:{self.port}"


class AddressString(BaseModel):
    """A parsed address that remembers the literal it came from.

    Serializes back to the literal string, so front matter round-trips
    exactly as written.
    """

    address: Address = Field(default_factory=Address)
    data: str = ""

    @classmethod
    def parse(cls, text: str) -> "AddressString":
        return cls(address=Address.parse(text), data=text)

    @property
    def scheme(self) -> Scheme:
        return self.address.scheme

    @property
    def host(self) -> str:
        return self.address.host

    @property
    def port(self) -> int | None:
        return self.address.port

    def as_str(self) -> str:
        return self.data

    @model_serializer
    def _serialize(self) -> str:
        return self.data

    @model_validator(mode="before")
    @classmethod
    def _from_literal(cls, value):
        if isinstance(value, str):
            try:
                return {"address": Address.parse(value), "data": value}
            except AddressError as err:
                raise ValueError(str(err)) from err
        return value
