"""Sends built requests over the network with httpx."""

import logging
import re

import httpx
from pydantic import BaseModel, Field

from reqmd.errors import TransportError
from reqmd.http.request import BinaryBody, Headers, NoBody, Request, RequestBody, TextBody

logger = logging.getLogger(__name__)

_TIMEOUT = re.compile(r"^(\d+)(ms|sec|min)$")
_UNITS = {"ms": 0.001, "sec": 1.0, "min": 60.0}


class Response(BaseModel):
    status: int
    headers: Headers = Field(default_factory=Headers)
    body: RequestBody = Field(default_factory=NoBody)


def parse_timeout(text: str | None) -> float | None:
    """Parse ``500ms``, ``15sec``, ``2min`` or ``none`` into seconds."""
    if text is None or not text.strip() or text.strip() == "none":
        return None
    match = _TIMEOUT.match(text.strip())
    if not match:
        raise ValueError(f"invalid timeout {text!r}, use a number followed by ms, sec or min")
    return int(match.group(1)) * _UNITS[match.group(2)]


class HttpClient:
    """Thin wrapper around ``httpx.Client``.

    Any status code counts as a successful send; only transport failures
    (connection errors, timeouts) raise.
    """

    def __init__(self, timeout: float | None = None, transport: httpx.BaseTransport | None = None):
        self.timeout = timeout
        self.transport = transport

    def send(self, request: Request) -> Response:
        logger.debug("sending %s %s", request.method.value, request.url())
        content = None
        if isinstance(request.body, TextBody):
            content = request.body.text.encode("utf-8")
        elif isinstance(request.body, BinaryBody):
            content = request.body.data

        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                response = client.request(
                    request.method.value,
                    request.url(),
                    headers=request.headers.pairs(),
                    content=content,
                )
        except httpx.HTTPError as e:
            raise TransportError(f"sending {request.method.value} {request.url()}: {e}") from e

        return Response(
            status=response.status_code,
            headers=Headers.from_pairs(response.headers.multi_items()),
            body=_response_body(response.content),
        )


def _response_body(data: bytes) -> RequestBody:
    if not data:
        return NoBody()
    try:
        return TextBody(text=data.decode("utf-8"))
    except UnicodeDecodeError:
        return BinaryBody(data=data)
