"""Built-in factory processors."""

import json
import os
import re
from typing import Mapping

import yaml

from reqmd.errors import AddressError
from reqmd.http.address import Address
from reqmd.http.request import RequestBuilder, TextBody
from reqmd.parser.base import RequestDescriptor

_VARIABLE = re.compile(r"\$(\w+)")


def expand_env_vars(text: str, env: Mapping[str, str]) -> str | None:
    """Replace ``$NAME`` tokens with values from ``env``.

    Unset variables are left as written. Returns None when nothing was
    replaced so callers can keep the original string.
    """
    expanded = False

    def replace(match: re.Match) -> str:
        nonlocal expanded
        value = env.get(match.group(1))
        if value is None:
            return match.group(0)
        expanded = True
        return value

    result = _VARIABLE.sub(replace, text)
    return result if expanded else None


class EnvVarExpansion:
    """Expands ``$NAME`` in header and query keys/values, the path and a text body."""

    name = "EnvVarExpander"

    def __init__(self, env: Mapping[str, str] | None = None):
        self.env = os.environ if env is None else env

    def apply(self, original: RequestDescriptor, request: RequestBuilder) -> None:
        for pair in [*request.headers, *request.query]:
            pair.key = self._expand(pair.key)
            pair.value = self._expand(pair.value)

        request.path = self._expand(request.path)

        text = request.body.as_text()
        if text is not None:
            expanded = expand_env_vars(text, self.env)
            if expanded is not None:
                request.body = TextBody(text=expanded)

    def _expand(self, text: str) -> str:
        expanded = expand_env_vars(text, self.env)
        return text if expanded is None else expanded


class ServerFromHostname:
    """Points the request at the server named by its ``Host`` header.

    A Host value without a scheme is read as ``http://``. Requests without a
    usable Host header are left untouched.
    """

    name = "ServerFromHostname"

    def apply(self, original: RequestDescriptor, request: RequestBuilder) -> None:
        host = request.headers.first("host")
        if host is None:
            return

        candidates = [host] if "://" in host else [host, f"http://{host}"]
        for candidate in candidates:
            try:
                request.address = Address.parse(candidate)
                return
            except AddressError:
                continue


class YamlAsJson:
    """Sends a ``yaml`` body tagged ``send-as-json`` as pretty-printed JSON.

    ```yaml send-as-json
    name: XFox
    tags: [new, shiny]
    ```
    """

    name = "YamlAsJsonProcessor"
    token = "send-as-json"

    def apply(self, original: RequestDescriptor, request: RequestBuilder) -> None:
        lang = (original.body.lang or "").lower()
        if lang not in ("yaml", "yml") or not self._requested(original.body.meta):
            return

        text = request.body.as_text()
        if text is None:
            return

        data = yaml.safe_load(text)
        request.body = TextBody(text=json.dumps(data, indent=2, ensure_ascii=False, default=str))

    def _requested(self, meta: str | None) -> bool:
        if not meta:
            return False
        return any(token.lower() == self.token for token in meta.split())
