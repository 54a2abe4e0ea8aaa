"""Request-line grammar for ``http`` code blocks.

The block reads like a raw HTTP request::

    POST /api/v1/widgets?foo=bar
                        &rofl=copter
    Content-Type: application/json
    Authorization: Bearer abcd1234

Query parameters may be continued on following indented lines, with the
``&`` either ending the previous line or starting the continuation line.
Whitespace at the end of a line is ignored. A backslash escapes a
space, ``=``, ``&``, ``?`` or another backslash inside a key or value.
The whole block must match; leftover text is a GrammarError.
"""

import re

from reqmd.errors import GrammarError
from reqmd.http.request import Headers, Method, QueryString
from reqmd.parser.base import RequestDescriptor

_METHOD = re.compile(r"[A-Za-z]+")
_SPACE = re.compile(r"[ \t]+")
_PATH = re.compile(r"[A-Za-z0-9\-._~!$&'()*+,;=:/@]+")
_NEWLINE = re.compile(r"\r?\n")
_NEWLINE_INDENT = re.compile(r"\r?\n[ \t]+")
_QUERY_PART = re.compile(r"(?:[A-Za-z0-9@!\"'$%^*_\-+()<>\[\]{}/|;`.]|\\[ =&?\\])+")
_QUERY_SEPARATOR = re.compile(r"&(?:[ \t]*\r?\n[ \t]+)?|[ \t]*\r?\n[ \t]+&")
_LINE_END_SPACE = re.compile(r"[ \t]+(?=\r?\n|$)")
_HEADER_NAME = re.compile(r"[A-Za-z0-9_-]+")
_HEADER_VALUE = re.compile(r"(?:[A-Za-z0-9 @!\"#$%^&*()_\-+={}\[\]|;'<>,.?/`~]|:(?! ))+")
_TRAILING = re.compile(r"\s*")
_ESCAPE = re.compile(r"\\([ =&?\\])")


def parse_http_block(text: str) -> RequestDescriptor:
    """Parse the literal text of an ``http`` block into a descriptor.

    Only method, path, query and headers are filled in; the extractor adds
    body, title, description and position.
    """
    return _Parser(text).http_data()


class _Parser:
    def __init__(self, text: str):
        self.text = text
        self.pos = 0
        self.rule = "method"
        # furthest position a rule failed at, for "unexpected input" reports
        self.failed_at = -1
        self.failed_rule = "method"

    def match(self, pattern: re.Pattern, rule: str) -> str | None:
        self.rule = rule
        found = pattern.match(self.text, self.pos)
        if not found:
            self.failed(rule)
            return None
        self.pos = found.end()
        return found.group(0)

    def literal(self, value: str, rule: str) -> bool:
        self.rule = rule
        if self.text.startswith(value, self.pos):
            self.pos += len(value)
            return True
        self.failed(rule)
        return False

    def failed(self, rule: str) -> None:
        if self.pos >= self.failed_at:
            self.failed_at = self.pos
            self.failed_rule = rule

    def expect(self, pattern: re.Pattern, rule: str) -> str:
        found = self.match(pattern, rule)
        if found is None:
            raise self.error(f"expected {rule}")
        return found

    def error(self, message: str) -> GrammarError:
        rest = self.text[self.pos:]
        return GrammarError(rest.split("\n", 1)[0] or rest, self.rule, message)

    def http_data(self) -> RequestDescriptor:
        start = self.pos
        verb = self.expect(_METHOD, "method")
        method = Method.parse(verb)
        if method is None:
            self.pos = start
            raise self.error(f"unknown HTTP method {verb!r}")
        self.expect(_SPACE, "separator")
        path = self.expect(_PATH, "path")
        self.match(_LINE_END_SPACE, "line end")
        self.match(_NEWLINE_INDENT, "query continuation")
        query = self.query_string() if self.literal("?", "query") else QueryString()
        self.match(_LINE_END_SPACE, "line end")
        self.match(_NEWLINE, "newline")
        headers = self.headers()

        self.match(_TRAILING, "trailing whitespace")
        if self.pos != len(self.text):
            self.rule = self.failed_rule
            raise self.error("unexpected input")

        return RequestDescriptor(method=method, path=path, query=query, headers=headers)

    def query_string(self) -> QueryString:
        query = QueryString()
        # a separator only counts when a full pair follows it
        mark = self.pos
        while True:
            key = self.match(_QUERY_PART, "query key")
            if key is None or not self.literal("=", "query key"):
                self.pos = mark
                break
            value = self.match(_QUERY_PART, "query value")
            if value is None:
                self.pos = mark
                break
            query.add(_unescape(key), _unescape(value))
            mark = self.pos
            if self.match(_QUERY_SEPARATOR, "query separator") is None:
                break
        return query

    def headers(self) -> Headers:
        headers = Headers()
        while True:
            mark = self.pos
            name = self.match(_HEADER_NAME, "header name")
            if name is None:
                break
            if not self.literal(": ", "header separator"):
                self.pos = mark
                break
            value = self.match(_HEADER_VALUE, "header value")
            if value is None:
                self.pos = mark
                break
            headers.add(name, value.rstrip())
            if self.match(_NEWLINE, "header line") is None:
                break
        return headers


def _unescape(text: str) -> str:
    return _ESCAPE.sub(r"\1", text)
