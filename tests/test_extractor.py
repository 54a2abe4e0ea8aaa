from pathlib import Path

import pytest

from reqmd.errors import GrammarError, MissingPositionError
from reqmd.http.request import Method, NoBody, TextBody
from reqmd.parser.extractor import extract_requests
from reqmd.parser.markdown import Code, Root, parse_tree

FIXTURES = Path(__file__).parent / "fixtures"


def _extract(source: str):
    return extract_requests(parse_tree(source), source)


class TestExtractRequests:
    def test_widgets_fixture(self):
        source = (FIXTURES / "post-widgets.md").read_text()
        requests = _extract(source)
        assert len(requests) == 2

        create, listing = requests
        assert create.method == Method.POST
        assert create.path == "/api/v1/widgets"
        assert create.query.pairs() == [("draft", "true"), ("owner", "me")]
        assert create.headers.first("authorization") == "Bearer $TOKEN"
        assert listing.method == Method.GET
        assert listing.title == "List widgets"

    def test_title_and_description_from_heading(self):
        source = (FIXTURES / "post-widgets.md").read_text()
        create = _extract(source)[0]
        assert create.title == "Create a widget"
        assert create.description == "Creates a widget owned by the current user."

    def test_position_covers_heading_through_body(self):
        source = (FIXTURES / "post-widgets.md").read_text()
        create, listing = _extract(source)
        assert (create.position.start.line, create.position.end.line) == (8, 24)
        assert (listing.position.start.line, listing.position.end.line) == (26, 30)
        assert create.position.slice(source).startswith("## Create a widget")
        assert create.position.slice(source).endswith("}\n```")

    def test_body_from_following_code_block(self):
        source = (FIXTURES / "post-widgets.md").read_text()
        create, listing = _extract(source)
        assert isinstance(create.body.content, TextBody)
        assert '"name": "XFox"' in create.body.content.text
        assert create.body.lang == "json"
        assert create.body.position.start.line == 19
        assert isinstance(listing.body.content, NoBody)

    def test_no_heading_means_no_title(self):
        requests = _extract("```http\nGET /\n```\n")
        assert requests[0].title is None
        assert requests[0].description is None

    def test_empty_description_is_none(self):
        requests = _extract("# Ping\n\n```http\nGET /ping\n```\n")
        assert requests[0].title == "Ping"
        assert requests[0].description is None

    def test_closest_heading_wins(self):
        source = "# Outer\n\n## Inner\n\n```http\nGET /\n```\n"
        assert _extract(source)[0].title == "Inner"

    def test_heading_is_used_once(self):
        source = "# Pair\n\n```http\nGET /a\n```\n\n```http\nGET /b\n```\n"
        first, second = _extract(source)
        assert first.title == "Pair"
        assert second.title is None
        assert second.path == "/b"

    def test_http_block_is_never_a_body(self):
        source = "```http\nGET /a\n```\n\n```http\nGET /b\n```\n"
        first, second = _extract(source)
        assert isinstance(first.body.content, NoBody)
        assert second.path == "/b"

    def test_body_must_follow_directly(self):
        source = "```http\nPOST /a\n```\n\nSome prose.\n\n```json\n{}\n```\n"
        requests = _extract(source)
        assert isinstance(requests[0].body.content, NoBody)

    def test_other_languages_are_ignored(self):
        assert _extract((FIXTURES / "no-requests.md").read_text()) == []

    def test_grammar_error_propagates(self):
        with pytest.raises(GrammarError):
            _extract("```http\nFETCH /a\n```\n")

    def test_missing_position(self):
        root = Root(children=[Code(lang="http", value="GET /")])
        with pytest.raises(MissingPositionError):
            extract_requests(root, "")
