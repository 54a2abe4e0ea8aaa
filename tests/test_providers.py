from pathlib import Path

import pytest

from reqmd.errors import DefaultProviderError
from reqmd.factory.pipeline import Factory
from reqmd.factory.providers import EnvProvider
from reqmd.http.address import Scheme
from reqmd.parser.base import GlobalDefaults
from reqmd.parser.document import parse_markdown

FIXTURES = Path(__file__).parent / "fixtures"


class TestEnvProvider:
    def test_headers_query_and_server(self):
        defaults = GlobalDefaults()
        EnvProvider(env={
            "REQMD_HEADER_Authorization": "Bearer abc",
            "REQMD_QUERY_debug": "1",
            "REQMD_SERVER": "https://staging.example.com",
            "HOME": "/root",
        }).apply(defaults)

        assert defaults.headers.pairs() == [("Authorization", "Bearer abc")]
        assert defaults.query.pairs() == [("debug", "1")]
        assert defaults.server.scheme == Scheme.HTTPS
        assert defaults.server.host == "staging.example.com"

    def test_custom_prefix(self):
        defaults = GlobalDefaults()
        EnvProvider("API_", env={"API_HEADER_X-Team": "core", "REQMD_HEADER_X-Other": "no"}).apply(defaults)
        assert defaults.headers.pairs() == [("X-Team", "core")]

    def test_sorted_order(self):
        defaults = GlobalDefaults()
        EnvProvider(env={"REQMD_HEADER_B": "2", "REQMD_HEADER_A": "1"}).apply(defaults)
        assert defaults.headers.pairs() == [("A", "1"), ("B", "2")]

    def test_empty_names_are_skipped(self):
        defaults = GlobalDefaults()
        EnvProvider(env={"REQMD_HEADER_": "x", "REQMD_QUERY_": "y", "REQMD_OTHER": "z"}).apply(defaults)
        assert defaults.headers.is_empty()
        assert defaults.query.is_empty()

    def test_env_headers_add_to_front_matter(self):
        document = parse_markdown((FIXTURES / "post-widgets.md").read_text())
        factory = Factory(providers=[EnvProvider(env={"REQMD_HEADER_X-Env": "yes"})])
        request = factory.build_requests(document).first().request
        assert request.headers.first("X-Env") == "yes"
        assert request.address.host == "api.example.com"

    def test_bad_server_fails_the_build(self):
        document = parse_markdown((FIXTURES / "sample-request.md").read_text())
        factory = Factory(providers=[EnvProvider(env={"REQMD_SERVER": "nope"})])
        with pytest.raises(DefaultProviderError) as exc_info:
            factory.build_requests(document)
        assert exc_info.value.provider == "EnvProvider"
