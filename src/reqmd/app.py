"""Library entry point: parse Markdown into requests and send them."""

from pathlib import Path
from typing import Iterable

from reqmd.factory.pipeline import DefaultProvider, Factory, FactoryProcessor
from reqmd.factory.processors import EnvVarExpansion, ServerFromHostname, YamlAsJson
from reqmd.factory.providers import DEFAULT_PREFIX, EnvProvider
from reqmd.http.client import HttpClient, Response
from reqmd.parser.document import File
from reqmd.requests import MdRequest, MdRequestList


class ReqmdApp:
    """A configured factory plus an HTTP client.

    Holds no per-call state, so one instance can serve many documents.
    """

    def __init__(
        self,
        providers: Iterable[DefaultProvider] = (),
        processors: Iterable[FactoryProcessor] = (),
        timeout: float | None = None,
        client: HttpClient | None = None,
    ):
        self.factory = Factory(providers, processors)
        self.client = client or HttpClient(timeout=timeout)

    @classmethod
    def default(cls, env_prefix: str = DEFAULT_PREFIX, timeout: float | None = None) -> "ReqmdApp":
        """App with every built-in provider and processor registered."""
        return cls(
            providers=[EnvProvider(env_prefix)],
            processors=[EnvVarExpansion(), ServerFromHostname(), YamlAsJson()],
            timeout=timeout,
        )

    def parse_requests(self, markdown: str, path: Path | None = None) -> MdRequestList:
        return self.factory.build_requests(File(markdown, path).document)

    def parse_file(self, path: Path) -> MdRequestList:
        return self.factory.build_requests(File.read(path).document)

    def send(self, md_request: MdRequest) -> Response:
        return self.client.send(md_request.request)
