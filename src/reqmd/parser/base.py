"""Data models for parsed request documents.

The extractor and the front-matter reader turn a Markdown tree into these
models; the build pipeline consumes them.
"""

from pydantic import BaseModel, ConfigDict, Field

from reqmd.http.address import AddressString
from reqmd.http.request import Headers, Method, NoBody, QueryString, RequestBody, RequestFactory
from reqmd.parser.position import Range


class BodyData(BaseModel):
    """Body of a request, normally the code block right after the ``http`` block."""

    content: RequestBody = Field(default_factory=NoBody)
    lang: str | None = None  # language label of the code block
    meta: str | None = None  # text following the language label
    position: Range | None = None  # None when not parsed from source


class RequestDescriptor(BaseModel):
    """One request found in a document, with its source position."""

    title: str | None = None
    description: str | None = None
    method: Method = Method.GET
    path: str = "/"
    query: QueryString = Field(default_factory=QueryString)
    headers: Headers = Field(default_factory=Headers)
    body: BodyData = Field(default_factory=BodyData)
    position: Range = Field(default_factory=Range)


class GlobalDefaults(BaseModel):
    """Server, headers and query shared by every request of a document."""

    model_config = ConfigDict(extra="forbid")

    server: AddressString = Field(default_factory=AddressString)
    headers: Headers = Field(default_factory=Headers)
    query: QueryString = Field(default_factory=QueryString)

    def factory(self) -> RequestFactory:
        seed = self.model_copy(deep=True)
        return RequestFactory(address=seed.server.address, headers=seed.headers, query=seed.query)


class MetaData(BaseModel):
    """Values read from the document's front matter."""

    title: str | None = None
    description: str | None = None
    http: GlobalDefaults = Field(default_factory=GlobalDefaults)
    position: Range | None = None


class Document(BaseModel):
    meta: MetaData = Field(default_factory=MetaData)
    requests: list[RequestDescriptor] = Field(default_factory=list)
    position: Range = Field(default_factory=Range)
