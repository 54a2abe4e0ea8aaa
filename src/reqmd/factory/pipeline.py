"""Request factory: turns a Document into a list of sendable requests.

On its own the factory only merges each descriptor onto the document's
defaults. Behaviour is added by registering stages, which run in
registration order:

* default providers adjust a private copy of the document's
  GlobalDefaults once per build;
* factory processors adjust each request after it has been merged.

Any exception raised by a stage aborts the build and is re-raised wrapped in
an error naming the stage.
"""

import logging
from typing import Callable, Iterable, Protocol

from reqmd.errors import DefaultProviderError, FactoryProcessorError
from reqmd.http.request import RequestBuilder
from reqmd.parser.base import Document, GlobalDefaults, RequestDescriptor
from reqmd.requests import MdRequest, MdRequestList

logger = logging.getLogger(__name__)


class DefaultProvider(Protocol):
    name: str

    def apply(self, defaults: GlobalDefaults) -> None: ...


class FactoryProcessor(Protocol):
    name: str

    def apply(self, original: RequestDescriptor, request: RequestBuilder) -> None: ...


class FunctionProvider:
    """Wraps a plain function as a DefaultProvider."""

    def __init__(self, name: str, func: Callable[[GlobalDefaults], None]):
        self.name = name
        self.func = func

    def apply(self, defaults: GlobalDefaults) -> None:
        self.func(defaults)


class FunctionProcessor:
    """Wraps a plain function as a FactoryProcessor."""

    def __init__(self, name: str, func: Callable[[RequestDescriptor, RequestBuilder], None]):
        self.name = name
        self.func = func

    def apply(self, original: RequestDescriptor, request: RequestBuilder) -> None:
        self.func(original, request)


class Factory:
    def __init__(
        self,
        providers: Iterable[DefaultProvider] = (),
        processors: Iterable[FactoryProcessor] = (),
    ):
        self.providers: list[DefaultProvider] = list(providers)
        self.processors: list[FactoryProcessor] = list(processors)

    def register_default_provider(self, provider: DefaultProvider) -> "Factory":
        self.providers.append(provider)
        return self

    def register_factory_processor(self, processor: FactoryProcessor) -> "Factory":
        self.processors.append(processor)
        return self

    def build_requests(self, document: Document) -> MdRequestList:
        """Build one MdRequest per descriptor, in document order.

        The document itself is never modified.
        """
        if not document.requests:
            return MdRequestList()

        defaults = self._apply_providers(document.meta.http)
        skeleton = defaults.factory()
        built = []

        for index, descriptor in enumerate(document.requests):
            original = descriptor.model_copy(deep=True)
            request = skeleton.builder()
            request.method = original.method
            request.path = original.path
            request.headers.extend(original.headers)
            request.query.extend(original.query)
            request.body = original.body.content.model_copy(deep=True)

            for processor in self.processors:
                logger.debug("running processor %s on request #%d", processor.name, index + 1)
                try:
                    processor.apply(original, request)
                except Exception as e:
                    raise FactoryProcessorError(processor.name, index, original.title, e) from e

            built.append(MdRequest(
                title=original.title,
                description=original.description,
                request=request.build(),
                data=original,
            ))

        return MdRequestList(built)

    def _apply_providers(self, document_defaults: GlobalDefaults) -> GlobalDefaults:
        defaults = document_defaults.model_copy(deep=True)
        for provider in self.providers:
            logger.debug("applying default provider %s", provider.name)
            try:
                provider.apply(defaults)
            except Exception as e:
                raise DefaultProviderError(provider.name, e) from e
        return defaults
