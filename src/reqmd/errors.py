"""Exception hierarchy shared by the parser, the build pipeline and the CLI.

Every failure aborts the operation that raised it; nothing is retried and no
partial document or request list is returned.
"""


class ReqmdError(Exception):
    """Base class for all reqmd errors."""


class GrammarError(ReqmdError):
    """An ``http`` block did not match the request-line grammar."""

    def __init__(self, text: str, rule: str, message: str):
        self.text = text
        self.rule = rule
        self.message = message
        super().__init__(f"HttpData parsing error in {rule}: {message} at {text!r}")


class StructureError(ReqmdError):
    """The document tree is missing a node the extractor relies on."""

    def __init__(self, node_kind: str, message: str):
        self.node_kind = node_kind
        super().__init__(f"{message} ({node_kind})")


class MissingPositionError(StructureError):
    def __init__(self, node_kind: str):
        super().__init__(node_kind, "Required position missing from node")


class FrontMatterError(ReqmdError):
    """Front matter was not valid YAML or did not match the schema."""

    def __init__(self, input: str, message: str):
        self.input = input
        self.message = message
        super().__init__(f"Invalid YAML with error: {message}")


class OffsetError(ReqmdError):
    """A range does not index valid boundaries of the sliced source."""

    def __init__(self, range, source_length: int):
        self.range = range
        self.source_length = source_length
        super().__init__(
            f"Unable to read position offset {range.start.offset}..{range.end.offset} "
            f"from source of {source_length} bytes"
        )


class AddressError(ReqmdError):
    """A server address string is not ``scheme://host[:port]``."""


class DefaultProviderError(ReqmdError):
    def __init__(self, provider: str, source: Exception):
        self.provider = provider
        self.source = source
        super().__init__(f"Error in Defaults Provider '{provider}': {source}")


class FactoryProcessorError(ReqmdError):
    def __init__(self, processor: str, index: int, title: str | None, source: Exception):
        self.processor = processor
        self.index = index
        self.title = title
        self.source = source
        label = f"request #{index + 1}" + (f" ({title})" if title else "")
        super().__init__(f"Error in Factory Processor '{processor}' for {label}: {source}")


class SelectionError(ReqmdError):
    """A request selection string could not be parsed."""


class TransportError(ReqmdError):
    """Sending a request failed before a response was received."""
