from pathlib import Path
from unittest.mock import MagicMock

import pytest

from reqmd.errors import DefaultProviderError, FactoryProcessorError
from reqmd.factory.pipeline import Factory, FunctionProcessor, FunctionProvider
from reqmd.http.request import Method, NoBody, TextBody
from reqmd.parser.document import parse_markdown

FIXTURES = Path(__file__).parent / "fixtures"


def _document(name: str):
    return parse_markdown((FIXTURES / name).read_text())


def _add_default_header(defaults):
    defaults.headers.add("X-Test-Default", "DefaultValue")


def _copy_title(original, request):
    request.headers.add("X-Test-Title", original.title)


class TestBuildRequests:
    def test_round_trip_with_provider_and_processor(self):
        factory = (
            Factory()
            .register_default_provider(FunctionProvider("TestDefaults", _add_default_header))
            .register_factory_processor(FunctionProcessor("TestTitle", _copy_title))
        )
        requests = factory.build_requests(_document("sample-request.md"))
        assert len(requests) == 1

        built = requests.first()
        assert built.title == "Sample Request"
        assert built.request.method == Method.GET
        assert built.request.path == "/api/v1/resources"
        assert built.request.headers.first("X-Test-Default") == "DefaultValue"
        assert built.request.headers.first("X-Test-Title") == "Sample Request"
        assert isinstance(built.request.body, NoBody)

    def test_empty_document_runs_no_stage(self):
        provider = MagicMock()
        provider.name = "Spy"
        processor = MagicMock()
        processor.name = "Spy"
        factory = Factory(providers=[provider], processors=[processor])

        requests = factory.build_requests(_document("no-requests.md"))

        assert requests.is_empty()
        provider.apply.assert_not_called()
        processor.apply.assert_not_called()

    def test_merges_defaults_before_descriptor(self):
        requests = Factory().build_requests(_document("post-widgets.md"))
        create = requests.first()
        assert create.request.url() == "https://api.example.com/api/v1/widgets?draft=true&owner=me"
        assert create.request.headers.first("Content-Type") == "application/json"
        assert isinstance(create.request.body, TextBody)
        assert create.data.position.start.line == 8

    def test_document_is_not_modified(self):
        document = _document("sample-request.md")
        before = document.model_dump()
        factory = (
            Factory()
            .register_default_provider(FunctionProvider("TestDefaults", _add_default_header))
            .register_factory_processor(FunctionProcessor("TestTitle", _copy_title))
        )
        factory.build_requests(document)
        factory.build_requests(document)
        assert document.model_dump() == before
        assert document.meta.http.headers.is_empty()

    def test_stages_run_in_registration_order(self):
        calls = []
        factory = (
            Factory()
            .register_default_provider(FunctionProvider("first", lambda d: calls.append("p1")))
            .register_default_provider(FunctionProvider("second", lambda d: calls.append("p2")))
            .register_factory_processor(FunctionProcessor("third", lambda o, r: calls.append(f"f1:{r.path}")))
            .register_factory_processor(FunctionProcessor("fourth", lambda o, r: calls.append(f"f2:{r.path}")))
        )
        factory.build_requests(_document("post-widgets.md"))
        assert calls == [
            "p1", "p2",
            "f1:/api/v1/widgets", "f2:/api/v1/widgets",
            "f1:/api/v1/widgets", "f2:/api/v1/widgets",
        ]

    def test_providers_run_once_per_build(self):
        provider = MagicMock()
        provider.name = "Spy"
        Factory(providers=[provider]).build_requests(_document("post-widgets.md"))
        provider.apply.assert_called_once()


class TestStageErrors:
    def test_provider_error_names_provider(self):
        def fail(defaults):
            raise RuntimeError("no credentials")

        factory = Factory(providers=[FunctionProvider("Vault", fail)])
        with pytest.raises(DefaultProviderError) as exc_info:
            factory.build_requests(_document("sample-request.md"))
        assert exc_info.value.provider == "Vault"
        assert "Vault" in str(exc_info.value)
        assert isinstance(exc_info.value.source, RuntimeError)

    def test_processor_error_names_processor_and_request(self):
        def fail_on_list(original, request):
            if original.title == "List widgets":
                raise ValueError("bad path")

        factory = Factory(processors=[FunctionProcessor("Checker", fail_on_list)])
        with pytest.raises(FactoryProcessorError) as exc_info:
            factory.build_requests(_document("post-widgets.md"))
        error = exc_info.value
        assert error.processor == "Checker"
        assert error.index == 1
        assert str(error) == "Error in Factory Processor 'Checker' for request #2 (List widgets): bad path"
