"""
Unit Tests for Observability Module

Tests the tracing infrastructure without requiring a collector.

TESTING STRATEGY:
-----------------
1. NoOp tracer tested directly (no dependencies)
2. Environment variable handling tested with patch.dict
3. Spans emitted by search and indexing checked with a MagicMock tracer
"""

from unittest.mock import MagicMock, patch

import pytest

from sample_search.observability import (
    INDEX_DOCUMENT_ID,
    INDEX_FAILURE_KIND,
    NoOpSpan,
    NoOpTracer,
    SEARCH_KIND,
    SEARCH_RESULT_COUNT,
    TracingConfig,
    get_config,
    get_tracer,
    index_document_attributes,
    index_run_attributes,
    init_tracing,
    semantic_search_attributes,
)
from sample_search.observability.attributes import (
    INDEX_CANCELLED,
    INDEX_DOCUMENT_VERSION,
    SEARCH_QUERY,
    SEARCH_VERSION,
)
from sample_search.observability.tracer import OTelSpan, OTelTracer
from sample_search.retrieval.search import SemanticSearchService
from sample_search.retrieval.store import InMemoryDocumentStore


def _mock_tracer():
    tracer = MagicMock()
    span = MagicMock()
    tracer.start_span.return_value.__enter__.return_value = span
    return tracer, span


# ---------------------------------------------------------------------------
# CONFIG TESTS
# ---------------------------------------------------------------------------


class TestTracingConfig:
    """Test TracingConfig loading."""

    def test_config_defaults(self):
        with patch.dict("os.environ", {}, clear=True):
            config = TracingConfig.from_env()

        assert config.enabled is False
        assert config.service_name == "sample-search"
        assert config.collector_endpoint is None
        assert config.capture_content is False

    @pytest.mark.parametrize("value", ["true", "1", "yes", "TRUE"])
    def test_config_enabled(self, value):
        with patch.dict("os.environ", {"TRACING_ENABLED": value}):
            assert TracingConfig.from_env().enabled is True

    @pytest.mark.parametrize("value", ["false", "0", "no"])
    def test_config_disabled(self, value):
        with patch.dict("os.environ", {"TRACING_ENABLED": value}):
            assert TracingConfig.from_env().enabled is False

    def test_config_endpoint_and_name(self):
        env = {
            "TRACING_SERVICE_NAME": "samples-prod",
            "OTEL_EXPORTER_OTLP_ENDPOINT": "http://collector:4318/v1/traces",
        }
        with patch.dict("os.environ", env):
            config = TracingConfig.from_env()

        assert config.service_name == "samples-prod"
        assert config.collector_endpoint == "http://collector:4318/v1/traces"

    def test_get_config_singleton(self):
        assert get_config() is get_config()


# ---------------------------------------------------------------------------
# NOOP TRACER TESTS
# ---------------------------------------------------------------------------


class TestNoOpTracer:
    """Test NoOpTracer for when tracing is disabled."""

    def test_noop_span_accepts_everything(self):
        with NoOpTracer().start_span("test", attributes={"key": "value"}) as span:
            assert isinstance(span, NoOpSpan)
            span.set_attribute("key", 1)
            span.set_status("error", "description")
            span.record_exception(ValueError("test"))

    def test_otel_span_drops_none_values(self):
        inner = MagicMock()
        span = OTelSpan(inner)

        span.set_attributes({"index.document.id": "a.cs", "index.document.version": None})
        span.set_attribute("search.version", None)

        inner.set_attributes.assert_called_once_with({"index.document.id": "a.cs"})
        inner.set_attribute.assert_not_called()

    def test_noop_span_propagates_exceptions(self):
        with pytest.raises(ValueError):
            with NoOpTracer().start_span("test"):
                raise ValueError("boom")


# ---------------------------------------------------------------------------
# GET_TRACER TESTS
# ---------------------------------------------------------------------------


class TestGetTracer:
    """Test get_tracer factory."""

    def test_returns_noop_when_disabled(self):
        with patch.dict("os.environ", {"TRACING_ENABLED": "false"}):
            assert isinstance(get_tracer(), NoOpTracer)

    def test_singleton(self):
        with patch.dict("os.environ", {"TRACING_ENABLED": "false"}):
            assert get_tracer() is get_tracer()

    def test_noop_until_provider_installed(self):
        with patch.dict("os.environ", {"TRACING_ENABLED": "true"}):
            with patch("opentelemetry.trace.get_tracer_provider", return_value=object()):
                assert isinstance(get_tracer(), NoOpTracer)

    def test_returns_otel_tracer_with_sdk_provider(self):
        from opentelemetry.sdk.trace import TracerProvider

        with patch.dict("os.environ", {"TRACING_ENABLED": "true"}):
            with patch("opentelemetry.trace.get_tracer_provider", return_value=TracerProvider()):
                assert isinstance(get_tracer(), OTelTracer)

    def test_init_tracing_disabled(self):
        assert init_tracing(TracingConfig(enabled=False)) is False


# ---------------------------------------------------------------------------
# INSTRUMENTATION TESTS
# ---------------------------------------------------------------------------


class TestInstrumentation:
    """Test instrumentor registration without touching the real libraries."""

    @pytest.fixture
    def instrumentation(self, monkeypatch):
        from sample_search.observability import instrumentation

        monkeypatch.setattr(instrumentation, "_registered", [])
        return instrumentation

    def test_registers_both_clients(self, instrumentation):
        module = MagicMock()

        with patch.object(instrumentation.importlib, "import_module", return_value=module):
            labels = instrumentation.register_instrumentors()

        assert labels == ["openai", "httpx"]
        module.OpenAIInstrumentor.return_value.instrument.assert_called_once()
        module.HTTPXClientInstrumentor.return_value.instrument.assert_called_once()

    def test_failed_instrumentor_is_skipped(self, instrumentation):
        module = MagicMock()

        def import_module(name):
            if name.startswith("openinference"):
                raise ImportError(name)
            return module

        with patch.object(instrumentation.importlib, "import_module", side_effect=import_module):
            labels = instrumentation.register_instrumentors()

        assert labels == ["httpx"]

    def test_registers_once(self, instrumentation):
        module = MagicMock()

        with patch.object(instrumentation.importlib, "import_module", return_value=module):
            instrumentation.register_instrumentors()
            instrumentation.register_instrumentors()

        module.HTTPXClientInstrumentor.return_value.instrument.assert_called_once()


# ---------------------------------------------------------------------------
# ATTRIBUTE HELPER TESTS
# ---------------------------------------------------------------------------


class TestAttributeHelpers:
    """Test attribute helper functions."""

    def test_semantic_search_attributes_hide_query(self):
        attrs = semantic_search_attributes("citrus fruit", top_k=5, min_score=0.5, version=10)

        assert attrs[SEARCH_KIND] == "semantic"
        assert attrs[SEARCH_VERSION] == 10
        assert SEARCH_QUERY not in attrs

    def test_semantic_search_attributes_capture_content(self):
        attrs = semantic_search_attributes("citrus fruit", top_k=5, min_score=0.5, capture_content=True)

        assert attrs[SEARCH_QUERY] == "citrus fruit"
        assert SEARCH_VERSION not in attrs

    def test_index_document_attributes(self):
        assert index_document_attributes("v10/a.cs", 10) == {
            INDEX_DOCUMENT_ID: "v10/a.cs",
            INDEX_DOCUMENT_VERSION: 10,
        }
        assert index_document_attributes("a.cs") == {INDEX_DOCUMENT_ID: "a.cs"}

    def test_index_run_attributes(self):
        attrs = index_run_attributes(10, 8, 2, cancelled=True)
        assert attrs[INDEX_CANCELLED] is True


# ---------------------------------------------------------------------------
# SPAN EMISSION TESTS
# ---------------------------------------------------------------------------


class TestSpans:
    """Test that search and indexing report through the tracer."""

    def test_semantic_search_span(self, topic_embeddings):
        store = InMemoryDocumentStore()
        store.upsert("salad.md", "fruit salad", topic_embeddings.embed("fruit salad"))
        tracer, span = _mock_tracer()

        with patch("sample_search.retrieval.search.get_tracer", return_value=tracer):
            SemanticSearchService(store, topic_embeddings).search("citrus fruit")

        assert tracer.start_span.call_args.args[0] == "semantic_search"
        span.set_attribute.assert_any_call(SEARCH_RESULT_COUNT, 1)

    def test_failed_document_marks_span(self, tmp_path, topic_embeddings):
        from sample_search.indexing.pipeline import IndexingPipeline

        empty = tmp_path / "Empty.cs"
        empty.write_text("", encoding="utf-8")
        tracer, span = _mock_tracer()

        with patch("sample_search.indexing.pipeline.get_tracer", return_value=tracer):
            IndexingPipeline(topic_embeddings, InMemoryDocumentStore()).index_all([empty])

        span.set_attribute.assert_any_call(INDEX_FAILURE_KIND, "empty")
        span.set_status.assert_called_with("error", "file is empty")
