"""
Observability - OpenTelemetry tracing for indexing and search.

Spans:
    index_corpus      one per index_all() call, with run totals
    index_document    one per file, with identifier, version, failure kind
    semantic_search   query path, with top_k, floor, version, result count
    keyword_search    keyword path, with result count

Embedding requests and inbound HTTP requests are traced by the OpenAI,
httpx and FastAPI instrumentors.

Tracing is off unless TRACING_ENABLED is set; the serve command calls
init_tracing() once at start-up and shutdown_tracing() on exit.
"""

from __future__ import annotations

import logging

from sample_search.observability.config import (
    TracingConfig,
    get_config,
    reset_config,
)
from sample_search.observability.tracer import (
    TracerProtocol,
    SpanProtocol,
    NoOpTracer,
    NoOpSpan,
    get_tracer,
    reset_tracer,
)
from sample_search.observability.attributes import (
    # Search
    SEARCH_KIND,
    SEARCH_RESULT_COUNT,
    SEARCH_CANDIDATE_COUNT,
    SEARCH_READY,
    # Index
    INDEX_DOCUMENT_ID,
    INDEX_FAILURE_KIND,
    # Helpers
    semantic_search_attributes,
    index_document_attributes,
    index_run_attributes,
)

logger = logging.getLogger(__name__)

_provider = None


def _span_exporter(config: TracingConfig):
    """OTLP/HTTP when a collector is configured, console otherwise."""
    if config.collector_endpoint:
        from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter

        logger.info(f"Exporting traces to {config.collector_endpoint}")
        return OTLPSpanExporter(endpoint=config.collector_endpoint)

    from opentelemetry.sdk.trace.export import ConsoleSpanExporter

    logger.info("OTEL_EXPORTER_OTLP_ENDPOINT not set, writing traces to the console")
    return ConsoleSpanExporter()


def init_tracing(config: TracingConfig | None = None) -> bool:
    """
    Install an SDK TracerProvider and register instrumentors.

    Returns:
        True when tracing is active (including on repeat calls), False when
        disabled or when the exporter could not be set up
    """
    global _provider
    if _provider is not None:
        return True

    config = config or get_config()
    if not config.enabled:
        logger.debug("Tracing disabled")
        return False

    from opentelemetry import trace
    from opentelemetry.sdk.resources import Resource
    from opentelemetry.sdk.trace import TracerProvider
    from opentelemetry.sdk.trace.export import BatchSpanProcessor

    from sample_search.observability.instrumentation import register_instrumentors

    try:
        exporter = _span_exporter(config)
    except Exception as e:
        logger.error(f"Tracing not started, exporter setup failed: {e}")
        return False

    provider = TracerProvider(resource=Resource.create({"service.name": config.service_name}))
    provider.add_span_processor(BatchSpanProcessor(exporter))
    trace.set_tracer_provider(provider)
    register_instrumentors()

    # Drop any NoOpTracer cached before the provider existed
    reset_tracer()
    _provider = provider
    logger.info(f"Tracing enabled for service {config.service_name}")
    return True


def shutdown_tracing() -> None:
    """Flush pending spans and shut the provider down."""
    global _provider
    if _provider is None:
        return

    try:
        _provider.shutdown()
    except Exception as e:
        logger.warning(f"Error flushing traces on shutdown: {e}")

    _provider = None
    reset_tracer()
    reset_config()


__all__ = [
    # Lifecycle
    "init_tracing",
    "shutdown_tracing",
    # Config
    "TracingConfig",
    "get_config",
    "reset_config",
    # Tracer
    "TracerProtocol",
    "SpanProtocol",
    "NoOpTracer",
    "NoOpSpan",
    "get_tracer",
    "reset_tracer",
    # Attributes
    "SEARCH_KIND",
    "SEARCH_RESULT_COUNT",
    "SEARCH_CANDIDATE_COUNT",
    "SEARCH_READY",
    "INDEX_DOCUMENT_ID",
    "INDEX_FAILURE_KIND",
    # Helpers
    "semantic_search_attributes",
    "index_document_attributes",
    "index_run_attributes",
]
