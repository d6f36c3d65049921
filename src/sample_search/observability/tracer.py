"""
Tracers for search and indexing spans.

Library code only ever talks to TracerProtocol. get_tracer() hands out an
OTelTracer once init_tracing() has installed an SDK provider, and a
NoOpTracer otherwise, so the indexing and query paths never branch on
whether tracing is on.

OTel rejects None attribute values, and many of ours are optional (a
common sample has no version tag), so both span types drop them.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Iterator, Protocol


def _present(attributes: dict[str, Any] | None) -> dict[str, Any]:
    return {k: v for k, v in (attributes or {}).items() if v is not None}


# ---------------------------------------------------------------------------
# PROTOCOLS
# ---------------------------------------------------------------------------


class SpanProtocol(Protocol):
    """What search and indexing code may do with a span."""

    def set_attribute(self, key: str, value: Any) -> None:
        ...

    def set_attributes(self, attributes: dict[str, Any]) -> None:
        """Set several attributes; None values are skipped."""
        ...

    def set_status(self, status: str, description: str | None = None) -> None:
        """Mark the span "ok" or "error"."""
        ...

    def record_exception(self, exception: Exception) -> None:
        ...


class TracerProtocol(Protocol):

    def start_span(self, name: str, attributes: dict[str, Any] | None = None) -> Iterator[SpanProtocol]:
        """Open a span for the duration of a with-block."""
        ...


# ---------------------------------------------------------------------------
# TRACING DISABLED
# ---------------------------------------------------------------------------


class NoOpSpan:
    """Accepts every span call and records nothing."""

    def set_attribute(self, key: str, value: Any) -> None:
        pass

    def set_attributes(self, attributes: dict[str, Any]) -> None:
        pass

    def set_status(self, status: str, description: str | None = None) -> None:
        pass

    def record_exception(self, exception: Exception) -> None:
        pass


class NoOpTracer:

    @contextmanager
    def start_span(self, name: str, attributes: dict[str, Any] | None = None) -> Iterator[NoOpSpan]:
        yield NoOpSpan()


# ---------------------------------------------------------------------------
# TRACING ENABLED
# ---------------------------------------------------------------------------


class OTelSpan:
    """Adapts an OpenTelemetry span to SpanProtocol."""

    def __init__(self, span: Any):
        self._span = span

    def set_attribute(self, key: str, value: Any) -> None:
        if value is not None:
            self._span.set_attribute(key, value)

    def set_attributes(self, attributes: dict[str, Any]) -> None:
        self._span.set_attributes(_present(attributes))

    def set_status(self, status: str, description: str | None = None) -> None:
        from opentelemetry.trace import StatusCode

        if status == "ok":
            self._span.set_status(StatusCode.OK)
        else:
            self._span.set_status(StatusCode.ERROR, description)

    def record_exception(self, exception: Exception) -> None:
        self._span.record_exception(exception)


class OTelTracer:
    """Opens spans on an OpenTelemetry tracer; exceptions escaping the block are recorded by OTel."""

    def __init__(self, tracer: Any):
        self._tracer = tracer

    @contextmanager
    def start_span(self, name: str, attributes: dict[str, Any] | None = None) -> Iterator[OTelSpan]:
        with self._tracer.start_as_current_span(name, attributes=_present(attributes)) as span:
            yield OTelSpan(span)


# ---------------------------------------------------------------------------
# FACTORY
# ---------------------------------------------------------------------------


_tracer: TracerProtocol | None = None


def get_tracer(instrumentation_name: str = "sample_search") -> TracerProtocol:
    """
    Tracer for library code.

    NoOpTracer while TRACING_ENABLED is off. When it is on but init_tracing()
    has not installed an SDK provider yet, a NoOpTracer is returned without
    being cached, so spans start flowing once the provider exists.
    """
    global _tracer
    if _tracer is not None:
        return _tracer

    from sample_search.observability.config import get_config

    if not get_config().enabled:
        _tracer = NoOpTracer()
        return _tracer

    from opentelemetry import trace
    from opentelemetry.sdk.trace import TracerProvider

    if not isinstance(trace.get_tracer_provider(), TracerProvider):
        return NoOpTracer()

    _tracer = OTelTracer(trace.get_tracer(instrumentation_name))
    return _tracer


def reset_tracer() -> None:
    """Forget the cached tracer; the next get_tracer() re-reads the config."""
    global _tracer
    _tracer = None
