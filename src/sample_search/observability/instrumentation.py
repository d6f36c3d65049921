"""
Auto-instrumentation for the embedding clients and the HTTP app.

OpenAI / Azure embedding calls go through the openai SDK (OpenInference
instrumentor); Ollama calls go through httpx (OTel httpx instrumentor).
"""

from __future__ import annotations

import importlib
import logging
from typing import Any

logger = logging.getLogger(__name__)

# backend label -> (module, instrumentor class)
_CLIENT_INSTRUMENTORS = {
    "openai": ("openinference.instrumentation.openai", "OpenAIInstrumentor"),
    "httpx": ("opentelemetry.instrumentation.httpx", "HTTPXClientInstrumentor"),
}

_registered: list[str] = []


def register_instrumentors() -> list[str]:
    """
    Instrument the embedding client libraries once per process.

    A library whose instrumentor fails to load is logged and skipped; the
    others still get instrumented.

    Returns:
        Labels of the instrumented libraries
    """
    if _registered:
        return list(_registered)

    for label, (module_name, class_name) in _CLIENT_INSTRUMENTORS.items():
        try:
            instrumentor = getattr(importlib.import_module(module_name), class_name)
            instrumentor().instrument()
        except Exception as e:
            logger.warning(f"Could not instrument {label} embedding calls: {e}")
            continue
        _registered.append(label)

    if _registered:
        logger.info(f"Instrumented embedding clients: {', '.join(_registered)}")
    return list(_registered)


def instrument_app(app: Any) -> None:
    """Trace inbound requests on a FastAPI app."""
    from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor

    FastAPIInstrumentor.instrument_app(app)
