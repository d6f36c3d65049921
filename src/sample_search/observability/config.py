"""
OpenTelemetry Configuration

Loads tracing settings from environment variables.
"""

import os
from dataclasses import dataclass

_TRUTHY = ("true", "1", "yes")


@dataclass
class TracingConfig:
    """Configuration for tracing.

    Environment Variables:
        TRACING_ENABLED: Enable OpenTelemetry tracing (default: false)
        TRACING_SERVICE_NAME: service.name resource attribute (default: sample-search)
        OTEL_EXPORTER_OTLP_ENDPOINT: OTLP/HTTP collector (console exporter if empty)
        TRACING_CAPTURE_CONTENT: Attach query text to spans (default: false)

    PRIVACY WARNING:
        Setting TRACING_CAPTURE_CONTENT=true exports raw query text to the
        collector.
    """

    enabled: bool = False
    service_name: str = "sample-search"
    collector_endpoint: str | None = None
    capture_content: bool = False

    @classmethod
    def from_env(cls) -> "TracingConfig":
        """Load config from environment variables."""
        return cls(
            enabled=os.environ.get("TRACING_ENABLED", "false").lower() in _TRUTHY,
            service_name=os.environ.get("TRACING_SERVICE_NAME", "sample-search"),
            collector_endpoint=os.environ.get("OTEL_EXPORTER_OTLP_ENDPOINT") or None,
            capture_content=os.environ.get("TRACING_CAPTURE_CONTENT", "false").lower() in _TRUTHY,
        )


# Global config singleton
_config: TracingConfig | None = None


def get_config() -> TracingConfig:
    """Get the global tracing config (lazy-loaded from env)."""
    global _config
    if _config is None:
        _config = TracingConfig.from_env()
    return _config


def reset_config() -> None:
    """Reset config (useful for testing)."""
    global _config
    _config = None
