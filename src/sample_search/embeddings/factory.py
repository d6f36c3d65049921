"""Factory for embedding providers."""

from __future__ import annotations

from sample_search.core.errors import ConfigurationError
from sample_search.core.protocols import EmbeddingProvider
from sample_search.embeddings.config import BACKENDS, EmbeddingConfig
from sample_search.embeddings.mock_embeddings import MockEmbeddings
from sample_search.embeddings.ollama_embeddings import OllamaEmbeddings
from sample_search.embeddings.openai_embeddings import OpenAIEmbeddings


def get_embedding_provider(
    config: EmbeddingConfig | None = None,
    use_mock: bool = False,
) -> EmbeddingProvider:
    """
    Factory function to get the appropriate embedding provider.

    Args:
        config: Backend configuration (loaded from env if not provided)
        use_mock: If True, return MockEmbeddings regardless of config

    Raises:
        ConfigurationError: unknown backend or missing credentials
    """
    config = config or EmbeddingConfig.from_env()

    if use_mock or config.backend == "mock":
        return MockEmbeddings(dimensions=config.mock_dimensions)

    if config.backend == "ollama":
        return OllamaEmbeddings(
            model=config.resolved_model,
            endpoint=config.ollama_endpoint,
            timeout=config.timeout_seconds,
        )

    if config.backend == "azure":
        if not config.azure_endpoint:
            raise ConfigurationError("AZURE_OPENAI_ENDPOINT environment variable is not set")
        if not config.api_key:
            raise ConfigurationError("AZURE_OPENAI_API_KEY environment variable is not set")
        return OpenAIEmbeddings.for_azure(
            endpoint=config.azure_endpoint,
            api_key=config.api_key,
            deployment=config.resolved_model,
            api_version=config.api_version,
            timeout=config.timeout_seconds,
        )

    if config.backend == "openai":
        if not config.api_key:
            raise ConfigurationError("OPENAI_API_KEY environment variable is not set")
        return OpenAIEmbeddings(
            model=config.resolved_model,
            api_key=config.api_key,
            timeout=config.timeout_seconds,
        )

    raise ConfigurationError(
        f"Unknown embedding backend '{config.backend}' (expected one of: {', '.join(BACKENDS)})"
    )
