"""
Embedding backend configuration.

Loads backend selection, model names and credentials from environment
variables. The provider factory turns this into an EmbeddingProvider.
"""

import os
from dataclasses import dataclass

BACKENDS = ("ollama", "azure", "openai", "mock")

DEFAULT_MODELS = {
    "ollama": "nomic-embed-text",
    "azure": "text-embedding-3-large",
    "openai": "text-embedding-3-small",
    "mock": "mock-embedding",
}

# Env var holding the model (or Azure deployment) name for each backend
_MODEL_ENV_VARS = {
    "ollama": "OLLAMA_EMBEDDING_MODEL",
    "azure": "AZURE_OPENAI_EMBEDDING_MODEL",
    "openai": "OPENAI_EMBEDDING_MODEL",
}

_API_KEY_ENV_VARS = {
    "azure": "AZURE_OPENAI_API_KEY",
    "openai": "OPENAI_API_KEY",
}


@dataclass
class EmbeddingConfig:
    """Configuration for the embedding backend.

    Environment Variables:
        EMBEDDING_BACKEND: ollama | azure | openai | mock (default: ollama)
        OLLAMA_ENDPOINT: Ollama base URL (default: http://localhost:11434)
        OLLAMA_EMBEDDING_MODEL / AZURE_OPENAI_EMBEDDING_MODEL / OPENAI_EMBEDDING_MODEL
        AZURE_OPENAI_ENDPOINT: Azure OpenAI resource endpoint
        AZURE_OPENAI_API_KEY / OPENAI_API_KEY: credentials
        AZURE_OPENAI_API_VERSION: Azure API version (default: 2024-02-01)
        EMBEDDING_TIMEOUT_SECONDS: per-request timeout (default: 30)
    """

    backend: str = "ollama"
    model: str | None = None  # None -> DEFAULT_MODELS[backend]
    ollama_endpoint: str = "http://localhost:11434"
    azure_endpoint: str | None = None
    api_key: str | None = None
    api_version: str = "2024-02-01"
    timeout_seconds: float = 30.0
    mock_dimensions: int = 384

    @property
    def resolved_model(self) -> str:
        """Model name actually sent to the backend."""
        return self.model or DEFAULT_MODELS.get(self.backend, "")

    @classmethod
    def from_env(cls) -> "EmbeddingConfig":
        """Load config from environment variables."""
        backend = os.environ.get("EMBEDDING_BACKEND", "ollama").strip().lower()
        model_var = _MODEL_ENV_VARS.get(backend)
        key_var = _API_KEY_ENV_VARS.get(backend)
        return cls(
            backend=backend,
            model=(os.environ.get(model_var) or None) if model_var else None,
            ollama_endpoint=os.environ.get("OLLAMA_ENDPOINT", "http://localhost:11434"),
            azure_endpoint=os.environ.get("AZURE_OPENAI_ENDPOINT") or None,
            api_key=(os.environ.get(key_var) or None) if key_var else None,
            api_version=os.environ.get("AZURE_OPENAI_API_VERSION", "2024-02-01"),
            timeout_seconds=float(os.environ.get("EMBEDDING_TIMEOUT_SECONDS", "30")),
        )
