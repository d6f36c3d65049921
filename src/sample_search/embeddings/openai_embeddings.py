"""
OpenAI / Azure OpenAI embeddings.

Single responsibility: convert text to vectors through the openai SDK and
translate SDK failures into the package's EmbeddingError taxonomy.

The same class serves both clouds: Azure only differs in how the client is
built, and in that `model` names a deployment rather than a model.
"""

from __future__ import annotations

import os

import numpy as np
import openai
from openai import AzureOpenAI, OpenAI

from sample_search.core.errors import (
    MalformedEmbeddingResponseError,
    TransientEmbeddingError,
    error_for_status,
)


class OpenAIEmbeddings:
    """
    OpenAI-based embedding provider.

    Uses text-embedding-3-small by default (1536 dimensions).
    """

    def __init__(
        self,
        model: str = "text-embedding-3-small",
        api_key: str | None = None,
        client: OpenAI | None = None,
        timeout: float | None = None,
    ):
        self.model = model
        self._owns_client = client is None
        if client is None:
            kwargs = {"api_key": api_key or os.environ.get("OPENAI_API_KEY")}
            if timeout is not None:
                kwargs["timeout"] = timeout
            client = OpenAI(**kwargs)
        self._client = client

    @classmethod
    def for_azure(
        cls,
        endpoint: str,
        api_key: str,
        deployment: str = "text-embedding-3-large",
        api_version: str = "2024-02-01",
        timeout: float | None = None,
    ) -> "OpenAIEmbeddings":
        """Build a provider backed by an Azure OpenAI deployment."""
        kwargs = {
            "azure_endpoint": endpoint,
            "api_key": api_key,
            "api_version": api_version,
        }
        if timeout is not None:
            kwargs["timeout"] = timeout
        provider = cls(model=deployment, client=AzureOpenAI(**kwargs))
        provider._owns_client = True
        return provider

    @property
    def dimensions(self) -> int:
        """Return embedding dimensions for the model."""
        model_dims = {
            "text-embedding-3-small": 1536,
            "text-embedding-3-large": 3072,
            "text-embedding-ada-002": 1536,
        }
        return model_dims.get(self.model, 1536)

    def embed(self, text: str) -> np.ndarray:
        """Generate embedding for a single text."""
        if not text:
            raise ValueError("Cannot embed empty text")
        return self._create(text, expected=1)[0]

    def embed_batch(self, texts: list[str]) -> list[np.ndarray]:
        """Generate embeddings for multiple texts in one request."""
        if not texts:
            return []
        if any(not t for t in texts):
            raise ValueError("Cannot embed empty text")
        return self._create(texts, expected=len(texts))

    def close(self) -> None:
        """Close the SDK client if this provider created it."""
        if self._owns_client:
            self._client.close()

    def _create(self, inputs: str | list[str], expected: int) -> list[np.ndarray]:
        try:
            response = self._client.embeddings.create(input=inputs, model=self.model)
        except openai.APIConnectionError as e:
            # Includes APITimeoutError
            raise TransientEmbeddingError(f"Embedding request failed: {e}") from e
        except openai.APIStatusError as e:
            raise error_for_status(e.status_code, e.message, self.model) from e

        data = list(getattr(response, "data", None) or [])
        if len(data) != expected:
            raise MalformedEmbeddingResponseError(
                f"Expected {expected} embeddings, got {len(data)}"
            )

        data.sort(key=lambda item: item.index)
        vectors = [np.array(item.embedding, dtype=np.float32) for item in data]
        if any(v.size == 0 for v in vectors):
            raise MalformedEmbeddingResponseError("Response contained an empty embedding")
        return vectors
