"""
Ollama embeddings over HTTP.

Talks to a local Ollama server's /api/embed endpoint with httpx. The JSON
body is validated into OllamaEmbedResponse before any vector is extracted,
so a schema change on the server surfaces as a typed error instead of a
None somewhere downstream.
"""

from __future__ import annotations

import logging
from typing import Annotated

import httpx
import numpy as np
from pydantic import BaseModel, Field, ValidationError

from sample_search.core.errors import (
    MalformedEmbeddingResponseError,
    TransientEmbeddingError,
    error_for_status,
)

logger = logging.getLogger(__name__)


class OllamaEmbedResponse(BaseModel):
    """Body returned by POST /api/embed."""

    model: str | None = None
    embeddings: list[Annotated[list[float], Field(min_length=1)]] = Field(min_length=1)


class OllamaEmbeddings:
    """Embedding provider backed by an Ollama server."""

    def __init__(
        self,
        model: str = "nomic-embed-text",
        endpoint: str = "http://localhost:11434",
        timeout: float = 30.0,
        client: httpx.Client | None = None,
    ):
        self.model = model
        self.endpoint = endpoint.rstrip("/")
        self._owns_client = client is None
        self._client = client or httpx.Client(timeout=httpx.Timeout(timeout))

    @property
    def url(self) -> str:
        return f"{self.endpoint}/api/embed"

    def embed(self, text: str) -> np.ndarray:
        """Generate embedding for a single text."""
        if not text:
            raise ValueError("Cannot embed empty text")
        return self._request(text, expected=1)[0]

    def embed_batch(self, texts: list[str]) -> list[np.ndarray]:
        """Generate embeddings for multiple texts in one request."""
        if not texts:
            return []
        if any(not t for t in texts):
            raise ValueError("Cannot embed empty text")
        return self._request(texts, expected=len(texts))

    def close(self) -> None:
        """Close the HTTP client if this provider created it."""
        if self._owns_client:
            self._client.close()

    def _request(self, inputs: str | list[str], expected: int) -> list[np.ndarray]:
        try:
            response = self._client.post(
                self.url, json={"model": self.model, "input": inputs}
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise error_for_status(
                e.response.status_code, e.response.text, self.model
            ) from e
        except httpx.TransportError as e:
            # Connection refused, DNS, timeouts
            raise TransientEmbeddingError(
                f"Could not reach Ollama at {self.endpoint}: {e}"
            ) from e

        try:
            payload = OllamaEmbedResponse.model_validate_json(response.content)
        except ValidationError as e:
            raise MalformedEmbeddingResponseError(
                f"Unexpected response from Ollama: {e.error_count()} validation error(s)"
            ) from e

        if len(payload.embeddings) != expected:
            raise MalformedEmbeddingResponseError(
                f"Expected {expected} embeddings, got {len(payload.embeddings)}"
            )

        logger.debug(f"Ollama returned {expected} embedding(s) of dimension {len(payload.embeddings[0])}")
        return [np.array(vector, dtype=np.float32) for vector in payload.embeddings]
