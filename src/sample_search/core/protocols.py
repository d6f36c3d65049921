"""
Core protocols defining contracts for the search service.

All infrastructure components implement these protocols,
enabling dependency injection and easy testing.

PATTERN:
- Protocol defines the contract
- Multiple implementations possible
- Factory functions for instantiation
- Test doubles for fast unit tests
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable

import numpy as np


# ---------------------------------------------------------------------------
# EMBEDDING PROVIDER PROTOCOL
# ---------------------------------------------------------------------------

@runtime_checkable
class EmbeddingProvider(Protocol):
    """
    Contract for embedding generation.

    Implementations:
    - OllamaEmbeddings (local embedding server)
    - OpenAIEmbeddings (OpenAI or Azure OpenAI)
    - MockEmbeddings (testing)

    Failures are raised as EmbeddingError subclasses.
    """

    def embed(self, text: str) -> np.ndarray:
        """Generate embedding for a single text."""
        ...

    def embed_batch(self, texts: list[str]) -> list[np.ndarray]:
        """Generate embeddings for multiple texts."""
        ...


# ---------------------------------------------------------------------------
# QUERY RESULTS
# ---------------------------------------------------------------------------

@dataclass
class QueryResult:
    """A ranked document reference with its similarity score."""
    identifier: str
    score: float
    version: int | None = None

    def to_dict(self) -> dict:
        return {
            "identifier": self.identifier,
            "score": self.score,
            "version": self.version,
        }


@dataclass
class WordMatch:
    """A query word found in a document, with its occurrence count."""
    word: str
    count: int


@dataclass
class KeywordResult:
    """A keyword search hit: total occurrences and the words that matched."""
    identifier: str
    score: int
    matching_words: list[WordMatch]

    def to_dict(self) -> dict:
        return {
            "identifier": self.identifier,
            "score": self.score,
            "matching_words": [
                {"word": m.word, "count": m.count} for m in self.matching_words
            ],
        }
