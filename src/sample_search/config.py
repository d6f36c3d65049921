"""
Service configuration.

Loads corpus location, search tuning and indexing concurrency from
environment variables; embedding settings live in EmbeddingConfig.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path

from sample_search.embeddings.config import EmbeddingConfig


@dataclass
class ServiceConfig:
    """Configuration for the search service.

    Environment Variables:
        SAMPLES_PATH: Directory of *.cs / *.md samples (default: samples)
        SEARCH_TOP_K: Default number of semantic results (default: 10)
        SEARCH_MIN_SCORE: Relevance floor; results must score above it (default: 0.5)
        INDEX_MAX_WORKERS: Concurrent embedding calls while indexing (default: 4)
        plus the EmbeddingConfig variables
    """

    samples_path: Path = Path("samples")
    top_k: int = 10
    min_score: float = 0.5
    max_workers: int = 4
    embedding: EmbeddingConfig = field(default_factory=EmbeddingConfig)

    @classmethod
    def from_env(cls) -> "ServiceConfig":
        """Load config from environment variables."""
        return cls(
            samples_path=Path(os.environ.get("SAMPLES_PATH", "samples")),
            top_k=int(os.environ.get("SEARCH_TOP_K", "10")),
            min_score=float(os.environ.get("SEARCH_MIN_SCORE", "0.5")),
            max_workers=int(os.environ.get("INDEX_MAX_WORKERS", "4")),
            embedding=EmbeddingConfig.from_env(),
        )


# Global config singleton
_config: ServiceConfig | None = None


def get_config() -> ServiceConfig:
    """Get the global service config (lazy-loaded from env)."""
    global _config
    if _config is None:
        _config = ServiceConfig.from_env()
    return _config


def reset_config() -> None:
    """Reset config (useful for testing)."""
    global _config
    _config = None
