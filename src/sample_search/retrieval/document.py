"""
Document model for the retrieval system.

Single responsibility: Define the structure of records held by the
document store.
"""

from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True, eq=False)
class DocumentRecord:
    """
    An indexed sample with its embedding.

    Records are immutable; re-indexing a sample replaces the whole record,
    so readers never see a half-updated one. `content` is kept for display
    and keyword lookups, it plays no part in scoring.
    """
    identifier: str
    content: str
    embedding: np.ndarray
    version: int | None = None  # None means common to all versions

    @property
    def dimension(self) -> int:
        return int(self.embedding.shape[0])

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization (embedding omitted)."""
        return {
            "identifier": self.identifier,
            "content": self.content,
            "version": self.version,
            "dimension": self.dimension,
        }
