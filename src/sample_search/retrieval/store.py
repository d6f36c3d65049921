"""
In-memory document store.

A lock-guarded dict from identifier to DocumentRecord, owned by whoever
creates it and passed explicitly to the indexing pipeline and the search
service. Writers replace whole immutable records under the lock; readers
take a snapshot under the same lock.

DIMENSIONALITY:
---------------
Cosine similarity is only meaningful between vectors from the same model.
The store pins its dimension on the first upsert (or at construction) and
rejects any record of a different length with DimensionMismatchError.
Switching embedding models means building a new store.
"""

from __future__ import annotations

import threading
from collections.abc import Sequence

import numpy as np

from sample_search.core.errors import DimensionMismatchError
from sample_search.retrieval.document import DocumentRecord


class InMemoryDocumentStore:
    """Thread-safe, process-local document store with no persistence."""

    def __init__(self, dimension: int | None = None):
        self._records: dict[str, DocumentRecord] = {}
        self._dimension = dimension
        self._lock = threading.Lock()

    @property
    def dimension(self) -> int | None:
        """Embedding length shared by all records, None until the first upsert."""
        with self._lock:
            return self._dimension

    def upsert(
        self,
        identifier: str,
        content: str,
        embedding: Sequence[float] | np.ndarray,
        version: int | None = None,
    ) -> DocumentRecord:
        """Insert or replace the record for `identifier`."""
        vector = np.array(embedding, dtype=np.float32).ravel()
        vector.flags.writeable = False
        record = DocumentRecord(
            identifier=identifier,
            content=content,
            embedding=vector,
            version=version,
        )

        with self._lock:
            if self._dimension is None:
                self._dimension = record.dimension
            elif record.dimension != self._dimension:
                raise DimensionMismatchError(self._dimension, record.dimension)
            self._records[identifier] = record
        return record

    def get(self, identifier: str) -> DocumentRecord | None:
        with self._lock:
            return self._records.get(identifier)

    def all_records(self) -> list[DocumentRecord]:
        """Snapshot of all records, in insertion order."""
        with self._lock:
            return list(self._records.values())

    def count(self) -> int:
        with self._lock:
            return len(self._records)

    def is_ready(self) -> bool:
        """True once at least one record exists."""
        return self.count() > 0

    def versions(self) -> set[int]:
        """Version tags present in the store."""
        with self._lock:
            return {r.version for r in self._records.values() if r.version is not None}
