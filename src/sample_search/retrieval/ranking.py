"""
Similarity ranking.

rank() applies the relevance floor BEFORE truncating to top_k: the result
holds min(top_k, number of candidates above the floor) entries.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

import numpy as np

from sample_search.core.errors import DimensionMismatchError
from sample_search.core.protocols import QueryResult
from sample_search.retrieval.document import DocumentRecord


def cosine_similarity(a: Sequence[float] | np.ndarray, b: Sequence[float] | np.ndarray) -> float:
    """
    Cosine similarity between two vectors.

    Returns 0.0 when either vector has zero magnitude.

    Raises:
        DimensionMismatchError: the vectors differ in length
    """
    a = np.asarray(a, dtype=np.float64).ravel()
    b = np.asarray(b, dtype=np.float64).ravel()
    if a.shape != b.shape:
        raise DimensionMismatchError(a.shape[0], b.shape[0])

    norm_a = np.linalg.norm(a)
    norm_b = np.linalg.norm(b)
    if norm_a == 0 or norm_b == 0:
        return 0.0
    return float(np.dot(a, b) / (norm_a * norm_b))


def rank(
    query_vector: Sequence[float] | np.ndarray,
    candidates: Iterable[DocumentRecord],
    top_k: int,
    min_score: float,
) -> list[QueryResult]:
    """
    Score candidates against the query and return the best matches.

    Args:
        query_vector: Embedding of the query text
        candidates: Records to score
        top_k: Maximum number of results
        min_score: Results must score strictly above this

    Returns:
        Results sorted by descending score; equal scores keep candidate order
    """
    if top_k <= 0:
        return []

    scored = [
        QueryResult(
            identifier=record.identifier,
            score=cosine_similarity(query_vector, record.embedding),
            version=record.version,
        )
        for record in candidates
    ]

    # Filter first, then sort (stable) and truncate
    kept = [r for r in scored if r.score > min_score]
    kept.sort(key=lambda r: r.score, reverse=True)
    return kept[:top_k]
