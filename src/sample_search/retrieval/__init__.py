"""
Retrieval module - storage and search over indexed samples.

This module provides:
- DocumentRecord: The stored record model
- InMemoryDocumentStore: Thread-safe in-memory store
- cosine_similarity / rank: Similarity ranking
- SemanticSearchService: Embedding-backed query path
- KeywordSearcher: Word-count search over raw contents
"""

from sample_search.retrieval.document import DocumentRecord
from sample_search.retrieval.store import InMemoryDocumentStore
from sample_search.retrieval.ranking import cosine_similarity, rank
from sample_search.retrieval.search import SemanticSearchService
from sample_search.retrieval.keyword import (
    KeywordSearcher,
    extract_search_words,
    count_occurrences,
)

__all__ = [
    "DocumentRecord",
    "InMemoryDocumentStore",
    "cosine_similarity",
    "rank",
    "SemanticSearchService",
    "KeywordSearcher",
    "extract_search_words",
    "count_occurrences",
]
