"""
Semantic search - the query path.

query text -> embedding -> version filter -> rank against the store.

A store with no records yet is a normal state (indexing runs in the
background), so search() answers [] without touching the embedding backend.
Embedding failures for the query itself are NOT swallowed; the caller
decides whether to fall back to keyword search.
"""

from __future__ import annotations

import logging

from sample_search.core.errors import EmbeddingError, InvalidQueryError
from sample_search.core.protocols import EmbeddingProvider, QueryResult
from sample_search.observability import (
    SEARCH_CANDIDATE_COUNT,
    SEARCH_READY,
    SEARCH_RESULT_COUNT,
    get_config as get_tracing_config,
    get_tracer,
    semantic_search_attributes,
)
from sample_search.retrieval.document import DocumentRecord
from sample_search.retrieval.ranking import rank
from sample_search.retrieval.store import InMemoryDocumentStore

logger = logging.getLogger(__name__)

CONNECTIVITY_PROBE_TEXT = "test connection"


class SemanticSearchService:
    """Embedding-backed similarity search over an InMemoryDocumentStore."""

    def __init__(
        self,
        store: InMemoryDocumentStore,
        embeddings: EmbeddingProvider,
        top_k: int = 10,
        min_score: float = 0.5,
    ):
        self._store = store
        self._embeddings = embeddings
        self.top_k = top_k
        self.min_score = min_score

    def is_ready(self) -> bool:
        return self._store.is_ready()

    def resolve_version(self, version: int | None = None) -> int | None:
        """The requested version, else the highest version tag in the store."""
        if version is not None:
            return version
        versions = self._store.versions()
        return max(versions) if versions else None

    def candidates(self, version: int | None) -> list[DocumentRecord]:
        """Common records plus those tagged with `version`."""
        records = self._store.all_records()
        if version is None:
            return records
        return [r for r in records if r.version is None or r.version == version]

    def search(
        self,
        query: str,
        version: int | None = None,
        top_k: int | None = None,
        min_score: float | None = None,
    ) -> list[QueryResult]:
        """
        Rank stored samples by similarity to `query`.

        Args:
            query: Free text
            version: Framework version; defaults to the highest indexed one
            top_k: Overrides the configured result limit
            min_score: Overrides the configured relevance floor

        Raises:
            InvalidQueryError: empty query
            EmbeddingError: the query could not be embedded
            DimensionMismatchError: query and store vectors differ in length
        """
        if not query or not query.strip():
            raise InvalidQueryError("Query must not be empty")

        top_k = self.top_k if top_k is None else top_k
        min_score = self.min_score if min_score is None else min_score
        version = self.resolve_version(version)

        attributes = semantic_search_attributes(
            query, top_k, min_score, version,
            capture_content=get_tracing_config().capture_content,
        )
        with get_tracer().start_span("semantic_search", attributes=attributes) as span:
            ready = self.is_ready()
            span.set_attribute(SEARCH_READY, ready)
            if not ready:
                logger.info("Semantic search requested before any samples were indexed")
                return []

            try:
                query_vector = self._embeddings.embed(query)
            except EmbeddingError as e:
                span.record_exception(e)
                span.set_status("error", str(e))
                logger.warning(f"Failed to generate query embedding: {e}")
                raise

            candidates = self.candidates(version)
            results = rank(query_vector, candidates, top_k=top_k, min_score=min_score)

            span.set_attribute(SEARCH_CANDIDATE_COUNT, len(candidates))
            span.set_attribute(SEARCH_RESULT_COUNT, len(results))

        logger.info(f"Found {len(results)} semantic matches for version {version}")
        return results

    def check_connectivity(self) -> bool:
        """Embed a probe text to verify the backend is reachable and configured."""
        try:
            self._embeddings.embed(CONNECTIVITY_PROBE_TEXT)
        except EmbeddingError as e:
            logger.error(f"Connectivity test failed - semantic search unavailable: {e}")
            return False
        logger.info("Connectivity test passed - semantic search available")
        return True
