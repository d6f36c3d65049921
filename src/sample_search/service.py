"""
SearchService - wires the corpus, store, embeddings, pipeline and searchers.

One instance per process. The store is created here and handed to both the
indexing pipeline and the semantic search service.
"""

from __future__ import annotations

import logging
import threading

from sample_search.config import ServiceConfig
from sample_search.core.protocols import EmbeddingProvider
from sample_search.embeddings import get_embedding_provider
from sample_search.indexing import Corpus, IndexingPipeline, IndexingRun
from sample_search.retrieval import InMemoryDocumentStore, KeywordSearcher, SemanticSearchService

logger = logging.getLogger(__name__)


class SearchService:
    """Owns the document store and the background indexing run."""

    def __init__(
        self,
        config: ServiceConfig,
        embeddings: EmbeddingProvider | None = None,
        store: InMemoryDocumentStore | None = None,
    ):
        self.config = config
        self._owns_embeddings = embeddings is None
        self.embeddings = embeddings or get_embedding_provider(config.embedding)
        self.store = store or InMemoryDocumentStore()
        self.corpus = Corpus(config.samples_path)
        self.pipeline = IndexingPipeline(
            self.embeddings,
            self.store,
            root=self.corpus.root,
            max_workers=config.max_workers,
        )
        self.semantic = SemanticSearchService(
            self.store,
            self.embeddings,
            top_k=config.top_k,
            min_score=config.min_score,
        )
        self.keyword = KeywordSearcher(self.corpus)
        self._run: IndexingRun | None = None
        self._run_lock = threading.Lock()

    @property
    def current_run(self) -> IndexingRun | None:
        with self._run_lock:
            return self._run

    def start_indexing(self) -> IndexingRun | None:
        """
        Start a background indexing run over the whole corpus.

        Returns:
            The new run, or None if a run is already in progress

        Raises:
            CorpusNotFoundError: the samples directory is missing
        """
        with self._run_lock:
            if self._run is not None and self._run.is_running():
                return None
            paths = self.corpus.discover()
            logger.info(f"Starting background indexing of {len(paths)} files from {self.corpus.root}")
            self._run = self.pipeline.start(paths)
            return self._run

    def stop(self, timeout: float | None = None) -> None:
        """Cancel the current run and wait for in-flight embeddings."""
        run = self.current_run
        if run is None:
            return
        run.cancel()
        if not run.wait(timeout):
            logger.warning("Indexing run did not finish before shutdown timeout")

    def close(self, timeout: float | None = None) -> None:
        """Stop indexing, then release the embedding client if this service built it."""
        self.stop(timeout)
        if not self._owns_embeddings:
            return
        close = getattr(self.embeddings, "close", None)
        if close is not None:
            close()

    def status(self) -> dict:
        run = self.current_run
        report = run.report if run is not None else None
        return {
            "running": run.is_running() if run is not None else False,
            "state": run.state.value if run is not None else "not_started",
            "files": run.file_count if run is not None else 0,
            "indexed": run.indexed_count if run is not None else 0,
            "cancelled": run.cancelled if run is not None else False,
            "errors": report.to_dict()["errors"] if report is not None else [],
            "document_count": self.store.count(),
        }
