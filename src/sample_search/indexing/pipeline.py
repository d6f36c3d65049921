"""
Indexing pipeline - read files, embed them, fill the document store.

Pattern: one attempt per file, failures collected, batch never aborted.

FAILURE HANDLING:
-----------------
- Unreadable or empty file       -> skipped, WARNING (undecodable bytes are replaced, not fatal)
- Transient embedding failure    -> skipped, WARNING
- Permanent embedding failure    -> skipped, ERROR (likely misconfiguration,
                                    will usually hit every other file too)
- Malformed backend response     -> skipped, WARNING
- Dimension mismatch on upsert   -> skipped, ERROR

BACKGROUND RUNS:
----------------
start() returns an IndexingRun: a worker thread with a cancel event and a
completion event. State goes NOT_STARTED -> IN_PROGRESS -> COMPLETED.
Cancelling stops new files from being embedded; in-flight calls finish and
everything already indexed stays in the store.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterable
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from sample_search.core.errors import (
    DimensionMismatchError,
    EmbeddingError,
    MalformedEmbeddingResponseError,
    PermanentEmbeddingError,
    TransientEmbeddingError,
)
from sample_search.core.protocols import EmbeddingProvider
from sample_search.indexing.corpus import detect_version, document_identifier, read_sample
from sample_search.observability import (
    INDEX_FAILURE_KIND,
    get_tracer,
    index_document_attributes,
    index_run_attributes,
)
from sample_search.retrieval.document import DocumentRecord
from sample_search.retrieval.store import InMemoryDocumentStore

logger = logging.getLogger(__name__)


class IndexState(str, Enum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class FailureKind(str, Enum):
    READ = "read"
    EMPTY = "empty"
    TRANSIENT = "transient"
    PERMANENT = "permanent"
    MALFORMED = "malformed"
    DIMENSION = "dimension"
    UNEXPECTED = "unexpected"


@dataclass
class IndexingFailure:
    """A file that could not be indexed, and why."""
    path: str
    reason: str
    kind: FailureKind


@dataclass
class IndexingReport:
    """Outcome of one index_all() call."""
    file_count: int = 0
    indexed_count: int = 0
    skipped_count: int = 0  # not attempted because of cancellation
    errors: list[IndexingFailure] = field(default_factory=list)
    cancelled: bool = False

    @property
    def error_count(self) -> int:
        return len(self.errors)

    @property
    def all_indexed(self) -> bool:
        return self.indexed_count == self.file_count

    def to_dict(self) -> dict:
        return {
            "file_count": self.file_count,
            "indexed": self.indexed_count,
            "skipped": self.skipped_count,
            "cancelled": self.cancelled,
            "errors": [
                {"path": e.path, "reason": e.reason, "kind": e.kind.value}
                for e in self.errors
            ],
        }


def _embedding_failure_kind(error: EmbeddingError) -> FailureKind:
    if isinstance(error, PermanentEmbeddingError):
        return FailureKind.PERMANENT
    if isinstance(error, MalformedEmbeddingResponseError):
        return FailureKind.MALFORMED
    if isinstance(error, TransientEmbeddingError):
        return FailureKind.TRANSIENT
    return FailureKind.UNEXPECTED


class IndexingPipeline:
    """
    Embeds sample files into a document store.

    Dependencies are INJECTED: the store is shared with the search service,
    the embedding provider can be a test double.
    """

    def __init__(
        self,
        embeddings: EmbeddingProvider,
        store: InMemoryDocumentStore,
        root: Path | str | None = None,
        max_workers: int = 4,
    ):
        """
        Args:
            embeddings: Embedding provider
            store: Store to upsert into
            root: Corpus root; identifiers are relative to it (file name if None)
            max_workers: Concurrent embedding calls
        """
        self._embeddings = embeddings
        self._store = store
        self.root = Path(root) if root is not None else None
        self.max_workers = max(1, max_workers)

    def index_all(
        self,
        paths: Iterable[Path | str],
        cancel_event: threading.Event | None = None,
        on_indexed: Callable[[DocumentRecord], None] | None = None,
    ) -> IndexingReport:
        """
        Index every file, tolerating per-file failures.

        Args:
            paths: Files to index
            cancel_event: When set, files not yet started are skipped
            on_indexed: Called with each record as soon as it is stored

        Returns:
            IndexingReport with counts and per-file errors
        """
        paths = [Path(p) for p in paths]
        report = IndexingReport(file_count=len(paths))
        logger.info(f"Found {len(paths)} files to index")

        with get_tracer().start_span("index_corpus") as span:
            with ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix="indexer") as executor:
                futures = {
                    executor.submit(self._index_one, path, cancel_event): path
                    for path in paths
                }
                for future in as_completed(futures):
                    path = futures[future]
                    try:
                        record, failure = future.result()
                    except Exception as e:
                        logger.exception(f"Unexpected error indexing {path}")
                        record, failure = None, IndexingFailure(str(path), str(e), FailureKind.UNEXPECTED)

                    if record is not None:
                        report.indexed_count += 1
                        if on_indexed is not None:
                            on_indexed(record)
                    elif failure is not None:
                        report.errors.append(failure)
                    else:
                        report.skipped_count += 1

            report.errors.sort(key=lambda e: e.path)
            report.cancelled = cancel_event is not None and cancel_event.is_set()
            span.set_attributes(index_run_attributes(
                report.file_count, report.indexed_count, report.error_count, report.cancelled
            ))

        logger.info(
            f"Indexed {report.indexed_count}/{report.file_count} files "
            f"({report.error_count} failed, {report.skipped_count} skipped)"
        )
        return report

    def start(self, paths: Iterable[Path | str]) -> "IndexingRun":
        """Run index_all() on a background thread and return its handle."""
        return IndexingRun(self, paths).start()

    def _index_one(
        self,
        path: Path,
        cancel_event: threading.Event | None,
    ) -> tuple[DocumentRecord | None, IndexingFailure | None]:
        """Index a single file. Returns (record, None), (None, failure) or (None, None) if skipped."""
        if cancel_event is not None and cancel_event.is_set():
            return None, None

        identifier = document_identifier(path, self.root)
        version = detect_version(identifier)
        version_info = f" (v{version})" if version is not None else " (common)"

        with get_tracer().start_span(
            "index_document", attributes=index_document_attributes(identifier, version)
        ) as span:
            failure = None
            try:
                content = read_sample(path)
            except OSError as e:
                logger.warning(f"Error reading file {path}: {e}")
                failure = IndexingFailure(str(path), str(e), FailureKind.READ)
            else:
                if not content.strip():
                    logger.warning(f"Skipping empty file {path}")
                    failure = IndexingFailure(str(path), "file is empty", FailureKind.EMPTY)

            if failure is None:
                try:
                    embedding = self._embeddings.embed(content)
                except EmbeddingError as e:
                    kind = _embedding_failure_kind(e)
                    if kind is FailureKind.PERMANENT:
                        logger.error(
                            f"Embedding rejected for {identifier}; check the embedding backend configuration: {e}"
                        )
                    else:
                        logger.warning(f"Failed to generate embedding for {identifier}: {e}")
                    failure = IndexingFailure(str(path), str(e), kind)

            if failure is None:
                try:
                    record = self._store.upsert(identifier, content, embedding, version=version)
                except DimensionMismatchError as e:
                    logger.error(f"Cannot index {identifier}: {e}")
                    failure = IndexingFailure(str(path), str(e), FailureKind.DIMENSION)

            if failure is not None:
                span.set_attribute(INDEX_FAILURE_KIND, failure.kind.value)
                span.set_status("error", failure.reason)
                return None, failure

        logger.debug(f"Indexed {identifier}{version_info} with {record.dimension} dimensions")
        return record, None


class IndexingRun:
    """Handle for a background indexing run."""

    def __init__(self, pipeline: IndexingPipeline, paths: Iterable[Path | str]):
        self._pipeline = pipeline
        self._paths = [Path(p) for p in paths]
        self._cancel = threading.Event()
        self._done = threading.Event()
        self._lock = threading.Lock()
        self._state = IndexState.NOT_STARTED
        self._indexed = 0
        self._thread: threading.Thread | None = None
        self.report: IndexingReport | None = None
        self.error: Exception | None = None

    @property
    def state(self) -> IndexState:
        with self._lock:
            return self._state

    @property
    def file_count(self) -> int:
        return len(self._paths)

    @property
    def indexed_count(self) -> int:
        """Records stored so far by this run."""
        with self._lock:
            return self._indexed

    @property
    def cancelled(self) -> bool:
        return self._cancel.is_set()

    def is_running(self) -> bool:
        return self.state is IndexState.IN_PROGRESS

    def start(self) -> "IndexingRun":
        with self._lock:
            if self._state is not IndexState.NOT_STARTED:
                raise RuntimeError("Indexing run already started")
            self._state = IndexState.IN_PROGRESS
        self._thread = threading.Thread(target=self._run, name="indexing-run", daemon=True)
        self._thread.start()
        return self

    def cancel(self) -> None:
        """Stop scheduling new files; in-flight embeddings complete."""
        self._cancel.set()

    def wait(self, timeout: float | None = None) -> bool:
        """Block until the run completes. Returns False on timeout."""
        return self._done.wait(timeout)

    def _record_progress(self, record: DocumentRecord) -> None:
        with self._lock:
            self._indexed += 1

    def _run(self) -> None:
        try:
            self.report = self._pipeline.index_all(
                self._paths,
                cancel_event=self._cancel,
                on_indexed=self._record_progress,
            )
        except Exception as e:
            logger.exception("Indexing run failed")
            self.error = e
        finally:
            with self._lock:
                self._state = IndexState.COMPLETED
            self._done.set()
