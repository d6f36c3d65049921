"""
Indexing module - turning the samples directory into document records.

This module provides:
- Corpus: File discovery, identifiers, version tags, safe fetch
- IndexingPipeline: Concurrent read -> embed -> upsert with failure tolerance
- IndexingRun: Background run handle (cancel, wait, progress)
"""

from sample_search.indexing.corpus import (
    SAMPLE_EXTENSIONS,
    Corpus,
    detect_version,
    document_identifier,
)
from sample_search.indexing.pipeline import (
    FailureKind,
    IndexState,
    IndexingFailure,
    IndexingPipeline,
    IndexingReport,
    IndexingRun,
)

__all__ = [
    "SAMPLE_EXTENSIONS",
    "Corpus",
    "detect_version",
    "document_identifier",
    "FailureKind",
    "IndexState",
    "IndexingFailure",
    "IndexingPipeline",
    "IndexingReport",
    "IndexingRun",
]
