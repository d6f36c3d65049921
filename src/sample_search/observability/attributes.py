"""
Semantic Conventions for Span Attributes

Custom namespaces for search and indexing spans. Embedding calls get their
own spans from the OpenAI and httpx instrumentors.
"""

# ---------------------------------------------------------------------------
# SEARCH NAMESPACE (custom)
# ---------------------------------------------------------------------------

SEARCH_KIND = "search.kind"  # "semantic", "keyword"
SEARCH_QUERY = "search.query"  # only when capture_content is on
SEARCH_QUERY_LENGTH = "search.query.length"
SEARCH_TOP_K = "search.top_k"
SEARCH_MIN_SCORE = "search.min_score"
SEARCH_VERSION = "search.version"
SEARCH_CANDIDATE_COUNT = "search.candidate_count"
SEARCH_RESULT_COUNT = "search.result_count"
SEARCH_READY = "search.ready"


# ---------------------------------------------------------------------------
# INDEX NAMESPACE (custom)
# ---------------------------------------------------------------------------

INDEX_DOCUMENT_ID = "index.document.id"  # "v10/BusinessClass.cs"
INDEX_DOCUMENT_VERSION = "index.document.version"
INDEX_FILE_COUNT = "index.file_count"
INDEX_INDEXED_COUNT = "index.indexed_count"
INDEX_ERROR_COUNT = "index.error_count"
INDEX_CANCELLED = "index.cancelled"
INDEX_FAILURE_KIND = "index.failure.kind"  # FailureKind value: "read", "transient", "dimension", ...


# ---------------------------------------------------------------------------
# HELPER FUNCTIONS
# ---------------------------------------------------------------------------


def semantic_search_attributes(
    query: str,
    top_k: int,
    min_score: float,
    version: int | None = None,
    capture_content: bool = False,
) -> dict:
    """Create attributes dict for a semantic search span."""
    attrs = {
        SEARCH_KIND: "semantic",
        SEARCH_QUERY_LENGTH: len(query),
        SEARCH_TOP_K: top_k,
        SEARCH_MIN_SCORE: min_score,
    }
    if version is not None:
        attrs[SEARCH_VERSION] = version
    if capture_content:
        attrs[SEARCH_QUERY] = query
    return attrs


def index_document_attributes(
    identifier: str,
    version: int | None = None,
) -> dict:
    """Create attributes dict for a single-document indexing span."""
    attrs = {INDEX_DOCUMENT_ID: identifier}
    if version is not None:
        attrs[INDEX_DOCUMENT_VERSION] = version
    return attrs


def index_run_attributes(
    file_count: int,
    indexed_count: int,
    error_count: int,
    cancelled: bool,
) -> dict:
    """Create attributes dict summarising an indexing run."""
    return {
        INDEX_FILE_COUNT: file_count,
        INDEX_INDEXED_COUNT: indexed_count,
        INDEX_ERROR_COUNT: error_count,
        INDEX_CANCELLED: cancelled,
    }
