"""
Error taxonomy for the search service.

Embedding failures are recoverable per item: the indexing pipeline records
them and moves on, the query path hands them back to the caller. Dimension
mismatches and configuration errors are invariant violations and are not
caught inside the library.
"""

from __future__ import annotations


class SampleSearchError(Exception):
    """Base class for all errors raised by this package."""


class ConfigurationError(SampleSearchError):
    """Required settings are missing or inconsistent."""


# ---------------------------------------------------------------------------
# EMBEDDING ERRORS
# ---------------------------------------------------------------------------


class EmbeddingError(SampleSearchError):
    """An embedding could not be produced for a text."""

    transient = False


class TransientEmbeddingError(EmbeddingError):
    """Network failure, timeout, throttling or a 5xx from the backend."""

    transient = True


class PermanentEmbeddingError(EmbeddingError):
    """The backend rejected the request (4xx): bad input, auth, missing model."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class MalformedEmbeddingResponseError(EmbeddingError):
    """The backend answered, but not with a usable vector."""


# Hints for 4xx responses that almost always mean a misconfigured backend.
_STATUS_HINTS = {
    400: "check that the model supports the configured API version",
    401: "check the API key",
    403: "check access permissions on the embedding resource",
    404: "check that the model or deployment '{model}' exists",
}


def error_for_status(status_code: int, detail: str, model: str = "") -> EmbeddingError:
    """Map an HTTP status from an embedding backend onto the error taxonomy."""
    if status_code == 429 or status_code >= 500:
        return TransientEmbeddingError(
            f"Embedding backend returned {status_code}: {detail}"
        )
    message = f"Embedding backend rejected request ({status_code}): {detail}"
    hint = _STATUS_HINTS.get(status_code)
    if hint:
        message = f"{message} - {hint.format(model=model)}"
    return PermanentEmbeddingError(message, status_code=status_code)


# ---------------------------------------------------------------------------
# STORE / RANKING ERRORS
# ---------------------------------------------------------------------------


class DimensionMismatchError(SampleSearchError):
    """Two vectors that must share a dimensionality do not."""

    def __init__(self, expected: int, actual: int):
        super().__init__(
            f"Vector dimension {actual} does not match expected dimension {expected}"
        )
        self.expected = expected
        self.actual = actual


# ---------------------------------------------------------------------------
# CORPUS ERRORS
# ---------------------------------------------------------------------------


class CorpusNotFoundError(SampleSearchError):
    """The samples directory does not exist."""


class InvalidSampleNameError(SampleSearchError):
    """A sample name is empty, absolute, or escapes the samples directory."""


class SampleNotFoundError(SampleSearchError):
    """No sample with the requested name exists."""


# ---------------------------------------------------------------------------
# QUERY ERRORS
# ---------------------------------------------------------------------------


class InvalidQueryError(SampleSearchError, ValueError):
    """A search query is empty or only whitespace."""
