"""
Core module - shared protocols, result types and errors.

USAGE:
------
from sample_search.core import EmbeddingProvider, QueryResult

class MyEmbeddings:
    '''Implements EmbeddingProvider protocol.'''
    ...
"""

from sample_search.core.errors import (
    SampleSearchError,
    ConfigurationError,
    EmbeddingError,
    TransientEmbeddingError,
    PermanentEmbeddingError,
    MalformedEmbeddingResponseError,
    DimensionMismatchError,
    CorpusNotFoundError,
    InvalidSampleNameError,
    SampleNotFoundError,
    InvalidQueryError,
)
from sample_search.core.protocols import (
    # Protocols
    EmbeddingProvider,
    # Data classes
    QueryResult,
    KeywordResult,
    WordMatch,
)

__all__ = [
    # Protocols
    "EmbeddingProvider",
    # Data classes
    "QueryResult",
    "KeywordResult",
    "WordMatch",
    # Errors
    "SampleSearchError",
    "ConfigurationError",
    "EmbeddingError",
    "TransientEmbeddingError",
    "PermanentEmbeddingError",
    "MalformedEmbeddingResponseError",
    "DimensionMismatchError",
    "CorpusNotFoundError",
    "InvalidSampleNameError",
    "SampleNotFoundError",
    "InvalidQueryError",
]
