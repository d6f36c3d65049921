"""
Embeddings module - text embedding generation.

The pattern:
1. Protocol (EmbeddingProvider) defines the interface
2. Production implementations (OllamaEmbeddings, OpenAIEmbeddings)
3. Test double (MockEmbeddings) for fast testing
4. Factory function (get_embedding_provider)
"""

from sample_search.core.protocols import EmbeddingProvider
from sample_search.embeddings.config import EmbeddingConfig
from sample_search.embeddings.factory import get_embedding_provider
from sample_search.embeddings.mock_embeddings import MockEmbeddings
from sample_search.embeddings.ollama_embeddings import OllamaEmbeddings, OllamaEmbedResponse
from sample_search.embeddings.openai_embeddings import OpenAIEmbeddings

__all__ = [
    "EmbeddingProvider",
    "EmbeddingConfig",
    "OllamaEmbeddings",
    "OllamaEmbedResponse",
    "OpenAIEmbeddings",
    "MockEmbeddings",
    "get_embedding_provider",
]
