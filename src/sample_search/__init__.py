"""
sample-search: keyword and embedding-backed search over a folder of code samples.

ARCHITECTURE:
-------------
1. embeddings  - EmbeddingProvider protocol, Ollama / OpenAI / mock backends
2. retrieval   - InMemoryDocumentStore, cosine ranking, semantic + keyword search
3. indexing    - Corpus access and the background IndexingPipeline
4. api / cli   - FastAPI surface and command-line entry points
"""

__version__ = "0.1.0"
