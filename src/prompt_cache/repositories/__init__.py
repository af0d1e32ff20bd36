"""Repository layer for data access.

This layer holds the concrete implementations behind the protocols:
- InMemoryCacheStore: authoritative entry store (CacheStore)
- SemanticIndex: cosine-similarity index used by the store
- OllamaEmbeddingProvider / LocalEmbeddingProvider: embedding generators

The repositories are protocol-based (structural typing), not inheritance-based.
LocalEmbeddingProvider pulls in sentence-transformers, so it is imported from
its module on demand:

    from prompt_cache.repositories.local_embedding_provider import LocalEmbeddingProvider
"""

from prompt_cache.protocols import CacheStore, EmbeddingProvider

from .memory_repository import InMemoryCacheStore
from .ollama_embedding_provider import OllamaEmbeddingProvider
from .semantic_index import SemanticIndex

__all__ = [
    "CacheStore",
    "EmbeddingProvider",
    "InMemoryCacheStore",
    "OllamaEmbeddingProvider",
    "SemanticIndex",
]
