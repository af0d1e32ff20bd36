"""Protocol interfaces for swappable implementations.

This package contains protocol definitions using structural typing.
Protocols enable:
- Easy swapping of implementations (in-memory store, Ollama -> local embeddings, etc.)
- Unit testing with fake implementations
- New eviction strategies without touching the store

Usage:
    ```python
    from prompt_cache.protocols import CacheStore, EmbeddingProvider

    store: CacheStore = InMemoryCacheStore()
    provider: EmbeddingProvider = OllamaEmbeddingProvider.create()
    ```
"""

from .cache_store import CacheStore
from .embedding_provider import EmbeddingProvider
from .eviction_strategy import EvictionStrategy

__all__ = [
    "CacheStore",
    "EmbeddingProvider",
    "EvictionStrategy",
]
