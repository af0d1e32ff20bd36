"""Prompt Cache - response caching for LLM provider calls.

Requests are matched by an exact fingerprint of (provider, model, prompt)
and, when an embedding backend is available, by semantic similarity to
earlier prompts for the same provider and model.

Layers:
    - protocols: Interface contracts (CacheStore, EmbeddingProvider, EvictionStrategy)
    - repositories: In-memory store, semantic index, embedding providers
    - services: Business logic (caching, analytics, warming)
    - handlers: HTTP endpoint handlers
    - dto: Data transfer objects (API contracts)
    - entities: Domain models (internal)

Usage:
    ```python
    from prompt_cache import CacheService, InMemoryCacheStore, OllamaEmbeddingProvider

    cache = CacheService.create(
        store=InMemoryCacheStore.create(capacity=500),
        embedding_provider=OllamaEmbeddingProvider.create(),
    )
    hit = await cache.lookup("Explain CQRS", "openai", "gpt-4")
    ```

For HTTP API:
    ```python
    from prompt_cache.api.app import app
    ```
"""

from prompt_cache.config import Settings, get_settings
from prompt_cache.entities import (
    CacheAnalytics,
    CacheEntry,
    CacheMetrics,
    FetchResult,
    LookupResult,
    ProviderResponse,
)
from prompt_cache.eviction import select_victims
from prompt_cache.fingerprint import fingerprint
from prompt_cache.protocols import CacheStore, EmbeddingProvider, EvictionStrategy
from prompt_cache.repositories import InMemoryCacheStore, OllamaEmbeddingProvider, SemanticIndex
from prompt_cache.services import AnalyticsService, CacheService, WarmingService

__all__ = [
    # Configuration
    "Settings",
    "get_settings",
    # Protocols (interfaces)
    "CacheStore",
    "EmbeddingProvider",
    "EvictionStrategy",
    # Services (business logic)
    "CacheService",
    "AnalyticsService",
    "WarmingService",
    # Repositories (data access)
    "InMemoryCacheStore",
    "SemanticIndex",
    "OllamaEmbeddingProvider",
    # Entities (domain models)
    "CacheEntry",
    "CacheMetrics",
    "LookupResult",
    "CacheAnalytics",
    "ProviderResponse",
    "FetchResult",
    # Helpers
    "fingerprint",
    "select_victims",
]
