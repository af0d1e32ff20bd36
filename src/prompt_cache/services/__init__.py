"""Service layer for business logic.

This layer contains the core business logic and orchestration.
Services depend on protocols (interfaces), not concrete implementations,
making them testable and flexible.

Architecture:
    Handler -> Service -> Repository
    (HTTP)  -> (Business) -> (Data Access)

Usage:
    ```python
    from prompt_cache.repositories import InMemoryCacheStore, OllamaEmbeddingProvider
    from prompt_cache.services import CacheService

    cache = CacheService.create(
        store=InMemoryCacheStore.create(),
        embedding_provider=OllamaEmbeddingProvider.create(),
    )
    ```
"""

from .analytics_service import AnalyticsService, extract_pattern, render_report
from .cache_service import CacheService
from .warming_service import WarmingService

__all__ = [
    "AnalyticsService",
    "CacheService",
    "WarmingService",
    "extract_pattern",
    "render_report",
]
