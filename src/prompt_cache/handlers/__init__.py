"""HTTP handlers.

Handlers translate request DTOs into CacheService / WarmingService calls
and service results back into response DTOs. They never touch the store.
"""

from .cache_handler import CacheHandler

__all__ = ["CacheHandler"]
