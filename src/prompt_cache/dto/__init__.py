"""Data Transfer Objects for API contracts.

These Pydantic models define the external API contract.
They are used for request/response validation and serialization.

Internal domain logic should use entities from the entities package.
"""

from .requests import LookupCacheRequest, ProjectContextRequest, StoreCacheRequest
from .responses import (
    CacheAnalyticsResponse,
    CacheDeleteResponse,
    CacheLookupResponse,
    CacheStatsResponse,
    CacheStoreResponse,
    ContextualWarmingItemResponse,
    HealthCheckResponse,
    PatternItem,
    ProviderEfficiencyItem,
    WarmingCandidateItem,
)

__all__ = [
    "LookupCacheRequest",
    "StoreCacheRequest",
    "ProjectContextRequest",
    "CacheLookupResponse",
    "CacheStoreResponse",
    "CacheDeleteResponse",
    "CacheStatsResponse",
    "CacheAnalyticsResponse",
    "PatternItem",
    "ProviderEfficiencyItem",
    "WarmingCandidateItem",
    "ContextualWarmingItemResponse",
    "HealthCheckResponse",
]
