"""Domain entities for internal representation.

These are plain dataclasses used internally by services and repositories.
They are NOT used for API contracts - use DTOs from the dto package for that.

Entities should have:
- No JSON serialization logic beyond `to_dict`
- No Pydantic validation
- No external dependencies
"""

from .analytics import CacheAnalytics, PatternStats, ProviderEfficiency
from .cache_entry import CacheEntry
from .cache_metrics import CacheMetrics
from .lookup_result import LookupResult
from .provider_call import FetchResult, ProviderResponse
from .warming import ContextualWarmingItem, ProjectContext, WarmingCandidate

__all__ = [
    "CacheAnalytics",
    "CacheEntry",
    "CacheMetrics",
    "ContextualWarmingItem",
    "FetchResult",
    "LookupResult",
    "PatternStats",
    "ProjectContext",
    "ProviderResponse",
    "ProviderEfficiency",
    "WarmingCandidate",
]
