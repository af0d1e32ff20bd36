"""Response DTOs for API endpoints."""

from typing import Any

from pydantic import BaseModel, Field


class CacheLookupResponse(BaseModel):
    """Response DTO for cache lookup operation."""

    prompt: str = Field(..., description="The original query prompt")
    is_hit: bool = Field(..., description="Whether a reusable response was found")
    semantic: bool = Field(False, description="Whether the hit came from similarity matching")
    similarity: float | None = Field(None, description="Cosine similarity of the match")
    key: str | None = Field(None, description="Key of the matched entry")
    response: Any = Field(None, description="The cached response payload")
    token_count: int | None = Field(None, description="Token count of the matched entry")
    hit_count: int | None = Field(None, description="Hits recorded on the matched entry")
    lookup_time_ms: float = Field(..., description="Time taken for the lookup in milliseconds")


class CacheStoreResponse(BaseModel):
    """Response DTO for cache store operation."""

    success: bool = Field(..., description="Whether the operation succeeded")
    key: str = Field(..., description="The cache key for the entry")
    message: str = Field(..., description="Human-readable status message")


class CacheDeleteResponse(BaseModel):
    """Response DTO for cache delete operation."""

    success: bool = Field(..., description="Whether an entry was removed")
    key: str = Field(..., description="The key that was removed")


class CacheStatsResponse(BaseModel):
    """Response DTO for cache statistics."""

    total_requests: int = Field(..., ge=0)
    hits: int = Field(..., ge=0)
    semantic_hits: int = Field(..., ge=0)
    misses: int = Field(..., ge=0)
    hit_rate: float = Field(..., ge=0.0, le=1.0)
    miss_rate: float = Field(..., ge=0.0, le=1.0)
    average_response_time: float = Field(..., description="Mean lookup latency in milliseconds")
    cost_savings: float = Field(..., description="Estimated USD saved")
    time_saved_ms: float = Field(..., description="Original response time served from cache")
    cache_size: int = Field(..., ge=0)
    evictions: int = Field(..., ge=0)
    expirations: int = Field(..., ge=0)
    index_size: int = Field(..., ge=0, description="Entries in the semantic index")
    semantic_matching: bool
    embedding_model: str | None = None


class PatternItem(BaseModel):
    """Usage of one content pattern."""

    pattern: str
    frequency: int
    avg_tokens: float
    cost_savings: float


class ProviderEfficiencyItem(BaseModel):
    """Cache efficiency of one provider."""

    hit_rate: float
    avg_response_time: float
    cost_per_request: float


class CacheAnalyticsResponse(BaseModel):
    """Response DTO for cache analytics."""

    popular_patterns: list[PatternItem] = Field(default_factory=list)
    provider_efficiency: dict[str, ProviderEfficiencyItem] = Field(default_factory=dict)
    recommendations: list[str] = Field(default_factory=list)


class WarmingCandidateItem(BaseModel):
    """Catalog prompt worth pre-fetching."""

    content: str
    priority: int
    estimated_value: float = Field(..., ge=0.0, le=1.0)
    category: str
    cache_hint: bool


class ContextualWarmingItemResponse(BaseModel):
    """Context-specific prompt with a suggested provider/model."""

    content: str
    priority: int
    provider: str
    model: str


class HealthCheckResponse(BaseModel):
    """Response DTO for health check."""

    status: str = Field(..., description="Health status: 'healthy' or 'degraded'")
    cache_healthy: bool = Field(..., description="Whether the cache store is usable")
    embedding_healthy: bool | None = Field(
        None,
        description="Whether the embedding service is reachable (None when semantic matching is off)",
    )
