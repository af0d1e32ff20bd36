"""HTTP handlers for cache operations.

Handlers convert between DTOs (API contracts) and service calls.
They handle HTTP concerns like status codes, validation, and error handling.
"""

import time
from dataclasses import asdict

from fastapi import HTTPException, status

from prompt_cache.dto import (
    CacheAnalyticsResponse,
    CacheDeleteResponse,
    CacheLookupResponse,
    CacheStatsResponse,
    CacheStoreResponse,
    ContextualWarmingItemResponse,
    HealthCheckResponse,
    LookupCacheRequest,
    ProjectContextRequest,
    StoreCacheRequest,
    WarmingCandidateItem,
)
from prompt_cache.entities import ProjectContext
from prompt_cache.services import CacheService, WarmingService


class CacheHandler:
    """HTTP handlers for cache operations.

    This handler delegates business logic to CacheService / WarmingService
    and handles HTTP-specific concerns like:
    - Converting entities to DTOs
    - Setting appropriate status codes
    - Error handling and responses
    """

    def __init__(self, cache_service: CacheService, warming_service: WarmingService | None = None) -> None:
        """Initialize the cache handler.

        Args:
            cache_service: The cache service for business logic (required).
            warming_service: Warming suggestions. Defaults to a new WarmingService.
        """
        self._cache = cache_service
        self._warming = warming_service or WarmingService()

    async def lookup(self, request: LookupCacheRequest) -> CacheLookupResponse:
        """Handle POST /cache/lookup requests."""
        try:
            start_time = time.time()
            result = await self._cache.lookup(
                prompt=request.prompt,
                provider=request.provider,
                model=request.model,
                use_semantic=request.use_semantic,
            )
            lookup_time_ms = (time.time() - start_time) * 1000
        except Exception as e:
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Failed to look up cache: {e}",
            ) from e

        if result is None:
            return CacheLookupResponse(prompt=request.prompt, is_hit=False, lookup_time_ms=lookup_time_ms)

        return CacheLookupResponse(
            prompt=request.prompt,
            is_hit=True,
            semantic=result.semantic,
            similarity=result.similarity,
            key=result.key,
            response=result.entry.response,
            token_count=result.entry.token_count,
            hit_count=result.entry.hit_count,
            lookup_time_ms=lookup_time_ms,
        )

    async def store(self, request: StoreCacheRequest) -> CacheStoreResponse:
        """Handle POST /cache/store requests."""
        try:
            key = await self._cache.store(
                prompt=request.prompt,
                response=request.response,
                provider=request.provider,
                model=request.model,
                token_count=request.token_count,
                response_time=request.response_time_ms,
                cache_hint=request.cache_hint,
                metadata=request.metadata,
            )
        except Exception as e:
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Failed to store entry: {e}",
            ) from e

        return CacheStoreResponse(success=True, key=key, message="Entry stored successfully")

    async def remove(self, key: str) -> CacheDeleteResponse:
        """Handle DELETE /cache/{key} requests."""
        if not self._cache.remove(key):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"No cache entry {key!r}")
        return CacheDeleteResponse(success=True, key=key)

    async def clear(self) -> dict:
        """Handle DELETE /cache requests (operator reset)."""
        self._cache.reset()
        return {"success": True, "message": "Cache cleared and metrics reset"}

    async def get_stats(self) -> CacheStatsResponse:
        """Handle GET /cache/stats requests."""
        return CacheStatsResponse(**self._cache.get_stats())

    async def get_analytics(self) -> CacheAnalyticsResponse:
        """Handle GET /cache/analytics requests."""
        try:
            analytics = self._cache.analyze()
        except Exception as e:
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Failed to analyze cache: {e}",
            ) from e
        return CacheAnalyticsResponse.model_validate(analytics.to_dict())

    async def get_report(self) -> str:
        """Handle GET /cache/report requests."""
        return self._cache.get_report()

    async def warming_candidates(self) -> list[WarmingCandidateItem]:
        """Handle GET /cache/warming/candidates requests."""
        return [WarmingCandidateItem(**asdict(c)) for c in self._warming.identify_warming_candidates()]

    async def contextual_warming(self, request: ProjectContextRequest) -> list[ContextualWarmingItemResponse]:
        """Handle POST /cache/warming/contextual requests."""
        context = ProjectContext(tech_stack=tuple(request.tech_stack), project_type=request.project_type)
        return [
            ContextualWarmingItemResponse(**asdict(item))
            for item in self._warming.generate_contextual_warming_content(context)
        ]

    async def health_check(self) -> HealthCheckResponse:
        """Handle GET /health requests."""
        embedding_healthy = await self._cache.is_healthy() if self._cache.semantic_enabled else None
        return HealthCheckResponse(
            status="degraded" if embedding_healthy is False else "healthy",
            cache_healthy=True,
            embedding_healthy=embedding_healthy,
        )
