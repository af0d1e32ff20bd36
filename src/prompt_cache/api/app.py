import logging
from typing import Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from prompt_cache.api.dependencies import HandlerDep, make_lifespan
from prompt_cache.config import get_settings
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
from prompt_cache.services import CacheService

API_DESCRIPTION = "Prompt cache for LLM provider calls with exact and semantic matching"


def create_app(cache_service: CacheService | None = None) -> FastAPI:
    """Build the HTTP app.

    Args:
        cache_service: Preconfigured service. Built from settings if None.
    """
    app = FastAPI(
        title="Prompt Cache API",
        description=API_DESCRIPTION,
        version="0.1.0",
        lifespan=make_lifespan(cache_service),
    )

    app.add_middleware(
        CORSMiddleware,  # type: ignore[arg-type]
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/")
    async def root() -> dict[str, Any]:
        """Root endpoint with API information."""
        return {
            "name": "Prompt Cache API",
            "version": "0.1.0",
            "description": API_DESCRIPTION,
            "endpoints": {
                "lookup": "/cache/lookup",
                "store": "/cache/store",
                "stats": "/cache/stats",
                "analytics": "/cache/analytics",
                "report": "/cache/report",
                "warming": "/cache/warming/candidates",
                "health": "/health",
                "docs": "/docs",
            },
        }

    @app.get("/health", response_model=HealthCheckResponse)
    async def health(handler: HandlerDep) -> HealthCheckResponse:
        """Health check endpoint."""
        return await handler.health_check()

    @app.post("/cache/lookup", response_model=CacheLookupResponse)
    async def lookup(request: LookupCacheRequest, handler: HandlerDep) -> CacheLookupResponse:
        """Look up a cached response: exact fingerprint first, then semantic similarity."""
        return await handler.lookup(request)

    @app.post("/cache/store", response_model=CacheStoreResponse)
    async def store(request: StoreCacheRequest, handler: HandlerDep) -> CacheStoreResponse:
        """Store a provider response."""
        return await handler.store(request)

    @app.delete("/cache/{key}", response_model=CacheDeleteResponse)
    async def remove(key: str, handler: HandlerDep) -> CacheDeleteResponse:
        """Delete one entry by key."""
        return await handler.remove(key)

    @app.delete("/cache", response_model=dict[str, Any])
    async def clear(handler: HandlerDep) -> dict[str, Any]:
        """Clear all entries and reset the metrics."""
        return await handler.clear()

    @app.get("/cache/stats", response_model=CacheStatsResponse)
    async def stats(handler: HandlerDep) -> CacheStatsResponse:
        """Get cache statistics."""
        return await handler.get_stats()

    @app.get("/cache/analytics", response_model=CacheAnalyticsResponse)
    async def analytics(handler: HandlerDep) -> CacheAnalyticsResponse:
        """Popular patterns, provider efficiency and recommendations."""
        return await handler.get_analytics()

    @app.get("/cache/report", response_class=PlainTextResponse)
    async def report(handler: HandlerDep) -> str:
        """Human-readable effectiveness report."""
        return await handler.get_report()

    @app.get("/cache/warming/candidates", response_model=list[WarmingCandidateItem])
    async def warming_candidates(handler: HandlerDep) -> list[WarmingCandidateItem]:
        """Catalog prompts worth pre-fetching, highest value first."""
        return await handler.warming_candidates()

    @app.post("/cache/warming/contextual", response_model=list[ContextualWarmingItemResponse])
    async def contextual_warming(
        request: ProjectContextRequest, handler: HandlerDep
    ) -> list[ContextualWarmingItemResponse]:
        """Prompts tailored to a project's stack and type."""
        return await handler.contextual_warming(request)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    uvicorn.run(
        "prompt_cache.api.app:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
    )
