"""Dependency injection configuration for FastAPI app.

Uses FastAPI's app.state pattern for storing service instances.

Pattern:
    - Services stored in app.state during lifespan
    - Dependency functions retrieve from request.app.state
    - Clean separation, no global mutable state
"""

import logging
from contextlib import asynccontextmanager
from typing import Annotated

from fastapi import Depends, FastAPI, Request

from prompt_cache.config import Settings, get_settings
from prompt_cache.handlers import CacheHandler
from prompt_cache.protocols import EmbeddingProvider
from prompt_cache.repositories import InMemoryCacheStore, OllamaEmbeddingProvider
from prompt_cache.services import CacheService

logger = logging.getLogger(__name__)


def get_cache_service(request: Request) -> CacheService:
    """Dependency injection for CacheService from app.state.

    Raises:
        RuntimeError: If service is not initialized
    """
    service = getattr(request.app.state, "cache_service", None)
    if service is None:
        raise RuntimeError("CacheService not initialized. Check lifespan setup.")
    return service


def get_handler(request: Request) -> CacheHandler:
    """Dependency injection for CacheHandler from app.state.

    Raises:
        RuntimeError: If handler is not initialized
    """
    handler = getattr(request.app.state, "cache_handler", None)
    if handler is None:
        raise RuntimeError("CacheHandler not initialized. Check lifespan setup.")
    return handler


def build_embedding_provider(settings: Settings) -> EmbeddingProvider | None:
    """Embedding provider selected by EMBEDDING_BACKEND.

    - ollama: HTTP calls to a local Ollama server (default)
    - local: sentence-transformers model loaded in-process
    - none: exact matching only
    """
    if not settings.semantic_matching or settings.embedding_backend == "none":
        return None
    if settings.embedding_backend == "local":
        # Imported here so sentence-transformers is only loaded when selected
        from prompt_cache.repositories.local_embedding_provider import LocalEmbeddingProvider

        return LocalEmbeddingProvider.create(model_name=settings.embedding_model)
    return OllamaEmbeddingProvider.create(
        model_name=settings.embedding_model,
        base_url=settings.ollama_base_url,
    )


def build_cache_service(settings: Settings | None = None) -> CacheService:
    """Wire store, embedding provider and service from settings."""
    settings = settings or get_settings()
    store = InMemoryCacheStore.create(
        capacity=settings.cache_capacity,
        eviction_strategy=settings.eviction_strategy,
        similarity_threshold=settings.similarity_threshold,
        ttl=settings.cache_ttl,
    )
    return CacheService.create(
        store=store,
        embedding_provider=build_embedding_provider(settings),
        semantic_matching=settings.semantic_matching,
    )


def make_lifespan(cache_service: CacheService | None = None):
    """Lifespan factory; an injected service is used as-is (tests, embedding apps)."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Initializes all layers and stores them in app.state.

        1. Store + embedding provider (data access)
        2. Service (business logic) - app.state.cache_service
        3. Handler (HTTP endpoints) - app.state.cache_handler
        """
        service = cache_service or build_cache_service()
        app.state.cache_service = service
        app.state.cache_handler = CacheHandler(cache_service=service)

        settings = get_settings()
        logger.info("Cache service initialized")
        logger.info(
            "Capacity: %d, eviction: %s, TTL: %ds",
            settings.cache_capacity,
            settings.eviction_strategy,
            settings.cache_ttl,
        )
        if service.semantic_enabled:
            logger.info(
                "Semantic matching: %s (threshold %.2f)",
                service.embedding_provider.model_name,  # type: ignore[union-attr]
                settings.similarity_threshold,
            )
        else:
            logger.info("Semantic matching disabled, exact matching only")

        yield

        provider = service.embedding_provider
        close = getattr(provider, "close", None)
        if close is not None:
            await close()

        del app.state.cache_handler
        del app.state.cache_service
        logger.info("Cache service shut down")

    return lifespan


# Type aliases for cleaner dependency injection
HandlerDep = Annotated[CacheHandler, Depends(get_handler)]
ServiceDep = Annotated[CacheService, Depends(get_cache_service)]
