"""Cache service for core business logic.

This service orchestrates cache operations by coordinating the store
(entries, metrics, eviction) and the embedding provider (query vectors).
The only suspension points are the embedding call and, in
`get_or_fetch`, the caller's provider call; store operations never block
on I/O.
"""

import hashlib
import logging
import time
from collections import OrderedDict
from collections.abc import Awaitable, Callable, Iterable, Mapping
from typing import Any

from prompt_cache.config import get_settings
from prompt_cache.entities import CacheAnalytics, FetchResult, LookupResult, ProviderResponse
from prompt_cache.fingerprint import normalize_prompt
from prompt_cache.protocols import CacheStore, EmbeddingProvider

from .analytics_service import AnalyticsService, render_report

logger = logging.getLogger(__name__)


class CacheService:
    """Core cache orchestration service.

    This service depends on PROTOCOLS, not concrete implementations:
    - CacheStore: the in-memory store, or any other backend
    - EmbeddingProvider: Ollama, sentence-transformers, etc. (optional)

    Without an embedding provider, or whenever it fails, the service falls
    back to exact fingerprint matching.

    Example:
        ```python
        cache = CacheService.create(
            store=InMemoryCacheStore.create(),
            embedding_provider=OllamaEmbeddingProvider.create(),
        )

        hit = await cache.lookup("Explain CQRS", "openai", "gpt-4")
        if hit is None:
            await cache.store("Explain CQRS", answer, "openai", "gpt-4", token_count=350)
        ```
    """

    def __init__(
        self,
        store: CacheStore,
        embedding_provider: EmbeddingProvider | None = None,
        semantic_matching: bool | None = None,
        embedding_cache_size: int | None = None,
        hit_target: float | None = None,
        analytics: AnalyticsService | None = None,
    ) -> None:
        """Initialize the cache service.

        Args:
            store: Cache storage backend (required).
            embedding_provider: Embedding generator; None disables semantic matching.
            semantic_matching: Global switch for semantic lookups. Defaults to settings.
            embedding_cache_size: Number of memoised embeddings. Defaults to settings.
            hit_target: Hit rate shown as target in the report. Defaults to settings.
            analytics: Analytics service. Defaults to one using the store's cost table.
        """
        settings = get_settings()
        self._store = store
        self._embeddings = embedding_provider
        self._semantic = settings.semantic_matching if semantic_matching is None else semantic_matching
        self._embedding_cache_size = (
            settings.embedding_cache_size if embedding_cache_size is None else embedding_cache_size
        )
        self._hit_target = settings.cache_hit_target if hit_target is None else hit_target
        self._analytics = analytics or AnalyticsService(getattr(store, "cost_table", None))
        self._embedding_cache: OrderedDict[str, list[float]] = OrderedDict()

    @classmethod
    def create(
        cls,
        store: CacheStore,
        embedding_provider: EmbeddingProvider | None = None,
        semantic_matching: bool | None = None,
    ) -> "CacheService":
        """Factory method to create CacheService with defaults from settings."""
        return cls(
            store=store,
            embedding_provider=embedding_provider,
            semantic_matching=semantic_matching,
        )

    @property
    def semantic_enabled(self) -> bool:
        return self._semantic and self._embeddings is not None

    async def embed(self, text: str) -> list[float] | None:
        """Embedding for `text`, or None when unavailable.

        Results are memoised per normalized text. Provider failures are
        logged and swallowed: the caller degrades to exact matching.
        """
        if not self.semantic_enabled:
            return None

        normalized = normalize_prompt(text)
        digest = hashlib.md5(normalized.encode("utf-8")).hexdigest()
        cached = self._embedding_cache.get(digest)
        if cached is not None:
            self._embedding_cache.move_to_end(digest)
            return cached

        try:
            vector = await self._embeddings.encode(normalized)  # type: ignore[union-attr]
        except Exception as e:
            logger.warning("Embedding unavailable, using exact matching only: %s", e)
            return None
        if not vector:
            return None

        vector = [float(x) for x in vector]
        if self._embedding_cache_size > 0:
            self._embedding_cache[digest] = vector
            while len(self._embedding_cache) > self._embedding_cache_size:
                self._embedding_cache.popitem(last=False)
        return vector

    async def lookup(
        self,
        prompt: str,
        provider: str,
        model: str,
        use_semantic: bool = True,
    ) -> LookupResult | None:
        """Find a cached response for (prompt, provider, model).

        Business logic:
        1. Exact fingerprint match
        2. Otherwise, embed the prompt and ask for a semantic match
        3. Otherwise, record a miss

        Returns:
            LookupResult on a hit, None on a miss
        """
        use_semantic = use_semantic and self.semantic_enabled
        embedding = None
        # Exact hits must not pay for an embedding call
        if use_semantic and not self._store.contains(prompt, provider, model):
            embedding = await self.embed(prompt)
        return self._store.lookup(prompt, provider, model, embedding=embedding, use_semantic=use_semantic)

    async def store(
        self,
        prompt: str,
        response: Any,
        provider: str,
        model: str,
        token_count: int | None = None,
        response_time: float = 0.0,
        cache_hint: bool = False,
        metadata: dict[str, Any] | None = None,
    ) -> str:
        """Store a provider response.

        Business logic:
        1. Generate embedding for the prompt (skipped on failure)
        2. Insert into the store, which evicts if over capacity

        Returns:
            The cache key of the entry
        """
        embedding = await self.embed(prompt)
        entry = self._store.put(
            prompt,
            response,
            provider,
            model,
            token_count=token_count,
            response_time=response_time,
            embedding=embedding,
            cache_hint=cache_hint,
            metadata=metadata,
        )
        return entry.key

    def remove(self, key: str) -> bool:
        """Delete a cache entry by key."""
        return self._store.remove(key)

    async def get_or_fetch(
        self,
        prompt: str,
        provider: str,
        model: str,
        fetch: Callable[[], Awaitable[ProviderResponse]],
        cache_hint: bool = False,
        metadata: dict[str, Any] | None = None,
    ) -> FetchResult:
        """Read-through helper: serve from cache or call the provider and cache the answer.

        Args:
            prompt: Prompt text
            provider: Provider identifier
            model: Model identifier
            fetch: Caller's provider call, awaited only on a miss
            cache_hint: Mark the new entry as especially reusable
            metadata: Extra metadata for the new entry

        Returns:
            FetchResult telling whether the response came from the cache
        """
        hit = await self.lookup(prompt, provider, model)
        if hit is not None:
            return FetchResult(
                response=hit.entry.response,
                key=hit.key,
                cached=True,
                semantic=hit.semantic,
            )

        start = time.perf_counter()
        result = await fetch()
        response_time = (time.perf_counter() - start) * 1000

        key = await self.store(
            prompt,
            result.response,
            provider,
            model,
            token_count=result.token_count,
            response_time=response_time,
            cache_hint=cache_hint,
            metadata=metadata,
        )
        return FetchResult(response=result.response, key=key, cached=False, response_time=response_time)

    async def warm_cache(self, items: Iterable[Mapping[str, Any]]) -> int:
        """Pre-populate the cache with already fetched responses.

        Each item needs `content`, `response`, `provider` and `model`;
        `token_count`, `response_time`, `cache_hint` and `metadata` are
        optional. Items are marked `warmed=True` in their metadata.

        Returns:
            Number of entries stored
        """
        items = list(items)
        logger.info("Warming cache with %d entries", len(items))
        count = 0
        for item in items:
            metadata = {**(item.get("metadata") or {}), "warmed": True}
            await self.store(
                item["content"],
                item["response"],
                item["provider"],
                item["model"],
                token_count=item.get("token_count"),
                response_time=item.get("response_time", 0.0),
                cache_hint=item.get("cache_hint", metadata.get("cache_hint", False)),
                metadata=metadata,
            )
            count += 1
        logger.info("Cache warming completed (%d entries)", count)
        return count

    def analyze(self) -> CacheAnalytics:
        """Run analytics on a snapshot of the store."""
        entries, metrics = self._store.snapshot()
        return self._analytics.analyze_cache(entries, metrics)

    def get_report(self) -> str:
        """Human-readable cache effectiveness report."""
        return render_report(self._store.metrics(), self._store.index_size, self._hit_target)

    def get_stats(self) -> dict[str, Any]:
        """Metrics plus configuration details."""
        stats: dict[str, Any] = self._store.metrics().to_dict()
        stats["index_size"] = self._store.index_size
        stats["semantic_matching"] = self.semantic_enabled
        stats["embedding_model"] = self._embeddings.model_name if self._embeddings else None
        return stats

    def reset(self) -> None:
        """Clear the cache and zero the metrics (operator action)."""
        self._store.reset()
        self._embedding_cache.clear()

    async def is_healthy(self) -> bool:
        """The store is in-process; health depends on the embedding provider only."""
        if self._embeddings is None:
            return True
        return await self._embeddings.is_available()

    @property
    def hit_target(self) -> float:
        return self._hit_target

    @property
    def store_backend(self) -> CacheStore:
        """Get the underlying store (for testing)."""
        return self._store

    @property
    def embedding_provider(self) -> EmbeddingProvider | None:
        """Get the underlying embedding provider (for testing)."""
        return self._embeddings
