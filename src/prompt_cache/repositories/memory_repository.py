"""In-memory implementation of CacheStore.

The store is the sole owner of cache entries and of the metrics aggregate.
A single re-entrant lock guards the entry map, the semantic index and the
metrics, so every lookup/insert/remove sees and leaves one consistent view.
Operations never perform I/O and hold the lock only for bounded work;
callers get copies of entries, never live objects.
"""

import logging
import threading
import time
from collections.abc import Callable, Sequence
from dataclasses import replace
from typing import Any

from prompt_cache.config import get_settings
from prompt_cache.entities import CacheEntry, CacheMetrics, LookupResult
from prompt_cache.eviction import get_strategy, select_victims
from prompt_cache.fingerprint import fingerprint
from prompt_cache.pricing import CostTable, estimate_tokens
from prompt_cache.protocols import EvictionStrategy

from .semantic_index import SemanticIndex

logger = logging.getLogger(__name__)


def _copy(entry: CacheEntry) -> CacheEntry:
    return replace(
        entry,
        embedding=list(entry.embedding) if entry.embedding is not None else None,
        metadata=dict(entry.metadata),
    )


class InMemoryCacheStore:
    """Process-local cache store with capacity-bound eviction.

    This class satisfies the CacheStore protocol through structural
    typing - no explicit inheritance needed.

    Example:
        ```python
        store = InMemoryCacheStore.create(capacity=500, eviction_strategy="lru")
        store.put("Explain CQRS", response, "openai", "gpt-4", token_count=120)
        result = store.lookup("Explain   CQRS", "openai", "gpt-4")  # exact hit
        ```
    """

    def __init__(
        self,
        capacity: int | None = None,
        eviction_strategy: EvictionStrategy | str | None = None,
        cost_table: CostTable | None = None,
        similarity_threshold: float | None = None,
        ttl: float | None = None,
        semantic_index: SemanticIndex | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize the store.

        Args:
            capacity: Max entries before eviction. Defaults to settings.
            eviction_strategy: Strategy instance or name. Defaults to settings.
            cost_table: Provider pricing for savings estimates. Defaults to settings.
            similarity_threshold: Cosine similarity a semantic hit must exceed.
            ttl: Entry lifetime in seconds, 0 disables expiry. Defaults to settings.
            semantic_index: Vector index. A fresh one is created if None.
            clock: Time source in seconds.
        """
        settings = get_settings()
        self._capacity = capacity if capacity is not None else settings.cache_capacity
        if self._capacity < 1:
            raise ValueError("capacity must be at least 1")

        strategy = eviction_strategy if eviction_strategy is not None else settings.eviction_strategy
        self._strategy = get_strategy(strategy) if isinstance(strategy, str) else strategy
        self._costs = cost_table or CostTable.from_settings()
        self._threshold = (
            similarity_threshold if similarity_threshold is not None else settings.similarity_threshold
        )
        self._ttl = ttl if ttl is not None else settings.cache_ttl
        self._index = semantic_index if semantic_index is not None else SemanticIndex()
        self._clock = clock

        self._entries: dict[str, CacheEntry] = {}
        self._metrics = CacheMetrics()
        self._lock = threading.RLock()

    @classmethod
    def create(
        cls,
        capacity: int | None = None,
        eviction_strategy: EvictionStrategy | str | None = None,
        cost_table: CostTable | None = None,
        similarity_threshold: float | None = None,
        ttl: float | None = None,
    ) -> "InMemoryCacheStore":
        """Factory method to create InMemoryCacheStore with defaults from settings."""
        return cls(
            capacity=capacity,
            eviction_strategy=eviction_strategy,
            cost_table=cost_table,
            similarity_threshold=similarity_threshold,
            ttl=ttl,
        )

    # -- lookups -----------------------------------------------------------

    def lookup(
        self,
        prompt: str,
        provider: str,
        model: str,
        embedding: Sequence[float] | None = None,
        use_semantic: bool = True,
    ) -> LookupResult | None:
        """Find a reusable entry for the request, recording a hit or a miss.

        Exact fingerprint match first; otherwise, when an embedding is given,
        the closest entry of the same provider/model above the similarity
        threshold. Expired entries met on the way are removed.

        Returns:
            LookupResult on a hit, None on a miss
        """
        start = time.perf_counter()
        key = fingerprint(prompt, provider, model)

        with self._lock:
            now = self._clock()
            entry = self._live_entry(key, now)
            semantic = False
            similarity = 1.0

            if entry is None and use_semantic and embedding is not None:
                match = self._semantic_match(embedding, provider, model, now)
                if match is not None:
                    entry = self._entries[match[0]]
                    semantic, similarity = True, match[1]

            elapsed_ms = (time.perf_counter() - start) * 1000
            self._metrics.record_lookup(elapsed_ms)

            if entry is None:
                self._metrics.misses += 1
                logger.debug("Miss for %s/%s", provider, model)
                return None

            entry.record_hit(now)
            self._metrics.hits += 1
            self._metrics.cost_savings += self._costs.estimate(entry.provider, entry.token_count)
            self._metrics.time_saved_ms += entry.response_time
            if semantic:
                self._metrics.semantic_hits += 1
                logger.debug("Semantic hit for %s/%s (similarity %.3f)", provider, model, similarity)
            else:
                logger.debug("Exact hit for %s/%s", provider, model)

            return LookupResult(
                entry=_copy(entry),
                semantic=semantic,
                similarity=similarity,
                lookup_time_ms=elapsed_ms,
            )

    def _live_entry(self, key: str, now: float) -> CacheEntry | None:
        entry = self._entries.get(key)
        if entry is not None and entry.is_expired(now, self._ttl):
            self._discard(key)
            self._metrics.expirations += 1
            logger.debug("Expired entry %s", key)
            return None
        return entry

    def _semantic_match(
        self, embedding: Sequence[float], provider: str, model: str, now: float
    ) -> tuple[str, float] | None:
        expired: list[str] = []

        def live_same_target(key: str) -> bool:
            candidate = self._entries.get(key)
            if candidate is None or candidate.provider != provider or candidate.model != model:
                return False
            if candidate.is_expired(now, self._ttl):
                expired.append(key)
                return False
            return True

        def tiebreak(key: str) -> tuple[int, float]:
            candidate = self._entries[key]
            return candidate.hit_count, candidate.timestamp

        try:
            match = self._index.query(embedding, self._threshold, accept=live_same_target, tiebreak=tiebreak)
        except ValueError as e:
            logger.warning("Semantic lookup skipped: %s", e)
            return None

        for key in expired:
            self._discard(key)
            self._metrics.expirations += 1
            logger.debug("Expired entry %s", key)
        return match

    def contains(self, prompt: str, provider: str, model: str) -> bool:
        """Check for a live exact entry without recording anything."""
        key = fingerprint(prompt, provider, model)
        with self._lock:
            entry = self._entries.get(key)
            return entry is not None and not entry.is_expired(self._clock(), self._ttl)

    def get(self, key: str) -> CacheEntry | None:
        """Return a copy of an entry without recording a hit."""
        with self._lock:
            entry = self._entries.get(key)
            return _copy(entry) if entry is not None else None

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    # -- mutations ---------------------------------------------------------

    def put(
        self,
        prompt: str,
        response: Any,
        provider: str,
        model: str,
        token_count: int | None = None,
        response_time: float = 0.0,
        embedding: Sequence[float] | None = None,
        cache_hint: bool = False,
        metadata: dict[str, Any] | None = None,
    ) -> CacheEntry:
        """Build an entry stamped with the store clock and insert it.

        Returns:
            Copy of the stored entry
        """
        now = self._clock()
        entry = CacheEntry(
            key=fingerprint(prompt, provider, model),
            content=prompt,
            response=response,
            provider=provider,
            model=model,
            token_count=token_count if token_count is not None else estimate_tokens(prompt),
            timestamp=now,
            last_hit=now,
            response_time=response_time,
            embedding=list(embedding) if embedding is not None else None,
            cache_hint=cache_hint,
            metadata=dict(metadata or {}),
        )
        key = self.insert(entry)
        return self.get(key) or entry

    def insert(self, entry: CacheEntry) -> str:
        """Add an entry, replacing any entry with the same key.

        A replacement is a fresh entry: hit statistics restart from zero.
        If the store then exceeds capacity, victims chosen by the eviction
        strategy are removed (never the entry just inserted).

        Returns:
            The entry key
        """
        stored = _copy(entry)
        stored.hit_count = 0
        stored.last_hit = stored.timestamp

        with self._lock:
            if stored.key in self._entries:
                self._discard(stored.key)

            if stored.embedding is not None:
                try:
                    self._index.index(stored.key, stored.embedding)
                except ValueError as e:
                    logger.warning("Not indexing %s: %s", stored.key, e)
                    stored.embedding = None

            self._entries[stored.key] = stored
            self._metrics.cache_size = len(self._entries)
            logger.debug(
                "Stored %s/%s content (%d tokens)", stored.provider, stored.model, stored.token_count
            )

            overflow = len(self._entries) - self._capacity
            if overflow > 0:
                self._evict(overflow, protect=stored.key)

        return stored.key

    def _evict(self, count: int, protect: str) -> None:
        candidates = [e for k, e in self._entries.items() if k != protect]
        victims = select_victims(candidates, count, self._strategy, now=self._clock())
        for key in victims:
            self._discard(key)
            self._metrics.evictions += 1
        if victims:
            logger.debug("Evicted %d entries (%s)", len(victims), self._strategy.name)

    def remove(self, key: str) -> bool:
        """Delete an entry and its semantic index association."""
        with self._lock:
            return self._discard(key)

    def _discard(self, key: str) -> bool:
        if self._entries.pop(key, None) is None:
            return False
        self._index.remove(key)
        self._metrics.cache_size = len(self._entries)
        return True

    def purge_expired(self) -> int:
        """Remove every expired entry.

        Returns:
            Number of entries removed
        """
        with self._lock:
            now = self._clock()
            expired = [k for k, e in self._entries.items() if e.is_expired(now, self._ttl)]
            for key in expired:
                self._discard(key)
            self._metrics.expirations += len(expired)
            return len(expired)

    def reset(self) -> None:
        """Drop all entries and zero the metrics (operator action)."""
        with self._lock:
            self._entries.clear()
            self._index.clear()
            self._metrics = CacheMetrics()
        logger.info("Cache cleared and metrics reset")

    # -- snapshots ---------------------------------------------------------

    def snapshot(self) -> tuple[list[CacheEntry], CacheMetrics]:
        """Consistent copy of all entries and the metrics.

        The lock is held only while copying; analysis runs on the copy.
        """
        with self._lock:
            return [_copy(e) for e in self._entries.values()], replace(self._metrics)

    def metrics(self) -> CacheMetrics:
        """Copy of the current metrics."""
        with self._lock:
            return replace(self._metrics)

    @property
    def index_size(self) -> int:
        with self._lock:
            return len(self._index)

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def similarity_threshold(self) -> float:
        return self._threshold

    @property
    def ttl(self) -> float:
        return self._ttl

    @property
    def strategy(self) -> EvictionStrategy:
        return self._strategy

    @property
    def cost_table(self) -> CostTable:
        return self._costs
