"""Cache storage protocol.

Defines the interface the cache service needs from the authoritative
entry store. The store performs no I/O: embeddings are computed by the
caller and passed in, so every operation completes without suspending.
"""

from collections.abc import Sequence
from typing import Any, Protocol, runtime_checkable

from prompt_cache.entities import CacheEntry, CacheMetrics, LookupResult


@runtime_checkable
class CacheStore(Protocol):
    """Protocol for cache storage backends."""

    def lookup(
        self,
        prompt: str,
        provider: str,
        model: str,
        embedding: Sequence[float] | None = None,
        use_semantic: bool = True,
    ) -> LookupResult | None:
        """Find a reusable entry, recording a hit or a miss.

        Args:
            prompt: Prompt text (normalized by the fingerprint)
            provider: Upstream provider identifier
            model: Model identifier
            embedding: Query vector for semantic fallback, or None to skip it
            use_semantic: Allow the semantic fallback

        Returns:
            LookupResult on a hit, None on a miss
        """
        ...

    def contains(self, prompt: str, provider: str, model: str) -> bool:
        """Check for a live exact entry without recording a hit or a miss."""
        ...

    def insert(self, entry: CacheEntry) -> str:
        """Add or replace an entry, evicting victims if over capacity.

        Returns:
            The entry key
        """
        ...

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
        """Build an entry stamped with the store clock and insert it."""
        ...

    def remove(self, key: str) -> bool:
        """Delete an entry and its semantic index association."""
        ...

    def get(self, key: str) -> CacheEntry | None:
        """Return a copy of an entry without recording a hit."""
        ...

    def snapshot(self) -> tuple[list[CacheEntry], CacheMetrics]:
        """Consistent copy of all entries and the metrics."""
        ...

    def metrics(self) -> CacheMetrics:
        """Copy of the current metrics."""
        ...

    @property
    def index_size(self) -> int:
        """Number of vectors in the semantic index."""
        ...

    def reset(self) -> None:
        """Drop all entries and zero the metrics (operator action)."""
        ...
