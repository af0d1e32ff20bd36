"""Eviction strategy protocol.

A strategy is a total order over cache entries: it scores each entry and
the entries with the lowest scores are evicted first. Strategies are pure
and never touch the store.
"""

from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from prompt_cache.entities import CacheEntry


@runtime_checkable
class EvictionStrategy(Protocol):
    """Protocol for eviction ranking strategies."""

    name: str

    def scores(self, entries: Sequence[CacheEntry], now: float) -> list[float]:
        """Score entries; lower scores are evicted first.

        Args:
            entries: Snapshot of candidate entries
            now: Current time in seconds

        Returns:
            One score per entry, in the same order
        """
        ...
