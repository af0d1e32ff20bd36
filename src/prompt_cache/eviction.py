"""Eviction strategies and victim selection.

Every strategy satisfies the EvictionStrategy protocol: it scores a
snapshot of entries and the lowest scores are evicted first. Adding a
strategy means writing a class with a `scores` method and registering it
in STRATEGIES.
"""

import time
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

import numpy as np

from prompt_cache.entities import CacheEntry
from prompt_cache.protocols import EvictionStrategy

# Floor for recency/age denominators, in seconds. An entry created or hit
# "just now" would otherwise produce an infinite term.
MIN_INTERVAL = 1.0


class LRUStrategy:
    """Least recently used: oldest `last_hit` goes first."""

    name = "lru"

    def scores(self, entries: Sequence[CacheEntry], now: float) -> list[float]:
        return [entry.last_hit for entry in entries]


class LFUStrategy:
    """Least frequently used: lowest `hit_count` goes first."""

    name = "lfu"

    def scores(self, entries: Sequence[CacheEntry], now: float) -> list[float]:
        return [float(entry.hit_count) for entry in entries]


class TTLStrategy:
    """Oldest created goes first."""

    name = "ttl"

    def scores(self, entries: Sequence[CacheEntry], now: float) -> list[float]:
        return [entry.timestamp for entry in entries]


@dataclass(frozen=True)
class IntelligentWeights:
    """Weights of the composite eviction score."""

    frequency: float = 0.30
    recency: float = 0.25
    tokens: float = 0.15
    cache_hint: float = 0.20
    age: float = 0.10


class IntelligentStrategy:
    """Multi-factor score; low-value entries go first.

    score = 0.30*hit_count + 0.25/recency + 0.15*token_count
            + 0.20*cache_hint + 0.10/age

    where recency = now - last_hit and age = now - timestamp, both in
    seconds and floored at MIN_INTERVAL.
    """

    name = "intelligent"

    def __init__(self, weights: IntelligentWeights | None = None) -> None:
        self.weights = weights or IntelligentWeights()

    def scores(self, entries: Sequence[CacheEntry], now: float) -> list[float]:
        if not entries:
            return []
        w = self.weights
        hits = np.array([e.hit_count for e in entries], dtype=float)
        tokens = np.array([e.token_count for e in entries], dtype=float)
        hints = np.array([1.0 if e.cache_hint else 0.0 for e in entries])
        recency = np.maximum(now - np.array([e.last_hit for e in entries], dtype=float), MIN_INTERVAL)
        age = np.maximum(now - np.array([e.timestamp for e in entries], dtype=float), MIN_INTERVAL)

        score = (
            w.frequency * hits
            + w.recency / recency
            + w.tokens * tokens
            + w.cache_hint * hints
            + w.age / age
        )
        return score.tolist()


STRATEGIES: dict[str, type] = {
    LRUStrategy.name: LRUStrategy,
    LFUStrategy.name: LFUStrategy,
    TTLStrategy.name: TTLStrategy,
    IntelligentStrategy.name: IntelligentStrategy,
}


def get_strategy(name: str) -> EvictionStrategy:
    """Instantiate a registered strategy by name.

    Raises:
        ValueError: If no strategy is registered under `name`
    """
    try:
        return STRATEGIES[name.lower()]()
    except KeyError:
        raise ValueError(f"Unknown eviction strategy {name!r}, expected one of {sorted(STRATEGIES)}") from None


def rank(
    entries: Sequence[CacheEntry],
    strategy: EvictionStrategy,
    now: float,
) -> list[tuple[float, CacheEntry]]:
    """Order entries from first-to-evict to last.

    Ties on score fall back to older `last_hit`, then older `timestamp`,
    then key, so the order is total and repeatable.
    """
    scored = zip(strategy.scores(entries, now), entries)
    return sorted(scored, key=lambda item: (item[0], item[1].last_hit, item[1].timestamp, item[1].key))


def select_victims(
    entries: Iterable[CacheEntry],
    count: int,
    strategy: EvictionStrategy | str = "intelligent",
    now: float | None = None,
) -> set[str]:
    """Choose `count` keys to evict (fewer if there are fewer entries).

    Args:
        entries: Snapshot of entries; not modified
        count: Number of victims wanted
        strategy: Strategy instance or registered name
        now: Current time in seconds, defaults to time.time()

    Returns:
        Keys of the lowest-ranked entries
    """
    snapshot = list(entries)
    if count <= 0 or not snapshot:
        return set()

    if isinstance(strategy, str):
        strategy = get_strategy(strategy)
    now = time.time() if now is None else now

    return {entry.key for _, entry in rank(snapshot, strategy, now)[:count]}
