"""Lookup result domain entity."""

from dataclasses import dataclass

from .cache_entry import CacheEntry


@dataclass(frozen=True)
class LookupResult:
    """A cache hit.

    Attributes:
        entry: Snapshot of the matched entry, taken after the hit was recorded
        semantic: True when found through vector similarity rather than the fingerprint
        similarity: Cosine similarity of a semantic hit (1.0 for exact hits)
        lookup_time_ms: Time spent inside the store
    """

    entry: CacheEntry
    semantic: bool = False
    similarity: float = 1.0
    lookup_time_ms: float = 0.0

    @property
    def key(self) -> str:
        return self.entry.key
