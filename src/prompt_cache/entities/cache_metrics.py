"""Aggregate cache metrics."""

from dataclasses import asdict, dataclass


@dataclass
class CacheMetrics:
    """Process-wide counters for one cache store.

    Attributes:
        total_requests: Lookups served
        hits: Lookups answered from the cache (exact + semantic)
        semantic_hits: Hits found through vector similarity
        misses: Lookups that found nothing
        average_response_time: Running mean lookup latency in milliseconds
        cost_savings: Estimated USD not spent thanks to hits
        time_saved_ms: Sum of original response times served from cache
        cache_size: Current entry count
        evictions: Entries removed to respect capacity
        expirations: Entries dropped because their TTL elapsed
    """

    total_requests: int = 0
    hits: int = 0
    semantic_hits: int = 0
    misses: int = 0
    average_response_time: float = 0.0
    cost_savings: float = 0.0
    time_saved_ms: float = 0.0
    cache_size: int = 0
    evictions: int = 0
    expirations: int = 0

    @property
    def hit_rate(self) -> float:
        """Calculate cache hit rate."""
        if self.total_requests == 0:
            return 0.0
        return self.hits / self.total_requests

    @property
    def miss_rate(self) -> float:
        """Calculate cache miss rate."""
        if self.total_requests == 0:
            return 0.0
        return self.misses / self.total_requests

    def record_lookup(self, elapsed_ms: float) -> None:
        self.total_requests += 1
        self.average_response_time += (elapsed_ms - self.average_response_time) / self.total_requests

    def to_dict(self) -> dict[str, float | int]:
        """Convert metrics to dictionary."""
        data: dict[str, float | int] = asdict(self)
        data["hit_rate"] = self.hit_rate
        data["miss_rate"] = self.miss_rate
        return data
