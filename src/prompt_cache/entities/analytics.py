"""Analytics result entities."""

from dataclasses import asdict, dataclass, field
from typing import Any


@dataclass(frozen=True)
class PatternStats:
    """Aggregate usage of one content pattern."""

    pattern: str
    frequency: int
    avg_tokens: float
    cost_savings: float


@dataclass(frozen=True)
class ProviderEfficiency:
    """Cache efficiency of one upstream provider."""

    hit_rate: float
    avg_response_time: float
    cost_per_request: float


@dataclass(frozen=True)
class CacheAnalytics:
    """Result of a cache analysis run."""

    popular_patterns: list[PatternStats] = field(default_factory=list)
    provider_efficiency: dict[str, ProviderEfficiency] = field(default_factory=dict)
    recommendations: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
