"""Cache analytics and reporting.

Everything here is read-only: it works on snapshots taken from the store
and never mutates its inputs, so it can run at any cadence.
"""

import re
from collections.abc import Iterable

from prompt_cache.entities import (
    CacheAnalytics,
    CacheEntry,
    CacheMetrics,
    PatternStats,
    ProviderEfficiency,
)
from prompt_cache.pricing import CostTable

LOW_HIT_RATE = 0.70
HIGH_HIT_RATE = 0.95
SAVINGS_REPORT_THRESHOLD = 10.0  # USD
EVICTION_RATE_LIMIT = 0.10
TOP_PATTERNS = 10

# First matching rule wins.
PATTERN_RULES: tuple[tuple[str, re.Pattern[str]], ...] = (
    ("React Development", re.compile(r"\breact\b", re.IGNORECASE)),
    ("API Development", re.compile(r"\b(api|apis|rest|restful|endpoints?|openapi)\b", re.IGNORECASE)),
    ("Database Operations", re.compile(r"\b(database|databases|sql|queries|indexing)\b", re.IGNORECASE)),
    ("Workflow Phases", re.compile(r"\bworkflow phase\b|\bphase \d\b", re.IGNORECASE)),
    ("Code Review", re.compile(r"\bcode review\b", re.IGNORECASE)),
    ("System Architecture", re.compile(r"\b(architecture|microservices?)\b", re.IGNORECASE)),
)
DEFAULT_PATTERN = "General Development"


def extract_pattern(content: str) -> str:
    """Classify prompt content into a coarse usage pattern."""
    for name, rule in PATTERN_RULES:
        if rule.search(content):
            return name
    return DEFAULT_PATTERN


class AnalyticsService:
    """Derives usage patterns, provider efficiency and recommendations.

    Example:
        ```python
        entries, metrics = store.snapshot()
        analytics = AnalyticsService(CostTable.from_settings()).analyze_cache(entries, metrics)
        for line in analytics.recommendations:
            print(line)
        ```
    """

    def __init__(self, cost_table: CostTable | None = None) -> None:
        self._costs = cost_table or CostTable.from_settings()

    def estimate_cost_savings(self, entry: CacheEntry) -> float:
        """Money saved by every hit on `entry`."""
        return self._costs.estimate(entry.provider, entry.token_count) * entry.hit_count

    def analyze_cache(self, entries: Iterable[CacheEntry], metrics: CacheMetrics) -> CacheAnalytics:
        """Analyze a snapshot of the cache.

        Args:
            entries: Entry snapshot
            metrics: Metrics snapshot

        Returns:
            CacheAnalytics with popular patterns, provider efficiency and recommendations
        """
        entries = list(entries)
        patterns = self.identify_popular_patterns(entries)
        efficiency = self.analyze_provider_efficiency(entries)
        return CacheAnalytics(
            popular_patterns=patterns,
            provider_efficiency=efficiency,
            recommendations=self.generate_recommendations(patterns, efficiency, metrics),
        )

    def identify_popular_patterns(self, entries: Iterable[CacheEntry]) -> list[PatternStats]:
        groups: dict[str, list[CacheEntry]] = {}
        for entry in entries:
            groups.setdefault(extract_pattern(entry.content), []).append(entry)

        stats = []
        for pattern, members in groups.items():
            frequency = sum(e.hit_count for e in members)
            if frequency:
                avg_tokens = sum(e.token_count * e.hit_count for e in members) / frequency
            else:
                avg_tokens = sum(e.token_count for e in members) / len(members)
            stats.append(
                PatternStats(
                    pattern=pattern,
                    frequency=frequency,
                    avg_tokens=avg_tokens,
                    cost_savings=sum(self.estimate_cost_savings(e) for e in members),
                )
            )

        stats.sort(key=lambda s: (-s.frequency, s.pattern))
        return stats[:TOP_PATTERNS]

    def analyze_provider_efficiency(self, entries: Iterable[CacheEntry]) -> dict[str, ProviderEfficiency]:
        totals: dict[str, dict[str, float]] = {}
        for entry in entries:
            t = totals.setdefault(
                entry.provider, {"hits": 0, "requests": 0, "response_time": 0.0, "cost": 0.0}
            )
            t["hits"] += entry.hit_count
            t["requests"] += entry.hit_count + 1  # +1 for the miss that created the entry
            t["response_time"] += entry.response_time * entry.hit_count
            t["cost"] += self.estimate_cost_savings(entry)

        return {
            provider: ProviderEfficiency(
                hit_rate=t["hits"] / t["requests"],
                avg_response_time=t["response_time"] / t["hits"] if t["hits"] else 0.0,
                cost_per_request=t["cost"] / t["requests"],
            )
            for provider, t in totals.items()
        }

    def generate_recommendations(
        self,
        patterns: list[PatternStats],
        efficiency: dict[str, ProviderEfficiency],
        metrics: CacheMetrics,
    ) -> list[str]:
        recommendations: list[str] = []

        if metrics.total_requests > 0:
            if metrics.hit_rate < LOW_HIT_RATE:
                recommendations.append(
                    "Consider implementing more aggressive cache warming for frequently used patterns"
                )
            if metrics.hit_rate > HIGH_HIT_RATE:
                recommendations.append(
                    "Excellent hit rate! Consider increasing cache size to maintain performance"
                )

        total_savings = sum(p.cost_savings for p in patterns)
        if total_savings > SAVINGS_REPORT_THRESHOLD:
            recommendations.append(
                f"Caching is highly effective - saving approximately ${total_savings:.2f} in API costs"
            )

        if len(efficiency) > 1:
            best = max(sorted(efficiency), key=lambda provider: efficiency[provider].hit_rate)
            recommendations.append(
                f"{best} shows best cache efficiency - consider prioritizing for high-value content"
            )

        if metrics.evictions > metrics.total_requests * EVICTION_RATE_LIMIT:
            recommendations.append(
                "High eviction rate detected - consider increasing cache size or adjusting TTL"
            )

        return recommendations


def render_report(metrics: CacheMetrics, index_size: int, hit_target: float) -> str:
    """Human-readable cache effectiveness summary."""
    return (
        "\n=== Prompt Cache Report ===\n"
        f"Hit Rate: {metrics.hit_rate:.2%} (Target: {hit_target:.0%})\n"
        f"Miss Rate: {metrics.miss_rate:.2%}\n"
        f"Total Requests: {metrics.total_requests}\n"
        f"Semantic Hits: {metrics.semantic_hits}\n"
        f"Average Response Time: {metrics.average_response_time:.2f}ms\n"
        f"Estimated Cost Savings: ${metrics.cost_savings:.4f}\n"
        f"Estimated Time Saved: {metrics.time_saved_ms:.0f}ms\n"
        f"Cache Size: {metrics.cache_size} entries\n"
        f"Cache Evictions: {metrics.evictions}\n"
        f"Semantic Index Size: {index_size} entries\n"
        "===========================\n"
    )
