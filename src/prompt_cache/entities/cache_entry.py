"""Cache entry domain entity."""

from dataclasses import dataclass, field
from typing import Any


@dataclass
class CacheEntry:
    """Domain entity for one cached prompt/response association.

    Entries are owned by the cache store. The store mutates `hit_count` and
    `last_hit` under its lock and only ever hands out copies, so callers
    never see a half-updated entry.

    Attributes:
        key: Fingerprint of (normalized prompt, provider, model)
        content: The cached prompt text
        response: The provider payload returned on a hit
        provider: Upstream provider identifier (e.g. "openai")
        model: Model identifier (e.g. "gpt-4")
        token_count: Size of the content in provider tokens
        timestamp: Creation time (seconds)
        last_hit: Time of the most recent hit, equal to `timestamp` until the first hit
        hit_count: Hits since creation
        response_time: Latency of the original, uncached call in milliseconds
        embedding: Vector used by the semantic index, None until computed
        cache_hint: Caller marked this content as especially reusable
        metadata: Free-form extra data (e.g. warmed=True)
    """

    key: str
    content: str
    response: Any
    provider: str
    model: str
    token_count: int
    timestamp: float
    last_hit: float
    hit_count: int = 0
    response_time: float = 0.0
    embedding: list[float] | None = None
    cache_hint: bool = False
    metadata: dict[str, Any] = field(default_factory=dict)

    def record_hit(self, now: float) -> None:
        self.hit_count += 1
        self.last_hit = max(now, self.timestamp)

    def is_expired(self, now: float, ttl: float) -> bool:
        """Check whether the entry outlived `ttl` seconds (0 = never expires)."""
        return ttl > 0 and now - self.timestamp >= ttl
