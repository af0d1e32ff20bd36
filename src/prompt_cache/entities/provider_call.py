"""Provider call entities used by the read-through helper."""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class ProviderResponse:
    """What the caller's provider call hands back on a miss.

    Attributes:
        response: Payload to cache and return
        token_count: Provider token count, estimated from the prompt if None
    """

    response: Any
    token_count: int | None = None


@dataclass(frozen=True)
class FetchResult:
    """Outcome of `CacheService.get_or_fetch`."""

    response: Any
    key: str
    cached: bool
    semantic: bool = False
    response_time: float = 0.0
