"""Provider pricing used for cost-savings estimates.

Rates are configuration, not code: a new provider or a price change only
needs a new `CACHE_COST_TABLE` value.
"""

import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from prompt_cache.config import get_settings

CHARS_PER_TOKEN = 4


def estimate_tokens(text: str) -> int:
    """Rough token estimate (~4 characters per token)."""
    return math.ceil(len(text) / CHARS_PER_TOKEN)


@dataclass(frozen=True)
class CostTable:
    """Static mapping of provider -> USD cost per 1000 tokens.

    Attributes:
        rates: Cost per 1000 tokens keyed by provider identifier
        default_rate: Rate applied to providers missing from `rates`
    """

    rates: Mapping[str, float] = field(default_factory=dict)
    default_rate: float = 0.002

    def __post_init__(self) -> None:
        object.__setattr__(self, "rates", MappingProxyType(dict(self.rates)))

    @classmethod
    def from_settings(cls) -> "CostTable":
        """Build the table from `CACHE_COST_TABLE` / `CACHE_DEFAULT_COST_PER_1K`."""
        settings = get_settings()
        return cls(rates=settings.cost_table, default_rate=settings.default_cost_per_1k)

    def cost_per_1k(self, provider: str) -> float:
        return self.rates.get(provider, self.default_rate)

    def estimate(self, provider: str, token_count: int) -> float:
        """Cost of sending `token_count` tokens to `provider`."""
        return self.cost_per_1k(provider) * (token_count / 1000)
