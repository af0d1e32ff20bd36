"""Shared fixtures: a controllable clock and fake embedding providers."""

import re

import pytest

from prompt_cache.repositories import InMemoryCacheStore
from prompt_cache.services import CacheService

VOCABULARY = ("cache", "react", "component", "database", "query", "api", "design", "python", "weather")


class FakeClock:
    """Manually advanced time source (seconds)."""

    def __init__(self, start: float = 1_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class KeywordEmbeddingProvider:
    """Deterministic bag-of-words embeddings over a tiny vocabulary.

    Prompts sharing the same vocabulary words get identical vectors, which
    makes semantic hits predictable without a model.
    """

    model_name = "keyword-test"

    def __init__(self) -> None:
        self.calls = 0

    async def encode(self, text: str) -> list[float]:
        self.calls += 1
        words = re.findall(r"[a-z]+", text.lower())
        vector = [float(words.count(term)) for term in VOCABULARY]
        # Constant component keeps unrelated prompts from producing a zero vector
        vector.append(0.1)
        return vector

    async def is_available(self) -> bool:
        return True


class FailingEmbeddingProvider:
    """Provider whose backend is always down."""

    model_name = "failing-test"

    def __init__(self) -> None:
        self.calls = 0

    async def encode(self, text: str) -> list[float]:
        self.calls += 1
        raise RuntimeError("embedding backend unreachable")

    async def is_available(self) -> bool:
        return False


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(clock):
    return InMemoryCacheStore(
        capacity=10,
        eviction_strategy="lru",
        similarity_threshold=0.85,
        ttl=0,
        clock=clock,
    )


@pytest.fixture
def embedder():
    return KeywordEmbeddingProvider()


@pytest.fixture
def service(store, embedder):
    return CacheService(store=store, embedding_provider=embedder, semantic_matching=True, hit_target=0.8)
