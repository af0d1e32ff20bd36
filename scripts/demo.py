#!/usr/bin/env python3
"""
Demo script for the prompt cache.

This script demonstrates exact and semantic hits, eviction, warming and
the analytics report. Semantic matching uses Ollama when it is reachable
and falls back to exact matching otherwise.
"""

import asyncio
import time

from prompt_cache import CacheService, InMemoryCacheStore, OllamaEmbeddingProvider, ProviderResponse
from prompt_cache.services import WarmingService


def print_section(title: str) -> None:
    """Print a section header."""
    print("\n" + "=" * 70)
    print(f"  {title}")
    print("=" * 70)


async def demo_basic_cache(cache: CacheService) -> None:
    """Demonstrate store and lookup."""
    print_section("Basic Cache Operations")

    pairs = [
        ("Explain the CQRS pattern", "CQRS separates the write model from the read model."),
        ("How do I index a PostgreSQL JSONB column?", "Use a GIN index: CREATE INDEX ... USING gin (col)."),
        ("Design a RESTful API for orders", "Resources: /orders, /orders/{id}, /orders/{id}/items."),
    ]

    print("\n📝 Storing sample responses...")
    for prompt, response in pairs:
        await cache.store(prompt, response, "openai", "gpt-4", response_time=1500.0)
        print(f"  ✓ Stored: {prompt}")

    print("\n🔍 Lookups:")
    queries = [
        "Explain   the CQRS pattern",  # whitespace only -> exact
        "Can you explain the CQRS pattern?",  # near duplicate -> semantic
        "What is the capital of France?",  # unrelated -> miss
    ]
    for query in queries:
        result = await cache.lookup(query, "openai", "gpt-4")
        print(f"\n  Query: {query}")
        if result is None:
            print("  ✗ Cache miss")
        elif result.semantic:
            print(f"  ✓ SEMANTIC HIT (similarity {result.similarity:.2%})")
            print(f"  Response: {result.entry.response}")
        else:
            print("  ✓ EXACT HIT")
            print(f"  Response: {result.entry.response}")


async def demo_read_through(cache: CacheService) -> None:
    """Demonstrate get_or_fetch with a slow fake provider call."""
    print_section("Read-through")

    async def slow_provider() -> ProviderResponse:
        await asyncio.sleep(0.3)
        return ProviderResponse(response="Use asyncio.gather for concurrent awaits.", token_count=40)

    for attempt in (1, 2):
        start = time.time()
        result = await cache.get_or_fetch(
            "How do I run coroutines concurrently?", "anthropic", "claude-3-sonnet", slow_provider
        )
        duration = (time.time() - start) * 1000
        source = "cache" if result.cached else "provider"
        print(f"  Attempt {attempt}: served from {source} in {duration:.1f}ms")


async def demo_warming(cache: CacheService) -> None:
    """Demonstrate warming suggestions and warm_cache."""
    print_section("Cache Warming")

    warming = WarmingService()
    print("\n🔥 Top catalog candidates:")
    for candidate in warming.identify_warming_candidates()[:3]:
        print(f"  [{candidate.priority}] {candidate.content[:70]}...")

    items = warming.generate_contextual_warming_content(
        {"tech_stack": ["React", "Python"], "project_type": "microservices"}
    )
    warmed = await cache.warm_cache(
        {
            "content": item.content,
            "response": f"(pre-fetched answer from {item.provider}/{item.model})",
            "provider": item.provider,
            "model": item.model,
            "cache_hint": True,
        }
        for item in items
    )
    print(f"\n  ✓ Warmed {warmed} contextual entries")


def demo_eviction() -> None:
    """Demonstrate capacity-bound eviction."""
    print_section("Eviction")

    store = InMemoryCacheStore.create(capacity=3, eviction_strategy="lru", ttl=0)
    for i in range(5):
        store.put(f"prompt {i}", f"response {i}", "gemini", "gemini-pro")
    metrics = store.metrics()
    print(f"  Capacity 3, inserted 5 -> size {metrics.cache_size}, evictions {metrics.evictions}")


async def run() -> None:
    provider = OllamaEmbeddingProvider.create()
    if not await provider.is_available():
        print(f"\n⚠️  Ollama model {provider.model_name} unavailable, semantic matching disabled")
        print("  Start it with: ollama serve && ollama pull nomic-embed-text")
        await provider.close()
        provider = None

    cache = CacheService.create(store=InMemoryCacheStore.create(), embedding_provider=provider)
    try:
        await demo_basic_cache(cache)
        await demo_read_through(cache)
        await demo_warming(cache)
        demo_eviction()

        print_section("Report")
        print(cache.get_report())
        for recommendation in cache.analyze().recommendations:
            print(f"  💡 {recommendation}")
    finally:
        if provider is not None:
            await provider.close()


def main() -> None:
    """Run all demos."""
    print("\n🚀 Prompt Cache Demo")
    print("=" * 70)

    asyncio.run(run())

    print("\n" + "=" * 70)
    print("✅ Demo completed successfully!")
    print("=" * 70)


if __name__ == "__main__":
    main()
