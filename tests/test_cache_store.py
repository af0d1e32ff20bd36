"""Tests for the in-memory cache store."""

import threading

import pytest

from prompt_cache.fingerprint import fingerprint
from prompt_cache.repositories import InMemoryCacheStore


def test_exact_hit_updates_entry_and_metrics(store):
    store.put("Explain CQRS", "answer", "openai", "gpt-4", token_count=500, response_time=1200.0)

    result = store.lookup("Explain   CQRS", "openai", "gpt-4")

    assert result is not None
    assert result.semantic is False
    assert result.entry.response == "answer"
    assert result.entry.hit_count == 1
    metrics = store.metrics()
    assert metrics.total_requests == 1
    assert metrics.hits == 1
    assert metrics.misses == 0
    assert metrics.cost_savings == pytest.approx(0.001)
    assert metrics.time_saved_ms == 1200.0


def test_miss_is_counted(store):
    assert store.lookup("unknown", "openai", "gpt-4") is None
    metrics = store.metrics()
    assert metrics.total_requests == 1
    assert metrics.misses == 1
    assert metrics.hit_rate == 0.0
    assert metrics.miss_rate == 1.0


def test_hit_and_miss_rates_add_up(store):
    store.put("a", "1", "openai", "gpt-4")
    store.lookup("a", "openai", "gpt-4")
    store.lookup("a", "openai", "gpt-4")
    store.lookup("b", "openai", "gpt-4")

    metrics = store.metrics()
    assert metrics.hits + metrics.misses == metrics.total_requests == 3
    assert metrics.hit_rate + metrics.miss_rate == pytest.approx(1.0)


def test_returned_entries_are_copies(store):
    store.put("a", "1", "openai", "gpt-4", metadata={"tag": "x"})
    result = store.lookup("a", "openai", "gpt-4")
    result.entry.metadata["tag"] = "changed"
    result.entry.hit_count = 99

    stored = store.get(result.key)
    assert stored.metadata["tag"] == "x"
    assert stored.hit_count == 1


def test_contains_records_nothing(store):
    store.put("a", "1", "openai", "gpt-4")
    assert store.contains("a", "openai", "gpt-4")
    assert not store.contains("a", "openai", "gpt-3.5")
    assert store.metrics().total_requests == 0


def test_token_count_is_estimated_when_missing(store):
    entry = store.put("x" * 10, "1", "openai", "gpt-4")
    assert entry.token_count == 3


def test_overwrite_replaces_entry_and_resets_hits(store, clock):
    store.put("a", "old", "openai", "gpt-4")
    store.lookup("a", "openai", "gpt-4")
    clock.advance(5)

    entry = store.put("a", "new", "openai", "gpt-4")

    assert entry.response == "new"
    assert entry.hit_count == 0
    assert entry.timestamp == clock.now
    assert len(store) == 1
    assert store.metrics().cache_size == 1


def test_capacity_is_never_exceeded(clock):
    store = InMemoryCacheStore(capacity=3, eviction_strategy="intelligent", ttl=0, clock=clock)
    for i in range(10):
        store.put(f"prompt {i}", str(i), "openai", "gpt-4")
        clock.advance(1)
        assert len(store) <= 3

    metrics = store.metrics()
    assert metrics.cache_size == 3
    assert metrics.evictions == 7


def test_just_inserted_entry_survives_eviction(clock):
    store = InMemoryCacheStore(capacity=1, eviction_strategy="lfu", ttl=0, clock=clock)
    store.put("popular", "1", "openai", "gpt-4")
    for _ in range(5):
        store.lookup("popular", "openai", "gpt-4")

    store.put("new", "2", "openai", "gpt-4")

    assert store.contains("new", "openai", "gpt-4")
    assert not store.contains("popular", "openai", "gpt-4")


def test_remove_cleans_semantic_index(store):
    entry = store.put("a", "1", "openai", "gpt-4", embedding=[1.0, 0.0])
    assert store.index_size == 1

    assert store.remove(entry.key) is True
    assert store.remove(entry.key) is False
    assert store.index_size == 0
    assert store.metrics().cache_size == 0
    assert store.lookup("b", "openai", "gpt-4", embedding=[1.0, 0.0]) is None


def test_semantic_hit(store):
    store.put("How do I build a React component?", "jsx", "openai", "gpt-4", embedding=[1.0, 0.1])

    result = store.lookup("React component howto", "openai", "gpt-4", embedding=[1.0, 0.12])

    assert result is not None
    assert result.semantic is True
    assert result.similarity > 0.85
    assert result.entry.response == "jsx"
    assert store.metrics().semantic_hits == 1


def test_semantic_hit_requires_same_provider_and_model(store):
    store.put("a", "1", "openai", "gpt-4", embedding=[1.0, 0.0])
    assert store.lookup("b", "anthropic", "gpt-4", embedding=[1.0, 0.0]) is None
    assert store.lookup("b", "openai", "gpt-3.5", embedding=[1.0, 0.0]) is None


def test_use_semantic_false_skips_similarity(store):
    store.put("a", "1", "openai", "gpt-4", embedding=[1.0, 0.0])
    assert store.lookup("b", "openai", "gpt-4", embedding=[1.0, 0.0], use_semantic=False) is None


def test_dimension_mismatch_stores_without_embedding(store):
    store.put("a", "1", "openai", "gpt-4", embedding=[1.0, 0.0])
    entry = store.put("b", "2", "openai", "gpt-4", embedding=[1.0, 0.0, 0.0])

    assert entry.embedding is None
    assert store.index_size == 1
    assert store.lookup("b", "openai", "gpt-4") is not None


def test_expired_entries_are_misses(clock):
    store = InMemoryCacheStore(capacity=10, eviction_strategy="lru", ttl=60, clock=clock)
    store.put("a", "1", "openai", "gpt-4", embedding=[1.0, 0.0])
    clock.advance(61)

    assert store.lookup("a", "openai", "gpt-4") is None
    metrics = store.metrics()
    assert metrics.expirations == 1
    assert metrics.evictions == 0
    assert metrics.cache_size == 0
    assert store.index_size == 0


def test_purge_expired(clock):
    store = InMemoryCacheStore(capacity=10, eviction_strategy="lru", ttl=60, clock=clock)
    store.put("a", "1", "openai", "gpt-4")
    clock.advance(30)
    store.put("b", "2", "openai", "gpt-4")
    clock.advance(40)

    assert store.purge_expired() == 1
    assert store.contains("b", "openai", "gpt-4")


def test_reset_clears_everything(store):
    store.put("a", "1", "openai", "gpt-4", embedding=[1.0, 0.0])
    store.lookup("a", "openai", "gpt-4")

    store.reset()

    assert len(store) == 0
    assert store.index_size == 0
    assert store.metrics().total_requests == 0


def test_unknown_strategy_is_rejected():
    with pytest.raises(ValueError):
        InMemoryCacheStore(capacity=10, eviction_strategy="random")


def test_concurrent_lookups_keep_counters_consistent(store):
    store.put("a", "1", "openai", "gpt-4")
    key = fingerprint("a", "openai", "gpt-4")

    def worker():
        for _ in range(200):
            store.lookup("a", "openai", "gpt-4")
            store.lookup("missing", "openai", "gpt-4")

    threads = [threading.Thread(target=worker) for _ in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    metrics = store.metrics()
    assert metrics.total_requests == 1600
    assert metrics.hits == 800
    assert metrics.misses == 800
    assert store.get(key).hit_count == 800


def test_semantic_lookup_skips_expired_closer_match(clock):
    store = InMemoryCacheStore(capacity=10, eviction_strategy="lru", ttl=60, clock=clock)
    store.put("old prompt", "stale", "openai", "gpt-4", embedding=[1.0, 0.0])
    clock.advance(50)
    store.put("newer prompt", "fresh", "openai", "gpt-4", embedding=[0.95, 0.05])
    clock.advance(15)

    result = store.lookup("another prompt", "openai", "gpt-4", embedding=[1.0, 0.0])

    assert result is not None
    assert result.semantic is True
    assert result.entry.response == "fresh"
    metrics = store.metrics()
    assert metrics.expirations == 1
    assert metrics.cache_size == 1
    assert store.index_size == 1


def test_semantic_tie_prefers_more_hits(store, clock):
    store.put("first", "1", "openai", "gpt-4", embedding=[1.0, 0.0])
    clock.advance(1)
    store.put("second", "2", "openai", "gpt-4", embedding=[2.0, 0.0])
    store.lookup("first", "openai", "gpt-4")
    store.lookup("first", "openai", "gpt-4")

    result = store.lookup("third", "openai", "gpt-4", embedding=[1.0, 0.0])

    assert result.semantic is True
    assert result.entry.response == "1"


def test_semantic_tie_with_equal_hits_prefers_newer(store, clock):
    store.put("first", "1", "openai", "gpt-4", embedding=[1.0, 0.0])
    clock.advance(1)
    store.put("second", "2", "openai", "gpt-4", embedding=[2.0, 0.0])

    result = store.lookup("third", "openai", "gpt-4", embedding=[1.0, 0.0])

    assert result.semantic is True
    assert result.entry.response == "2"
