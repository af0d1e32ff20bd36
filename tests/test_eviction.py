"""Tests for eviction strategies and victim selection."""

import pytest

from prompt_cache.entities import CacheEntry
from prompt_cache.eviction import (
    MIN_INTERVAL,
    IntelligentStrategy,
    get_strategy,
    select_victims,
)


def make_entry(key, timestamp=0.0, last_hit=None, hit_count=0, token_count=100, cache_hint=False):
    return CacheEntry(
        key=key,
        content=key,
        response=key,
        provider="openai",
        model="gpt-4",
        token_count=token_count,
        timestamp=timestamp,
        last_hit=timestamp if last_hit is None else last_hit,
        hit_count=hit_count,
        cache_hint=cache_hint,
    )


def test_lru_evicts_least_recently_hit():
    entries = [
        make_entry("a", timestamp=0, last_hit=1),
        make_entry("b", timestamp=0, last_hit=2),
        make_entry("c", timestamp=0, last_hit=3),
    ]
    assert select_victims(entries, 1, "lru", now=4) == {"a"}


def test_lfu_evicts_least_hit():
    entries = [make_entry("a", hit_count=5), make_entry("b", hit_count=1), make_entry("c", hit_count=3)]
    assert select_victims(entries, 2, "lfu", now=10) == {"b", "c"}


def test_ttl_evicts_oldest():
    entries = [make_entry("a", timestamp=5), make_entry("b", timestamp=1), make_entry("c", timestamp=3)]
    assert select_victims(entries, 1, "ttl", now=10) == {"b"}


def test_count_larger_than_entries():
    entries = [make_entry("a"), make_entry("b")]
    assert select_victims(entries, 5, "lru", now=1) == {"a", "b"}


def test_nothing_to_evict():
    assert select_victims([], 3, "lru", now=1) == set()
    assert select_victims([make_entry("a")], 0, "lru", now=1) == set()


def test_input_is_not_modified():
    entries = [make_entry("a"), make_entry("b")]
    select_victims(entries, 1, "intelligent", now=10)
    assert [e.key for e in entries] == ["a", "b"]


def test_intelligent_prefers_keeping_hits_tokens_and_hints():
    now = 1000.0
    base = make_entry("base", timestamp=0, last_hit=0)
    strategy = IntelligentStrategy()
    variants = [
        base,
        make_entry("hits", timestamp=0, last_hit=0, hit_count=3),
        make_entry("tokens", timestamp=0, last_hit=0, token_count=400),
        make_entry("hint", timestamp=0, last_hit=0, cache_hint=True),
    ]
    scores = dict(zip([e.key for e in variants], strategy.scores(variants, now)))

    assert scores["hits"] > scores["base"]
    assert scores["tokens"] > scores["base"]
    assert scores["hint"] > scores["base"]


def test_intelligent_recency_terms_are_floored():
    now = 50.0
    fresh = make_entry("fresh", timestamp=now, last_hit=now)
    [score] = IntelligentStrategy().scores([fresh], now)
    expected = 0.15 * 100 + 0.25 / MIN_INTERVAL + 0.10 / MIN_INTERVAL
    assert score == pytest.approx(expected)


def test_intelligent_evicts_lowest_value():
    now = 100.0
    entries = [
        make_entry("keep", timestamp=0, last_hit=99, hit_count=10),
        make_entry("drop", timestamp=0, last_hit=0, hit_count=0),
    ]
    assert select_victims(entries, 1, "intelligent", now=now) == {"drop"}


def test_unknown_strategy_name():
    with pytest.raises(ValueError):
        get_strategy("fifo")


def test_lru_evicts_two_of_three():
    entries = [make_entry(k, timestamp=0, last_hit=t) for k, t in (("a", 1), ("b", 2), ("c", 3))]
    assert select_victims(entries, 2, "lru", now=4) == {"a", "b"}


def test_intelligent_victims_score_no_higher_than_survivors():
    now = 500.0
    entries = [
        make_entry(
            f"e{i}",
            timestamp=i * 10,
            last_hit=i * 11,
            hit_count=i % 4,
            token_count=50 + (37 * i) % 300,
            cache_hint=i % 3 == 0,
        )
        for i in range(20)
    ]
    strategy = IntelligentStrategy()
    scores = dict(zip([e.key for e in entries], strategy.scores(entries, now)))

    victims = select_victims(entries, 7, strategy, now=now)

    assert len(victims) == 7
    survivors = set(scores) - victims
    assert max(scores[k] for k in victims) <= min(scores[k] for k in survivors)
