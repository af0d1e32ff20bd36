"""Tests for request fingerprinting and token estimation."""

import pytest

from prompt_cache.fingerprint import fingerprint, normalize_prompt
from prompt_cache.pricing import CostTable, estimate_tokens


def test_whitespace_variants_share_a_key():
    a = fingerprint("Explain  CQRS\n in detail ", "openai", "gpt-4")
    b = fingerprint("Explain CQRS in detail", "openai", "gpt-4")
    assert a == b


def test_key_depends_on_provider_and_model():
    base = fingerprint("hello", "openai", "gpt-4")
    assert base != fingerprint("hello", "anthropic", "gpt-4")
    assert base != fingerprint("hello", "openai", "gpt-3.5")


def test_case_is_significant():
    assert fingerprint("Hello", "openai", "gpt-4") != fingerprint("hello", "openai", "gpt-4")


def test_key_format():
    key = fingerprint("hello", "openai", "gpt-4")
    prefix, digest = key.rsplit("_", 1)
    assert prefix == "openai_gpt-4"
    assert len(digest) == 64


def test_normalize_prompt():
    assert normalize_prompt("\t a \n\n b  ") == "a b"


def test_estimate_tokens_rounds_up():
    assert estimate_tokens("") == 0
    assert estimate_tokens("abcd") == 1
    assert estimate_tokens("abcde") == 2


def test_cost_table_default_rate():
    table = CostTable(rates={"openai": 0.002}, default_rate=0.005)
    assert table.estimate("openai", 500) == pytest.approx(0.001)
    assert table.estimate("mistral", 1000) == pytest.approx(0.005)
