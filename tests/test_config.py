"""Tests for environment-driven settings."""

import pytest

from prompt_cache.api.dependencies import build_embedding_provider
from prompt_cache.config import Settings


@pytest.fixture
def clean_env(monkeypatch):
    for name in ("EMBEDDING_BACKEND", "EMBEDDING_MODEL", "SEMANTIC_MATCHING"):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_ollama_backend_defaults_to_ollama_tag(clean_env):
    assert Settings().embedding_model == "nomic-embed-text"


def test_local_backend_defaults_to_sentence_transformers_model(clean_env):
    clean_env.setenv("EMBEDDING_BACKEND", "local")

    settings = Settings()

    assert settings.embedding_backend == "local"
    assert settings.embedding_model == "all-MiniLM-L6-v2"


def test_explicit_embedding_model_wins(clean_env):
    clean_env.setenv("EMBEDDING_BACKEND", "local")
    clean_env.setenv("EMBEDDING_MODEL", "paraphrase-multilingual-MiniLM-L12-v2")
    assert Settings().embedding_model == "paraphrase-multilingual-MiniLM-L12-v2"


def test_local_backend_builds_provider_with_its_model(clean_env):
    pytest.importorskip("sentence_transformers")
    clean_env.setenv("EMBEDDING_BACKEND", "local")

    provider = build_embedding_provider(Settings())

    assert provider.model_name == "all-MiniLM-L6-v2"


def test_none_backend_has_no_provider(clean_env):
    clean_env.setenv("EMBEDDING_BACKEND", "none")
    assert build_embedding_provider(Settings()) is None


def test_invalid_backend_is_rejected(clean_env):
    clean_env.setenv("EMBEDDING_BACKEND", "openai")
    with pytest.raises(ValueError):
        Settings()
