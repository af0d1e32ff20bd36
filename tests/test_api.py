"""
Tests for the prompt cache API.
"""

import pytest
from conftest import FailingEmbeddingProvider
from fastapi.testclient import TestClient

from prompt_cache.api.app import create_app
from prompt_cache.services import CacheService


@pytest.fixture
def client(service):
    """Create a test client around an injected service."""
    with TestClient(create_app(cache_service=service)) as test_client:
        yield test_client


def store_payload(prompt="Design a react component", **overrides):
    payload = {
        "prompt": prompt,
        "response": {"text": "Here is the component"},
        "provider": "openai",
        "model": "gpt-4",
        "token_count": 500,
    }
    payload.update(overrides)
    return payload


def test_root(client):
    """Test root endpoint."""
    response = client.get("/")
    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "Prompt Cache API"
    assert "lookup" in data["endpoints"]


def test_health(client):
    """Test health check endpoint."""
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["embedding_healthy"] is True


def test_health_degraded(store):
    service = CacheService(store=store, embedding_provider=FailingEmbeddingProvider(), semantic_matching=True)
    with TestClient(create_app(cache_service=service)) as client:
        data = client.get("/health").json()
    assert data["status"] == "degraded"
    assert data["cache_healthy"] is True


def test_lookup_miss(client):
    """Lookup on an empty cache."""
    response = client.post(
        "/cache/lookup",
        json={"prompt": "Anything cached?", "provider": "openai", "model": "gpt-4"},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["is_hit"] is False
    assert data["response"] is None


def test_store_then_lookup(client):
    """Stored responses come back on exact and semantic lookups."""
    stored = client.post("/cache/store", json=store_payload())
    assert stored.status_code == 200
    key = stored.json()["key"]

    exact = client.post(
        "/cache/lookup",
        json={"prompt": "Design  a react component", "provider": "openai", "model": "gpt-4"},
    ).json()
    assert exact["is_hit"] is True
    assert exact["key"] == key
    assert exact["semantic"] is False
    assert exact["response"] == {"text": "Here is the component"}
    assert exact["hit_count"] == 1

    semantic = client.post(
        "/cache/lookup",
        json={"prompt": "react component design", "provider": "openai", "model": "gpt-4"},
    ).json()
    assert semantic["is_hit"] is True
    assert semantic["semantic"] is True


def test_store_validation(client):
    response = client.post("/cache/store", json=store_payload(prompt=""))
    assert response.status_code == 422


def test_delete_entry(client):
    key = client.post("/cache/store", json=store_payload()).json()["key"]

    assert client.delete(f"/cache/{key}").json() == {"success": True, "key": key}
    assert client.delete(f"/cache/{key}").status_code == 404


def test_clear_cache(client):
    client.post("/cache/store", json=store_payload())
    assert client.delete("/cache").status_code == 200
    assert client.get("/cache/stats").json()["cache_size"] == 0


def test_get_stats(client):
    """Test stats endpoint."""
    client.post("/cache/store", json=store_payload())
    client.post("/cache/lookup", json={"prompt": "Design a react component", "provider": "openai", "model": "gpt-4"})
    client.post("/cache/lookup", json={"prompt": "Unrelated weather", "provider": "openai", "model": "gpt-4"})

    data = client.get("/cache/stats").json()
    assert data["total_requests"] == 2
    assert data["hits"] == 1
    assert data["misses"] == 1
    assert data["hit_rate"] == 0.5
    assert data["cost_savings"] == pytest.approx(0.001)
    assert data["embedding_model"] == "keyword-test"


def test_get_analytics(client):
    client.post("/cache/store", json=store_payload())
    client.post("/cache/lookup", json={"prompt": "Design a react component", "provider": "openai", "model": "gpt-4"})

    data = client.get("/cache/analytics").json()
    assert data["popular_patterns"][0]["pattern"] == "React Development"
    assert "openai" in data["provider_efficiency"]
    assert isinstance(data["recommendations"], list)


def test_get_report(client):
    response = client.get("/cache/report")
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/plain")
    assert "=== Prompt Cache Report ===" in response.text


def test_warming_candidates(client):
    data = client.get("/cache/warming/candidates").json()
    assert data[0]["category"] == "architecture"
    assert len(data) == 8


def test_contextual_warming(client):
    response = client.post(
        "/cache/warming/contextual",
        json={"tech_stack": ["React"], "project_type": "ecommerce"},
    )
    assert response.status_code == 200
    assert [item["provider"] for item in response.json()] == ["openai", "openai"]
