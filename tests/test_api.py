"""
Tests for the AI gateway HTTP API.
"""

import pytest
from fastapi.testclient import TestClient

from ai_gateway.api.app import create_app
from ai_gateway.errors import TransportError, UpstreamError
from ai_gateway.repositories import InMemoryCacheRepository

from tests.conftest import FakeChatProvider


@pytest.fixture
def provider():
    return FakeChatProvider(content="4")


@pytest.fixture
def client(provider):
    """Create a test client backed by a fake provider."""
    app = create_app(
        cache=InMemoryCacheRepository(max_entries=10, ttl=60),
        chat_provider=provider,
    )
    with TestClient(app) as test_client:
        yield test_client


def test_root(client):
    """Test root endpoint."""
    response = client.get("/")
    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "AI Gateway"
    assert data["endpoints"]["gateway"] == "/api/ai"


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "credentials_configured": True}


def test_miss_then_hit(client, provider):
    """A repeated request is answered from cache with cached=true."""
    first = client.post("/api/ai", json={"prompt": "What is 2+2?"})
    second = client.post("/api/ai", json={"prompt": "What is 2+2?"})

    assert first.status_code == 200
    assert first.json() == {"choices": [{"message": {"content": "4"}}], "cached": False}
    assert second.status_code == 200
    assert second.json() == {"choices": [{"message": {"content": "4"}}], "cached": True}
    assert len(provider.calls) == 1


def test_empty_body_uses_fallback(client, provider):
    response = client.post("/api/ai", content=b"")

    assert response.status_code == 200
    assert provider.calls[0].messages[-1].content == "Please provide a short answer."


def test_invalid_json_is_rejected(client, provider):
    response = client.post(
        "/api/ai",
        content=b"{not json",
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 400
    assert response.json()["error"] == "Invalid request"
    assert provider.calls == []


def test_wrong_field_type_is_rejected(client):
    response = client.post("/api/ai", json={"messages": [{"role": "robot", "content": "hi"}]})

    assert response.status_code == 400
    assert "messages" in response.json()["details"]


@pytest.mark.parametrize("method", ["GET", "PUT", "PATCH", "DELETE"])
def test_other_methods_are_not_allowed(client, method):
    response = client.request(method, "/api/ai")

    assert response.status_code == 405
    assert response.json() == {"error": "Method not allowed"}


def test_upstream_error_is_passed_through(client, provider):
    provider.error = UpstreamError(status=429, body='{"error": "rate limited"}')

    response = client.post("/api/ai", json={"prompt": "hi"})

    assert response.status_code == 502
    assert response.json() == {
        "error": "OpenAI API failed",
        "status": 429,
        "body": '{"error": "rate limited"}',
    }


def test_transport_error_maps_to_bad_gateway(client, provider):
    provider.error = TransportError("OpenAI connection failed: refused")

    response = client.post("/api/ai", json={"prompt": "hi"})

    assert response.status_code == 502
    assert response.json() == {
        "error": "OpenAI API unreachable",
        "details": "OpenAI connection failed: refused",
    }


def test_missing_credentials_is_config_error(client, provider):
    provider.configured = False

    response = client.post("/api/ai", json={"prompt": "hi"})

    assert response.status_code == 500
    assert response.json() == {"error": "Missing OPENAI_API_KEY environment variable"}


def test_unexpected_error_is_internal_error(client, provider):
    provider.error = RuntimeError("kaboom")

    response = client.post("/api/ai", json={"prompt": "hi"})

    assert response.status_code == 500
    assert response.json() == {"error": "Internal error", "details": "kaboom"}


def test_failed_call_is_not_cached(client, provider):
    provider.error = UpstreamError(status=500, body="boom")
    client.post("/api/ai", json={"prompt": "hi"})

    provider.error = None
    response = client.post("/api/ai", json={"prompt": "hi"})

    assert response.status_code == 200
    assert response.json()["cached"] is False


def test_cache_stats_and_clear(client):
    client.post("/api/ai", json={"prompt": "hi"})
    client.post("/api/ai", json={"prompt": "hi"})

    stats = client.get("/cache/stats").json()
    assert stats["total_entries"] == 1
    assert stats["max_entries"] == 10
    assert stats["cache_hits"] == 1
    assert stats["cache_misses"] == 1

    cleared = client.delete("/cache").json()
    assert cleared["deleted_count"] == 1
    assert client.get("/cache/stats").json()["total_entries"] == 0


def test_health_reports_missing_credentials():
    app = create_app(
        cache=InMemoryCacheRepository(max_entries=10, ttl=60),
        chat_provider=FakeChatProvider(configured=False),
    )
    with TestClient(app) as test_client:
        response = test_client.get("/health")

    assert response.json() == {"status": "degraded", "credentials_configured": False}


def test_cors_headers_present(client):
    response = client.post(
        "/api/ai",
        json={"prompt": "hi"},
        headers={"Origin": "https://classroom.example"},
    )
    assert response.headers["access-control-allow-origin"] in ("*", "https://classroom.example")


def test_deeply_nested_body_is_rejected(client, provider):
    response = client.post(
        "/api/ai",
        content=("[" * 100000 + "]" * 100000).encode(),
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 400
    assert response.json()["error"] == "Invalid request"
    assert provider.calls == []


@pytest.mark.parametrize("literal", ["NaN", "Infinity", "-Infinity"])
def test_non_finite_numbers_are_rejected(client, provider, literal):
    response = client.post(
        "/api/ai",
        content=f'{{"prompt": "hi", "temperature": {literal}}}'.encode(),
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 400
    assert response.json()["error"] == "Invalid request"
    assert provider.calls == []
