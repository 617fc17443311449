"""Tests for health endpoints."""

from fastapi.testclient import TestClient


def test_health_endpoint(client: TestClient) -> None:
    """Test the basic health check endpoint."""
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["service"] == "research-assistant"


def test_ready_reports_configured_keys(client: TestClient) -> None:
    response = client.get("/ready")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ready"
    assert data["checks"] == {"model_api_key": True, "web_search_api_key": False}


def test_ready_degraded_without_model_key(client: TestClient, settings) -> None:
    settings.fireworks_api_key = None

    data = client.get("/ready").json()

    assert data["status"] == "degraded"
    assert data["checks"]["model_api_key"] is False
