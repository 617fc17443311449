"""Tests for RequestLoggingMiddleware and CorrelationIDMiddleware."""

from __future__ import annotations

import json
from typing import Any

import structlog.testing
from fastapi import FastAPI, Request
from fastapi.testclient import TestClient

from research_assistant.observability import get_correlation_id
from research_assistant.observability.constants import REDACTED_VALUE, LogEvents
from research_assistant.observability.middleware import (
    CorrelationIDMiddleware,
    RequestLoggingMiddleware,
)


def make_app(
    log_request_headers: bool = False,
    log_request_body: bool = False,
    exclude_paths: set[str] | None = None,
) -> FastAPI:
    """Build a minimal FastAPI app with the observability middleware."""
    test_app = FastAPI()
    test_app.add_middleware(
        RequestLoggingMiddleware,
        log_request_headers=log_request_headers,
        log_request_body=log_request_body,
        exclude_paths=exclude_paths if exclude_paths is not None else {"/health"},
    )
    test_app.add_middleware(CorrelationIDMiddleware)

    @test_app.get("/test")
    async def test_get() -> dict[str, Any]:
        return {"correlation_id": get_correlation_id()}

    @test_app.post("/test")
    async def test_post(request: Request) -> dict[str, Any]:
        body = await request.body()
        return {"body": body.decode()}

    @test_app.get("/health")
    async def health() -> dict[str, Any]:
        return {"status": "ok"}

    return test_app


def _get_started_log(logs: list[dict[str, Any]]) -> dict[str, Any]:
    started = [log for log in logs if log.get("event") == LogEvents.REQUEST_STARTED]
    assert len(started) == 1, f"Expected 1 {LogEvents.REQUEST_STARTED!r} entry, got {len(started)}"
    return started[0]


def test_url_and_path_logged() -> None:
    client = TestClient(make_app())
    with structlog.testing.capture_logs() as logs:
        client.get("/test?foo=bar")
    log = _get_started_log(logs)
    assert log["path"] == "/test"
    assert "foo=bar" in log["url"]


def test_authorization_header_redacted() -> None:
    client = TestClient(make_app(log_request_headers=True))
    with structlog.testing.capture_logs() as logs:
        client.get("/test", headers={"Authorization": "Bearer secret123", "X-Custom": "v"})
    log = _get_started_log(logs)
    assert log["headers"]["authorization"] == REDACTED_VALUE
    assert log["headers"]["x-custom"] == "v"


def test_headers_not_logged_when_disabled() -> None:
    client = TestClient(make_app(log_request_headers=False))
    with structlog.testing.capture_logs() as logs:
        client.get("/test", headers={"Authorization": "Bearer secret123"})
    assert "headers" not in _get_started_log(logs)


def test_body_credentials_sanitized() -> None:
    client = TestClient(make_app(log_request_body=True))
    with structlog.testing.capture_logs() as logs:
        client.post("/test", json={"message": "bitcoin price", "tavily_api_key": "tvly-123"})
    log = _get_started_log(logs)
    assert log["body"] == {"message": "bitcoin price", "tavily_api_key": REDACTED_VALUE}


def test_large_body_truncated() -> None:
    client = TestClient(make_app(log_request_body=True))
    long_value = "x" * 1500
    with structlog.testing.capture_logs() as logs:
        client.post("/test", json={"message": long_value})
    body_data = _get_started_log(logs)["body"]["message"]
    assert "truncated" in body_data
    assert len(body_data) < len(long_value)


def test_body_available_to_downstream_handler() -> None:
    """Reading body in middleware must not consume the stream for downstream handlers."""
    client = TestClient(make_app(log_request_body=True))
    payload = {"message": "hello"}
    response = client.post("/test", json=payload)
    assert response.status_code == 200
    assert json.loads(response.json()["body"]) == payload


def test_excluded_path_skips_logging() -> None:
    client = TestClient(make_app())
    with structlog.testing.capture_logs() as logs:
        client.get("/health")
    assert not [log for log in logs if log.get("event") == LogEvents.REQUEST_STARTED]


def test_correlation_id_generated_and_returned() -> None:
    client = TestClient(make_app())
    response = client.get("/test")
    correlation_id = response.headers["x-correlation-id"]
    assert correlation_id
    assert response.json()["correlation_id"] == correlation_id


def test_correlation_id_propagated() -> None:
    client = TestClient(make_app())
    response = client.get("/test", headers={"X-Correlation-ID": "abc-123"})
    assert response.headers["x-correlation-id"] == "abc-123"
    assert response.json()["correlation_id"] == "abc-123"
