"""Shared fixtures for research assistant tests."""

from collections.abc import Iterator
from pathlib import Path

import pytest
import structlog
from fastapi.testclient import TestClient

from research_assistant.api.dependencies import (
    get_adapters,
    get_model_client,
    get_session_store,
)
from research_assistant.core.config import Settings, get_settings
from research_assistant.main import create_app
from research_assistant.schemas.internal import SourceType
from research_assistant.services.sessions import SessionStore
from tests.fakes import FakeModelClient, StubAdapter, make_result

# capture_logs only sees loggers that have not been cached yet
structlog.configure(cache_logger_on_first_use=False)


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings with a model key and a temporary sessions directory."""
    return Settings(
        _env_file=None,
        fireworks_api_key="test-fireworks-key",
        tavily_api_key=None,
        github_token=None,
        sessions_dir=tmp_path / "sessions",
    )


@pytest.fixture
def session_store(settings: Settings) -> SessionStore:
    return SessionStore(settings.sessions_dir)


@pytest.fixture
def adapters() -> dict[SourceType, StubAdapter]:
    return {
        SourceType.WEB: StubAdapter(SourceType.WEB, [make_result("Web One")]),
        SourceType.CODE_HOST: StubAdapter(
            SourceType.CODE_HOST, [make_result("owner/repo", SourceType.CODE_HOST)]
        ),
        SourceType.SOCIAL: StubAdapter(
            SourceType.SOCIAL, [make_result("Twitter Search: q", SourceType.SOCIAL)]
        ),
        SourceType.MARKET_DATA: StubAdapter(
            SourceType.MARKET_DATA, [make_result("Bitcoin (BTC)", SourceType.MARKET_DATA)]
        ),
    }


@pytest.fixture
def model_client() -> FakeModelClient:
    return FakeModelClient()


@pytest.fixture
def client(
    settings: Settings,
    adapters: dict[SourceType, StubAdapter],
    model_client: FakeModelClient,
    session_store: SessionStore,
) -> Iterator[TestClient]:
    """Test client with external collaborators replaced by fakes."""
    app = create_app()
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_adapters] = lambda: adapters
    app.dependency_overrides[get_model_client] = lambda: model_client
    app.dependency_overrides[get_session_store] = lambda: session_store
    yield TestClient(app)
    app.dependency_overrides.clear()
