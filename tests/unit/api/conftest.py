"""Fixtures for API router tests."""

from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient

from radiodial.config import OrchestratorSettings, Settings
from radiodial.main import create_app


@pytest.fixture
def api_settings() -> Settings:
    # Long start delay: a played station never reaches the real proxy in tests
    return Settings(
        _env_file=None,
        orchestrator=OrchestratorSettings(start_delay=600),
    )


@pytest.fixture
def client(api_settings: Settings) -> Iterator[TestClient]:
    """TestClient with the lifespan run, so app.state holds real services."""
    with TestClient(create_app(api_settings)) as test_client:
        yield test_client
