"""Shared fixtures."""

from collections.abc import AsyncIterator, Iterator

import httpx
import pytest

from radiodial.config import get_settings
from radiodial.domain.entities import StationDescriptor


@pytest.fixture(autouse=True)
def _fresh_settings() -> Iterator[None]:
    """Every test sees settings built from its own environment."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
async def http_client() -> AsyncIterator[httpx.AsyncClient]:
    """Plain AsyncClient, intercepted by pytest-httpx where a test uses httpx_mock."""
    async with httpx.AsyncClient() as client:
        yield client


@pytest.fixture
def station() -> StationDescriptor:
    """An ordinary Icecast station."""
    return StationDescriptor(
        id="9608b51d-0601-11e8-ae97-52543be04c81",
        name="Example FM",
        url="https://stream.example/radio",
        homepage="https://example.fm",
        country_code="DE",
    )
