"""Tests for the station catalog client."""

import httpx
import pytest
from pytest_httpx import HTTPXMock

from radiodial.config import RadioBrowserSettings
from radiodial.domain.exceptions import ExternalServiceError, ValidationError
from radiodial.infrastructure.integrations import RadioBrowserClient

STATIONS = [
    {
        "stationuuid": "s1",
        "name": "Jazz One",
        "url": "http://jazz.example/stream",
        "url_resolved": "https://jazz.example/stream",
        "countrycode": "US",
    },
    {"stationuuid": "s2", "name": "Broken", "url": "", "url_resolved": ""},
]


@pytest.fixture
def catalog(http_client: httpx.AsyncClient) -> RadioBrowserClient:
    return RadioBrowserClient(
        http_client, RadioBrowserSettings(base_url="https://rb.example", search_limit=20)
    )


class TestRadioBrowserClient:
    """Test RadioBrowserClient."""

    async def test_search_by_name(self, catalog: RadioBrowserClient, httpx_mock: HTTPXMock) -> None:
        """Test search by name."""
        httpx_mock.add_response(json=STATIONS)

        stations = await catalog.search("jazz")

        assert [s.id for s in stations] == ["s1"]
        assert stations[0].url == "https://jazz.example/stream"
        request = httpx_mock.get_requests()[0]
        assert request.url.path == "/json/stations/search"
        assert request.url.params["name"] == "jazz"
        assert request.url.params["limit"] == "20"
        assert request.url.params["order"] == "clickcount"
        assert request.url.params["hidebroken"] == "true"

    async def test_search_by_tag(self, catalog: RadioBrowserClient, httpx_mock: HTTPXMock) -> None:
        """Test search by tag."""
        httpx_mock.add_response(json=[])

        assert await catalog.search("deep house", by="tag", limit=5) == []
        request = httpx_mock.get_requests()[0]
        assert request.url.path == "/json/stations/bytag/deep house"
        assert request.url.params["limit"] == "5"

    async def test_empty_query(self, catalog: RadioBrowserClient) -> None:
        """Test an empty query is rejected before any request."""
        with pytest.raises(ValidationError):
            await catalog.search("   ")

    async def test_http_error(self, catalog: RadioBrowserClient, httpx_mock: HTTPXMock) -> None:
        """Test an error status becomes ExternalServiceError."""
        httpx_mock.add_response(status_code=500)

        with pytest.raises(ExternalServiceError) as exc_info:
            await catalog.search("jazz")
        assert exc_info.value.status_code == 500

    async def test_get_station(self, catalog: RadioBrowserClient, httpx_mock: HTTPXMock) -> None:
        """Test looking up one station by UUID."""
        httpx_mock.add_response(json=STATIONS[:1])

        station = await catalog.get_station("s1")

        assert station is not None
        assert station.name == "Jazz One"
        assert httpx_mock.get_requests()[0].url.path == "/json/stations/byuuid/s1"
