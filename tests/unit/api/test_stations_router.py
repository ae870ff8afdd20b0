"""Tests for station catalog search endpoint."""

from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from radiodial.domain.entities import StationDescriptor
from radiodial.domain.exceptions import ExternalServiceError
from radiodial.infrastructure.integrations import RadioBrowserClient


@pytest.fixture
def catalog(client: TestClient) -> AsyncMock:
    mock = AsyncMock(spec=RadioBrowserClient)
    client.app.state.radio_browser_client = mock  # type: ignore[attr-defined]
    return mock


class TestStationSearch:
    """Test GET /api/stations/search."""

    def test_search(self, client: TestClient, catalog: AsyncMock) -> None:
        """Test searching by tag returns catalog stations."""
        catalog.search.return_value = [
            StationDescriptor(
                id="s1", name="Jazz FM", url="https://jazz.example/live", country_code="GB"
            )
        ]

        response = client.get("/api/stations/search", params={"q": "jazz", "by": "tag"})

        assert response.status_code == 200
        data = response.json()
        assert data["count"] == 1
        assert data["by"] == "tag"
        assert data["stations"][0]["countrycode"] == "GB"
        catalog.search.assert_awaited_once_with("jazz", by="tag", limit=None)

    def test_empty_query(self, client: TestClient, catalog: AsyncMock) -> None:
        """Test an empty query is rejected before the catalog is called."""
        response = client.get("/api/stations/search", params={"q": ""})

        assert response.status_code == 422
        catalog.search.assert_not_awaited()

    def test_unknown_search_field(self, client: TestClient, catalog: AsyncMock) -> None:
        """Test unknown search field."""
        response = client.get("/api/stations/search", params={"q": "jazz", "by": "genre"})

        assert response.status_code == 422

    def test_catalog_down(self, client: TestClient, catalog: AsyncMock) -> None:
        """Test catalog down."""
        catalog.search.side_effect = ExternalServiceError("Radio-Browser", "unreachable")

        response = client.get("/api/stations/search", params={"q": "jazz"})

        assert response.status_code == 502
        assert response.json() == {"detail": "Radio-Browser: unreachable"}


class TestStationLookup:
    """Test GET /api/stations/{station_uuid}."""

    def test_found(self, client: TestClient, catalog: AsyncMock) -> None:
        """Test looking up a known station."""
        catalog.get_station.return_value = StationDescriptor(
            id="s1", name="Jazz FM", url="https://jazz.example/live", country_code="GB"
        )

        response = client.get("/api/stations/s1")

        assert response.status_code == 200
        assert response.json()["name"] == "Jazz FM"
        assert response.json()["countrycode"] == "GB"
        catalog.get_station.assert_awaited_once_with("s1")

    def test_unknown_station(self, client: TestClient, catalog: AsyncMock) -> None:
        """Test unknown station."""
        catalog.get_station.return_value = None

        response = client.get("/api/stations/missing")

        assert response.status_code == 404

    def test_search_route_is_not_a_lookup(self, client: TestClient, catalog: AsyncMock) -> None:
        """Test search route is not a lookup."""
        catalog.search.return_value = []

        response = client.get("/api/stations/search", params={"q": "jazz"})

        assert response.status_code == 200
        catalog.get_station.assert_not_awaited()
