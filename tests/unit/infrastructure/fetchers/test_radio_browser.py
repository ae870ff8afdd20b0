"""Tests for the Radio-Browser rename fetcher."""

from datetime import UTC, datetime, timedelta

import httpx
import pytest

from radiodial.domain.value_objects import RadioBrowserSource
from radiodial.infrastructure.fetchers.radio_browser import RadioBrowserFetcher

NOW = datetime(2024, 5, 1, 12, 0, tzinfo=UTC)


def _fetcher(entry: dict[str, object]) -> tuple[RadioBrowserFetcher, httpx.AsyncClient]:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/json/stations/byuuid/abc"
        return httpx.Response(200, json=[entry])

    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    fetcher = RadioBrowserFetcher(
        client, 1.0, base_url="https://rb.example", clock=lambda: NOW
    )
    return fetcher, client


def _entry(**overrides: object) -> dict[str, object]:
    entry: dict[str, object] = {
        "name": "Jazz FM - Late Night Session with Someone",
        "lastcheckok": 1,
        "lastchangetime_iso8601": (NOW - timedelta(minutes=10)).isoformat(),
    }
    entry.update(overrides)
    return entry


class TestRadioBrowserFetcher:
    """Test RadioBrowserFetcher."""

    async def test_recent_longer_name_is_metadata(self) -> None:
        """Test recent longer name is metadata."""
        fetcher, client = _fetcher(_entry())
        async with client:
            result = await fetcher.fetch(
                RadioBrowserSource(station_id="abc", station_name="Jazz FM")
            )

        assert result is not None
        assert result.now_playing == "Jazz FM - Late Night Session with Someone"
        assert result.source == "Radio-Browser API"

    @pytest.mark.parametrize(
        "overrides",
        [
            {"lastchangetime_iso8601": (NOW - timedelta(hours=2)).isoformat()},
            {"lastchangetime_iso8601": None},
            {"lastcheckok": 0},
            {"name": "Jazz FM"},
            {"name": "Jazz"},
        ],
    )
    async def test_rejected_entries(self, overrides: dict[str, object]) -> None:
        """Test rejected entries."""
        fetcher, client = _fetcher(_entry(**overrides))
        async with client:
            result = await fetcher.fetch(
                RadioBrowserSource(station_id="abc", station_name="Jazz FM")
            )

        assert result is None
