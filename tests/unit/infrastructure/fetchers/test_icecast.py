"""Tests for the Icecast status fetcher."""

import httpx

from radiodial.domain.value_objects import IcecastSource
from radiodial.infrastructure.fetchers.icecast import (
    IcecastFetcher,
    extract_sources,
    parse_icecast_status,
    select_source,
)

ENDPOINTS = (
    "https://stream.example/status-json.xsl",
    "https://stream.example/status.json",
    "https://stream.example/stats.json",
    "https://stream.example/status?json=1",
)


class TestParsing:
    """Test status JSON shape handling."""

    def test_icestats_single_source(self) -> None:
        """Test icestats single source."""
        data = {"icestats": {"source": {"title": "Song", "artist": "Artist"}}}
        assert extract_sources(data) == [{"title": "Song", "artist": "Artist"}]

    def test_sources_list(self) -> None:
        """Test a plain sources list is accepted."""
        assert len(extract_sources({"sources": [{"title": "a"}, {"title": "b"}]})) == 2

    def test_stats_shape(self) -> None:
        """Test the stats wrapper shape is accepted."""
        assert extract_sources({"stats": {"song": "x"}}) == [{"song": "x"}]

    def test_unknown_shape(self) -> None:
        """Test an unrecognized document yields no sources."""
        assert extract_sources({"foo": 1}) == []
        assert extract_sources("nope") == []

    def test_select_source_by_mount(self) -> None:
        """Test select source by mount."""
        sources = [
            {"listenurl": "http://host:8000/other", "title": "Other"},
            {"listenurl": "http://host:8000/radio", "title": "Ours"},
        ]
        assert select_source(sources, "/radio") == sources[1]

    def test_select_source_falls_back_to_first(self) -> None:
        """Test select source falls back to first."""
        sources = [{"mount": "/a"}, {"mount": "/b"}]
        assert select_source(sources, "/zzz") == sources[0]

    def test_parse_builds_display_and_extras(self) -> None:
        """Test parse builds display and extras."""
        data = {
            "icestats": {
                "source": {
                    "artist": "Artist",
                    "title": "Song",
                    "genre": "Jazz",
                    "bitrate": 128,
                    "listeners": "42",
                }
            }
        }
        parsed = parse_icecast_status(data)
        assert parsed == {
            "now_playing": "Artist - Song",
            "genre": "Jazz",
            "bitrate": 128,
            "listeners": 42,
        }

    def test_parse_rejects_generic_titles(self) -> None:
        """Test parse rejects generic titles."""
        assert parse_icecast_status({"icestats": {"source": {"title": "Live"}}}) is None


class TestIcecastFetcher:
    """Test IcecastFetcher against a mocked server."""

    async def test_first_usable_endpoint_wins(self) -> None:
        """Test first usable endpoint wins."""

        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path == "/status-json.xsl":
                return httpx.Response(
                    200,
                    json={
                        "icestats": {
                            "source": [
                                {"listenurl": "https://stream.example/other", "title": "Nope"},
                                {
                                    "listenurl": "https://stream.example/radio",
                                    "title": "Artist X - Track Y",
                                },
                            ]
                        }
                    },
                )
            return httpx.Response(404)

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            result = await IcecastFetcher(client, timeout=1.0).fetch(
                IcecastSource(endpoints=ENDPOINTS, mount="/radio")
            )

        assert result is not None
        assert result.now_playing == "Artist X - Track Y"
        assert result.source == "Icecast Server"
        assert result.endpoint == "https://stream.example/status-json.xsl"

    async def test_broken_endpoints_give_none(self) -> None:
        """Test broken endpoints give None."""

        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path == "/status.json":
                return httpx.Response(200, text="<html>not json</html>")
            if request.url.path == "/stats.json":
                raise httpx.ConnectError("refused")
            return httpx.Response(503)

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            result = await IcecastFetcher(client, timeout=1.0).fetch(
                IcecastSource(endpoints=ENDPOINTS, mount="/radio")
            )

        assert result is None
