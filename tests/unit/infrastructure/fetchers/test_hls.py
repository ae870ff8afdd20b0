"""Tests for the HLS playlist fetcher."""

import httpx

from radiodial.domain.value_objects import HlsSource
from radiodial.infrastructure.fetchers.hls import HlsFetcher, parse_playlist_title

MASTER = """#EXTM3U
#EXT-X-STREAM-INF:BANDWIDTH=64000,NAME="Low"
low.m3u8
#EXT-X-STREAM-INF:BANDWIDTH=128000,NAME="High Quality"
high.m3u8
"""

MEDIA = """#EXTM3U
#EXT-X-TARGETDURATION:6
#EXT-X-DATERANGE:ID="p1",START-DATE="2024-01-01T00:00:00Z",TITLE="Artist - Song"
#EXTINF:6.0,
seg1.aac
"""


class TestParsePlaylistTitle:
    """Test parse_playlist_title."""

    def test_daterange_title_wins(self) -> None:
        """Test daterange title wins."""
        assert parse_playlist_title(MASTER + MEDIA) == "Artist - Song"

    def test_last_stream_inf_name(self) -> None:
        """Test last stream inf name."""
        assert parse_playlist_title(MASTER) == "High Quality"

    def test_nothing(self) -> None:
        """Test a playlist without names gives None."""
        assert parse_playlist_title("#EXTM3U\nseg.ts\n") is None


class TestHlsFetcher:
    """Test HlsFetcher."""

    async def test_fetches_playlist(self) -> None:
        """Test fetches playlist."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text=MEDIA)

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            result = await HlsFetcher(client, 1.0).fetch(
                HlsSource(url="https://cdn.example/live.m3u8")
            )

        assert result is not None
        assert result.now_playing == "Artist - Song"
        assert result.source == "HLS Stream"

    async def test_non_playlist_url_is_skipped(self) -> None:
        """Test non playlist URL is skipped."""
        calls: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(200, text=MEDIA)

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            result = await HlsFetcher(client, 1.0).fetch(HlsSource(url="https://s.example/radio"))

        assert result is None
        assert calls == []
