"""Tests for the fetcher base class."""

import asyncio

import httpx

from radiodial.domain.entities import MetadataResult
from radiodial.infrastructure.fetchers.base import MetadataFetcher, origin_of


class _StubFetcher(MetadataFetcher[str]):
    source_label = "Stub"

    def __init__(self, behavior: str, timeout: float = 0.05) -> None:
        super().__init__(httpx.AsyncClient(), timeout)
        self.behavior = behavior

    async def _fetch(self, target: str) -> MetadataResult | None:
        if self.behavior == "raise":
            raise httpx.ConnectError("refused")
        if self.behavior == "hang":
            await asyncio.sleep(10)
        return MetadataResult(source=self.source_label, now_playing=target)


class TestMetadataFetcher:
    """Test MetadataFetcher.fetch() contract."""

    async def test_returns_valid_result(self) -> None:
        """Test returns valid result."""
        result = await _StubFetcher("ok").fetch("Artist - Song")
        assert result is not None
        assert result.now_playing == "Artist - Song"

    async def test_errors_become_none(self) -> None:
        """Test errors become None."""
        assert await _StubFetcher("raise").fetch("Artist - Song") is None

    async def test_deadline_becomes_none(self) -> None:
        """Test deadline becomes None."""
        assert await _StubFetcher("hang").fetch("Artist - Song") is None

    async def test_generic_text_becomes_none(self) -> None:
        """Test generic text becomes None."""
        assert await _StubFetcher("ok").fetch("Live") is None


def test_origin_of() -> None:
    """Test origin_of keeps the port and requires a scheme."""
    assert origin_of("http://stream.example:8000/live.mp3") == "http://stream.example:8000"
    assert origin_of("stream.example/live") is None
