"""Tests for the Airtime Pro fetcher."""

import httpx
import pytest

from radiodial.application.services.source_selector import CASHMERE_ENDPOINT
from radiodial.domain.value_objects import AirtimeProPlan, CashmerePlan
from radiodial.infrastructure.fetchers.airtime_pro import (
    AirtimeProFetcher,
    parse_airtime_pro_now_playing,
)


def _doc(show: str | None = None, artist: str = "", title: str = "", name: str = "") -> dict:
    return {
        "shows": {"current": {"name": show} if show else None},
        "tracks": {
            "current": {
                "name": name,
                "metadata": {"artist_name": artist, "track_title": title},
            }
        },
    }


class TestParseAirtimePro:
    """Test parse_airtime_pro_now_playing."""

    @pytest.mark.parametrize(
        ("doc", "expected"),
        [
            (_doc("Morning Drift", "Artist", "Song"), "Morning Drift - Artist - Song"),
            (_doc("Morning Drift", "Morning Drift", "Song"), "Morning Drift - Song"),
            (_doc("Airtime Pro Archive", "Artist", "Song"), "Artist - Song"),
            (_doc(None, name="- Artist - Song"), "Artist - Song"),
            (_doc("Evening Show"), "Evening Show"),
        ],
    )
    def test_show_and_track_combinations(self, doc: dict, expected: str) -> None:
        """Test show and track combinations."""
        assert parse_airtime_pro_now_playing(doc) == expected

    def test_last_resort_now_key(self) -> None:
        """Test last resort now key."""
        assert parse_airtime_pro_now_playing({"now": {"title": "Fallback"}}) == "Fallback"

    def test_nothing(self) -> None:
        """Test an empty live-info document gives no text."""
        assert parse_airtime_pro_now_playing({}) is None
        assert parse_airtime_pro_now_playing(None) is None


class TestAirtimeProFetcher:
    """Test AirtimeProFetcher source labels."""

    @pytest.mark.parametrize(
        ("plan", "label"),
        [
            (CashmerePlan(endpoint=CASHMERE_ENDPOINT), "Cashmere Radio API"),
            (
                AirtimeProPlan(endpoint="https://foo.airtime.pro/api/live-info-v2"),
                "Airtime Pro API",
            ),
        ],
    )
    async def test_labels(self, plan: CashmerePlan | AirtimeProPlan, label: str) -> None:
        """Test the source label follows the plan type."""

        def handler(request: httpx.Request) -> httpx.Response:
            assert str(request.url) == plan.endpoint
            return httpx.Response(200, json=_doc("Night Shift", "Artist", "Song"))

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            result = await AirtimeProFetcher(client, 1.0).fetch(plan)

        assert result is not None
        assert result.source == label
        assert result.now_playing == "Night Shift - Artist - Song"
