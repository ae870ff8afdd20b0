"""Tests for the first-success race."""

import asyncio

from radiodial.application.services.race_coordinator import first_non_null
from radiodial.domain.entities import MetadataResult


async def _after(delay: float, text: str | None) -> MetadataResult | None:
    await asyncio.sleep(delay)
    if text is None:
        return None
    return MetadataResult(source=f"src-{delay}", now_playing=text)


async def _fail_after(delay: float) -> MetadataResult | None:
    await asyncio.sleep(delay)
    raise RuntimeError("boom")


class TestFirstNonNull:
    """Test first_non_null."""

    async def test_fastest_success_wins(self) -> None:
        """Test fastest success wins."""
        result = await first_non_null(
            [_after(0.05, "Slow - Song"), _after(0.01, "Fast - Song"), _after(0.03, None)]
        )
        assert result is not None
        assert result.now_playing == "Fast - Song"

    async def test_none_results_do_not_win(self) -> None:
        """Test None results do not win."""
        result = await first_non_null([_after(0.0, None), _after(0.02, "Later - Song")])
        assert result is not None
        assert result.now_playing == "Later - Song"

    async def test_result_without_now_playing_does_not_win(self) -> None:
        """Test result without now playing does not win."""

        async def empty() -> MetadataResult:
            return MetadataResult(source="Empty")

        result = await first_non_null([empty(), _after(0.01, "Real - Song")])
        assert result is not None
        assert result.now_playing == "Real - Song"

    async def test_exceptions_are_swallowed(self) -> None:
        """Test exceptions are swallowed."""
        result = await first_non_null([_fail_after(0.0), _after(0.01, "Still - Here")])
        assert result is not None
        assert result.now_playing == "Still - Here"

    async def test_all_fail_returns_none_after_everything_finished(self) -> None:
        """Test all fail returns None after everything finished."""
        loop = asyncio.get_running_loop()
        started = loop.time()
        result = await first_non_null([_after(0.01, None), _fail_after(0.0), _after(0.05, None)])
        assert result is None
        assert loop.time() - started >= 0.04

    async def test_empty_input(self) -> None:
        """Test an empty race returns None."""
        assert await first_non_null([]) is None

    async def test_losers_are_cancelled(self) -> None:
        """Test losers are cancelled."""
        slow_cancelled = asyncio.Event()

        async def slow() -> MetadataResult | None:
            try:
                await asyncio.sleep(10)
            except asyncio.CancelledError:
                slow_cancelled.set()
                raise
            return None

        result = await first_non_null([slow(), _after(0.01, "Winner - Song")])
        assert result is not None
        assert result.now_playing == "Winner - Song"
        assert slow_cancelled.is_set()

    async def test_cancelling_the_race_cancels_children(self) -> None:
        """Test cancelling the race cancels children."""
        child_cancelled = asyncio.Event()

        async def child() -> MetadataResult | None:
            try:
                await asyncio.sleep(10)
            except asyncio.CancelledError:
                child_cancelled.set()
                raise
            return None

        race = asyncio.ensure_future(first_non_null([child(), child()]))
        await asyncio.sleep(0.01)
        race.cancel()
        await asyncio.gather(race, return_exceptions=True)
        assert race.cancelled()
        assert child_cancelled.is_set()
