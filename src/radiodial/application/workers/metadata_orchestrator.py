"""Metadata Orchestrator - per-station now-playing polling session.

Hey future me - this is the ONE place that owns "what's on display right now".
Nobody else mutates current metadata, nobody else starts or stops fetch sessions.

Lifecycle:
    IDLE --start()--> STARTING --(start delay)--> POLLING <--> RETRYING
      ^                                              |
      +----------- stop() / station change ----------+--> STOPPED

Per session we run ONE loop task:
    sleep(start_delay) -> first tick (not awaited) -> every poll_interval: tick

Each tick:
1. Guards: playback active, current station is still OUR station, session alive.
   Any guard fails -> the loop ends. The session never fetches for a stale station.
2. Single flight: previous tick still running -> skip this one.
3. HLS (.m3u8) -> local race directly. Everything else -> proxy first, local
   fetchers when the proxy says "use local" / "use fallback" or blows up.
4. Normalize, drop generic junk, publish ONLY if different from what's shown.

Retries happen only when a fetch step RAISES (MetadataFetchError). A clean None
("nothing found") is a normal outcome, not an error. Retries are an explicit
loop with linear backoff, guards re-checked before each one.
"""

import asyncio
import logging
import uuid
from dataclasses import dataclass, field
from typing import Any

from radiodial.application.services.local_metadata_service import LocalMetadataService
from radiodial.application.services.source_selector import select_plan
from radiodial.config import OrchestratorSettings
from radiodial.domain.entities import (
    MetadataResult,
    PlaybackState,
    ProxyOutcome,
    ProxyOutcomeKind,
    SessionState,
    StationDescriptor,
)
from radiodial.domain.exceptions import MalformedStationError, MetadataFetchError
from radiodial.domain.ports import IUiNotifier
from radiodial.domain.value_objects import FetcherPlan, is_valid_now_playing, normalize
from radiodial.infrastructure.integrations.metadata_proxy_client import MetadataProxyClient
from radiodial.infrastructure.observability.logging import set_session_id

logger = logging.getLogger(__name__)

STATION_NAME_SOURCE = "Station Name"


@dataclass
class FetchSession:
    """State of one station-playback fetch session."""

    id: str
    station: StationDescriptor
    plan: FetcherPlan
    retry_count: int = 0
    cancelled: bool = False
    ticks: int = 0
    loop_task: asyncio.Task[None] | None = field(default=None, repr=False)
    tick_task: asyncio.Task[None] | None = field(default=None, repr=False)

    @property
    def tick_in_flight(self) -> bool:
        return self.tick_task is not None and not self.tick_task.done()

    def tasks(self) -> list[asyncio.Task[None]]:
        return [t for t in (self.loop_task, self.tick_task) if t is not None]


class MetadataOrchestrator:
    """Owns the current fetch session and the current-metadata cell."""

    def __init__(
        self,
        settings: OrchestratorSettings,
        proxy_client: MetadataProxyClient,
        local_service: LocalMetadataService,
        playback_state: PlaybackState,
        notifier: IUiNotifier,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            settings: Polling/retry policy
            proxy_client: Remote metadata proxy
            local_service: Local protocol fetchers
            playback_state: Shared playback flags (read-only here)
            notifier: Where metadata updates go
        """
        self.settings = settings
        self._proxy = proxy_client
        self._local = local_service
        self._playback = playback_state
        self._notifier = notifier

        self._session: FetchSession | None = None
        self._current: MetadataResult | None = None
        self._state = SessionState.IDLE
        # Inline (stream-embedded) metadata isn't wiped by a tick that found nothing
        self._inline_active = False
        self._draining: set[asyncio.Task[None]] = set()

    # =========================================================================
    # PUBLIC API
    # =========================================================================

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def current_metadata(self) -> MetadataResult | None:
        return self._current

    @property
    def session(self) -> FetchSession | None:
        return self._session

    def start(self, station: StationDescriptor) -> FetchSession:
        """Tear down any previous session and start polling for a station.

        Raises:
            MalformedStationError: If the station has no stream URL
        """
        if not station.url:
            raise MalformedStationError("Station has no stream URL", station_id=station.id)

        self.stop()

        plan = select_plan(station)
        session = FetchSession(id=uuid.uuid4().hex[:8], station=station, plan=plan)
        self._session = session
        self._state = SessionState.STARTING
        session.loop_task = asyncio.get_running_loop().create_task(
            self._run_session(session), name=f"metadata-session-{session.id}"
        )
        logger.info(
            "Metadata session %s started for %s (%s)",
            session.id,
            station.name or station.url,
            type(plan).__name__,
        )
        return session

    # Listen up, stop() is SYNC on purpose: play() on a new station must be able to
    # tear the old session down before anything else happens, no await in between.
    # Cancelled tasks finish in the background, aclose() waits for them.
    def stop(self) -> None:
        """Cancel the current session and clear displayed metadata. Idempotent."""
        session = self._teardown()
        self._publish(None, session.station if session else None)

    def reset(self, station: StationDescriptor) -> None:
        """Cancel the current session and tell the UI a new station has no metadata yet.

        Unlike stop() this always notifies, even when nothing was on display.
        """
        self._teardown()
        self._current = None
        self._notifier.metadata_update(None, station)

    def _teardown(self) -> FetchSession | None:
        session = self._session
        self._session = None
        self._inline_active = False
        if session is None:
            return None

        session.cancelled = True
        for task in session.tasks():
            if not task.done():
                task.cancel()
                self._draining.add(task)
                task.add_done_callback(self._draining.discard)
        logger.info("Metadata session %s stopped", session.id)
        self._state = SessionState.STOPPED
        return session

    async def aclose(self) -> None:
        """Stop and wait until every session task has finished."""
        self.stop()
        if self._draining:
            await asyncio.gather(*list(self._draining), return_exceptions=True)

    def accept_inline_metadata(self, result: MetadataResult) -> bool:
        """Take metadata the audio engine found inside the stream (HLS ID3 tags).

        Goes through the same normalize + dedup path as fetched metadata.

        Returns:
            True if the UI was notified
        """
        station = self._session.station if self._session else self._playback.current_station
        if station is None:
            return False
        cleaned = self._clean(result)
        if cleaned is None:
            return False
        self._inline_active = True
        return self._publish(cleaned, station)

    def get_status(self) -> dict[str, Any]:
        """Snapshot for the status endpoint."""
        session = self._session
        return {
            "state": self._state.value,
            "session_id": session.id if session else None,
            "station": session.station.to_dict() if session else None,
            "plan": type(session.plan).__name__ if session else None,
            "retry_count": session.retry_count if session else 0,
            "ticks": session.ticks if session else 0,
            "tick_in_flight": session.tick_in_flight if session else False,
            "metadata": self._current.to_dict() if self._current else None,
        }

    # =========================================================================
    # SESSION LOOP
    # =========================================================================

    async def _run_session(self, session: FetchSession) -> None:
        set_session_id(session.id)
        try:
            if self.settings.start_delay > 0:
                await asyncio.sleep(self.settings.start_delay)
            if not self._is_current(session):
                return

            self._state = SessionState.POLLING
            # Hey future me - the first tick skips the "is playing" guard. The engine
            # reports "playing" whenever the stream actually starts, which can be after
            # the start delay on slow streams. Later ticks do check it.
            self._launch_tick(session)

            while True:
                await asyncio.sleep(self.settings.poll_interval)
                if not self._guards_hold(session):
                    logger.info("Metadata session %s ended: guard failed", session.id)
                    break
                self._launch_tick(session)
        except asyncio.CancelledError:
            raise
        except Exception:
            logger.exception("Metadata session %s loop crashed", session.id)
        finally:
            if self._is_current(session) and not session.tick_in_flight:
                self._state = SessionState.STOPPED

    def _launch_tick(self, session: FetchSession) -> None:
        if session.tick_in_flight:
            logger.debug("Previous metadata fetch still running, skipping tick")
            return
        session.tick_task = asyncio.get_running_loop().create_task(
            self._tick(session), name=f"metadata-tick-{session.id}"
        )

    async def _tick(self, session: FetchSession) -> None:
        max_attempts = self.settings.max_retries + 1
        try:
            for attempt in range(max_attempts):
                if attempt > 0:
                    self._state = SessionState.RETRYING
                    await asyncio.sleep(self.settings.retry_backoff * attempt)
                    if not self._guards_hold(session):
                        logger.debug("Retry abandoned, session no longer current")
                        return
                try:
                    await self._fetch_and_update(session, attempt)
                except MetadataFetchError as e:
                    session.retry_count = attempt + 1
                    logger.warning(
                        "Metadata fetch failed (attempt %d/%d): %s",
                        attempt + 1,
                        max_attempts,
                        e.message,
                    )
                    continue
                session.retry_count = 0
                return
            logger.info("Metadata retries exhausted, waiting for next tick")
        except asyncio.CancelledError:
            raise
        except Exception:
            logger.exception("Metadata tick crashed")
        finally:
            session.ticks += 1
            if self._is_current(session):
                # The loop may have ended on a guard while this tick was in flight
                self._state = (
                    SessionState.STOPPED if self._loop_ended(session) else SessionState.POLLING
                )

    # =========================================================================
    # ONE FETCH
    # =========================================================================

    async def _fetch_and_update(self, session: FetchSession, attempt: int) -> None:
        station = session.station

        if station.is_hls:
            result = await self._fetch_local(session, attempt)
        else:
            self._maybe_show_loading(session)
            outcome = await self._fetch_proxy(station)
            if outcome.kind is ProxyOutcomeKind.LOADING:
                # Proxy is cold-starting, keep whatever loading state we have
                return
            if outcome.should_use_local:
                result = await self._fetch_local(session, attempt)
            else:
                result = outcome.metadata

        if not self._may_publish(session):
            return

        cleaned = self._clean(result)
        if cleaned is None and self._inline_active:
            return
        if cleaned is None and self.settings.station_name_fallback and station.name:
            cleaned = MetadataResult(source=STATION_NAME_SOURCE, now_playing=station.name)
        self._publish(cleaned, station)

    async def _fetch_proxy(self, station: StationDescriptor) -> ProxyOutcome:
        try:
            return await self._proxy.fetch_now_playing_with_fallback(
                station.url,
                station_id=station.id,
                homepage=station.homepage or None,
                country=station.country_code or None,
            )
        except Exception as e:
            logger.warning("Metadata proxy failed, falling back to local fetchers: %s", e)
            return ProxyOutcome(kind=ProxyOutcomeKind.USE_FALLBACK, reason=str(e))

    async def _fetch_local(self, session: FetchSession, attempt: int) -> MetadataResult | None:
        try:
            return await self._local.fetch(session.plan)
        except Exception as e:
            raise MetadataFetchError(f"Local fetch failed: {e}", attempt=attempt) from e

    # Yo, the placeholder is only for the very first fetch of a session with nothing on
    # display. Showing it on every tick makes stations without metadata blink
    # "Loading..." every 20 seconds.
    def _maybe_show_loading(self, session: FetchSession) -> None:
        if not self.settings.show_loading_placeholder:
            return
        if self._current is not None or session.ticks > 0:
            return
        self._publish(MetadataResult.loading(), session.station)

    # =========================================================================
    # CURRENT-METADATA CELL
    # =========================================================================

    @staticmethod
    def _clean(result: MetadataResult | None) -> MetadataResult | None:
        if result is None or not result.now_playing:
            return None
        cleaned = normalize(result.now_playing)
        if not is_valid_now_playing(cleaned):
            return None
        return result if cleaned == result.now_playing else result.with_now_playing(cleaned)

    def _publish(
        self, metadata: MetadataResult | None, station: StationDescriptor | None
    ) -> bool:
        """Set current metadata and notify the UI if it actually changed."""
        old_key = self._current.dedup_key() if self._current else None
        new_key = metadata.dedup_key() if metadata else None
        if old_key == new_key:
            return False

        self._current = metadata
        self._notifier.metadata_update(metadata, station)
        if metadata is not None:
            logger.info("Now playing: %s (%s)", metadata.now_playing, metadata.source)
        return True

    def _is_current(self, session: FetchSession) -> bool:
        return session is self._session and not session.cancelled

    @staticmethod
    def _loop_ended(session: FetchSession) -> bool:
        return session.loop_task is not None and session.loop_task.done()

    def _may_publish(self, session: FetchSession) -> bool:
        if not self._is_current(session) or self._loop_ended(session):
            return False
        # Same exemption as at launch: the first tick may finish before "playing"
        return session.ticks == 0 or self._guards_hold(session)

    def _guards_hold(self, session: FetchSession) -> bool:
        current_station = self._playback.current_station
        return (
            self._is_current(session)
            and self._playback.is_playing
            and current_station is not None
            and current_station.url == session.station.url
        )
