"""Playback coordination between UI commands, the audio engine and metadata polling."""

import logging
from typing import Any

from radiodial.application.workers.metadata_orchestrator import MetadataOrchestrator
from radiodial.domain.entities import (
    MetadataResult,
    PlaybackEvent,
    PlaybackEventType,
    PlaybackState,
    StationDescriptor,
)
from radiodial.domain.exceptions import MalformedStationError
from radiodial.domain.ports import IAudioEngine, IUiNotifier
from radiodial.domain.value_objects import compose_now_playing

logger = logging.getLogger(__name__)

INLINE_METADATA_SOURCE = "HLS ID3"

_STOPPING_EVENTS = frozenset(
    {PlaybackEventType.PAUSED, PlaybackEventType.ENDED, PlaybackEventType.ERROR}
)


class PlaybackService:
    """Single owner of PlaybackState.

    Hey future me - is_playing is ONLY set by the engine's "playing" event, never by
    play() itself. The engine can fail to start (CORS, dead stream) and then the
    metadata guards must not think we're playing.
    """

    def __init__(
        self,
        engine: IAudioEngine,
        notifier: IUiNotifier,
        orchestrator: MetadataOrchestrator,
        state: PlaybackState,
    ) -> None:
        self._engine = engine
        self._notifier = notifier
        self._orchestrator = orchestrator
        self.state = state

    async def play(self, station: StationDescriptor) -> None:
        """Switch playback to a station and start metadata polling for it.

        Raises:
            MalformedStationError: If the station has no stream URL (nothing is started)
        """
        if not station.url:
            raise MalformedStationError("Station has no stream URL", station_id=station.id)

        self.state.is_paused = False
        self.state.current_station = station
        self._orchestrator.reset(station)

        await self._engine.play(station)
        self._notifier.station_changed(station)
        self._orchestrator.start(station)
        logger.info("Playing %s", station.name or station.url)

    async def pause(self) -> None:
        await self._engine.pause()
        self.state.is_paused = True
        self.state.is_playing = False
        self._orchestrator.stop()
        logger.info("Playback paused")

    async def stop(self) -> None:
        await self._engine.stop()
        self.state.is_playing = False
        self.state.is_paused = False
        self._orchestrator.stop()
        logger.info("Playback stopped")

    async def set_volume(self, volume: float) -> float:
        """Clamp to 0.0 - 1.0 and forward to the engine.

        Returns:
            The volume actually applied
        """
        clamped = min(1.0, max(0.0, float(volume)))
        self.state.volume = clamped
        await self._engine.set_volume(clamped)
        return clamped

    def handle_engine_event(self, event: PlaybackEvent) -> None:
        """Apply an audio engine event to playback state and forward it to the UI."""
        if event.type is PlaybackEventType.PLAYING:
            # A late "playing" after the user hit pause must not resurrect playback
            if not self.state.is_paused:
                self.state.is_playing = True
        elif event.type in _STOPPING_EVENTS:
            self.state.is_playing = False
            if event.type is PlaybackEventType.ERROR:
                logger.warning(
                    "Audio engine error%s: %s",
                    " (CORS)" if event.is_cors_error else "",
                    event.message or "unknown",
                )
        elif event.type is PlaybackEventType.INLINE_METADATA:
            self._accept_inline(event)

        self._notifier.playback_event(event)

    def _accept_inline(self, event: PlaybackEvent) -> None:
        now_playing = compose_now_playing(event.artist, event.title)
        if not now_playing:
            return
        self._orchestrator.accept_inline_metadata(
            MetadataResult(
                source=event.source or INLINE_METADATA_SOURCE,
                now_playing=now_playing,
                artist=event.artist or None,
                title=event.title or None,
            )
        )

    def get_state(self) -> dict[str, Any]:
        """Playback snapshot for the UI."""
        current = self._orchestrator.current_metadata
        station = self.state.current_station
        return {
            "is_playing": self.state.is_playing,
            "is_paused": self.state.is_paused,
            "volume": self.state.volume,
            "station": station.to_dict() if station else None,
            "metadata": current.to_dict() if current else None,
        }
