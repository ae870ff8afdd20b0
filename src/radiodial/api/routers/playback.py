"""Playback control endpoints.

Hey future me - these are the UI's commands (play/pause/stop/volume) plus the
channel the audio engine reports back on (POST /events). The engine itself
listens on GET /api/events/engine.
"""

import logging

from fastapi import APIRouter, Depends, status

from radiodial.api.dependencies import get_playback_service
from radiodial.api.schemas import (
    EngineEventRequest,
    PlaybackStateResponse,
    PlayRequest,
    VolumeRequest,
    VolumeResponse,
)
from radiodial.application.services.playback_service import PlaybackService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/play", response_model=PlaybackStateResponse)
async def play(
    request: PlayRequest,
    playback: PlaybackService = Depends(get_playback_service),
) -> PlaybackStateResponse:
    """Play a station. A station without a stream URL is rejected with 422."""
    await playback.play(request.station.to_domain())
    return PlaybackStateResponse(**playback.get_state())


@router.post("/pause", response_model=PlaybackStateResponse)
async def pause(
    playback: PlaybackService = Depends(get_playback_service),
) -> PlaybackStateResponse:
    await playback.pause()
    return PlaybackStateResponse(**playback.get_state())


@router.post("/stop", response_model=PlaybackStateResponse)
async def stop(
    playback: PlaybackService = Depends(get_playback_service),
) -> PlaybackStateResponse:
    await playback.stop()
    return PlaybackStateResponse(**playback.get_state())


@router.post("/volume", response_model=VolumeResponse)
async def set_volume(
    request: VolumeRequest,
    playback: PlaybackService = Depends(get_playback_service),
) -> VolumeResponse:
    """Set volume, out-of-range values are clamped to 0.0 - 1.0."""
    return VolumeResponse(volume=await playback.set_volume(request.volume))


@router.get("/state", response_model=PlaybackStateResponse)
async def get_state(
    playback: PlaybackService = Depends(get_playback_service),
) -> PlaybackStateResponse:
    return PlaybackStateResponse(**playback.get_state())


@router.post("/events", status_code=status.HTTP_202_ACCEPTED)
async def engine_event(
    request: EngineEventRequest,
    playback: PlaybackService = Depends(get_playback_service),
) -> dict[str, str]:
    """Audio engine reports playing/paused/ended/error/buffering/inline_metadata."""
    playback.handle_engine_event(request.to_domain())
    return {"status": "accepted"}
