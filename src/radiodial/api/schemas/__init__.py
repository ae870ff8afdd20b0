"""Pydantic request/response models for the HTTP API."""

from radiodial.api.schemas.playback import (
    EngineEventRequest,
    PlaybackStateResponse,
    PlayRequest,
    StationSchema,
    VolumeRequest,
    VolumeResponse,
)
from radiodial.api.schemas.stations import SearchBy, StationSearchResponse

__all__ = [
    "EngineEventRequest",
    "PlayRequest",
    "PlaybackStateResponse",
    "SearchBy",
    "StationSchema",
    "StationSearchResponse",
    "VolumeRequest",
    "VolumeResponse",
]
