"""API schemas for playback control and engine events."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from radiodial.domain.entities import PlaybackEvent, PlaybackEventType, StationDescriptor


class StationSchema(BaseModel):
    """A station as the UI sends it (catalog shape)."""

    model_config = ConfigDict(populate_by_name=True)

    id: str | None = Field(default=None, description="Catalog station uuid")
    name: str = Field(default="", description="Display name")
    # Empty is allowed here on purpose: the playback service rejects it with a
    # MalformedStationError so the caller gets the domain message.
    url: str = Field(default="", description="Stream URL")
    homepage: str = Field(default="")
    country_code: str = Field(default="", alias="countrycode")
    favicon: str = Field(default="")

    def to_domain(self) -> StationDescriptor:
        return StationDescriptor(
            id=self.id,
            name=self.name.strip(),
            url=self.url.strip(),
            homepage=self.homepage.strip(),
            country_code=self.country_code.strip(),
            favicon=self.favicon.strip(),
        )

    @classmethod
    def from_domain(cls, station: StationDescriptor) -> "StationSchema":
        return cls(
            id=station.id,
            name=station.name,
            url=station.url,
            homepage=station.homepage,
            country_code=station.country_code,
            favicon=station.favicon,
        )


class PlayRequest(BaseModel):
    """Request schema for starting playback."""

    station: StationSchema


class VolumeRequest(BaseModel):
    """Request schema for volume changes (clamped to 0.0 - 1.0 server side)."""

    volume: float = Field(..., description="Requested volume")


class VolumeResponse(BaseModel):
    volume: float


class EngineEventRequest(BaseModel):
    """An event reported by the audio engine."""

    type: PlaybackEventType
    message: str | None = None
    is_cors_error: bool = False
    title: str | None = Field(default=None, description="Inline metadata title")
    artist: str | None = Field(default=None, description="Inline metadata artist")
    source: str | None = Field(default=None, description="Inline metadata source label")

    def to_domain(self) -> PlaybackEvent:
        return PlaybackEvent(
            type=self.type,
            message=self.message,
            is_cors_error=self.is_cors_error,
            title=self.title,
            artist=self.artist,
            source=self.source,
        )


class PlaybackStateResponse(BaseModel):
    """Playback snapshot."""

    is_playing: bool
    is_paused: bool
    volume: float
    station: dict[str, Any] | None = None
    metadata: dict[str, Any] | None = None
