"""Domain entities for stations, playback state and now-playing metadata.

Hey future me - everything here is plain data. No I/O, no asyncio. The fetchers
produce MetadataResult, the orchestrator owns the "current" one, the playback
service owns PlaybackState. Keep it that way so the rest stays testable.
"""

from __future__ import annotations

import time
from dataclasses import asdict, dataclass, field, replace
from enum import Enum
from typing import Any

# Display text of the transient placeholder shown while the proxy warms up.
LOADING_TEXT = "Loading..."


@dataclass(frozen=True)
class StationDescriptor:
    """A named internet radio stream as delivered by the station catalog."""

    id: str | None = None
    name: str = ""
    url: str = ""
    homepage: str = ""
    country_code: str = ""
    favicon: str = ""

    # Yo, the catalog (and old stored station lists) use different key names for the
    # same things: stationuuid vs id, countrycode vs country. Accept all of them here
    # so nothing downstream has to care.
    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> StationDescriptor:
        """Build a descriptor from a catalog or UI station object."""
        station_id = data.get("id") or data.get("stationuuid")
        return cls(
            id=str(station_id) if station_id else None,
            name=(data.get("name") or "").strip(),
            url=(data.get("url_resolved") or data.get("url") or "").strip(),
            homepage=(data.get("homepage") or "").strip(),
            country_code=(
                data.get("countrycode") or data.get("country_code") or data.get("country") or ""
            ).strip(),
            favicon=(data.get("favicon") or "").strip(),
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the UI wire shape."""
        return {
            "id": self.id,
            "name": self.name,
            "url": self.url,
            "homepage": self.homepage,
            "countrycode": self.country_code,
            "favicon": self.favicon,
        }

    @property
    def is_hls(self) -> bool:
        """Check if the stream is an HLS playlist."""
        return ".m3u8" in self.url


@dataclass(frozen=True)
class MetadataResult:
    """Now-playing metadata from one source.

    Invariant: now_playing, when set, is normalized and not a generic placeholder.
    The only exception is the loading placeholder (is_loading=True).
    """

    source: str | None = None
    now_playing: str | None = None
    artist: str | None = None
    title: str | None = None
    genre: str | None = None
    listeners: int | None = None
    bitrate: int | str | None = None
    channel: str | None = None
    artwork: str | None = None
    start_time: str | None = None
    endpoint: str | None = None
    raw: Any = None
    cache_ttl: int | None = None
    from_proxy: bool = False
    is_loading: bool = False
    timestamp: float = field(default_factory=time.time)

    @classmethod
    def loading(cls, source: str = "Loading") -> MetadataResult:
        """Create the transient loading placeholder."""
        return cls(source=source, now_playing=LOADING_TEXT, is_loading=True)

    def with_now_playing(self, now_playing: str) -> MetadataResult:
        """Return a copy with a different now_playing text."""
        return replace(self, now_playing=now_playing)

    def to_dict(self) -> dict[str, Any]:
        """Serialize for the UI, dropping unset fields."""
        return {
            key: value
            for key, value in asdict(self).items()
            if value is not None and value is not False
        }

    # Hey future me - the timestamp changes on EVERY fetch, so a naive "compare the
    # serialized dicts" would never consider two fetches equal and the UI would redraw
    # every 20s. Dedup compares everything except the retrieval time.
    def dedup_key(self) -> tuple[tuple[str, str], ...]:
        """Serialized form used for change detection (timestamp excluded)."""
        data = self.to_dict()
        data.pop("timestamp", None)
        return tuple(sorted((key, repr(value)) for key, value in data.items()))


class PlaybackEventType(str, Enum):
    """Events emitted by the audio engine."""

    PLAYING = "playing"
    PAUSED = "paused"
    ENDED = "ended"
    ERROR = "error"
    BUFFERING = "buffering"
    INLINE_METADATA = "inline_metadata"


@dataclass(frozen=True)
class PlaybackEvent:
    """One event reported by the audio engine."""

    type: PlaybackEventType
    message: str | None = None
    is_cors_error: bool = False
    title: str | None = None
    artist: str | None = None
    source: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serialize for forwarding to the UI."""
        data = {
            "type": self.type.value,
            "message": self.message,
            "is_cors_error": self.is_cors_error or None,
            "title": self.title,
            "artist": self.artist,
            "source": self.source,
        }
        return {key: value for key, value in data.items() if value is not None}


@dataclass
class PlaybackState:
    """Process-wide playback flags, mutated only by the playback service."""

    is_playing: bool = False
    is_paused: bool = False
    current_station: StationDescriptor | None = None
    volume: float = 1.0


class ProxyOutcomeKind(str, Enum):
    """What the metadata proxy told us to do."""

    METADATA = "metadata"
    LOADING = "loading"
    USE_LOCAL = "use_local"
    USE_FALLBACK = "use_fallback"


@dataclass(frozen=True)
class ProxyOutcome:
    """Result of a metadata proxy call."""

    kind: ProxyOutcomeKind
    metadata: MetadataResult | None = None
    reason: str | None = None

    @property
    def should_use_local(self) -> bool:
        """Check if the caller should fall back to local fetchers."""
        return self.kind in (ProxyOutcomeKind.USE_LOCAL, ProxyOutcomeKind.USE_FALLBACK)


class SessionState(str, Enum):
    """Fetch orchestrator lifecycle states."""

    IDLE = "idle"
    STARTING = "starting"
    POLLING = "polling"
    RETRYING = "retrying"
    STOPPED = "stopped"


__all__ = [
    "LOADING_TEXT",
    "MetadataResult",
    "PlaybackEvent",
    "PlaybackEventType",
    "PlaybackState",
    "ProxyOutcome",
    "ProxyOutcomeKind",
    "SessionState",
    "StationDescriptor",
]
