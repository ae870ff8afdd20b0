"""Icecast-family status JSON fetcher.

Hey future me - "Icecast status JSON" is not one format. Real servers send:

    {"icestats": {"source": {...}}}            classic Icecast 2 status-json.xsl
    {"icestats": {"source": [{...}, {...}]}}   same, several mounts
    {"sources": [...]}                          some forks and proxies
    {"source": {...}}                           more forks
    {"stats": {...}}                            Shoutcast-ish stats.json

SOURCE_LIST_RULES turns each shape into a list of source dicts (first rule that
matches wins). Then we pick the entry for OUR mount and read whatever title-ish
fields it has. All candidate endpoints are raced, first usable answer wins.
"""

import asyncio
import logging
from collections.abc import Callable
from typing import Any

import httpx

from radiodial.application.services.race_coordinator import first_non_null
from radiodial.domain.entities import MetadataResult
from radiodial.domain.value_objects import (
    IcecastSource,
    is_valid_now_playing,
    parse_artist_title,
)
from radiodial.infrastructure.fetchers.base import MetadataFetcher

logger = logging.getLogger(__name__)

TITLE_KEYS: tuple[str, ...] = ("title", "song", "track", "track_title")
ARTIST_KEYS: tuple[str, ...] = ("artist", "performer", "artist_name")
MOUNT_KEYS: tuple[str, ...] = ("listenurl", "mount", "path")


def _as_list(value: Any) -> list[dict[str, Any]]:
    items = value if isinstance(value, list) else [value]
    return [item for item in items if isinstance(item, dict)]


def _rule_icestats(data: dict[str, Any]) -> list[dict[str, Any]] | None:
    icestats = data.get("icestats")
    if isinstance(icestats, dict) and icestats.get("source"):
        return _as_list(icestats["source"])
    return None


def _rule_sources(data: dict[str, Any]) -> list[dict[str, Any]] | None:
    return _as_list(data["sources"]) if data.get("sources") else None


def _rule_source(data: dict[str, Any]) -> list[dict[str, Any]] | None:
    return _as_list(data["source"]) if data.get("source") else None


def _rule_stats(data: dict[str, Any]) -> list[dict[str, Any]] | None:
    return _as_list(data["stats"]) if data.get("stats") else None


SOURCE_LIST_RULES: tuple[Callable[[dict[str, Any]], list[dict[str, Any]] | None], ...] = (
    _rule_icestats,
    _rule_sources,
    _rule_source,
    _rule_stats,
)


def extract_sources(data: Any) -> list[dict[str, Any]]:
    """Uniform list of source entries from any known status JSON shape."""
    if not isinstance(data, dict):
        return []
    for rule in SOURCE_LIST_RULES:
        sources = rule(data)
        if sources is not None:
            return sources
    return []


def select_source(sources: list[dict[str, Any]], mount: str) -> dict[str, Any] | None:
    """Entry whose listen URL/mount/path contains our mount, else the first."""
    if not sources:
        return None
    if mount:
        for source in sources:
            for key in MOUNT_KEYS:
                value = source.get(key)
                if isinstance(value, str) and mount in value:
                    return source
    return sources[0]


def _first_field(source: dict[str, Any], keys: tuple[str, ...]) -> str:
    for key in keys:
        value = source.get(key)
        if value is not None and str(value).strip():
            return str(value).strip()
    return ""


def parse_icecast_status(data: Any, mount: str = "") -> dict[str, Any] | None:
    """Pick our source entry and build its display text.

    Returns:
        Dict with now_playing, genre, bitrate, listeners; None if nothing usable
    """
    source = select_source(extract_sources(data), mount)
    if source is None:
        return None

    now_playing = parse_artist_title(
        artist=_first_field(source, ARTIST_KEYS),
        title=_first_field(source, TITLE_KEYS),
    )
    if not is_valid_now_playing(now_playing):
        return None

    return {
        "now_playing": now_playing,
        "genre": source.get("genre") or None,
        "bitrate": source.get("bitrate") or None,
        "listeners": _as_int(source.get("listeners") or source.get("listener_peak")),
    }


def _as_int(value: Any) -> int | None:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


class IcecastFetcher(MetadataFetcher[IcecastSource]):
    """Race all candidate status endpoints of the stream host."""

    source_label = "Icecast Server"

    @property
    def deadline(self) -> float | None:
        # Each endpoint has its own timeout and they all run in parallel
        return None

    async def _fetch(self, target: IcecastSource) -> MetadataResult | None:
        return await first_non_null(
            self._attempt(endpoint, target.mount) for endpoint in target.endpoints
        )

    async def _attempt(self, endpoint: str, mount: str) -> MetadataResult | None:
        """One status endpoint. Never raises (except cancellation)."""
        try:
            data = await asyncio.wait_for(self._get_json(endpoint), timeout=self.timeout)
        except (TimeoutError, httpx.HTTPError, ValueError) as e:
            logger.debug("Icecast endpoint %s gave nothing: %s", endpoint, e)
            return None

        parsed = parse_icecast_status(data, mount)
        if parsed is None:
            return None
        return MetadataResult(source=self.source_label, endpoint=endpoint, **parsed)
