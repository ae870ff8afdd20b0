"""Airtime Pro live-info fetcher (Cashmere Radio and *.out.airtime.pro stations)."""

import logging
import re
from typing import Any

from radiodial.domain.entities import MetadataResult
from radiodial.domain.value_objects import (
    AirtimeProPlan,
    CashmerePlan,
    compose_now_playing,
    normalize,
)
from radiodial.infrastructure.fetchers.base import MetadataFetcher

logger = logging.getLogger(__name__)

# Airtime fills shows.current.name with placeholders like "Airtime Pro Show" or
# "Archive" when nothing is scheduled. Those are not show names.
_PLACEHOLDER_SHOW = re.compile(r"airtime|archive", re.IGNORECASE)
_LEADING_DASH = re.compile(r"^\s*-\s*")


def _text(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


def parse_airtime_pro_now_playing(data: Any) -> str | None:
    """Build "Show - Artist - Title" from an Airtime Pro live-info-v2 document.

    Examples:
        show "Morning Drift", track "Artist - Song" -> "Morning Drift - Artist - Song"
        show "Morning Drift", track "Morning Drift - Song" -> "Morning Drift - Song"
        show "Airtime Pro Archive", track "Artist - Song" -> "Artist - Song"
    """
    if not isinstance(data, dict):
        return None

    current_track = (data.get("tracks") or {}).get("current") or {}
    meta = current_track.get("metadata") or {}
    artist = _text(meta.get("artist_name")) or _text(meta.get("artist"))
    title = _text(meta.get("track_title"))
    if not title and isinstance(current_track.get("name"), str):
        title = _LEADING_DASH.sub("", current_track["name"], count=1).strip()

    show = _text(((data.get("shows") or {}).get("current") or {}).get("name"))
    if show and _PLACEHOLDER_SHOW.search(show):
        show = ""

    track = compose_now_playing(artist, title)

    now_playing = ""
    if show and track:
        lc_show, lc_track = show.lower(), track.lower()
        if lc_track.startswith(f"{lc_show} - ") or lc_track == lc_show:
            now_playing = track
        else:
            now_playing = f"{show} - {track}"
    else:
        now_playing = track or show

    if not now_playing:
        node = data.get("now") or data.get("now_playing") or data.get("nowPlaying")
        if isinstance(node, str):
            now_playing = node.strip()
        elif isinstance(node, dict):
            now_playing = _text(node.get("title")) or _text(node.get("name"))

    return normalize(now_playing) or None


class AirtimeProFetcher(MetadataFetcher[CashmerePlan | AirtimeProPlan]):
    """Fetch from an Airtime Pro live-info-v2 endpoint."""

    source_label = "Airtime Pro API"
    CASHMERE_SOURCE_LABEL = "Cashmere Radio API"

    async def _fetch(self, target: CashmerePlan | AirtimeProPlan) -> MetadataResult | None:
        data = await self._get_json(target.endpoint)
        now_playing = parse_airtime_pro_now_playing(data)
        if not now_playing:
            return None

        source = (
            self.CASHMERE_SOURCE_LABEL if isinstance(target, CashmerePlan) else self.source_label
        )
        return MetadataResult(source=source, now_playing=now_playing, endpoint=target.endpoint)
