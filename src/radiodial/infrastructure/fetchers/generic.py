"""Generic station metadata fetcher.

Last line of defense for streams we know nothing about. First the partner
special cases (Callshop Radio, RadioKing), then a list of conventional
"now playing" paths on the stream host, one after another, each with its own
short timeout. First JSON answer that yields valid text wins.
"""

import asyncio
import logging
import re
from typing import Any

import httpx

from radiodial.domain.entities import MetadataResult
from radiodial.domain.value_objects import (
    GenericSource,
    is_valid_now_playing,
    normalize,
    parse_artist_title,
    parse_station_metadata,
)
from radiodial.infrastructure.fetchers.base import MetadataFetcher, origin_of
from radiodial.infrastructure.fetchers.icecast import extract_sources, select_source

logger = logging.getLogger(__name__)

CONVENTIONAL_PATHS: tuple[str, ...] = (
    "/api/nowplaying",
    "/nowplaying",
    "/current",
    "/metadata",
    "/info",
    "/playing.json",
    "/current.json",
    "/api/current",
    "/stats",
    "/7.html",
)

CALLSHOP_STATUS_URL = "https://icecast.callshopradio.com/status-json.xsl"
_RADIOKING_ID = re.compile(r"radio/(\d+)")


def radioking_endpoints(stream_url: str) -> list[str]:
    """Candidate RadioKing APIs for a stream URL, [] if there is no radio id."""
    match = _RADIOKING_ID.search(stream_url)
    if not match:
        return []
    radio_id = match.group(1)
    endpoints = [
        f"https://www.radioking.com/api/radio/{radio_id}/track/current",
        f"https://api.radioking.com/widget/radio/{radio_id}",
        f"https://www.radioking.com/api/radio/{radio_id}",
    ]
    origin = origin_of(stream_url)
    if origin:
        endpoints.append(f"{origin}/api/radio/{radio_id}/track/current")
    return endpoints


def parse_radioking(data: Any) -> str | None:
    """Display text from a RadioKing track document."""
    if not isinstance(data, dict):
        return None
    track = data.get("track") if isinstance(data.get("track"), dict) else {}
    title = data.get("title") or track.get("title") or track.get("name") or ""
    artist = data.get("artist") or track.get("artist") or ""
    return parse_artist_title(str(title), str(artist), str(title))


class GenericFetcher(MetadataFetcher[GenericSource]):
    """Partner special cases, then conventional endpoints in sequence."""

    source_label = "Station API"
    CALLSHOP_SOURCE_LABEL = "Callshop Radio JSON"
    RADIOKING_SOURCE_LABEL = "Radio King API"

    @property
    def deadline(self) -> float | None:
        # Endpoints are tried one by one, each with self.timeout
        return None

    async def _fetch(self, target: GenericSource) -> MetadataResult | None:
        url = target.url

        if "callshopradio.com" in url:
            result = await self._fetch_callshop(url)
            if result is not None:
                return result

        if "radioking.com" in url:
            for endpoint in radioking_endpoints(url):
                data = await self._try_json(endpoint)
                now_playing = parse_radioking(data)
                if is_valid_now_playing(now_playing):
                    return MetadataResult(
                        source=self.RADIOKING_SOURCE_LABEL,
                        now_playing=now_playing,
                        endpoint=endpoint,
                    )

        origin = origin_of(url)
        if origin is None:
            return None
        for path in CONVENTIONAL_PATHS:
            endpoint = f"{origin}{path}"
            now_playing = parse_station_metadata(await self._try_json(endpoint))
            if is_valid_now_playing(now_playing):
                return MetadataResult(
                    source=self.source_label, now_playing=now_playing, endpoint=endpoint
                )
        return None

    async def _fetch_callshop(self, url: str) -> MetadataResult | None:
        mount = "/callshopradio-wien" if "/callshopradio-wien" in url else "/callshopradio"
        source = select_source(extract_sources(await self._try_json(CALLSHOP_STATUS_URL)), mount)
        if not source:
            return None
        now_playing = normalize(source.get("title") if isinstance(source.get("title"), str) else "")
        if not is_valid_now_playing(now_playing):
            return None
        listeners = source.get("listeners")
        return MetadataResult(
            source=self.CALLSHOP_SOURCE_LABEL,
            now_playing=now_playing,
            genre=source.get("genre") or None,
            listeners=listeners if isinstance(listeners, int) else None,
            endpoint=CALLSHOP_STATUS_URL,
        )

    async def _try_json(self, endpoint: str) -> Any:
        """One endpoint with its own timeout, None on any failure."""
        try:
            return await asyncio.wait_for(self._get_json(endpoint), timeout=self.timeout)
        except (TimeoutError, httpx.HTTPError, ValueError) as e:
            logger.debug("Endpoint %s gave nothing: %s", endpoint, e)
            return None
