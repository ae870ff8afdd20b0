"""Radio-Browser catalog fetcher.

Hey future me - this one is a long shot. Some stations rename themselves in the
catalog to include the current show ("Jazz FM - Late Night Session with X"). We
only believe it when the catalog entry was checked OK, changed within the last
hour, and its name is a LONGER variant of the name we already know. Anything else
is just the station name again, which is not metadata.
"""

import logging
from collections.abc import Callable
from datetime import UTC, datetime, timedelta

import httpx

from radiodial.domain.entities import MetadataResult
from radiodial.domain.value_objects import RadioBrowserSource, normalize
from radiodial.infrastructure.fetchers.base import MetadataFetcher

logger = logging.getLogger(__name__)

RECENT_CHANGE_WINDOW = timedelta(hours=1)


def _parse_timestamp(value: object) -> datetime | None:
    if not isinstance(value, str) or not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=UTC)


class RadioBrowserFetcher(MetadataFetcher[RadioBrowserSource]):
    """Look for a recently renamed catalog entry."""

    source_label = "Radio-Browser API"

    def __init__(
        self,
        client: httpx.AsyncClient,
        timeout: float,
        base_url: str = "https://de1.api.radio-browser.info",
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        super().__init__(client, timeout)
        self.base_url = base_url.rstrip("/")
        self._clock = clock or (lambda: datetime.now(UTC))

    async def _fetch(self, target: RadioBrowserSource) -> MetadataResult | None:
        if not target.station_id:
            return None

        endpoint = f"{self.base_url}/json/stations/byuuid/{target.station_id}"
        data = await self._get_json(endpoint)
        if not isinstance(data, list) or not data or not isinstance(data[0], dict):
            return None
        entry = data[0]

        changed_at = _parse_timestamp(entry.get("lastchangetime_iso8601"))
        if changed_at is None or self._clock() - changed_at >= RECENT_CHANGE_WINDOW:
            return None
        if entry.get("lastcheckok") != 1:
            return None

        catalog_name = entry.get("name") or ""
        known_name = target.station_name or ""
        if catalog_name == known_name or len(catalog_name) <= len(known_name):
            return None

        return MetadataResult(
            source=self.source_label,
            now_playing=normalize(catalog_name),
            endpoint=endpoint,
        )
