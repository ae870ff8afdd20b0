"""NTS Radio live API fetcher."""

import logging
from typing import Any

from radiodial.domain.entities import MetadataResult
from radiodial.domain.value_objects import NtsPlan, normalize
from radiodial.infrastructure.fetchers.base import MetadataFetcher

logger = logging.getLogger(__name__)


class NtsFetcher(MetadataFetcher[NtsPlan]):
    """Now playing for the two NTS live channels."""

    source_label = "NTS Radio API"

    API_URL = "https://www.nts.live/api/v2/live"
    # Only the live relays have now-playing info. Mixtape streams
    # (stream-mixtape-geo.ntslive.net) never do, don't even ask.
    LIVE_RELAY_HOST = "stream-relay-geo.ntslive.net"

    @staticmethod
    def channel_for(stream_url: str) -> str:
        """NTS channel name ("1" or "2") for a relay URL."""
        return "2" if "/stream2" in stream_url else "1"

    async def _fetch(self, target: NtsPlan) -> MetadataResult | None:
        if self.LIVE_RELAY_HOST not in target.stream_url:
            return None

        data = await self._get_json(self.API_URL)
        if not isinstance(data, dict):
            return None
        channels = [c for c in data.get("results") or [] if isinstance(c, dict)]
        if not channels:
            return None

        wanted = self.channel_for(target.stream_url)
        channel = next((c for c in channels if c.get("channel_name") == wanted), channels[0])
        now: dict[str, Any] = channel.get("now") or {}
        if not now:
            return None

        # Hey future me - embeds.details.name is the show/artist name and reads better than
        # broadcast_title, which is sometimes just "Breakfast Show w/ ...". Prefer it.
        details = (now.get("embeds") or {}).get("details") or {}
        text = details.get("name") or now.get("broadcast_title") or now.get("title") or ""

        return MetadataResult(
            source=self.source_label,
            now_playing=normalize(text),
            channel="NTS 2" if channel.get("channel_name") == "2" else "NTS 1",
            artwork=(details.get("media") or {}).get("picture_medium"),
            start_time=now.get("start_timestamp"),
            endpoint=self.API_URL,
        )
