"""HLS playlist metadata fetcher."""

import logging
import re

from radiodial.domain.entities import MetadataResult
from radiodial.domain.value_objects import HlsSource, normalize
from radiodial.infrastructure.fetchers.base import MetadataFetcher

logger = logging.getLogger(__name__)

_DATERANGE_TITLE = re.compile(r'TITLE="([^"]+)"')
_STREAM_INF_NAME = re.compile(r'NAME="([^"]+)"')


def parse_playlist_title(playlist: str) -> str | None:
    """Now-playing text from an m3u8 playlist.

    A #EXT-X-DATERANGE TITLE wins immediately (that's the program/track marker).
    Otherwise the last #EXT-X-STREAM-INF NAME, which is usually just the
    variant name, but better than nothing.
    """
    found: str | None = None
    for raw_line in playlist.splitlines():
        line = raw_line.strip()
        if line.startswith("#EXT-X-DATERANGE:"):
            match = _DATERANGE_TITLE.search(line)
            if match:
                return match.group(1)
        elif line.startswith("#EXT-X-STREAM-INF:"):
            match = _STREAM_INF_NAME.search(line)
            if match:
                found = match.group(1)
    return found


class HlsFetcher(MetadataFetcher[HlsSource]):
    """Scan the master/media playlist for title tags."""

    source_label = "HLS Stream"

    async def _fetch(self, target: HlsSource) -> MetadataResult | None:
        if ".m3u8" not in target.url:
            return None

        response = await self._client.get(target.url, timeout=self.timeout)
        response.raise_for_status()

        title = parse_playlist_title(response.text)
        if not title:
            return None
        return MetadataResult(source=self.source_label, now_playing=normalize(title))
