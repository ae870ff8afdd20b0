"""ICY (SHOUTcast/Icecast inline) metadata fetcher.

Hey future me - how ICY works, since you WILL forget:
1. We GET the audio stream with "Icy-MetaData: 1"
2. The server answers with "icy-metaint: N" (e.g. 16000)
3. The body is N bytes of audio, then ONE length byte L, then L*16 bytes of
   metadata text like "StreamTitle='Artist - Song';StreamUrl='';" padded with NULs,
   then N bytes of audio again, and so on
4. No icy-metaint header means no inline metadata. Then the icy-name header is
   the best we get

We only read up to the first metadata block and then close the connection. The
Range header is a hint for servers that honor it, most radio servers ignore it.
"""

import logging
import re

import httpx

from radiodial.domain.entities import MetadataResult
from radiodial.domain.value_objects import (
    IcySource,
    compose_now_playing,
    is_valid_now_playing,
    normalize,
)
from radiodial.infrastructure.fetchers.base import MetadataFetcher

logger = logging.getLogger(__name__)

_STREAM_TITLE = re.compile(r"StreamTitle='([^']*)'")
_STREAM_ARTIST = re.compile(r"StreamArtist='([^']*)'")

# Length byte max is 255, times 16
MAX_METADATA_BLOCK = 255 * 16


def decode_icy_text(raw: bytes) -> str:
    """Decode a metadata block (UTF-8, else Latin-1) and drop NUL padding."""
    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError:
        text = raw.decode("latin-1")
    return text.replace("\0", "")


def parse_stream_title(text: str) -> str | None:
    """Display text from "StreamTitle='...';StreamArtist='...';" metadata."""
    title_match = _STREAM_TITLE.search(text)
    artist_match = _STREAM_ARTIST.search(text)
    title = title_match.group(1).strip() if title_match else ""
    artist = artist_match.group(1).strip() if artist_match else ""
    return normalize(compose_now_playing(artist, title)) or None


def extract_metadata_block(buffer: bytes, metaint: int) -> bytes | None:
    """First metadata block of an ICY byte stream.

    Returns:
        The block bytes, b"" for an empty block, None if the buffer is too short
    """
    if len(buffer) < metaint + 1:
        return None
    length = buffer[metaint] * 16
    end = metaint + 1 + length
    if len(buffer) < end:
        return None
    return buffer[metaint + 1 : end]


class IcyFetcher(MetadataFetcher[IcySource]):
    """Read the first inline metadata block of the stream."""

    source_label = "ICY Stream"
    HEADERS_SOURCE_LABEL = "ICY Headers"

    def __init__(self, client: httpx.AsyncClient, timeout: float, range_bytes: int = 8192) -> None:
        super().__init__(client, timeout)
        self.range_bytes = range_bytes

    async def _fetch(self, target: IcySource) -> MetadataResult | None:
        headers = {"Icy-MetaData": "1", "Range": f"bytes=0-{self.range_bytes}"}
        async with self._client.stream(
            "GET", target.url, headers=headers, timeout=self.timeout
        ) as response:
            response.raise_for_status()

            try:
                metaint = int(response.headers.get("icy-metaint", ""))
            except ValueError:
                metaint = 0
            if metaint <= 0:
                return self._from_headers(response.headers)

            block = await self._read_block(response, metaint)

        if not block:
            return None
        now_playing = parse_stream_title(decode_icy_text(block))
        if not now_playing:
            return None
        return MetadataResult(source=self.source_label, now_playing=now_playing)

    async def _read_block(self, response: httpx.Response, metaint: int) -> bytes | None:
        buffer = bytearray()
        limit = metaint + 1 + MAX_METADATA_BLOCK
        async for chunk in response.aiter_bytes():
            buffer.extend(chunk)
            block = extract_metadata_block(bytes(buffer), metaint)
            if block is not None:
                return block
            if len(buffer) >= limit:
                break
        return None

    def _from_headers(self, headers: httpx.Headers) -> MetadataResult | None:
        name = normalize(headers.get("icy-name"))
        description = normalize(headers.get("icy-description"))

        candidates = [name] if name and name != description else []
        candidates.append(description)
        for candidate in candidates:
            if is_valid_now_playing(candidate):
                return MetadataResult(
                    source=self.HEADERS_SOURCE_LABEL,
                    now_playing=candidate,
                    genre=headers.get("icy-genre") or None,
                )
        return None
