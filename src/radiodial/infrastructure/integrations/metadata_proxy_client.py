"""HTTP client for the remote metadata proxy.

Hey future me - the proxy resolves now-playing for every non-HLS stream server-side
(it runs the same kind of fetchers we have locally, without the CORS and connection
limits). It runs on a free host that goes to sleep, so the FIRST request after a
while can take 10-15 seconds or come back as 502/503/504 from the host's gateway.
That's the "cold start" case: we return a LOADING outcome so the UI shows
"Loading..." instead of blank, and the next orchestrator tick tries again.

Wire contract:
    GET {base}/v1/metadata?url=...&stationId=...&homepage=...&country=...
    -> {"ok": true, "source": "icy", "display": "Artist - Song", "artist"?, "title"?,
        "raw"?, "cacheTtl"?}
    -> {"ok": false, "reason": "no-metadata", "message": "..."}
    GET {base}/health -> {"status": "ok"}
"""

import asyncio
import logging
from typing import Any

import httpx

from radiodial.config import ProxySettings
from radiodial.domain.entities import MetadataResult, ProxyOutcome, ProxyOutcomeKind

logger = logging.getLogger(__name__)

PROXY_SOURCE_MAP: dict[str, str] = {
    "nts": "NTS Radio API",
    "airtimepro": "Airtime Pro API",
    "cashmere": "Cashmere Radio API",
    "icecast-status": "Icecast Server",
    "icy": "ICY Stream",
    "icy-headers": "ICY Headers",
    "generic-api": "Station API",
    "radioking": "Radio King API",
    "callshop-radio": "Callshop Radio JSON",
    "radio-browser": "Radio-Browser API",
    "station-info": "Station Info",
    "proxy-starting": "Server Starting",
    "unknown": "Metadata Server",
}
DEFAULT_PROXY_SOURCE = "Metadata Server"
DEFAULT_CACHE_TTL = 15

# Proxy-side failures that won't get better by asking again
TERMINAL_REASONS: frozenset[str] = frozenset({"invalid-url", "no-metadata", "blocked"})
RETRYABLE_REASONS: frozenset[str] = frozenset({"timeout", "upstream-error", "server-error"})
LOCAL_REASON = "hls-client"

COLD_START_STATUS_CODES: frozenset[int] = frozenset({502, 503, 504})


def map_proxy_source(proxy_source: str | None) -> str:
    """Translate the proxy's source id into our display label."""
    return PROXY_SOURCE_MAP.get(proxy_source or "", DEFAULT_PROXY_SOURCE)


def should_use_proxy(stream_url: str | None) -> bool:
    """Check if a stream goes through the proxy (everything except HLS)."""
    if not stream_url or not isinstance(stream_url, str):
        return False
    return ".m3u8" not in stream_url


def _loading_outcome() -> ProxyOutcome:
    return ProxyOutcome(
        kind=ProxyOutcomeKind.LOADING,
        metadata=MetadataResult.loading(source=PROXY_SOURCE_MAP["proxy-starting"]),
        reason="Server starting up, please wait...",
    )


class _ColdStart(Exception):
    """Gateway error from the proxy host, counts like a timeout."""


class MetadataProxyClient:
    """Client for the remote metadata proxy."""

    def __init__(self, client: httpx.AsyncClient, settings: ProxySettings) -> None:
        """Initialize proxy client.

        Args:
            client: Shared HTTP client
            settings: Proxy configuration
        """
        self._client = client
        self.settings = settings

    # Listen up future me, the retry loop here is SEPARATE from the orchestrator's retry
    # loop. This one handles proxy hiccups (max_retries=1, so two attempts). The
    # orchestrator only retries when an exception escapes, which this method never does.
    async def fetch_now_playing(
        self,
        stream_url: str | None,
        station_id: str | None = None,
        homepage: str | None = None,
        country: str | None = None,
    ) -> ProxyOutcome | None:
        """Ask the proxy for now-playing metadata.

        Args:
            stream_url: Stream URL of the station
            station_id: Radio-Browser station uuid
            homepage: Station homepage URL
            country: Station country code

        Returns:
            METADATA, LOADING (cold start) or USE_LOCAL outcome; None when the proxy
            has nothing or failed for good
        """
        if not stream_url or not isinstance(stream_url, str):
            logger.warning("Invalid stream URL provided to metadata proxy")
            return None

        if not should_use_proxy(stream_url):
            return ProxyOutcome(
                kind=ProxyOutcomeKind.USE_LOCAL, reason="HLS streams handled locally"
            )

        params = {"url": stream_url}
        if station_id:
            params["stationId"] = station_id
        if homepage:
            params["homepage"] = homepage
        if country:
            params["country"] = country

        attempts = self.settings.max_retries + 1
        last_error: str | None = None

        for attempt in range(attempts):
            is_last = attempt == attempts - 1
            try:
                data = await asyncio.wait_for(
                    self._request(params), timeout=self.settings.request_timeout
                )
            except (TimeoutError, httpx.TimeoutException, _ColdStart) as e:
                if attempt == 0:
                    logger.info(
                        "Metadata proxy not answering yet (%s), showing loading",
                        str(e) or "timeout",
                    )
                    return _loading_outcome()
                last_error = str(e) or "timeout"
            except (httpx.HTTPError, ValueError) as e:
                last_error = str(e)
                logger.debug(
                    "Metadata proxy request failed (attempt %d/%d): %s", attempt + 1, attempts, e
                )
            else:
                if data.get("ok"):
                    return ProxyOutcome(
                        kind=ProxyOutcomeKind.METADATA, metadata=self._to_result(data)
                    )

                reason = data.get("reason")
                if reason == LOCAL_REASON:
                    return ProxyOutcome(kind=ProxyOutcomeKind.USE_LOCAL, reason=reason)
                if reason in TERMINAL_REASONS or reason not in RETRYABLE_REASONS:
                    logger.debug("Metadata proxy has nothing: %s (%s)", reason, data.get("message"))
                    return None
                last_error = f"{reason}: {data.get('message')}"

            if not is_last:
                await asyncio.sleep(self.settings.retry_backoff * (attempt + 1))

        logger.warning("Metadata proxy failed after %d attempts: %s", attempts, last_error)
        return None

    async def fetch_now_playing_with_fallback(
        self,
        stream_url: str | None,
        station_id: str | None = None,
        homepage: str | None = None,
        country: str | None = None,
    ) -> ProxyOutcome:
        """Same as fetch_now_playing but None becomes USE_FALLBACK."""
        outcome = await self.fetch_now_playing(stream_url, station_id, homepage, country)
        if outcome is not None:
            return outcome
        return ProxyOutcome(
            kind=ProxyOutcomeKind.USE_FALLBACK,
            reason="Proxy unavailable, use local fallback methods",
        )

    async def is_healthy(self) -> bool:
        """Check the proxy's /health endpoint."""
        try:
            response = await self._client.get(
                f"{self.settings.base_url}/health", timeout=self.settings.health_timeout
            )
            if response.status_code != 200:
                return False
            data = response.json()
        except (httpx.HTTPError, ValueError):
            return False
        return isinstance(data, dict) and data.get("status") == "ok"

    async def _request(self, params: dict[str, str]) -> dict[str, Any]:
        response = await self._client.get(
            f"{self.settings.base_url}/v1/metadata",
            params=params,
            headers={"Cache-Control": "no-store"},
            timeout=self.settings.request_timeout,
        )
        if response.status_code in COLD_START_STATUS_CODES:
            raise _ColdStart(f"proxy returned {response.status_code}")
        response.raise_for_status()
        data = response.json()
        if not isinstance(data, dict):
            raise ValueError("Proxy response is not a JSON object")
        return data

    @staticmethod
    def _to_result(data: dict[str, Any]) -> MetadataResult:
        return MetadataResult(
            source=map_proxy_source(data.get("source")),
            now_playing=data.get("display") or None,
            artist=data.get("artist") or None,
            title=data.get("title") or None,
            raw=data.get("raw"),
            cache_ttl=data.get("cacheTtl") or DEFAULT_CACHE_TTL,
            from_proxy=True,
        )
