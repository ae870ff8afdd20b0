"""Shared HTTP client pool.

Hey future me - every fetcher, the proxy client and the catalog client share ONE
httpx.AsyncClient. A metadata tick can fire 10+ requests at the same host (four
Icecast status endpoints, the stream itself for ICY, generic endpoints), keep-alive
makes that cheap. Per-request timeouts are passed at call time by each fetcher,
the pool timeout is only the ceiling.

Usage:
    client = await HttpClientPool.get_client()
    response = await client.get(url, timeout=3.5)

HttpClientPool.close() is called once at app shutdown (see lifecycle.py).
"""

import asyncio
import logging
from typing import ClassVar

import httpx

from radiodial.config import HttpSettings

logger = logging.getLogger(__name__)


class HttpClientPool:
    """Process-wide shared httpx.AsyncClient, created lazily."""

    _client: ClassVar[httpx.AsyncClient | None] = None
    _lock: ClassVar[asyncio.Lock | None] = None

    DEFAULT_USER_AGENT: ClassVar[str] = "RadioDial/1.0"

    @classmethod
    def _ensure_lock(cls) -> asyncio.Lock:
        # asyncio.Lock must be created inside a running loop.
        if cls._lock is None:
            cls._lock = asyncio.Lock()
        return cls._lock

    @classmethod
    async def get_client(
        cls,
        settings: HttpSettings | None = None,
        user_agent: str | None = None,
    ) -> httpx.AsyncClient:
        """Get the shared client, creating it on first call.

        Args:
            settings: Pool limits and ceiling timeout (first call only)
            user_agent: User-Agent header for every request (first call only)

        Returns:
            Shared httpx.AsyncClient instance
        """
        async with cls._ensure_lock():
            if cls._client is None:
                settings = settings or HttpSettings()
                cls._client = httpx.AsyncClient(
                    timeout=httpx.Timeout(settings.timeout),
                    limits=httpx.Limits(
                        max_keepalive_connections=settings.max_keepalive,
                        max_connections=settings.max_connections,
                    ),
                    headers={"User-Agent": user_agent or cls.DEFAULT_USER_AGENT},
                    http2=True,
                    # Stream hosts love redirecting to load-balanced relays
                    follow_redirects=True,
                )
                logger.info(
                    "HTTP client pool initialized (timeout=%.1fs, keepalive=%d, max_conn=%d)",
                    settings.timeout,
                    settings.max_keepalive,
                    settings.max_connections,
                )
            return cls._client

    @classmethod
    async def close(cls) -> None:
        """Close the shared client. A later get_client() creates a fresh one."""
        async with cls._ensure_lock():
            if cls._client is not None:
                await cls._client.aclose()
                cls._client = None
                logger.info("HTTP client pool closed")

    @classmethod
    def is_initialized(cls) -> bool:
        """Check if the shared client exists."""
        return cls._client is not None
