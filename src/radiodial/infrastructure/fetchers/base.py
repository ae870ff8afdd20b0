"""Base class for protocol metadata fetchers.

Hey future me - a fetcher NEVER raises past fetch(). Timeouts, 4xx/5xx, broken JSON,
connection resets: all of it becomes None ("nothing to show"). Only the orchestrator
sees real exceptions, and only from its own steps. The one thing that MUST get
through is asyncio.CancelledError (session stopped), which is why we catch
Exception and never BaseException.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import ClassVar, Generic, TypeVar
from urllib.parse import urlsplit

import httpx

from radiodial.domain.entities import MetadataResult
from radiodial.domain.value_objects import is_valid_now_playing

logger = logging.getLogger(__name__)

TargetT = TypeVar("TargetT")

# Upstream status codes that just mean "this endpoint has nothing for us".
NO_SIGNAL_STATUS_CODES: frozenset[int] = frozenset({401, 403, 404, 500, 502, 503})


class MetadataFetcher(ABC, Generic[TargetT]):
    """One strategy for getting now-playing metadata from one server family."""

    source_label: ClassVar[str] = ""

    def __init__(self, client: httpx.AsyncClient, timeout: float) -> None:
        """Initialize the fetcher.

        Args:
            client: Shared HTTP client (HttpClientPool)
            timeout: Deadline for one fetch in seconds
        """
        self._client = client
        self.timeout = timeout

    @property
    def deadline(self) -> float | None:
        """Overall deadline for fetch(). None when _fetch enforces per-request timeouts."""
        return self.timeout

    async def fetch(self, target: TargetT) -> MetadataResult | None:
        """Fetch metadata for the target, None on any failure."""
        try:
            result = await asyncio.wait_for(self._fetch(target), timeout=self.deadline)
        except TimeoutError:
            logger.debug("%s timed out after %ss", type(self).__name__, self.deadline)
            return None
        except Exception as e:
            logger.debug("%s failed: %s", type(self).__name__, e)
            return None

        if result is None or not is_valid_now_playing(result.now_playing):
            return None
        return result

    @abstractmethod
    async def _fetch(self, target: TargetT) -> MetadataResult | None:
        """Protocol-specific fetch. May raise, fetch() converts it to None."""
        ...

    async def _get_json(self, url: str, timeout: float | None = None) -> object | None:
        """GET a JSON document, None for no-signal status codes.

        Raises:
            httpx.HTTPStatusError: For unexpected error statuses
            ValueError: If the body isn't JSON
        """
        response = await self._client.get(
            url,
            timeout=timeout or self.timeout,
            headers={"Cache-Control": "no-store", "Accept": "application/json"},
        )
        if response.status_code in NO_SIGNAL_STATUS_CODES:
            return None
        response.raise_for_status()
        return response.json()


def origin_of(url: str) -> str | None:
    """scheme://host[:port] of a URL, None if there is no host."""
    try:
        parts = urlsplit(url)
    except ValueError:
        return None
    if not parts.scheme or not parts.netloc:
        return None
    return f"{parts.scheme}://{parts.netloc}"
