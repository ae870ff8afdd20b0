"""Radio-Browser station catalog client."""

import logging
from typing import Any, Literal
from urllib.parse import quote

import httpx

from radiodial.config import RadioBrowserSettings
from radiodial.domain.entities import StationDescriptor
from radiodial.domain.exceptions import ExternalServiceError, ValidationError

logger = logging.getLogger(__name__)

SearchBy = Literal["name", "tag", "country"]


class RadioBrowserClient:
    """Search the public Radio-Browser directory."""

    SERVICE_NAME = "Radio-Browser"

    # Hey future me - unlike the metadata path, catalog failures DO raise. A user typed
    # a search and is waiting for an answer, "no results" would be a lie.
    def __init__(self, client: httpx.AsyncClient, settings: RadioBrowserSettings) -> None:
        """Initialize catalog client.

        Args:
            client: Shared HTTP client
            settings: Catalog configuration
        """
        self._client = client
        self.settings = settings

    async def search(
        self, query: str, by: SearchBy = "name", limit: int | None = None
    ) -> list[StationDescriptor]:
        """Search stations by name, tag or country.

        Args:
            query: Search text
            by: Which field to search
            limit: Max results (defaults to settings.search_limit)

        Returns:
            Stations ordered by click count, most popular first

        Raises:
            ValidationError: If the query is empty
            ExternalServiceError: If the catalog request fails
        """
        query = (query or "").strip()
        if not query:
            raise ValidationError("Search query must not be empty")

        params: dict[str, Any] = {
            "hidebroken": "true",
            "limit": limit or self.settings.search_limit,
            "order": "clickcount",
            "reverse": "true",
        }
        if by == "tag":
            path = f"/json/stations/bytag/{quote(query, safe='')}"
        elif by == "country":
            path = f"/json/stations/bycountry/{quote(query, safe='')}"
        else:
            path = "/json/stations/search"
            params["name"] = query

        data = await self._get(path, params)
        if not isinstance(data, list):
            raise ExternalServiceError(self.SERVICE_NAME, "Unexpected search response")

        stations = [
            StationDescriptor.from_dict(item)
            for item in data
            if isinstance(item, dict) and (item.get("url_resolved") or item.get("url"))
        ]
        logger.debug("Catalog search %s=%r returned %d stations", by, query, len(stations))
        return stations

    async def get_station(self, station_uuid: str) -> StationDescriptor | None:
        """Get one station by catalog uuid, None if unknown."""
        data = await self._get(f"/json/stations/byuuid/{quote(station_uuid, safe='')}", {})
        if isinstance(data, list) and data and isinstance(data[0], dict):
            return StationDescriptor.from_dict(data[0])
        return None

    async def _get(self, path: str, params: dict[str, Any]) -> Any:
        try:
            response = await self._client.get(
                f"{self.settings.base_url}{path}",
                params=params,
                timeout=self.settings.timeout,
            )
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as e:
            raise ExternalServiceError(
                self.SERVICE_NAME,
                f"Request failed with status {e.response.status_code}",
                status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            raise ExternalServiceError(self.SERVICE_NAME, f"Request failed: {e}") from e
        except ValueError as e:
            raise ExternalServiceError(self.SERVICE_NAME, "Invalid JSON response") from e
