"""Health checks for the external services the metadata pipeline depends on."""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any

import httpx

logger = logging.getLogger(__name__)


class HealthStatus(str, Enum):
    """Health check status."""

    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"


@dataclass
class HealthCheck:
    """Result of a health check."""

    name: str
    status: HealthStatus
    message: str | None = None
    details: dict[str, Any] | None = None


# Hey future me - the proxy being down is NOT fatal. Non-HLS stations just fall back
# to the local fetchers. That's why an unreachable proxy is DEGRADED for the overall
# report (see health router), not a reason to fail readiness.
async def check_proxy_health(
    client: httpx.AsyncClient, base_url: str, timeout: float = 3.0
) -> HealthCheck:
    """Check the metadata proxy's /health endpoint.

    Args:
        client: Shared HTTP client
        base_url: Proxy base URL
        timeout: Request timeout in seconds

    Returns:
        Health check result
    """
    try:
        response = await client.get(
            f"{base_url}/health",
            timeout=timeout,
            headers={"Cache-Control": "no-store"},
        )
        if response.status_code != 200:
            return HealthCheck(
                name="metadata_proxy",
                status=HealthStatus.DEGRADED,
                message=f"Metadata proxy returned status {response.status_code}",
                details={"url": base_url, "status_code": response.status_code},
            )

        data = response.json()
        if isinstance(data, dict) and data.get("status") == "ok":
            return HealthCheck(
                name="metadata_proxy",
                status=HealthStatus.HEALTHY,
                message="Metadata proxy is accessible",
                details={"url": base_url},
            )
        return HealthCheck(
            name="metadata_proxy",
            status=HealthStatus.DEGRADED,
            message="Metadata proxy reported a non-ok status",
            details={"url": base_url},
        )

    except (httpx.RequestError, ValueError) as e:
        logger.warning("Metadata proxy health check failed", extra={"error": str(e)})
        return HealthCheck(
            name="metadata_proxy",
            status=HealthStatus.UNHEALTHY,
            message=f"Metadata proxy unreachable: {e}",
            details={"url": base_url},
        )


async def check_radio_browser_health(
    client: httpx.AsyncClient, base_url: str, timeout: float = 5.0
) -> HealthCheck:
    """Check the Radio-Browser catalog's stats endpoint.

    Args:
        client: Shared HTTP client
        base_url: Catalog base URL
        timeout: Request timeout in seconds

    Returns:
        Health check result
    """
    try:
        response = await client.get(f"{base_url}/json/stats", timeout=timeout)
        if response.status_code == 200:
            return HealthCheck(
                name="radio_browser",
                status=HealthStatus.HEALTHY,
                message="Radio-Browser API is accessible",
            )
        return HealthCheck(
            name="radio_browser",
            status=HealthStatus.DEGRADED,
            message=f"Radio-Browser API returned status {response.status_code}",
            details={"status_code": response.status_code},
        )

    except httpx.RequestError as e:
        logger.warning("Radio-Browser health check failed", extra={"error": str(e)})
        return HealthCheck(
            name="radio_browser",
            status=HealthStatus.UNHEALTHY,
            message=f"Radio-Browser API unreachable: {e}",
        )
