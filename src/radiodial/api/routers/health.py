# Hey future me - health endpoints for Docker probes and the UI's status dot.
#
# Endpoints:
# - /health/live  → Liveness probe (process is running, no I/O)
# - /health       → Metadata proxy + station catalog reachability, session state
#
# Neither external service is fatal: without the proxy, stations fall back to local
# fetchers; without the catalog, search is down but playback still works. So the
# worst we report with both down is "degraded" plus a 200. Only a broken app
# (services not initialized) is a 503.
"""Health check endpoints."""

import asyncio
from datetime import UTC, datetime
from typing import Any

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from radiodial import __version__
from radiodial.api.dependencies import get_app_settings
from radiodial.infrastructure.integrations import HttpClientPool
from radiodial.infrastructure.observability import (
    HealthStatus,
    check_proxy_health,
    check_radio_browser_health,
)

router = APIRouter()


class HealthResponse(BaseModel):
    """Overall health status response."""

    status: str = Field(description="Overall status: healthy, degraded, unhealthy")
    timestamp: str = Field(description="ISO timestamp of health check")
    version: str = Field(default=__version__, description="Application version")
    checks: dict[str, Any] = Field(default_factory=dict, description="Component checks")


class LivenessStatus(BaseModel):
    """Simple liveness probe response."""

    status: str = Field(description="alive or dead")
    timestamp: str = Field(description="ISO timestamp")


@router.get("/live", response_model=LivenessStatus)
async def liveness_probe() -> LivenessStatus:
    """Liveness probe, no dependency checks."""
    return LivenessStatus(status="alive", timestamp=datetime.now(UTC).isoformat())


@router.get("", response_model=HealthResponse)
async def health_check(request: Request) -> JSONResponse:
    """Check external services and the metadata session.

    Returns 200 for healthy/degraded, 503 when the app isn't initialized.
    """
    settings = get_app_settings(request)
    checks: dict[str, Any] = {}

    orchestrator = getattr(request.app.state, "metadata_orchestrator", None)
    if orchestrator is None:
        checks["metadata_session"] = {"status": "error", "error": "Not initialized"}
        response = HealthResponse(
            status=HealthStatus.UNHEALTHY.value,
            timestamp=datetime.now(UTC).isoformat(),
            checks=checks,
        )
        return JSONResponse(
            content=response.model_dump(), status_code=status.HTTP_503_SERVICE_UNAVAILABLE
        )

    checks["metadata_session"] = {"status": "ok", "state": orchestrator.state.value}

    client = await HttpClientPool.get_client()
    proxy, catalog = await asyncio.gather(
        check_proxy_health(client, settings.proxy.base_url, settings.proxy.health_timeout),
        check_radio_browser_health(
            client, settings.radio_browser.base_url, settings.proxy.health_timeout
        ),
    )
    for check in (proxy, catalog):
        checks[check.name] = {
            "status": check.status.value,
            "message": check.message,
            "details": check.details,
        }

    all_healthy = all(c.status is HealthStatus.HEALTHY for c in (proxy, catalog))
    response = HealthResponse(
        status=(HealthStatus.HEALTHY if all_healthy else HealthStatus.DEGRADED).value,
        timestamp=datetime.now(UTC).isoformat(),
        checks=checks,
    )
    return JSONResponse(content=response.model_dump(), status_code=status.HTTP_200_OK)
