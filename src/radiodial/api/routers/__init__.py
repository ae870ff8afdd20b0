"""API router initialization."""

# Hey future me, this is the MAIN API router aggregator! main.py mounts it under /api,
# so endpoints become /api/playback/play, /api/events/ui, /api/health/live, etc.
# The tags group endpoints in the OpenAPI docs.

from fastapi import APIRouter

from radiodial.api.routers import events, health, metadata, playback, stations

api_router = APIRouter()

api_router.include_router(playback.router, prefix="/playback", tags=["Playback"])
api_router.include_router(metadata.router, prefix="/metadata", tags=["Metadata"])
api_router.include_router(events.router, prefix="/events", tags=["Events"])
api_router.include_router(stations.router, prefix="/stations", tags=["Stations"])
api_router.include_router(health.router, prefix="/health", tags=["Health"])

__all__ = ["api_router", "events", "health", "metadata", "playback", "stations"]
