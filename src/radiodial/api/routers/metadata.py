"""Now-playing metadata endpoints."""

from typing import Any

from fastapi import APIRouter, Depends

from radiodial.api.dependencies import get_metadata_orchestrator
from radiodial.application.workers.metadata_orchestrator import MetadataOrchestrator

router = APIRouter()


@router.get("/current")
async def get_current_metadata(
    orchestrator: MetadataOrchestrator = Depends(get_metadata_orchestrator),
) -> dict[str, Any]:
    """What's on display right now (metadata is null when nothing is known)."""
    current = orchestrator.current_metadata
    session = orchestrator.session
    return {
        "metadata": current.to_dict() if current else None,
        "station": session.station.to_dict() if session else None,
    }


@router.get("/status")
async def get_metadata_status(
    orchestrator: MetadataOrchestrator = Depends(get_metadata_orchestrator),
) -> dict[str, Any]:
    """Fetch session state (polling/retrying/stopped, plan, retry count)."""
    return orchestrator.get_status()
