"""Background workers."""

from radiodial.application.workers.metadata_orchestrator import (
    FetchSession,
    MetadataOrchestrator,
)

__all__ = ["FetchSession", "MetadataOrchestrator"]
