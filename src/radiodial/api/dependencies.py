"""Dependency injection for API endpoints.

Everything lives on app.state (see infrastructure/lifecycle.py). A missing
attribute means the lifespan never ran or failed halfway. That is a
ConfigurationError, which the exception handlers turn into a 503 instead of
an AttributeError crash.
"""

from typing import Any, cast

from fastapi import Request

from radiodial.application.services.playback_service import PlaybackService
from radiodial.application.workers.metadata_orchestrator import MetadataOrchestrator
from radiodial.config import Settings, get_settings
from radiodial.domain.exceptions import ConfigurationError
from radiodial.infrastructure.integrations import RadioBrowserClient
from radiodial.infrastructure.messaging import MessageBus


def _from_state(request: Request, name: str, label: str) -> Any:
    if not hasattr(request.app.state, name):
        raise ConfigurationError(f"{label} not initialized")
    return getattr(request.app.state, name)


def get_app_settings(request: Request) -> Settings:
    """Settings the app was started with (falls back to the cached global)."""
    return cast(Settings, getattr(request.app.state, "settings", None) or get_settings())


def get_playback_service(request: Request) -> PlaybackService:
    return cast(PlaybackService, _from_state(request, "playback_service", "Playback service"))


def get_metadata_orchestrator(request: Request) -> MetadataOrchestrator:
    return cast(
        MetadataOrchestrator,
        _from_state(request, "metadata_orchestrator", "Metadata orchestrator"),
    )


def get_message_bus(request: Request) -> MessageBus:
    return cast(MessageBus, _from_state(request, "message_bus", "Message bus"))


def get_radio_browser_client(request: Request) -> RadioBrowserClient:
    return cast(
        RadioBrowserClient,
        _from_state(request, "radio_browser_client", "Station catalog client"),
    )
