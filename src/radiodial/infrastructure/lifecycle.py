"""Application lifecycle management for startup and shutdown tasks.

Wires the object graph once per process and parks it on app.state:

    HttpClientPool ─┬─ MetadataProxyClient ─┐
                    ├─ LocalMetadataService ─┼─ MetadataOrchestrator ─ PlaybackService
                    └─ RadioBrowserClient    │
    MessageBus ─── BusUiNotifier ───────────┘
               └── BusAudioEngine ─────────────────────────────────── PlaybackService
"""

import asyncio
import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from radiodial.application.services.local_metadata_service import LocalMetadataService
from radiodial.application.services.playback_service import PlaybackService
from radiodial.application.workers.metadata_orchestrator import MetadataOrchestrator
from radiodial.config import get_settings
from radiodial.domain.entities import PlaybackState
from radiodial.infrastructure.integrations import (
    HttpClientPool,
    MetadataProxyClient,
    RadioBrowserClient,
)
from radiodial.infrastructure.messaging import BusAudioEngine, BusUiNotifier, MessageBus
from radiodial.infrastructure.observability import configure_logging

logger = logging.getLogger(__name__)


# Listen future me, everything before `yield` runs at STARTUP, everything after at SHUTDOWN.
# The try/finally makes sure the fetch session is cancelled and the HTTP pool closed even if
# startup blows up halfway. Routes reach the services through app.state (see dependencies.py).
@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Handles startup and shutdown tasks including:
    - Logging configuration
    - Shared HTTP client
    - Message bus, playback service and metadata orchestrator
    - Resource cleanup
    """
    settings = getattr(app.state, "settings", None) or get_settings()

    configure_logging(
        log_level=settings.log_level,
        json_format=settings.observability.log_json_format,
        app_name=settings.app_name,
    )
    logger.info("Starting application: %s", settings.app_name)

    try:
        client = await HttpClientPool.get_client(
            settings.http, user_agent=settings.fetchers.user_agent
        )

        bus = MessageBus(queue_size=settings.api.event_queue_size)
        notifier = BusUiNotifier(bus)
        playback_state = PlaybackState()

        orchestrator = MetadataOrchestrator(
            settings=settings.orchestrator,
            proxy_client=MetadataProxyClient(client, settings.proxy),
            local_service=LocalMetadataService(
                client, settings.fetchers, settings.radio_browser
            ),
            playback_state=playback_state,
            notifier=notifier,
        )
        playback_service = PlaybackService(
            engine=BusAudioEngine(bus),
            notifier=notifier,
            orchestrator=orchestrator,
            state=playback_state,
        )

        app.state.settings = settings
        app.state.message_bus = bus
        app.state.metadata_orchestrator = orchestrator
        app.state.playback_service = playback_service
        app.state.radio_browser_client = RadioBrowserClient(client, settings.radio_browser)
        logger.info(
            "Services initialized (proxy=%s, poll every %.0fs)",
            settings.proxy.base_url,
            settings.orchestrator.poll_interval,
        )

        yield

    except Exception as e:
        logger.exception("Error during application startup: %s", e)
        raise
    finally:
        logger.info("Shutting down application")

        orchestrator = getattr(app.state, "metadata_orchestrator", None)
        if orchestrator is not None:
            try:
                await asyncio.wait_for(
                    orchestrator.aclose(),
                    timeout=settings.observability.shutdown_timeout,
                )
                logger.info("Metadata orchestrator stopped")
            except TimeoutError:
                logger.warning("Metadata orchestrator did not stop in time")
            except Exception as e:
                logger.exception("Error stopping metadata orchestrator: %s", e)

        try:
            await HttpClientPool.close()
            logger.info("HTTP client pool closed")
        except Exception as e:
            logger.exception("Error closing HTTP client pool: %s", e)
