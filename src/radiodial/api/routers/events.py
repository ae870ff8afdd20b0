"""Server-Sent Events for the UI and the audio engine.

Hey future me - one SSE connection = one message bus subscription. The
subscription lives exactly as long as the generator, so a client that goes
away stops receiving (and stops using queue memory) right away.

Channels:
    /api/events/ui      metadata_update, station_changed, playback_event
    /api/events/engine  play, pause, stop, set_volume
"""

import asyncio
import json
import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Request
from sse_starlette.sse import EventSourceResponse

from radiodial.api.dependencies import get_message_bus
from radiodial.infrastructure.messaging import CHANNELS, MessageBus

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/{channel}")
async def stream_events(
    channel: str,
    request: Request,
    bus: MessageBus = Depends(get_message_bus),
) -> EventSourceResponse:
    """Stream bus messages of one channel as SSE."""
    if channel not in CHANNELS:
        raise HTTPException(status_code=404, detail=f"Unknown channel: {channel}")

    async def event_generator() -> Any:
        try:
            async with bus.subscribe(channel) as messages:
                yield {"event": "connected", "data": json.dumps({"channel": channel})}
                async for message in messages:
                    if await request.is_disconnected():
                        break
                    yield {
                        "event": message.get("type", "message"),
                        "data": json.dumps(message),
                    }
        except asyncio.CancelledError:
            logger.debug("SSE client on %s disconnected", channel)
            raise

    return EventSourceResponse(event_generator())
