"""In-process message bus between the background service, the UI and the audio engine.

Hey future me - delivery is FIRE-AND-FORGET, on purpose:
- publish() never blocks (it only raises for a channel that doesn't exist)
- no subscriber on a channel -> the message is dropped (nobody is looking anyway)
- a slow subscriber whose queue is full loses its OLDEST message, not the newest.
  For now-playing updates the newest one is the only one that matters

Channels:
    "ui"      metadata_update / station_changed / forwarded engine events
    "engine"  play / pause / stop / set_volume commands for the audio engine

Subscribers are SSE connections (see api/routers/events.py).
"""

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from radiodial.domain.entities import MetadataResult, PlaybackEvent, StationDescriptor
from radiodial.domain.ports import IAudioEngine, IUiNotifier

logger = logging.getLogger(__name__)

UI_CHANNEL = "ui"
ENGINE_CHANNEL = "engine"
CHANNELS: frozenset[str] = frozenset({UI_CHANNEL, ENGINE_CHANNEL})

Message = dict[str, Any]


class MessageBus:
    """Named channels with bounded per-subscriber queues."""

    def __init__(self, queue_size: int = 100) -> None:
        """Initialize the bus.

        Args:
            queue_size: Max buffered messages per subscriber
        """
        self.queue_size = queue_size
        self._subscribers: dict[str, set[asyncio.Queue[Message]]] = {
            channel: set() for channel in CHANNELS
        }
        self._stats = {"published": 0, "dropped_no_listener": 0, "dropped_overflow": 0}

    def publish(self, channel: str, message: Message) -> int:
        """Deliver a message to every current subscriber of a channel.

        Returns:
            Number of subscribers that got the message
        """
        queues = self._subscribers.get(channel)
        if queues is None:
            raise ValueError(f"Unknown channel: {channel}")

        self._stats["published"] += 1
        if not queues:
            self._stats["dropped_no_listener"] += 1
            logger.debug("No listener on %s, dropping %s", channel, message.get("type"))
            return 0

        for queue in queues:
            if queue.full():
                queue.get_nowait()
                self._stats["dropped_overflow"] += 1
            queue.put_nowait(message)
        return len(queues)

    @asynccontextmanager
    async def subscribe(self, channel: str) -> AsyncIterator[AsyncIterator[Message]]:
        """Subscribe to a channel for the duration of the context.

        Usage:
            async with bus.subscribe("ui") as messages:
                async for message in messages:
                    ...
        """
        if channel not in self._subscribers:
            raise ValueError(f"Unknown channel: {channel}")

        queue: asyncio.Queue[Message] = asyncio.Queue(maxsize=self.queue_size)
        self._subscribers[channel].add(queue)
        logger.debug("Subscriber added to %s (%d total)", channel, len(self._subscribers[channel]))
        try:
            yield self._iterate(queue)
        finally:
            self._subscribers[channel].discard(queue)
            logger.debug("Subscriber removed from %s", channel)

    @staticmethod
    async def _iterate(queue: asyncio.Queue[Message]) -> AsyncIterator[Message]:
        while True:
            yield await queue.get()

    def subscriber_count(self, channel: str) -> int:
        """Number of current subscribers on a channel."""
        return len(self._subscribers.get(channel, ()))

    def get_stats(self) -> dict[str, int]:
        """Publish/drop counters for the status endpoint."""
        return dict(self._stats)


class BusUiNotifier(IUiNotifier):
    """IUiNotifier that publishes on the "ui" channel."""

    def __init__(self, bus: MessageBus) -> None:
        self._bus = bus

    def metadata_update(
        self, metadata: MetadataResult | None, station: StationDescriptor | None
    ) -> None:
        self._bus.publish(
            UI_CHANNEL,
            {
                "type": "metadata_update",
                "metadata": metadata.to_dict() if metadata else None,
                "station": station.to_dict() if station else None,
            },
        )

    def station_changed(self, station: StationDescriptor) -> None:
        self._bus.publish(UI_CHANNEL, {"type": "station_changed", "station": station.to_dict()})

    def playback_event(self, event: PlaybackEvent) -> None:
        self._bus.publish(UI_CHANNEL, {"type": "playback_event", "event": event.to_dict()})


class BusAudioEngine(IAudioEngine):
    """IAudioEngine that sends commands to the engine over the "engine" channel.

    The actual engine (a browser audio element, a local player process) subscribes
    to /api/events/engine and reports back through POST /api/playback/events.
    """

    def __init__(self, bus: MessageBus) -> None:
        self._bus = bus

    async def play(self, station: StationDescriptor) -> None:
        self._bus.publish(ENGINE_CHANNEL, {"type": "play", "station": station.to_dict()})

    async def pause(self) -> None:
        self._bus.publish(ENGINE_CHANNEL, {"type": "pause"})

    async def stop(self) -> None:
        self._bus.publish(ENGINE_CHANNEL, {"type": "stop"})

    async def set_volume(self, volume: float) -> None:
        self._bus.publish(ENGINE_CHANNEL, {"type": "set_volume", "volume": volume})
