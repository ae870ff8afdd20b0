"""In-process messaging between the service, the UI and the audio engine."""

from radiodial.infrastructure.messaging.message_bus import (
    CHANNELS,
    ENGINE_CHANNEL,
    UI_CHANNEL,
    BusAudioEngine,
    BusUiNotifier,
    MessageBus,
)

__all__ = [
    "CHANNELS",
    "ENGINE_CHANNEL",
    "UI_CHANNEL",
    "BusAudioEngine",
    "BusUiNotifier",
    "MessageBus",
]
