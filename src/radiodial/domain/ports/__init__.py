"""Domain ports (interfaces) for dependency inversion.

Hey future me - the audio engine and the UI are EXTERNAL collaborators. The
playback service and the orchestrator only talk to these interfaces, the
message bus adapters in infrastructure/messaging implement them. Tests swap in
mocks with AsyncMock(spec=IAudioEngine) / MagicMock(spec=IUiNotifier).
"""

from abc import ABC, abstractmethod

from radiodial.domain.entities import MetadataResult, PlaybackEvent, StationDescriptor


class IAudioEngine(ABC):
    """Command interface of the audio playback engine."""

    @abstractmethod
    async def play(self, station: StationDescriptor) -> None:
        """Start playing a station's stream."""
        pass

    @abstractmethod
    async def pause(self) -> None:
        """Pause playback."""
        pass

    @abstractmethod
    async def stop(self) -> None:
        """Stop playback and release the stream."""
        pass

    @abstractmethod
    async def set_volume(self, volume: float) -> None:
        """Set output volume (0.0 - 1.0)."""
        pass


# Listen up - these are fire-and-forget. No delivery guarantee, no return value.
# If no UI is listening the message is simply dropped. That's why they're sync.
class IUiNotifier(ABC):
    """Outbound notifications to whatever UI is currently listening."""

    @abstractmethod
    def metadata_update(
        self, metadata: MetadataResult | None, station: StationDescriptor | None
    ) -> None:
        """Now-playing metadata changed (None clears the display)."""
        pass

    @abstractmethod
    def station_changed(self, station: StationDescriptor) -> None:
        """A new station was selected for playback."""
        pass

    @abstractmethod
    def playback_event(self, event: PlaybackEvent) -> None:
        """Forward an audio engine event."""
        pass


__all__ = ["IAudioEngine", "IUiNotifier"]
