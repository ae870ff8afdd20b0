"""Domain exceptions."""

from typing import Any


class DomainException(Exception):
    """Base exception for all domain exceptions."""

    # Hey future me, message is stored as an attribute so handlers can read it without
    # parsing str(exception). Never raise this directly, always a subclass.
    def __init__(self, message: str, *args: Any) -> None:
        super().__init__(message, *args)
        self.message = message


class ValidationError(DomainException):
    """Input validation failed.

    HTTP Status: 422
    """

    pass


class MalformedStationError(ValidationError):
    """Station data cannot be used for playback or metadata lookup.

    Raised when the station object has no stream URL. Nothing is fetched and
    the error goes back to whoever asked for the station to be played.

    HTTP Status: 422

    Example:
        raise MalformedStationError("Station has no stream URL", station_id="abc")
    """

    def __init__(self, message: str, station_id: str | None = None) -> None:
        super().__init__(message)
        self.station_id = station_id


class ConfigurationError(DomainException):
    """Application misconfiguration.

    HTTP Status: 503 (Service Unavailable)
    """

    pass


class ExternalServiceError(DomainException):
    """An external service (station catalog, metadata proxy) failed.

    Only raised on paths where the caller needs to know, like catalog search.
    The metadata path never raises this, it degrades to "no metadata".

    HTTP Status: 502
    """

    def __init__(
        self,
        service: str,
        message: str,
        status_code: int | None = None,
    ) -> None:
        super().__init__(f"{service}: {message}")
        self.service = service
        self.status_code = status_code


class MetadataFetchError(DomainException):
    """A metadata fetch step failed with an actual error.

    Hey future me - this is NOT "nothing found" (that's a plain None). This is
    for the orchestrator retry loop: an escaped error from a fetch step is
    wrapped in this so the loop can log it with the attempt number.
    """

    def __init__(self, message: str, attempt: int = 0) -> None:
        super().__init__(message)
        self.attempt = attempt


__all__ = [
    "ConfigurationError",
    "DomainException",
    "ExternalServiceError",
    "MalformedStationError",
    "MetadataFetchError",
    "ValidationError",
]
