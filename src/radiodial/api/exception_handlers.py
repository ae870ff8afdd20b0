"""Custom exception handlers for FastAPI application.

Converts domain exceptions and request validation errors into HTTP responses
with appropriate status codes. Every handler answers {"detail": ...}.
"""

import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from radiodial.domain.exceptions import (
    ConfigurationError,
    ExternalServiceError,
    MalformedStationError,
    ValidationError,
)

logger = logging.getLogger(__name__)


# Hey future me - Pydantic's exc.errors() can carry the raw request body as bytes in the
# 'input' field, and JSONResponse chokes on bytes. Walk the structure and decode them.
def _sanitize_validation_errors(errors: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Convert bytes inside validation error dicts to strings."""

    def _sanitize_value(value: Any) -> Any:
        if isinstance(value, bytes):
            try:
                return value.decode("utf-8")
            except UnicodeDecodeError:
                return value.decode("latin-1")
        if isinstance(value, dict):
            return {k: _sanitize_value(v) for k, v in value.items()}
        if isinstance(value, list | tuple):
            return [_sanitize_value(item) for item in value]
        return value

    return [_sanitize_value(error) for error in errors]


# Hey future me, register these BEFORE the first request arrives (create_app does it).
# Without them domain exceptions leak out as 500s with stack traces.
def register_exception_handlers(app: FastAPI) -> None:
    """Register handlers for domain and validation exceptions.

    - MalformedStationError / ValidationError -> 422
    - RequestValidationError -> 422
    - ExternalServiceError -> 502
    - ConfigurationError -> 503
    """

    @app.exception_handler(MalformedStationError)
    async def malformed_station_handler(
        request: Request, exc: MalformedStationError
    ) -> JSONResponse:
        logger.warning(
            "Malformed station at %s: %s (station_id=%s)",
            request.url.path,
            exc.message,
            exc.station_id,
        )
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"detail": exc.message, "station_id": exc.station_id},
        )

    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
        """Handle domain validation errors with 422 Unprocessable Entity."""
        logger.warning(
            "Validation error at %s: %s",
            request.url.path,
            exc.message,
            extra={"path": request.url.path, "error": exc.message},
        )
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"detail": exc.message},
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        sanitized_errors = _sanitize_validation_errors(list(exc.errors()))
        logger.warning(
            "Request validation error at %s: %s",
            request.url.path,
            sanitized_errors,
            extra={"path": request.url.path, "errors": sanitized_errors},
        )
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"detail": sanitized_errors},
        )

    @app.exception_handler(ExternalServiceError)
    async def external_service_error_handler(
        request: Request, exc: ExternalServiceError
    ) -> JSONResponse:
        """Handle external service errors with 502 Bad Gateway."""
        logger.error(
            "External service error at %s: %s",
            request.url.path,
            exc.message,
            extra={"path": request.url.path, "error": exc.message},
        )
        return JSONResponse(
            status_code=status.HTTP_502_BAD_GATEWAY,
            content={"detail": exc.message},
        )

    @app.exception_handler(ConfigurationError)
    async def configuration_error_handler(
        request: Request, exc: ConfigurationError
    ) -> JSONResponse:
        """Handle configuration errors with 503 Service Unavailable."""
        logger.error("Configuration error at %s: %s", request.url.path, exc.message)
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"detail": exc.message},
        )
