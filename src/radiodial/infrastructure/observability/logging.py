"""Logging configuration with JSON formatting and fetch-session ids."""

import contextvars
import logging
import sys
import traceback
import uuid
from pathlib import Path
from typing import Any

from pythonjsonlogger import jsonlogger

# Hey future me, the orchestrator runs one fetch session per station. Every log line
# written inside a session's tasks carries its id, so "why did metadata for station X
# never show" is one grep. asyncio tasks copy the context when they're created, so
# setting this at the top of the session loop covers the tick and retry tasks too.
session_id_var: contextvars.ContextVar[str] = contextvars.ContextVar("session_id", default="")


def get_session_id() -> str:
    """Get the current fetch-session id ("" outside a session)."""
    return session_id_var.get()


def set_session_id(session_id: str | None = None) -> str:
    """Set the fetch-session id in context, generating a short one if None.

    Returns:
        The session id that was set
    """
    if session_id is None:
        session_id = uuid.uuid4().hex[:8]
    session_id_var.set(session_id)
    return session_id


class SessionIdFilter(logging.Filter):
    """Add session_id to log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.session_id = get_session_id()
        return True


class CompactExceptionFormatter(logging.Formatter):
    """Human formatter with compact exception chains.

    Each exception in the chain gets one "╰─►" header line followed by the frames
    from our own package only:

    WARNING │ radiodial.application.workers.metadata_orchestrator:210 │ [a1b2c3d4] Tick failed
    ╰─► ConnectError: All connection attempts failed
        File "metadata_proxy_client.py", line 140, in _request
          response = await self._client.get(url, params=params)
    """

    PACKAGE_MARKER = "radiodial"

    def format(self, record: logging.LogRecord) -> str:
        session_id = getattr(record, "session_id", "")
        record.session_tag = f"[{session_id}] " if session_id else ""
        return super().format(record)

    def formatException(self, ei: Any) -> str:
        _, exc_value, _ = ei
        if exc_value is None:
            return ""

        chain: list[BaseException] = []
        current: BaseException | None = exc_value
        while current is not None and current not in chain:
            chain.append(current)
            current = current.__cause__ or current.__context__
        chain.reverse()

        lines: list[str] = []
        for exc in chain:
            lines.append(f"╰─► {exc.__class__.__name__}: {exc}")
            if not exc.__traceback__:
                continue
            for frame in traceback.extract_tb(exc.__traceback__):
                if "/site-packages/" in frame.filename or self.PACKAGE_MARKER not in frame.filename:
                    continue
                lines.append(
                    f'    File "{Path(frame.filename).name}", line {frame.lineno}, in {frame.name}'
                )
                if frame.line:
                    lines.append(f"      {frame.line.strip()}")
        return "\n".join(lines)


class CustomJsonFormatter(jsonlogger.JsonFormatter):  # type: ignore[name-defined,misc]
    """JSON formatter with location fields and the session id."""

    def add_fields(
        self,
        log_record: dict[str, Any],
        record: logging.LogRecord,
        message_dict: dict[str, Any],
    ) -> None:
        super().add_fields(log_record, record, message_dict)

        log_record["timestamp"] = self.formatTime(record, self.datefmt)
        log_record["level"] = record.levelname
        log_record["logger"] = record.name
        log_record["module"] = record.module
        log_record["function"] = record.funcName
        log_record["line"] = record.lineno

        session_id = getattr(record, "session_id", "")
        if session_id:
            log_record["session_id"] = session_id

        if record.exc_info:
            log_record["exc_info"] = self.formatException(record.exc_info)
        if record.stack_info:
            log_record["stack_info"] = self.formatStack(record.stack_info)


# Listen future me, call this ONCE at startup (lifespan does it). It replaces every root
# handler, so calling it again in tests is safe. httpx/httpcore log every request at
# INFO, with a metadata tick hitting ten endpoints that drowns everything else.
def configure_logging(
    log_level: str = "INFO",
    json_format: bool = False,
    app_name: str = "radiodial",
) -> None:
    """Configure root logging.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_format: Emit JSON lines instead of the compact human format
        app_name: Application name included in the startup record
    """
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    level = getattr(logging, log_level.upper(), logging.INFO)
    root_logger.setLevel(level)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.addFilter(SessionIdFilter())

    formatter: logging.Formatter
    if json_format:
        formatter = CustomJsonFormatter(
            "%(timestamp)s %(level)s %(name)s %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    else:
        formatter = CompactExceptionFormatter(
            fmt="%(asctime)s │ %(levelname)-7s │ %(name)s:%(lineno)d │ %(session_tag)s%(message)s",
            datefmt="%H:%M:%S",
        )
    handler.setFormatter(formatter)
    root_logger.addHandler(handler)

    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("hpack").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

    logging.getLogger(__name__).info(
        "Logging configured",
        extra={"app_name": app_name, "log_level": log_level, "json_format": json_format},
    )
