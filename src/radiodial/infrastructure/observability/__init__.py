"""Observability infrastructure: logging and health checks."""

from radiodial.infrastructure.observability.health import (
    HealthCheck,
    HealthStatus,
    check_proxy_health,
    check_radio_browser_health,
)
from radiodial.infrastructure.observability.logging import (
    configure_logging,
    get_session_id,
    set_session_id,
)

__all__ = [
    "HealthCheck",
    "HealthStatus",
    "check_proxy_health",
    "check_radio_browser_health",
    "configure_logging",
    "get_session_id",
    "set_session_id",
]
