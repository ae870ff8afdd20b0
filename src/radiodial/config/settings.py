"""Application settings loaded from environment variables.

Hey future me - everything configurable lives here, grouped per concern. Nested
groups are set from the environment with a double underscore:

    RADIODIAL_PROXY__BASE_URL=https://my-proxy.example
    RADIODIAL_ORCHESTRATOR__POLL_INTERVAL=30
    RADIODIAL_OBSERVABILITY__LOG_JSON_FORMAT=true

The defaults are the values the metadata pipeline was tuned with. Don't shrink the
proxy timeout below ~15s, the proxy runs on a free host that sleeps when idle and
a cold start easily takes 10+ seconds.
"""

from functools import lru_cache
from typing import Literal

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ProxySettings(BaseModel):
    """Remote metadata proxy."""

    base_url: str = Field(
        default="https://radiodock-metadata-proxy-1.onrender.com",
        description="Base URL of the metadata proxy service",
    )
    request_timeout: float = Field(default=15.0, gt=0, description="Per-attempt timeout (s)")
    max_retries: int = Field(default=1, ge=0, description="Retries after the first attempt")
    retry_backoff: float = Field(default=1.0, ge=0, description="Linear backoff factor (s)")
    health_timeout: float = Field(default=3.0, gt=0, description="Health check timeout (s)")

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, value: str) -> str:
        """Base URLs are joined with paths, so no trailing slash."""
        return value.rstrip("/")


class FetcherSettings(BaseModel):
    """Local protocol fetchers."""

    user_agent: str = Field(default="RadioDial/1.0")
    icecast_timeout: float = Field(default=3.5, gt=0, description="Per status endpoint")
    generic_timeout: float = Field(default=3.0, gt=0, description="Per conventional endpoint")
    airtime_timeout: float = Field(default=5.0, gt=0)
    nts_timeout: float = Field(default=5.0, gt=0)
    icy_timeout: float = Field(default=8.0, gt=0)
    hls_timeout: float = Field(default=8.0, gt=0)
    radio_browser_timeout: float = Field(default=5.0, gt=0)
    icy_range_bytes: int = Field(default=8192, gt=0, description="Range header size for ICY")


class OrchestratorSettings(BaseModel):
    """Fetch orchestrator policy."""

    poll_interval: float = Field(default=20.0, gt=0, description="Seconds between ticks")
    max_retries: int = Field(default=2, ge=0)
    retry_backoff: float = Field(default=1.0, ge=0)
    start_delay: float = Field(
        default=2.0,
        ge=0,
        description="Wait after playback start before the first fetch",
    )
    # Yo, showing the station name when nothing is found looks like metadata but isn't.
    # Off by default: better to show nothing than something misleading.
    station_name_fallback: bool = Field(default=False)
    show_loading_placeholder: bool = Field(default=True)


class RadioBrowserSettings(BaseModel):
    """Radio-Browser station catalog."""

    base_url: str = Field(default="https://de1.api.radio-browser.info")
    search_limit: int = Field(default=50, ge=1, le=500)
    timeout: float = Field(default=10.0, gt=0)

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, value: str) -> str:
        """Base URLs are joined with paths, so no trailing slash."""
        return value.rstrip("/")


class HttpSettings(BaseModel):
    """Shared HTTP client pool."""

    timeout: float = Field(default=30.0, gt=0)
    max_keepalive: int = Field(default=20, ge=0)
    max_connections: int = Field(default=100, ge=1)


class ObservabilitySettings(BaseModel):
    """Logging."""

    log_json_format: bool = Field(default=False)
    shutdown_timeout: float = Field(default=5.0, gt=0)


class APISettings(BaseModel):
    """HTTP API server."""

    host: str = Field(default="127.0.0.1")
    port: int = Field(default=8765, ge=1, le=65535)
    event_queue_size: int = Field(
        default=100, ge=1, description="Per-subscriber message buffer on the bus"
    )
    cors_origins: list[str] = Field(
        default_factory=lambda: ["*"],
        description="Origins allowed to call the API (the UI and engine run in a browser)",
    )


class Settings(BaseSettings):
    """Root settings object."""

    model_config = SettingsConfigDict(
        env_prefix="RADIODIAL_",
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = Field(default="RadioDial")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(default="INFO")

    proxy: ProxySettings = Field(default_factory=ProxySettings)
    fetchers: FetcherSettings = Field(default_factory=FetcherSettings)
    orchestrator: OrchestratorSettings = Field(default_factory=OrchestratorSettings)
    radio_browser: RadioBrowserSettings = Field(default_factory=RadioBrowserSettings)
    http: HttpSettings = Field(default_factory=HttpSettings)
    observability: ObservabilitySettings = Field(default_factory=ObservabilitySettings)
    api: APISettings = Field(default_factory=APISettings)

    @field_validator("log_level", mode="before")
    @classmethod
    def upper_log_level(cls, value: str) -> str:
        """Accept lowercase levels from the environment."""
        return value.upper() if isinstance(value, str) else value


# Hey future me - cached so the whole process sees ONE settings object. Tests that need
# different values build Settings(...) directly and pass it in, or call
# get_settings.cache_clear() after monkeypatching env vars.
@lru_cache
def get_settings() -> Settings:
    """Get the process-wide settings."""
    return Settings()
