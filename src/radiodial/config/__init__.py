"""Configuration module for RadioDial."""

from .settings import (
    APISettings,
    FetcherSettings,
    HttpSettings,
    ObservabilitySettings,
    OrchestratorSettings,
    ProxySettings,
    RadioBrowserSettings,
    Settings,
    get_settings,
)

__all__ = [
    "APISettings",
    "FetcherSettings",
    "HttpSettings",
    "ObservabilitySettings",
    "OrchestratorSettings",
    "ProxySettings",
    "RadioBrowserSettings",
    "Settings",
    "get_settings",
]
