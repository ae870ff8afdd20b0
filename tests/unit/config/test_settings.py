"""Tests for settings loading."""

import pytest
from pydantic import ValidationError

from radiodial.config import ProxySettings, Settings, get_settings


class TestSettings:
    """Test Settings defaults and environment overrides."""

    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test default settings without environment or .env file."""
        monkeypatch.delenv("RADIODIAL_LOG_LEVEL", raising=False)
        settings = Settings(_env_file=None)

        assert settings.orchestrator.poll_interval == 20.0
        assert settings.orchestrator.max_retries == 2
        assert settings.orchestrator.start_delay == 2.0
        assert settings.orchestrator.station_name_fallback is False
        assert settings.proxy.request_timeout == 15.0
        assert settings.proxy.max_retries == 1
        assert settings.fetchers.icecast_timeout == 3.5
        assert settings.api.port == 8765

    def test_nested_env_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test nested env override."""
        monkeypatch.setenv("RADIODIAL_ORCHESTRATOR__POLL_INTERVAL", "5")
        monkeypatch.setenv("RADIODIAL_PROXY__BASE_URL", "https://proxy.example/")
        monkeypatch.setenv("RADIODIAL_LOG_LEVEL", "debug")

        settings = get_settings()

        assert settings.orchestrator.poll_interval == 5.0
        assert settings.proxy.base_url == "https://proxy.example"
        assert settings.log_level == "DEBUG"

    def test_get_settings_is_cached(self) -> None:
        """Test get settings is cached."""
        assert get_settings() is get_settings()

    def test_invalid_values_rejected(self) -> None:
        """Test invalid values rejected."""
        with pytest.raises(ValidationError):
            ProxySettings(request_timeout=0)
