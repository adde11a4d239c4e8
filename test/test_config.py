"""
Tests for application configuration.
"""

import pytest
from pydantic import ValidationError

from openphone_mcp.config import OPENPHONE_API_BASE, Settings, get_settings


class TestSettings:
    def test_default_values(self) -> None:
        # Environment variables may override defaults; check declared defaults.
        fields = Settings.model_fields
        assert fields["port"].default == 3001
        assert fields["openphone_timeout_seconds"].default == 30.0
        assert fields["cors_origins"].default == "*"

    def test_custom_values(self) -> None:
        settings = Settings(
            _env_file=None,
            openphone_api_key="key_123",
            port=8080,
            openphone_timeout_seconds=12.5,
            log_level="DEBUG",
        )

        assert settings.openphone_api_key == "key_123"
        assert settings.port == 8080
        assert settings.openphone_timeout_seconds == 12.5
        assert settings.log_level == "DEBUG"

    def test_api_base_is_fixed(self) -> None:
        settings = Settings(_env_file=None, openphone_api_key="key_123")
        assert settings.openphone_api_base == OPENPHONE_API_BASE == "https://api.openphone.com/v1"

    def test_reads_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("OPENPHONE_API_KEY", "env-key")
        monkeypatch.setenv("PORT", "4000")

        settings = Settings(_env_file=None)

        assert settings.openphone_api_key == "env-key"
        assert settings.port == 4000

    def test_missing_api_key_is_rejected(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("OPENPHONE_API_KEY", raising=False)

        with pytest.raises(ValidationError) as exc_info:
            Settings(_env_file=None)

        assert "openphone_api_key" in str(exc_info.value)

    def test_empty_api_key_is_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Settings(_env_file=None, openphone_api_key="")

    def test_cors_origins_list(self) -> None:
        settings = Settings(
            _env_file=None,
            openphone_api_key="k",
            cors_origins="https://a.example.com, https://b.example.com,",
        )
        assert settings.cors_origins_list == ["https://a.example.com", "https://b.example.com"]


class TestGetSettings:
    def test_returns_cached_instance(
        self,
        monkeypatch: pytest.MonkeyPatch,
        clean_settings_cache: None,
    ) -> None:
        monkeypatch.setenv("OPENPHONE_API_KEY", "cached-key")

        first = get_settings()
        second = get_settings()

        assert first is second
        assert first.openphone_api_key == "cached-key"
