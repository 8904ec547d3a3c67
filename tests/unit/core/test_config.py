"""Tests for configuration management."""

from __future__ import annotations

from pathlib import Path

import pytest

from royale_engine.core.config import Settings, clear_settings_cache, get_settings
from royale_engine.core.exceptions import ConfigurationError


class TestSettings:
    """Tests for main Settings configuration."""

    def test_default_settings(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test default settings initialization."""
        monkeypatch.chdir(tmp_path)

        settings = Settings()

        assert settings.app_name == "Royale Engine"
        assert settings.debug is False
        assert settings.log_level == "INFO"
        assert settings.default_ruleset_id == "ER_S10"
        assert settings.random_seed is None

    def test_env_overrides(
        self,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
        mock_env_vars: dict[str, str],
    ) -> None:
        """Test settings read from prefixed environment variables."""
        monkeypatch.chdir(tmp_path)

        settings = Settings()

        assert settings.debug is True
        assert settings.log_level == "DEBUG"
        assert settings.default_ruleset_id == "LEGACY"
        assert settings.random_seed == 1234

    def test_env_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test settings read from a .env file."""
        (tmp_path / ".env").write_text("ROYALE_ENGINE_JSON_LOGS=true\n", encoding="utf-8")
        monkeypatch.chdir(tmp_path)

        assert Settings().json_logs is True


class TestGetSettings:
    """Tests for the cached settings accessor."""

    def test_cached_instance(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test get_settings returns the same instance until cleared."""
        monkeypatch.chdir(tmp_path)

        first = get_settings()
        assert get_settings() is first

        clear_settings_cache()
        assert get_settings() is not first

    def test_invalid_value_raises_configuration_error(
        self,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """Test invalid environment values surface as ConfigurationError."""
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("ROYALE_ENGINE_DEFAULT_RULESET_ID", "NOPE")

        with pytest.raises(ConfigurationError) as exc_info:
            get_settings()

        assert "original_error" in exc_info.value.details
