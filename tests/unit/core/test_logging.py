"""Tests for structured logging helpers."""

from __future__ import annotations

import json

import pytest
import structlog

from royale_engine.core.logging import bind_context, clear_context, configure_logging, get_logger


class TestContext:
    """Tests for context binding."""

    def test_bind_and_clear(self) -> None:
        """Test bound values are visible until cleared."""
        bind_context(match_id="m1", day=2)
        assert structlog.contextvars.get_contextvars() == {"match_id": "m1", "day": 2}

        clear_context()
        assert structlog.contextvars.get_contextvars() == {}


class TestConfigureLogging:
    """Tests for logging configuration."""

    def test_json_output(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Test JSON rendering includes the app name and bound context."""
        configure_logging(level="INFO", json_format=True, app_name="arena")
        bind_context(match_id="m1")
        try:
            get_logger("test").info("Phase resolved", alive=3)
        finally:
            clear_context()

        record = json.loads(capsys.readouterr().out.strip().splitlines()[-1])
        assert record["event"] == "Phase resolved"
        assert record["app"] == "arena"
        assert record["alive"] == 3
        assert record["match_id"] == "m1"
        assert record["level"] == "info"

    def test_level_filtering(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Test events below the configured level are dropped."""
        configure_logging(level="WARNING", json_format=True)
        get_logger("test").info("Hidden")

        assert "Hidden" not in capsys.readouterr().out

    def test_defaults_from_settings(
        self,
        mock_env_vars: dict[str, str],
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        """Test unset arguments fall back to the engine settings."""
        monkeypatch.setenv("ROYALE_ENGINE_JSON_LOGS", "true")
        monkeypatch.setenv("ROYALE_ENGINE_APP_NAME", "Test Arena")

        configure_logging()
        get_logger("test").debug("Effects ticked", actor_id="a1")

        record = json.loads(capsys.readouterr().out.strip().splitlines()[-1])
        assert record["app"] == "Test Arena"
        assert record["actor_id"] == "a1"
        assert record["level"] == "debug"

    def test_non_ascii_names_kept(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Test Korean actor names render unescaped in JSON."""
        configure_logging(level="INFO", json_format=True)
        get_logger("test").info("Battle scored", actor_a="시로코")

        assert "시로코" in capsys.readouterr().out
