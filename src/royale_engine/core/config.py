"""Process-level configuration for the resolution engine.

Settings come from pydantic-settings: environment variables first, then
an optional ``.env`` file. Per-match tuning does not live here; it is the
immutable ``Ruleset`` (see ``royale_engine.models.ruleset``) supplied once
per simulation run.

Example:
    >>> from royale_engine.core.config import get_settings
    >>> settings = get_settings()
    >>> settings.default_ruleset_id
    'ER_S10'

Environment Variables:
    ROYALE_ENGINE_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    ROYALE_ENGINE_JSON_LOGS: Emit JSON log lines instead of console output
    ROYALE_ENGINE_DEFAULT_RULESET_ID: Ruleset preset used when none is given
    ROYALE_ENGINE_RANDOM_SEED: Seed for the default random source
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from royale_engine.core.exceptions import ConfigurationError


class Settings(BaseSettings):
    """Engine settings.

    Attributes:
        app_name: Application name used in log context.
        debug: Enable debug mode.
        log_level: Logging level.
        json_logs: Render logs as JSON.
        default_ruleset_id: Ruleset preset used when a match names none.
        random_seed: Optional seed for the default random source.
    """

    model_config = SettingsConfigDict(
        env_prefix="ROYALE_ENGINE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = Field(
        default="Royale Engine",
        description="Application name",
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )
    json_logs: bool = Field(
        default=False,
        description="Render logs as JSON",
    )
    default_ruleset_id: Literal["ER_S10", "LEGACY"] = Field(
        default="ER_S10",
        description="Ruleset preset used when none is given",
    )
    random_seed: int | None = Field(
        default=None,
        description="Seed for the default random source",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the settings singleton.

    Returns:
        The cached Settings instance.

    Raises:
        ConfigurationError: If the environment holds invalid values.
    """
    try:
        return Settings()
    except Exception as exc:
        raise ConfigurationError(
            f"Failed to load engine settings: {exc}",
            details={"original_error": str(exc)},
        ) from exc


def clear_settings_cache() -> None:
    """Clear the settings cache, forcing a reload on next access."""
    get_settings.cache_clear()


__all__ = [
    "Settings",
    "get_settings",
    "clear_settings_cache",
]
