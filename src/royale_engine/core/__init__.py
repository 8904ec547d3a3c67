"""Core module providing configuration, logging, and base exceptions.

Exports:
    Exceptions:
        RoyaleEngineError: Base exception for all engine errors.
        ConfigurationError: Settings and ruleset errors.
        DataValidationError: Unusable ingested records.
        GameEngineError, InvalidGameStateError, CombatError, RandomSourceError.

    Configuration:
        Settings: Process-level settings.
        get_settings: Get the settings singleton.
        clear_settings_cache: Force settings reload.

    Logging:
        configure_logging, get_logger, bind_context, clear_context.
"""

from __future__ import annotations

from royale_engine.core.config import Settings, clear_settings_cache, get_settings
from royale_engine.core.exceptions import (
    CombatError,
    ConfigurationError,
    DataValidationError,
    GameEngineError,
    InvalidGameStateError,
    RandomSourceError,
    RoyaleEngineError,
)
from royale_engine.core.logging import (
    bind_context,
    clear_context,
    configure_logging,
    get_logger,
)


__all__ = [
    # Exceptions
    "RoyaleEngineError",
    "ConfigurationError",
    "DataValidationError",
    "GameEngineError",
    "InvalidGameStateError",
    "CombatError",
    "RandomSourceError",
    # Configuration
    "Settings",
    "get_settings",
    "clear_settings_cache",
    # Logging
    "configure_logging",
    "get_logger",
    "bind_context",
    "clear_context",
]
