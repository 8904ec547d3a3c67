"""Custom exception hierarchy for the battle-royale resolution engine.

The engine follows a "degrade, don't fail" policy: malformed numbers,
missing catalog entries and absent equipment are absorbed locally. The
exceptions below are reserved for configuration failures and for the few
hard invariant violations a simulation loop must never paper over.

Example:
    >>> from royale_engine.core.exceptions import CombatError
    >>> raise CombatError("Battle needs two distinct actors", actor_id="a1")
"""

from __future__ import annotations

from typing import Any


class RoyaleEngineError(Exception):
    """Base exception for all engine errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary containing additional error context.
    """

    def __init__(self, message: str, *, details: dict[str, Any] | None = None) -> None:
        """Initialize the base exception.

        Args:
            message: Human-readable error description.
            details: Optional dictionary containing additional error context.
        """
        self.message = message
        self.details = details or {}
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the exception message with optional details.

        Returns:
            Formatted error message including any provided details.
        """
        if self.details:
            detail_str = ", ".join(f"{k}={v!r}" for k, v in self.details.items())
            return f"{self.message} [{detail_str}]"
        return self.message

    def __repr__(self) -> str:
        """Return a detailed string representation of the exception.

        Returns:
            String representation suitable for debugging.
        """
        return f"{self.__class__.__name__}(message={self.message!r}, details={self.details!r})"


# =============================================================================
# Configuration & Validation Exceptions
# =============================================================================


class ConfigurationError(RoyaleEngineError):
    """Raised when settings or a ruleset override cannot be loaded."""

    def __init__(
        self,
        message: str,
        *,
        config_key: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize configuration error with config key context.

        Args:
            message: Human-readable error description.
            config_key: The configuration key that caused the error.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if config_key:
            combined_details["config_key"] = config_key
        super().__init__(message, details=combined_details)


class DataValidationError(RoyaleEngineError):
    """Raised when an ingested record is unusable as a whole.

    Individual malformed fields never raise; they fall back to defaults.
    This is only raised when the record itself is not a mapping or has
    no identity at all.
    """

    def __init__(
        self,
        message: str,
        *,
        record_kind: str | None = None,
        invalid_value: Any | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize validation error with record context.

        Args:
            message: Human-readable error description.
            record_kind: Kind of record being normalized (actor, item, ...).
            invalid_value: The value that failed validation.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if record_kind:
            combined_details["record_kind"] = record_kind
        if invalid_value is not None:
            combined_details["invalid_value"] = repr(invalid_value)[:80]
        super().__init__(message, details=combined_details)


# =============================================================================
# Game Engine Domain Exceptions
# =============================================================================


class GameEngineError(RoyaleEngineError):
    """Base exception for all simulation errors."""


class InvalidGameStateError(GameEngineError):
    """Raised when a match enters an invalid or inconsistent state."""

    def __init__(
        self,
        message: str,
        *,
        current_state: str | None = None,
        expected_states: list[str] | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize invalid game state error with state context.

        Args:
            message: Human-readable error description.
            current_state: The current invalid state identifier.
            expected_states: List of valid states that were expected.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if current_state:
            combined_details["current_state"] = current_state
        if expected_states:
            combined_details["expected_states"] = expected_states
        super().__init__(message, details=combined_details)


class CombatError(GameEngineError):
    """Raised when the battle resolver is called with invalid participants."""

    def __init__(
        self,
        message: str,
        *,
        actor_id: str | None = None,
        day: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize combat error with combat context.

        Args:
            message: Human-readable error description.
            actor_id: Identifier of the actor involved.
            day: Match day when the error occurred.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if actor_id:
            combined_details["actor_id"] = actor_id
        if day is not None:
            combined_details["day"] = day
        super().__init__(message, details=combined_details)


class RandomSourceError(GameEngineError):
    """Raised when a random source yields a value outside ``[0, 1)``."""

    def __init__(
        self,
        message: str,
        *,
        value: float | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize random source error.

        Args:
            message: Human-readable error description.
            value: The offending value.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if value is not None:
            combined_details["value"] = value
        super().__init__(message, details=combined_details)


__all__ = [
    "RoyaleEngineError",
    "ConfigurationError",
    "DataValidationError",
    "GameEngineError",
    "InvalidGameStateError",
    "CombatError",
    "RandomSourceError",
]
