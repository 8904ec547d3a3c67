"""Diagnostic logging for the resolution engine.

Engine diagnostics (phase transitions, battle scores, effect ticks) go
through structlog. The transcript shown to players is match data kept in
``MatchState.log`` and never passes through these loggers.

Level, renderer and the ``app`` field default to the values in
:class:`~royale_engine.core.config.Settings`, so a host only needs::

    >>> from royale_engine.core.logging import configure_logging, get_logger
    >>> configure_logging()
    >>> get_logger(__name__).info("Phase advanced", day=2, phase="night")

While a phase resolves, the orchestrator binds ``match_id``, ``day`` and
``phase`` to the context so every line of that phase can be correlated.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import structlog
from structlog.types import Processor

from royale_engine.core.config import get_settings


if TYPE_CHECKING:
    from structlog.types import EventDict, WrappedLogger


def app_context(app_name: str) -> Processor:
    """Build a processor stamping ``app`` on every event."""

    def _add_app(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
        event_dict.setdefault("app", app_name)
        return event_dict

    return _add_app


def configure_logging(
    *,
    level: str | None = None,
    json_format: bool | None = None,
    app_name: str | None = None,
) -> None:
    """Configure structlog for the engine.

    Arguments left as ``None`` are taken from the cached settings
    (``log_level``, ``json_logs`` and ``app_name``).

    Args:
        level: Minimum level name, e.g. ``"DEBUG"``.
        json_format: Render one JSON object per line instead of the
            colored console format.
        app_name: Value of the ``app`` field on every event.
    """
    settings = get_settings()
    level = level or settings.log_level
    json_format = settings.json_logs if json_format is None else json_format
    app_name = app_name or settings.app_name

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        app_context(app_name),
        structlog.processors.UnicodeDecoder(),
    ]
    if json_format:
        processors += [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(ensure_ascii=False),
        ]
    else:
        processors.append(
            structlog.dev.ConsoleRenderer(exception_formatter=structlog.dev.plain_traceback)
        )

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelNamesMapping().get(level.upper(), logging.INFO)
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str | None = None) -> structlog.BoundLogger:
    return structlog.get_logger(name)


def bind_context(**kwargs: Any) -> None:
    """Bind key-value pairs to every log line until :func:`clear_context`."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()


__all__ = [
    "app_context",
    "configure_logging",
    "get_logger",
    "bind_context",
    "clear_context",
]
