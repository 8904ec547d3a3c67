"""Royale Engine - battle-royale resolution engine.

A synchronous, in-process library that resolves a day/night survival
match phase by phase: weighted battle scoring, minor-event generation,
status effects and equipment aggregation.

Example:
    >>> from royale_engine import (
    ...     PhaseOrchestrator, SeededRandom, get_ruleset, normalize_roster
    ... )
    >>> actors = normalize_roster(raw_characters)
    >>> orchestrator = PhaseOrchestrator.new_match(
    ...     actors, get_ruleset("ER_S10"), rng=SeededRandom(42)
    ... )
    >>> summary = orchestrator.run_to_completion()
    >>> print(summary.winner_name)

Modules:
    core: Configuration, logging, and base exceptions.
    models: Pydantic V2 schemas (actors, items, ruleset, match state).
    engine: Stat/equipment aggregation, battle, events, phase orchestration.
    ingestion: Normalization of raw storage records.
"""

from __future__ import annotations

# Core
from royale_engine.core.config import Settings, get_settings
from royale_engine.core.exceptions import RoyaleEngineError
from royale_engine.core.logging import configure_logging, get_logger

# Models
from royale_engine.models import (
    Actor,
    BattleOutcome,
    EventOutcome,
    ItemStack,
    MatchState,
    MatchSummary,
    Ruleset,
    StatBlock,
    StatusEffect,
    get_ruleset,
)

# Engine
from royale_engine.engine import (
    PhaseOrchestrator,
    RandomSource,
    SeededRandom,
    SequenceRandom,
    effective_stats,
    equipment_deltas,
    equipment_stat_totals,
    generate_event,
    resolve_battle,
)

# Ingestion
from royale_engine.ingestion import (
    normalize_actor,
    normalize_catalog,
    normalize_roster,
    ruleset_from_settings,
)


__version__ = "0.1.0"
__all__ = [
    # Version info
    "__version__",
    # Core
    "RoyaleEngineError",
    "Settings",
    "get_settings",
    "configure_logging",
    "get_logger",
    # Models
    "Actor",
    "StatBlock",
    "ItemStack",
    "StatusEffect",
    "Ruleset",
    "get_ruleset",
    "BattleOutcome",
    "EventOutcome",
    "MatchState",
    "MatchSummary",
    # Engine
    "RandomSource",
    "SeededRandom",
    "SequenceRandom",
    "effective_stats",
    "equipment_deltas",
    "equipment_stat_totals",
    "resolve_battle",
    "generate_event",
    "PhaseOrchestrator",
    # Ingestion
    "normalize_actor",
    "normalize_catalog",
    "normalize_roster",
    "ruleset_from_settings",
]
