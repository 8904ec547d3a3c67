"""Pydantic V2 schemas for the battle-royale resolution engine.

Submodules:
    enums: Enumeration types (Stat, EquipSlot, SkillKind, EventCategory, ...)
    components: Reusable components (StatBlock, ItemStack, StatusEffect, ...)
    entities: The Actor entity
    ruleset: Per-match tuning (Ruleset and its presets)
    outcomes: Results returned by battle, event and item resolution
    game_state: Match state, transcript and summary

Example:
    >>> from royale_engine.models import Actor, StatBlock
    >>> actor = Actor(id="a1", name="Hyunwoo", stats=StatBlock.uniform(10))
"""

from __future__ import annotations

# =============================================================================
# Enumerations
# =============================================================================
from royale_engine.models.enums import (
    EffectKind,
    EffectName,
    EquipSlot,
    EventCategory,
    FlavorEventType,
    FlavorTime,
    ItemCategory,
    LogKind,
    MatchStatus,
    SkillKind,
    Stat,
    TimeOfDay,
)

# =============================================================================
# Components
# =============================================================================
from royale_engine.models.components import (
    ItemStack,
    ItemStats,
    SpecialSkill,
    StatBlock,
    StatusEffect,
    Tier,
)

# =============================================================================
# Entities
# =============================================================================
from royale_engine.models.entities import Actor

# =============================================================================
# Ruleset
# =============================================================================
from royale_engine.models.ruleset import (
    DEFAULT_RULESET_ID,
    RULESET_PRESETS,
    BattleTuning,
    ConsumableTuning,
    CreditTuning,
    EquipmentTuning,
    EventTuning,
    PhaseTuning,
    Ruleset,
    StatWeights,
    get_ruleset,
    merge_deep,
)

# =============================================================================
# Outcomes & Game State
# =============================================================================
from royale_engine.models.outcomes import (
    BattleOutcome,
    EffectTickResult,
    EventOutcome,
    ItemUseOutcome,
)
from royale_engine.models.game_state import (
    FlavorEvent,
    LogEntry,
    MatchState,
    MatchSummary,
)


__all__ = [
    # Enums
    "Stat",
    "EquipSlot",
    "ItemCategory",
    "SkillKind",
    "EffectName",
    "EffectKind",
    "TimeOfDay",
    "MatchStatus",
    "EventCategory",
    "FlavorEventType",
    "FlavorTime",
    "LogKind",
    # Components
    "Tier",
    "StatBlock",
    "ItemStats",
    "ItemStack",
    "StatusEffect",
    "SpecialSkill",
    # Entities
    "Actor",
    # Ruleset
    "StatWeights",
    "BattleTuning",
    "EquipmentTuning",
    "EventTuning",
    "PhaseTuning",
    "ConsumableTuning",
    "CreditTuning",
    "Ruleset",
    "DEFAULT_RULESET_ID",
    "RULESET_PRESETS",
    "get_ruleset",
    "merge_deep",
    # Outcomes & state
    "BattleOutcome",
    "EventOutcome",
    "ItemUseOutcome",
    "EffectTickResult",
    "LogEntry",
    "FlavorEvent",
    "MatchSummary",
    "MatchState",
]
