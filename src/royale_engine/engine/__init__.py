"""Resolution engine for the battle-royale simulation.

Submodules:
    rng: Injectable random sources and roll helpers
    stats: Effective stats and per-phase status-effect ticks
    equipment: Equipment deltas and clamped stat totals
    battle: One-shot battle resolver
    events: Weighted minor-event generator
    items: Consumable use
    loot: Procedural equipment generation
    flavor: Two-actor flavor encounters
    phase: Phase orchestrator (the per-phase match driver)

Example:
    >>> from royale_engine.engine import PhaseOrchestrator, SeededRandom
    >>> orchestrator = PhaseOrchestrator.new_match(actors, ruleset, rng=SeededRandom(7))
    >>> summary = orchestrator.run_to_completion()
"""

from __future__ import annotations

# =============================================================================
# Randomness
# =============================================================================
from royale_engine.engine.rng import (
    RandomSource,
    SeededRandom,
    SequenceRandom,
    chance,
    pick,
    pick_weighted,
    rand_float,
    rand_int,
    shuffled,
)

# =============================================================================
# Aggregators
# =============================================================================
from royale_engine.engine.stats import effective_stats, tick_effects
from royale_engine.engine.equipment import (
    EquipmentDeltas,
    EquipmentTotals,
    equipment_deltas,
    equipment_stat_totals,
    resolve_weapon,
)

# =============================================================================
# Resolution
# =============================================================================
from royale_engine.engine.battle import SKILL_FORMULAS, draw_threshold, resolve_battle
from royale_engine.engine.events import category_weights, generate_event
from royale_engine.engine.items import (
    apply_item_effect,
    consume_item,
    find_healing_item,
    food_poisoning,
)
from royale_engine.engine.loot import NameHistory, create_equipment_item
from royale_engine.engine.flavor import eligible_flavor_events, pick_flavor_line

# =============================================================================
# Orchestration
# =============================================================================
from royale_engine.engine.phase import (
    PhaseOrchestrator,
    PhaseReport,
    battle_probability,
    event_probability,
    zone_damage,
)


__all__ = [
    # Randomness
    "RandomSource",
    "SeededRandom",
    "SequenceRandom",
    "rand_int",
    "rand_float",
    "chance",
    "pick",
    "pick_weighted",
    "shuffled",
    # Aggregators
    "effective_stats",
    "tick_effects",
    "EquipmentDeltas",
    "EquipmentTotals",
    "equipment_deltas",
    "equipment_stat_totals",
    "resolve_weapon",
    # Resolution
    "SKILL_FORMULAS",
    "draw_threshold",
    "resolve_battle",
    "category_weights",
    "generate_event",
    "apply_item_effect",
    "consume_item",
    "find_healing_item",
    "food_poisoning",
    "NameHistory",
    "create_equipment_item",
    "eligible_flavor_events",
    "pick_flavor_line",
    # Orchestration
    "PhaseOrchestrator",
    "PhaseReport",
    "battle_probability",
    "event_probability",
    "zone_damage",
]
