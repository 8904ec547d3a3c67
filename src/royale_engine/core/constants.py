"""Engine-wide constants.

Values here are fixed game rules rather than per-match tuning; tunable
numbers belong to the ``Ruleset`` model.
"""

from __future__ import annotations

# =============================================================================
# Stats
# =============================================================================

STAT_KEYS: tuple[str, ...] = ("str", "agi", "int", "men", "luk", "dex", "sht", "end")
"""The eight base stats, in canonical order."""

MIN_EFFECTIVE_STAT = 1
"""Effective stats never drop below this value."""

DEFAULT_MAX_HP = 100
"""Max HP for actors whose record carries none."""

# =============================================================================
# Status Effects
# =============================================================================

FOOD_POISONING_DOT = 10
"""HP lost per phase while food-poisoned."""

FOOD_POISONING_END_FACTOR = 0.5
"""Endurance multiplier while food-poisoned (floored)."""

BLEED_DEFAULT_DOT = 6
"""Bleeding tick damage when the effect record carries none."""

# =============================================================================
# Equipment
# =============================================================================

ARMOR_SLOTS: tuple[str, ...] = ("head", "clothes", "arm", "shoes")
"""Equipment slots that count as armor."""

RANGED_MARKERS = frozenset({"ranged", "gun", "shoot", "총", "원거리"})
"""Tags that classify a weapon as ranged."""

RANGED_WEAPON_TYPES = frozenset(
    {"pistol", "assault_rifle", "sniper_rifle", "arcana", "bow", "crossbow", "throw", "shuriken"}
)
"""Weapon types that are ranged when generated."""

GUN_WEAPON_TYPES = frozenset({"pistol", "assault_rifle", "sniper_rifle"})
"""Weapon types that additionally carry the gun markers."""

RATE_STAT_CAP = 0.75
"""Upper bound for summed attack speed, crit chance, cdr and lifesteal."""

SKILL_AMP_CAP = 2.5
"""Upper bound for summed skill amplification."""

MIN_TIER = 1
MAX_TIER = 6

# =============================================================================
# Catalog
# =============================================================================

LEGENDARY_MATERIAL_KEYS = frozenset(
    {"meteor", "life_tree", "world_tree", "mithril", "force_core", "vf", "vf_blood"}
)
"""Material tags reserved for world spawns; never handed out by scavenging."""

MEDICAL_TAGS = frozenset({"medical", "heal"})
FOOD_TAGS = frozenset({"food", "drink", "healthy"})
BANDAGE_KEYWORDS: tuple[str, ...] = ("bandage", "붕대", "medkit")


__all__ = [
    "STAT_KEYS",
    "MIN_EFFECTIVE_STAT",
    "DEFAULT_MAX_HP",
    "FOOD_POISONING_DOT",
    "FOOD_POISONING_END_FACTOR",
    "BLEED_DEFAULT_DOT",
    "ARMOR_SLOTS",
    "RANGED_MARKERS",
    "RANGED_WEAPON_TYPES",
    "GUN_WEAPON_TYPES",
    "RATE_STAT_CAP",
    "SKILL_AMP_CAP",
    "MIN_TIER",
    "MAX_TIER",
    "LEGENDARY_MATERIAL_KEYS",
    "MEDICAL_TAGS",
    "FOOD_TAGS",
    "BANDAGE_KEYWORDS",
]
