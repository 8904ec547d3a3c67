"""Procedural equipment generation.

Rolls a tier (late days tilt slightly toward the top grades), then builds
weapon stats from an archetype or armor stats from a base stat plus
affixes. Legendary and transcendent pieces draw names through a bounded
``NameHistory`` so the same famous blade does not show up twice in a row.
"""

from __future__ import annotations

from collections import OrderedDict, deque
from collections.abc import Sequence
from dataclasses import dataclass
from uuid import uuid4

from royale_engine.core.constants import GUN_WEAPON_TYPES, MAX_TIER, MIN_TIER, RANGED_WEAPON_TYPES
from royale_engine.core.logging import get_logger
from royale_engine.engine.rng import RandomSource, pick, pick_weighted, rand_float, rand_int
from royale_engine.models.components import ItemStack, ItemStats
from royale_engine.models.enums import EquipSlot, ItemCategory


logger = get_logger(__name__)


# =============================================================================
# Grades
# =============================================================================


@dataclass(frozen=True)
class Grade:
    """An equipment grade.

    Attributes:
        tier: Tier 1-6.
        label: Display label prefixed to item names.
        mult: Stat scale factor.
        weight: Base roll weight.
    """

    tier: int
    label: str
    mult: float
    weight: float


GRADES: tuple[Grade, ...] = (
    Grade(1, "Common", 1.00, 55.0),
    Grade(2, "Uncommon", 1.35, 25.0),
    Grade(3, "Rare", 1.85, 12.0),
    Grade(4, "Epic", 2.55, 6.0),
    Grade(5, "Legendary", 3.45, 1.6),
    Grade(6, "Transcendent", 4.55, 0.4),
)

BOOSTED_TIER = 4
MAX_TIER_BOOST = 2.2
TIER_BOOST_PER_DAY = 0.03


def get_grade(tier: int) -> Grade:
    """Grade for ``tier``, clamped to 1-6."""
    return GRADES[max(MIN_TIER, min(MAX_TIER, int(tier))) - 1]


def roll_tier(day: int, rng: RandomSource) -> int:
    """Roll an equipment tier; weights of tiers 4+ grow slowly with day."""
    boost = min(MAX_TIER_BOOST, 1 + max(1, day) * TIER_BOOST_PER_DAY)
    weights = [
        (grade.tier, grade.weight * boost if grade.tier >= BOOSTED_TIER else grade.weight)
        for grade in GRADES
    ]
    return pick_weighted(rng, weights) or MIN_TIER


# =============================================================================
# Names
# =============================================================================


WEAPON_TYPES: tuple[str, ...] = (
    "pistol", "assault_rifle", "sniper_rifle",
    "gloves", "tonfa", "nunchaku", "arcana",
    "sword", "dual_swords", "hammer", "bat", "whip",
    "throw", "shuriken", "bow", "crossbow",
    "axe", "dagger", "spear", "rapier",
)

REAL_WEAPON_NAMES: dict[str, tuple[str, ...]] = {
    "pistol": ("Glock 17", "Beretta M9", "SIG P226", "Desert Eagle"),
    "assault_rifle": ("AK-47", "M4A1", "HK416", "FN SCAR-L"),
    "sniper_rifle": ("Remington 700", "M24 SWS", "Barrett M82", "AWM"),
    "gloves": ("Combat Gloves", "Leather Gloves", "Knuckle Wraps"),
    "tonfa": ("Police Tonfa", "Side-Handle Baton"),
    "nunchaku": ("Oak Nunchaku", "Iron Nunchaku"),
    "arcana": ("Tarot Deck", "Crystal Orb", "Grimoire"),
    "sword": ("Longsword", "Katana", "Saber"),
    "dual_swords": ("Twin Blades", "Dual Short Swords"),
    "hammer": ("War Hammer", "Sledgehammer"),
    "bat": ("Aluminum Bat", "Wooden Bat"),
    "whip": ("Leather Whip", "Chain Whip"),
    "throw": ("Throwing Axe", "Boomerang"),
    "shuriken": ("Throwing Knife", "Shuriken"),
    "bow": ("Recurve Bow", "Longbow"),
    "crossbow": ("Light Crossbow", "Heavy Crossbow"),
    "axe": ("Hatchet", "Battle Axe"),
    "dagger": ("Stiletto", "Dagger"),
    "spear": ("Spear", "Pike"),
    "rapier": ("Rapier", "Estoc"),
}

REAL_ARMOR_NAMES: dict[EquipSlot, tuple[str, ...]] = {
    EquipSlot.HEAD: ("FAST Helmet", "Kevlar Helmet", "Motorcycle Helmet"),
    EquipSlot.CLOTHES: ("Kevlar Vest", "Tactical Vest", "Leather Jacket"),
    EquipSlot.ARM: ("Tactical Gloves", "Bracer", "Gauntlet"),
    EquipSlot.SHOES: ("Tactical Boots", "Trail Runners", "Combat Boots"),
}

LEGENDARY_NAMES: dict[EquipSlot, tuple[str, ...]] = {
    EquipSlot.WEAPON: (
        "Excalibur", "Gram", "Durendal", "Kusanagi", "Gungnir", "Mistilteinn",
        "Masamune", "Mjolnir", "Arondight", "Caladbolg", "Claiomh Solais",
        "Laevateinn", "Tyrfing", "Balmung", "Joyeuse", "Zulfiqar", "Hrunting",
    ),
    EquipSlot.HEAD: ("Helm of Hades", "Helm of Minerva", "Helm of Athena", "Crown of Ra"),
    EquipSlot.CLOTHES: ("Dragon Scale Armor", "Golden Fleece", "Phoenix Robe", "Armor of Achilles"),
    EquipSlot.ARM: ("Gauntlets of Heracles", "Giant's Bracers", "Bracelet of Thor"),
    EquipSlot.SHOES: ("Sandals of Hermes", "Boots of the Wind", "Wings of Icarus"),
}

TRANSCENDENT_NAMES: dict[EquipSlot, tuple[str, ...]] = {
    EquipSlot.WEAPON: (
        "Blade of Genesis", "Astral Lance", "Skyrender Axe", "Starcleaver Twins",
        "Akashic Codex", "Hammer of the End", "Spear of Spacetime", "Ouroboros Chain",
        "Celestial Rapier", "Abyssal Dagger", "Bow of the Sun", "Moonlight Crossbow",
    ),
    EquipSlot.HEAD: ("Crown of Constellations", "Astronomer's Helm", "Starlight Helm"),
    EquipSlot.CLOTHES: ("Galactic Plate", "Primordial Cuirass", "Nebula Robe"),
    EquipSlot.ARM: ("Dimensional Bracers", "Starlight Gauntlets", "Abyssal Bracers"),
    EquipSlot.SHOES: ("Voidwalkers", "Boots of Time", "Riftstep Boots", "Eternal Stride"),
}


class NameHistory:
    """Bounded memory of recently used names.

    Each key (for example ``legend:weapon:sword``) keeps its last
    ``capacity`` names. At most ``max_keys`` keys are tracked; the least
    recently used key is evicted first.

    Example:
        >>> history = NameHistory(capacity=2)
        >>> history.remember("k", "Gram")
        >>> "Gram" in history.recent("k")
        True
    """

    def __init__(self, *, capacity: int = 10, max_keys: int = 64) -> None:
        self._capacity = max(3, capacity)
        self._max_keys = max(1, max_keys)
        self._entries: OrderedDict[str, deque[str]] = OrderedDict()

    @property
    def capacity(self) -> int:
        return self._capacity

    def __len__(self) -> int:
        return len(self._entries)

    def recent(self, key: str) -> tuple[str, ...]:
        names = self._entries.get(key)
        return tuple(names) if names is not None else ()

    def remember(self, key: str, name: str) -> None:
        names = self._entries.get(key)
        if names is None:
            names = deque(maxlen=self._capacity)
            self._entries[key] = names
        self._entries.move_to_end(key)
        names.append(name)
        while len(self._entries) > self._max_keys:
            self._entries.popitem(last=False)

    def clear(self) -> None:
        self._entries.clear()

    def pick_unique(self, pool: Sequence[str], key: str, rng: RandomSource) -> str | None:
        """Pick a name from ``pool``, avoiding recent names for ``key``.

        After a bounded number of misses a recent name is accepted.
        """
        if not pool:
            return None
        banned = set(self.recent(key))
        tries = min(16, max(6, len(pool) * 2))
        chosen: str | None = None
        for _ in range(tries):
            candidate = pick(rng, pool)
            if candidate is not None and candidate not in banned:
                chosen = candidate
                break
        if chosen is None:
            chosen = pick(rng, pool)
        if chosen is not None:
            self.remember(key, chosen)
        return chosen


def _pick_name(
    slot: EquipSlot,
    weapon_type: str,
    tier: int,
    rng: RandomSource,
    history: NameHistory,
) -> str:
    if tier >= 6:
        name = history.pick_unique(TRANSCENDENT_NAMES[slot], f"transc:{slot}:{weapon_type}", rng)
        return name or "Transcendent Gear"
    if tier >= 5:
        name = history.pick_unique(LEGENDARY_NAMES[slot], f"legend:{slot}:{weapon_type}", rng)
        return name or "Legendary Gear"
    if slot is EquipSlot.WEAPON:
        return pick(rng, REAL_WEAPON_NAMES.get(weapon_type, ())) or weapon_type or "Weapon"
    return pick(rng, REAL_ARMOR_NAMES[slot]) or "Armor"


# =============================================================================
# Stats
# =============================================================================


WEAPON_ARCHETYPES: tuple[str, ...] = ("atk_speed", "atk_amp", "amp_only")
ARMOR_AFFIXES: tuple[str, ...] = ("crit_chance", "cdr", "lifesteal")


def _ratio(rng: RandomSource, low: float, high: float, scale: float) -> float:
    return round(rand_float(rng, low, high) * scale, 3)


def make_weapon_stats(tier: int, archetype: str, rng: RandomSource) -> ItemStats:
    """Weapon stats for one archetype.

    ``amp_only`` trades all attack for skill amplification; ``atk_speed``
    and ``atk_amp`` pair base attack with a secondary ratio.
    """
    scale = get_grade(tier).mult
    base_atk = max(1, round(rand_int(rng, 10, 18) * scale))
    if archetype == "amp_only":
        return ItemStats(skill_amp=_ratio(rng, 0.12, 0.26, 0.8 + scale * 0.22))
    if archetype == "atk_speed":
        return ItemStats(atk=base_atk, atk_speed=_ratio(rng, 0.05, 0.14, 0.85 + scale * 0.18))
    return ItemStats(atk=base_atk, skill_amp=_ratio(rng, 0.06, 0.16, 0.85 + scale * 0.18))


def _affix_count(tier: int) -> int:
    if tier <= 2:
        return 1
    return 2 if tier <= 4 else 3


def make_armor_stats(tier: int, slot: EquipSlot, rng: RandomSource) -> ItemStats:
    """Armor stats: one base stat, 1-3 affixes and move speed on shoes."""
    scale = get_grade(tier).mult
    values: dict[str, float] = {}

    base = pick(rng, ("atk", "hp", "skill_amp")) or "hp"
    if base == "atk":
        values["atk"] = max(1, round(rand_int(rng, 2, 6) * scale))
    elif base == "hp":
        values["hp"] = max(5, round(rand_int(rng, 18, 45) * scale))
    else:
        values["skill_amp"] = _ratio(rng, 0.03, 0.10, 0.8 + scale * 0.20)

    pool = list(ARMOR_AFFIXES)
    affix_scale = 0.9 + scale * 0.12
    ranges = {"crit_chance": (0.02, 0.10), "cdr": (0.02, 0.12), "lifesteal": (0.01, 0.08)}
    for _ in range(_affix_count(tier)):
        if not pool:
            break
        affix = pool.pop(int(rand_float(rng, 0, len(pool))))
        low, high = ranges[affix]
        values[affix] = _ratio(rng, low, high, affix_scale)

    if slot is EquipSlot.SHOES:
        values["move_speed"] = _ratio(rng, 0.03, 0.12, affix_scale)
    return ItemStats(**values)


# =============================================================================
# Factory
# =============================================================================


_DEFAULT_HISTORY = NameHistory()


def create_equipment_item(
    slot: EquipSlot,
    rng: RandomSource,
    *,
    day: int = 1,
    tier: int | None = None,
    weapon_type: str = "",
    history: NameHistory | None = None,
) -> ItemStack:
    """Generate one piece of equipment.

    Args:
        slot: Slot the piece is made for.
        rng: Random source.
        day: Match day; tilts the tier roll when ``tier`` is None.
        tier: Fixed tier (clamped to 1-6) instead of a roll.
        weapon_type: Weapon family; a random one is chosen if empty.
        history: Name history; a process-wide default is used if None.

    Returns:
        A single-unit item stack.
    """
    history = history if history is not None else _DEFAULT_HISTORY
    rolled = max(MIN_TIER, min(MAX_TIER, tier)) if tier is not None else roll_tier(day, rng)
    grade = get_grade(rolled)

    tags: list[str] = ["equipment", grade.label.lower()]
    archetype = ""
    if slot is EquipSlot.WEAPON:
        weapon_type = weapon_type or pick(rng, WEAPON_TYPES) or "sword"
        archetype = pick(rng, WEAPON_ARCHETYPES) or "atk_speed"
        stats = make_weapon_stats(rolled, archetype, rng)
        tags += ["weapon", weapon_type]
        if weapon_type in RANGED_WEAPON_TYPES:
            tags.append("ranged")
        if weapon_type in GUN_WEAPON_TYPES:
            tags += ["gun", "shoot"]
        category = ItemCategory.WEAPON
        prefix = "wpn"
    else:
        weapon_type = ""
        stats = make_armor_stats(rolled, slot, rng)
        tags += ["armor", slot.value]
        category = ItemCategory.ARMOR
        prefix = "eq"

    name = f"{grade.label} {_pick_name(slot, weapon_type, rolled, rng, history)}"
    item = ItemStack(
        id=f"{prefix}_{uuid4().hex[:12]}",
        name=name,
        category=category,
        tags=tuple(tags),
        tier=rolled,
        quantity=1,
        stats=stats,
        equip_slot=slot,
        weapon_type=weapon_type,
    )
    logger.debug("Equipment generated", item_id=item.id, tier=rolled, slot=slot.value, archetype=archetype)
    return item


__all__ = [
    "Grade",
    "GRADES",
    "get_grade",
    "roll_tier",
    "WEAPON_TYPES",
    "NameHistory",
    "make_weapon_stats",
    "make_armor_stats",
    "create_equipment_item",
]
