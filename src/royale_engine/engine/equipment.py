"""Equipment aggregation.

Resolves an actor's weapon and armor slots into two views:

- ``EquipmentDeltas``: flat stat bonuses driven by item tiers, folded into
  effective stats by the battle resolver.
- ``EquipmentTotals``: summed catalog stats (attack, crit chance, ...)
  with rate stats clamped so stacking cannot run away.

Missing or dangling equipment references contribute nothing; nothing in
this module raises.
"""

from __future__ import annotations

from dataclasses import dataclass

from royale_engine.core.constants import MIN_TIER, RATE_STAT_CAP, SKILL_AMP_CAP
from royale_engine.models.components import ItemStack, StatBlock
from royale_engine.models.entities import Actor
from royale_engine.models.enums import EquipSlot, Stat
from royale_engine.models.ruleset import Ruleset


ARMOR_EQUIP_SLOTS: tuple[EquipSlot, ...] = (
    EquipSlot.HEAD,
    EquipSlot.CLOTHES,
    EquipSlot.ARM,
    EquipSlot.SHOES,
)


@dataclass(frozen=True)
class EquipmentDeltas:
    """Flat bonuses from equipment tiers.

    Attributes:
        str_add: Strength bonus (melee weapon attack).
        sht_add: Shooting bonus (ranged weapon attack).
        end_add: Endurance bonus from armor.
        armor_def: Armor defense subtracted from incoming ranged score.
        weapon_tier: Tier of the resolved weapon (0 if unarmed).
        armor_tier_sum: Sum of equipped armor tiers.
        weapon_is_ranged: Whether the resolved weapon is ranged.
    """

    str_add: float = 0.0
    sht_add: float = 0.0
    end_add: float = 0.0
    armor_def: float = 0.0
    weapon_tier: int = 0
    armor_tier_sum: int = 0
    weapon_is_ranged: bool = False


@dataclass(frozen=True)
class EquipmentTotals:
    """Summed catalog stats of all equipped items."""

    atk: float = 0.0
    hp: float = 0.0
    skill_amp: float = 0.0
    atk_speed: float = 0.0
    crit_chance: float = 0.0
    cdr: float = 0.0
    lifesteal: float = 0.0
    move_speed: float = 0.0
    weapon_type: str = ""
    weapon_is_ranged: bool = False


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def resolve_weapon(actor: Actor) -> ItemStack | None:
    """Find the weapon an actor fights with.

    The item referenced by the weapon slot wins; otherwise the highest-tier
    weapon in the inventory (first one on ties).
    """
    equipped = actor.equipped_item(EquipSlot.WEAPON)
    if equipped is not None:
        return equipped

    best: ItemStack | None = None
    for item in actor.inventory:
        if item.quantity <= 0 or not (item.is_weapon or item.weapon_type):
            continue
        if best is None or item.effective_tier > best.effective_tier:
            best = item
    return best


def resolve_armor(actor: Actor) -> dict[EquipSlot, ItemStack]:
    """Map each filled armor slot to its item."""
    pieces: dict[EquipSlot, ItemStack] = {}
    for slot in ARMOR_EQUIP_SLOTS:
        item = actor.equipped_item(slot)
        if item is not None:
            pieces[slot] = item
    return pieces


def equipment_deltas(actor: Actor, ruleset: Ruleset) -> EquipmentDeltas:
    """Compute flat combat bonuses from weapon and armor tiers.

    Weapon attack is ``weapon_atk_per_tier * clamp(tier, 1, max_tier)`` and
    goes to shooting for ranged weapons, strength otherwise. Armor defense
    is ``armor_def_per_tier * armor_tier_sum`` and doubles as the endurance
    bonus.

    Args:
        actor: The actor whose equipment is evaluated.
        ruleset: Supplies the per-tier constants.

    Returns:
        The equipment deltas.
    """
    tuning = ruleset.equipment
    weapon = resolve_weapon(actor)
    armor = resolve_armor(actor)

    weapon_tier = 0
    weapon_atk = 0.0
    ranged = False
    if weapon is not None:
        weapon_tier = int(_clamp(weapon.effective_tier, MIN_TIER, tuning.max_tier))
        weapon_atk = tuning.weapon_atk_per_tier * weapon_tier
        ranged = weapon.is_ranged

    armor_tier_sum = sum(
        int(_clamp(piece.effective_tier, MIN_TIER, tuning.max_tier)) for piece in armor.values()
    )
    armor_def = tuning.armor_def_per_tier * armor_tier_sum

    return EquipmentDeltas(
        str_add=0.0 if ranged else weapon_atk,
        sht_add=weapon_atk if ranged else 0.0,
        end_add=armor_def,
        armor_def=armor_def,
        weapon_tier=weapon_tier,
        armor_tier_sum=armor_tier_sum,
        weapon_is_ranged=ranged,
    )


def equipment_stat_totals(actor: Actor) -> EquipmentTotals:
    """Sum the catalog stats of the weapon and equipped armor.

    Attack speed, crit chance, cooldown reduction and lifesteal are clamped
    to ``[0, 0.75]``, skill amplification to ``[0, 2.5]``, attack and HP to
    non-negative values.
    """
    weapon = resolve_weapon(actor)
    pieces: list[ItemStack] = list(resolve_armor(actor).values())
    if weapon is not None:
        pieces.insert(0, weapon)

    sums = dict.fromkeys(
        ("atk", "hp", "skill_amp", "atk_speed", "crit_chance", "cdr", "lifesteal", "move_speed"),
        0.0,
    )
    for piece in pieces:
        if piece.stats is None:
            continue
        for key in sums:
            sums[key] += getattr(piece.stats, key)

    return EquipmentTotals(
        atk=max(0.0, sums["atk"]),
        hp=max(0.0, sums["hp"]),
        skill_amp=_clamp(sums["skill_amp"], 0.0, SKILL_AMP_CAP),
        atk_speed=_clamp(sums["atk_speed"], 0.0, RATE_STAT_CAP),
        crit_chance=_clamp(sums["crit_chance"], 0.0, RATE_STAT_CAP),
        cdr=_clamp(sums["cdr"], 0.0, RATE_STAT_CAP),
        lifesteal=_clamp(sums["lifesteal"], 0.0, RATE_STAT_CAP),
        move_speed=max(0.0, sums["move_speed"]),
        weapon_type=weapon.weapon_type if weapon is not None else "",
        weapon_is_ranged=weapon.is_ranged if weapon is not None else False,
    )


def apply_deltas(stats: StatBlock, deltas: EquipmentDeltas) -> dict[Stat, float]:
    """Fold equipment deltas into effective stats."""
    combined: dict[Stat, float] = {stat: float(value) for stat, value in stats.as_dict().items()}
    combined[Stat.STR] += deltas.str_add
    combined[Stat.SHT] += deltas.sht_add
    combined[Stat.END] += deltas.end_add
    return combined


__all__ = [
    "ARMOR_EQUIP_SLOTS",
    "EquipmentDeltas",
    "EquipmentTotals",
    "resolve_weapon",
    "resolve_armor",
    "equipment_deltas",
    "equipment_stat_totals",
    "apply_deltas",
]
