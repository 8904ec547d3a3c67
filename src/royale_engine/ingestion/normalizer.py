"""Normalization of raw storage records into canonical models.

Stored documents come in several generations: ``_id`` or ``id``,
``name`` or ``text``, ``qty`` or ``quantity``, Korean or English type
names, populated or bare item references. Everything is mapped onto the
canonical pydantic models here, once, so the engine never sees the raw
shapes.

Malformed fields never raise; they fall back to defaults. Only a record
that is not a mapping at all, or that has neither id nor name, is
rejected with ``DataValidationError``.

Example:
    >>> actor = normalize_actor({"_id": "c1", "name": "Shiroko",
    ...                          "stats": {"sht": "14"}})
    >>> actor.stats.shooting, actor.skill.kind
    (14, <SkillKind.DRONE_SUPPORT: 'drone_support'>)
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping
from typing import Any

from royale_engine.core.constants import (
    DEFAULT_MAX_HP,
    MAX_TIER,
    MIN_TIER,
    RANGED_MARKERS,
    RANGED_WEAPON_TYPES,
)
from royale_engine.core.exceptions import DataValidationError
from royale_engine.core.logging import get_logger
from royale_engine.models.components import (
    ItemStack,
    ItemStats,
    SpecialSkill,
    StatBlock,
    StatusEffect,
)
from royale_engine.models.entities import Actor
from royale_engine.models.enums import (
    EffectKind,
    EffectName,
    EquipSlot,
    FlavorEventType,
    FlavorTime,
    ItemCategory,
    SkillKind,
    Stat,
)
from royale_engine.models.game_state import FlavorEvent
from royale_engine.models.ruleset import Ruleset, get_ruleset


logger = get_logger(__name__)


# =============================================================================
# Alias Tables
# =============================================================================

ITEM_CATEGORY_ALIASES: dict[str, ItemCategory] = {
    "weapon": ItemCategory.WEAPON,
    "무기": ItemCategory.WEAPON,
    "armor": ItemCategory.ARMOR,
    "방어구": ItemCategory.ARMOR,
    "consumable": ItemCategory.CONSUMABLE,
    "소모품": ItemCategory.CONSUMABLE,
    "food": ItemCategory.CONSUMABLE,
    "material": ItemCategory.MATERIAL,
    "재료": ItemCategory.MATERIAL,
    "misc": ItemCategory.MISC,
    "기타": ItemCategory.MISC,
}

EQUIP_SLOT_ALIASES: dict[str, EquipSlot] = {
    "weapon": EquipSlot.WEAPON,
    "무기": EquipSlot.WEAPON,
    "head": EquipSlot.HEAD,
    "머리": EquipSlot.HEAD,
    "clothes": EquipSlot.CLOTHES,
    "옷": EquipSlot.CLOTHES,
    "arm": EquipSlot.ARM,
    "팔": EquipSlot.ARM,
    "shoes": EquipSlot.SHOES,
    "신발": EquipSlot.SHOES,
}

WEAPON_TYPE_ALIASES: dict[str, str] = {
    "권총": "pistol",
    "돌격소총": "assault_rifle",
    "돌소총": "assault_rifle",
    "저격총": "sniper_rifle",
    "장갑": "gloves",
    "톤파": "tonfa",
    "쌍절곤": "nunchaku",
    "아르카나": "arcana",
    "검": "sword",
    "쌍검": "dual_swords",
    "망치": "hammer",
    "방망이": "bat",
    "채찍": "whip",
    "투척": "throw",
    "암기": "shuriken",
    "활": "bow",
    "석궁": "crossbow",
    "도끼": "axe",
    "단검": "dagger",
    "창": "spear",
    "레이피어": "rapier",
}

EFFECT_NAME_ALIASES: dict[str, EffectName] = {
    "식중독": EffectName.FOOD_POISONING,
    "food_poisoning": EffectName.FOOD_POISONING,
    "food poisoning": EffectName.FOOD_POISONING,
    "출혈": EffectName.BLEEDING,
    "bleeding": EffectName.BLEEDING,
    "bleed": EffectName.BLEEDING,
    "studied": EffectName.STUDIED,
}

# Checked in order; the abyss markers must win over the drone markers
# because the abyss variant's name contains the drone owner's name.
SKILL_MARKERS: tuple[tuple[SkillKind, tuple[str, ...]], ...] = (
    (SkillKind.ABYSS, ("테러", "심연", "terror", "abyss")),
    (SkillKind.DRONE_SUPPORT, ("시로코", "shiroko", "드론", "drone")),
    (SkillKind.IAIDO, ("발도", "iaido")),
)

ITEM_STAT_KEYS: dict[str, str] = {
    "atk": "atk",
    "hp": "hp",
    "skillAmp": "skill_amp",
    "atkSpeed": "atk_speed",
    "critChance": "crit_chance",
    "cdr": "cdr",
    "lifesteal": "lifesteal",
    "moveSpeed": "move_speed",
}


# =============================================================================
# Coercion Helpers
# =============================================================================


def _first(record: Mapping[str, Any], *keys: str) -> Any:
    """First value among ``keys`` that is present and not None."""
    for key in keys:
        value = record.get(key)
        if value is not None:
            return value
    return None


def to_float(value: Any, default: float = 0.0) -> float:
    """Coerce to a finite float, falling back to ``default``."""
    if isinstance(value, bool):
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    return number if math.isfinite(number) else default


def to_int(value: Any, default: int = 0) -> int:
    """Coerce to an int (truncated), falling back to ``default``."""
    number = to_float(value, float("nan"))
    if math.isnan(number):
        return default
    return int(number)


def _text(value: Any) -> str:
    return str(value).strip() if value is not None else ""


def _ref_id(value: Any) -> str:
    """Id of a bare or populated reference."""
    if isinstance(value, Mapping):
        return _text(_first(value, "_id", "id", "itemId", "externalId"))
    return _text(value)


def _tags(value: Any) -> list[str]:
    if not isinstance(value, (list, tuple)):
        return []
    seen: list[str] = []
    for tag in value:
        text = _text(tag)
        if text and text not in seen:
            seen.append(text)
    return seen


def normalize_weapon_type(value: Any) -> str:
    text = _text(value)
    return WEAPON_TYPE_ALIASES.get(text, text.lower().replace(" ", "_"))


def resolve_effect_name(name: str) -> EffectName | None:
    return EFFECT_NAME_ALIASES.get(name.strip().lower())


def resolve_skill_kind(*names: str) -> SkillKind:
    """Map a skill name (or, failing that, an actor name) to a kind.

    Names are tried in order; the first one carrying a known marker wins.
    """
    for name in names:
        lowered = (name or "").lower()
        if not lowered:
            continue
        for kind, markers in SKILL_MARKERS:
            if any(marker in lowered for marker in markers):
                return kind
    return SkillKind.NONE


def _require_mapping(raw: Any, record_kind: str) -> Mapping[str, Any]:
    if not isinstance(raw, Mapping):
        raise DataValidationError(
            f"{record_kind} record must be a mapping",
            record_kind=record_kind,
            invalid_value=raw,
        )
    return raw


# =============================================================================
# Records
# =============================================================================


def normalize_stats(raw: Any) -> StatBlock:
    """Build a StatBlock; missing or non-numeric stats read as 0."""
    if not isinstance(raw, Mapping):
        return StatBlock()
    values: dict[Stat, int] = {}
    for stat in Stat:
        values[stat] = to_int(raw.get(stat.value))
    return StatBlock.from_mapping(values)


def normalize_item_stats(raw: Any) -> ItemStats | None:
    if not isinstance(raw, Mapping):
        return None
    values = {
        field: to_float(_first(raw, key, field))
        for key, field in ITEM_STAT_KEYS.items()
    }
    return ItemStats(**values)


def normalize_item(raw: Any) -> ItemStack | None:
    """Normalize an item definition or inventory entry.

    Inventory entries may wrap a populated definition under ``itemId``;
    the entry's own fields (quantity, tags, ...) take precedence.

    Returns:
        The item, or None when it has neither id nor name.
    """
    record = dict(_require_mapping(raw, "item"))
    populated = record.get("itemId")
    if isinstance(populated, Mapping):
        record = {**populated, **{k: v for k, v in record.items() if k != "itemId"}}
        record.setdefault("itemId", _ref_id(populated))

    name = _text(_first(record, "name", "text"))
    item_id = _text(_first(record, "id", "_id", "itemId", "externalId")) or name
    if not item_id:
        logger.debug("Item without identity dropped", keys=sorted(record))
        return None

    raw_type = _text(record.get("type")).lower()
    tags = _tags(record.get("tags"))
    if raw_type == "food" and "food" not in tags:
        tags.append("food")

    slot = EQUIP_SLOT_ALIASES.get(_text(record.get("equipSlot")).lower())
    category = ITEM_CATEGORY_ALIASES.get(raw_type)
    if category is None:
        if slot is EquipSlot.WEAPON or "weapon" in tags:
            category = ItemCategory.WEAPON
        elif slot is not None or "armor" in tags:
            category = ItemCategory.ARMOR
        else:
            category = ItemCategory.MISC

    weapon_type = normalize_weapon_type(record.get("weaponType"))
    if weapon_type in RANGED_WEAPON_TYPES and not any(t in RANGED_MARKERS for t in tags):
        tags.append("ranged")

    tier_raw = record.get("tier")
    tier = None
    if tier_raw is not None:
        tier = max(MIN_TIER, min(MAX_TIER, to_int(tier_raw, MIN_TIER)))

    return ItemStack(
        id=item_id,
        name=name or item_id,
        category=category,
        tags=tuple(tags),
        tier=tier,
        quantity=max(0, to_int(_first(record, "qty", "quantity", "count"), 1)),
        stats=normalize_item_stats(record.get("stats")),
        equip_slot=slot,
        weapon_type=weapon_type,
    )


def normalize_effect(raw: Any) -> StatusEffect | None:
    """Normalize an active status effect.

    A duration of ``-1`` means the effect lasts until cured. Any other
    non-positive duration marks an already expired effect, which is
    dropped (None).
    """
    record = _require_mapping(raw, "effect")
    populated = record.get("effectId")
    base: Mapping[str, Any] = populated if isinstance(populated, Mapping) else {}

    name = _text(_first(record, "name", "effectName") or base.get("name"))
    if not name:
        return None

    duration_raw = _first(record, "remainingDuration", "duration")
    if duration_raw is None:
        duration_raw = base.get("duration", 1)
    duration = to_int(duration_raw, 1)
    if duration == -1:
        remaining: int | None = None
    elif duration <= 0:
        logger.debug("Expired effect dropped", effect=name, duration=duration)
        return None
    else:
        remaining = duration

    modifiers_raw = _first(record, "statModifiers") or base.get("statModifiers") or {}
    modifiers: dict[Stat, int] = {}
    if isinstance(modifiers_raw, Mapping):
        for stat in Stat:
            delta = to_int(modifiers_raw.get(stat.value))
            if delta:
                modifiers[stat] = delta

    dot = _first(record, "dotDamage", "dot")
    if dot is None:
        tick = _first(record, "tickEffect") or base.get("tickEffect")
        if isinstance(tick, Mapping) and tick.get("hpChange") is not None:
            dot = abs(to_float(tick.get("hpChange")))
    dot_damage = to_float(dot) if dot is not None else None

    kind_raw = _text(_first(record, "type", "kind") or base.get("type")).lower()
    kind = EffectKind.BUFF if kind_raw == "buff" else EffectKind.DEBUFF

    return StatusEffect(
        name=name,
        effect=resolve_effect_name(name),
        kind=kind,
        remaining_duration=remaining,
        stat_modifiers=modifiers,
        dot_damage=dot_damage,
    )


def normalize_skill(raw: Any, actor_name: str) -> SpecialSkill:
    if isinstance(raw, Mapping):
        name = _text(raw.get("name"))
        description = _text(raw.get("description"))
    else:
        name = _text(raw)
        description = ""
    return SpecialSkill(
        name=name,
        kind=resolve_skill_kind(name, actor_name),
        description=description,
    )


def normalize_actor(raw: Any) -> Actor:
    """Normalize a character record into an Actor.

    Raises:
        DataValidationError: If ``raw`` is not a mapping or has neither id
            nor name.
    """
    record = _require_mapping(raw, "actor")
    name = _text(record.get("name"))
    actor_id = _text(_first(record, "_id", "id")) or name
    if not actor_id:
        raise DataValidationError(
            "Actor record has neither id nor name",
            record_kind="actor",
            invalid_value=record,
        )

    max_hp = max(1, to_int(_first(record, "maxHp", "max_hp"), DEFAULT_MAX_HP))
    hp = min(max_hp, to_int(record.get("hp"), max_hp))

    inventory: list[ItemStack] = []
    for entry in record.get("inventory") or []:
        if not isinstance(entry, Mapping):
            continue
        item = normalize_item(entry)
        if item is not None:
            inventory.append(item)

    equipped: dict[EquipSlot, str] = {}
    raw_equipped = record.get("equipped")
    if isinstance(raw_equipped, Mapping):
        for slot_name, ref in raw_equipped.items():
            slot = EQUIP_SLOT_ALIASES.get(_text(slot_name).lower())
            ref_id = _ref_id(ref)
            if slot is not None and ref_id:
                equipped[slot] = ref_id

    effects: list[StatusEffect] = []
    for entry in _first(record, "activeEffects", "effects") or []:
        if not isinstance(entry, Mapping):
            continue
        effect = normalize_effect(entry)
        if effect is not None:
            effects.append(effect)

    records = record.get("records") if isinstance(record.get("records"), Mapping) else {}
    return Actor(
        id=actor_id,
        name=name or actor_id,
        stats=normalize_stats(record.get("stats")),
        hp=hp,
        max_hp=max_hp,
        inventory=inventory,
        equipped=equipped,
        effects=effects,
        skill=normalize_skill(record.get("specialSkill"), name),
        credits=to_int(record.get("credits")),
        total_kills=to_int(_first(records, "totalKills") or record.get("totalKills")),
        total_wins=to_int(_first(records, "totalWins") or record.get("totalWins")),
    )


def normalize_flavor_event(raw: Any) -> FlavorEvent | None:
    """Normalize a flavor template; None when it carries no text."""
    record = _require_mapping(raw, "flavor_event")
    text = _text(record.get("text"))
    if not text:
        return None
    try:
        event_type = FlavorEventType(_text(record.get("type")).lower() or "normal")
    except ValueError:
        event_type = FlavorEventType.NORMAL
    try:
        time_of_day = FlavorTime(_text(record.get("timeOfDay")).lower() or "both")
    except ValueError:
        time_of_day = FlavorTime.BOTH

    survivors = record.get("survivorCount")
    victims = record.get("victimCount")
    return FlavorEvent(
        id=_text(_first(record, "_id", "id")),
        text=text,
        type=event_type,
        time_of_day=time_of_day,
        survivor_count=to_int(survivors) if survivors is not None else None,
        victim_count=to_int(victims) if victims is not None else None,
    )


# =============================================================================
# Collections
# =============================================================================


def normalize_catalog(raws: Iterable[Any]) -> list[ItemStack]:
    """Normalize an item catalog, skipping unusable entries."""
    catalog: list[ItemStack] = []
    for raw in raws:
        if not isinstance(raw, Mapping):
            logger.warning("Non-mapping catalog entry skipped", value=repr(raw)[:40])
            continue
        item = normalize_item(raw)
        if item is not None:
            catalog.append(item)
    return catalog


def normalize_flavor_events(raws: Iterable[Any]) -> list[FlavorEvent]:
    events: list[FlavorEvent] = []
    for raw in raws:
        if isinstance(raw, Mapping):
            event = normalize_flavor_event(raw)
            if event is not None:
                events.append(event)
    return events


def normalize_roster(raws: Iterable[Any]) -> list[Actor]:
    """Normalize a roster; later duplicates of an id are dropped.

    Raises:
        DataValidationError: If any record is not a mapping or has no
            identity.
    """
    roster: list[Actor] = []
    seen: set[str] = set()
    for raw in raws:
        actor = normalize_actor(raw)
        if actor.id in seen:
            logger.warning("Duplicate actor skipped", actor_id=actor.id)
            continue
        seen.add(actor.id)
        roster.append(actor)
    return roster


def ruleset_from_settings(raw: Mapping[str, Any] | None) -> Ruleset:
    """Build the match ruleset from a stored settings record.

    Reads ``rulesetId``, ``statWeights`` and the legacy top-level keys
    ``forbiddenZoneStartDay``, ``forbiddenZoneDamageBase`` and
    ``baseBattleProb``. A nested ``ruleset`` mapping is merged last.

    Raises:
        ConfigurationError: If the resulting ruleset is invalid.
    """
    record: Mapping[str, Any] = raw or {}
    overrides: dict[str, Any] = {}

    weights = record.get("statWeights")
    if isinstance(weights, Mapping):
        overrides["stat_weights"] = {
            stat.value: to_float(weights.get(stat.value), 1.0)
            for stat in Stat
            if weights.get(stat.value) is not None
        }

    phase: dict[str, Any] = {}
    if record.get("forbiddenZoneStartDay") is not None:
        phase["forbidden_zone_start_day"] = to_int(record["forbiddenZoneStartDay"], 3)
    if record.get("forbiddenZoneDamageBase") is not None:
        phase["forbidden_zone_damage_base"] = to_float(record["forbiddenZoneDamageBase"], 1.5)
    if record.get("baseBattleProb") is not None:
        phase["battle_base"] = to_float(record["baseBattleProb"], 0.3)
    if phase:
        overrides["phase"] = phase

    nested = record.get("ruleset")
    if isinstance(nested, Mapping):
        for key, value in nested.items():
            if isinstance(value, Mapping) and isinstance(overrides.get(key), dict):
                overrides[key] = {**overrides[key], **value}
            else:
                overrides[key] = value

    ruleset_id = _text(_first(record, "rulesetId", "ruleset_id")) or None
    return get_ruleset(ruleset_id, overrides)


__all__ = [
    "ITEM_CATEGORY_ALIASES",
    "EQUIP_SLOT_ALIASES",
    "WEAPON_TYPE_ALIASES",
    "EFFECT_NAME_ALIASES",
    "to_float",
    "to_int",
    "normalize_weapon_type",
    "resolve_effect_name",
    "resolve_skill_kind",
    "normalize_stats",
    "normalize_item_stats",
    "normalize_item",
    "normalize_effect",
    "normalize_skill",
    "normalize_actor",
    "normalize_flavor_event",
    "normalize_flavor_events",
    "normalize_catalog",
    "normalize_roster",
    "ruleset_from_settings",
]
