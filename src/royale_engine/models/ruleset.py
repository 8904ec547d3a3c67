"""Per-match ruleset: stat weights and tuning constants.

A ruleset is immutable for the duration of a match and supplied once per
simulation run. Two presets ship with the engine; callers can layer a
partial override on top of either one.

Example:
    >>> ruleset = get_ruleset("ER_S10", {"phase": {"battle_base": 0.5}})
    >>> ruleset.phase.battle_base
    0.5
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from royale_engine.core.config import get_settings
from royale_engine.core.exceptions import ConfigurationError
from royale_engine.models.enums import EventCategory, Stat


# =============================================================================
# Sections
# =============================================================================


class StatWeights(BaseModel):
    """Per-stat weight multipliers used by the battle resolver."""

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    strength: float = Field(default=1.0, alias="str")
    agility: float = Field(default=1.0, alias="agi")
    intelligence: float = Field(default=1.0, alias="int")
    mentality: float = Field(default=1.0, alias="men")
    luck: float = Field(default=1.0, alias="luk")
    dexterity: float = Field(default=1.0, alias="dex")
    shooting: float = Field(default=1.0, alias="sht")
    endurance: float = Field(default=1.0, alias="end")

    def get(self, stat: Stat) -> float:
        return getattr(self, _WEIGHT_FIELD_BY_STAT[stat])


_WEIGHT_FIELD_BY_STAT: dict[Stat, str] = {
    Stat.STR: "strength",
    Stat.AGI: "agility",
    Stat.INT: "intelligence",
    Stat.MEN: "mentality",
    Stat.LUK: "luck",
    Stat.DEX: "dexterity",
    Stat.SHT: "shooting",
    Stat.END: "endurance",
}


class BattleTuning(BaseModel):
    """Constants of the one-shot battle formula."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    skill_bonus_cap: float = Field(default=40.0, ge=0)
    skill_mult_floor: float = Field(default=0.1, ge=0)
    men_resist_scale: float = 0.005
    drone_sht_scale: float = 0.3
    abyss_hp_ratio: float = Field(default=0.5, ge=0, le=1)
    abyss_missing_hp_scale: float = 0.5
    abyss_log_min: float = 15.0
    iaido_scale: float = 0.25
    weapon_stat_scale: float = 0.2
    weapon_tier_step: float = 0.25
    sudden_death_per_day: float = 0.1
    luck_scale: float = 0.2
    crit_damage_scale: float = 0.5
    lifesteal_heal_scale: float = 1.0
    lifesteal_log_min: float = 1.0
    draw_base: float = 30.0
    draw_per_day: float = 3.0
    draw_floor: float = 5.0
    escalation_day: int = 5


class EquipmentTuning(BaseModel):
    """Flat equipment bonuses per tier."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    weapon_atk_per_tier: float = 6.0
    armor_def_per_tier: float = 4.0
    max_tier: int = Field(default=6, ge=1)


def _default_event_weights() -> dict[EventCategory, float]:
    return {
        EventCategory.NOTHING: 20.0,
        EventCategory.REST: 18.0,
        EventCategory.MEDICAL: 6.0,
        EventCategory.SCAVENGE: 18.0,
        EventCategory.FOOD: 12.0,
        EventCategory.MISHAP: 14.0,
        EventCategory.MINOR_FIGHT: 12.0,
    }


class EventTuning(BaseModel):
    """Weights and magnitudes of the minor-event generator."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    weights: dict[EventCategory, float] = Field(default_factory=_default_event_weights)
    low_hp_ratio: float = 0.35
    mid_hp_ratio: float = 0.6
    low_hp_rest_mult: float = 2.0
    low_hp_medical_mult: float = 2.5
    mid_hp_rest_mult: float = 1.4
    mid_hp_medical_mult: float = 1.5
    night_risk_mult: float = 1.5
    day_risk_per_day: float = 0.08
    day_risk_cap: float = 2.0

    rest_min: int = 3
    rest_max_day: int = 12
    rest_max_night: int = 9
    rest_cap: int = 18
    rest_power_div: float = Field(default=40.0, gt=0)
    rest_power_bonus_max: int = 6
    rest_suppress_hp_ratio: float = 0.8
    rest_suppress_chance: float = 0.5

    medical_fallback_heal: tuple[int, int] = (2, 8)
    scavenge_fallback_credits: tuple[int, int] = (3, 8)

    mishap_max_day: int = 6
    mishap_max_night: int = 9
    mishap_day_scale: float = 0.5
    mishap_min: int = 1
    mishap_cap: int = 14

    fight_damage: tuple[int, int] = (6, 14)
    fight_night_bonus: int = 3
    fight_day_scale: float = 1.0
    fight_min: int = 4
    fight_cap: int = 24
    fight_credits: tuple[int, int] = (5, 15)

    power_reduction: float = 0.02
    poison_int_threshold: int = 40
    poison_damage: int = 20
    poison_duration: int = 2


class PhaseTuning(BaseModel):
    """Zone damage and per-phase encounter probabilities."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    forbidden_zone_start_day: int = 3
    forbidden_zone_damage_base: float = 1.5
    battle_base: float = Field(default=0.30, ge=0, le=1)
    battle_day_scale: float = 0.05
    battle_max: float = Field(default=0.85, ge=0, le=1)
    event_offset: float = 0.30
    event_max: float = Field(default=0.95, ge=0, le=1)
    time_limit_day: int | None = Field(default=None, ge=1)


class ConsumableTuning(BaseModel):
    """Automatic consumable use and item effect magnitudes."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    enabled: bool = True
    use_hp_below: int = 60
    food_heal: int = 15
    healthy_food_heal: int = 30
    medical_heal: int = 50
    book_int_bonus: int = 5


class CreditTuning(BaseModel):
    """Credit rewards."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    base_per_phase: int = Field(default=10, ge=0)
    kill: int = Field(default=25, ge=0)


# =============================================================================
# Ruleset
# =============================================================================


class Ruleset(BaseModel):
    """Complete tuning configuration for one match."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: str = "ER_S10"
    label: str = "Eternal Return S10 (hybrid)"
    stat_weights: StatWeights = Field(default_factory=StatWeights)
    battle: BattleTuning = Field(default_factory=BattleTuning)
    equipment: EquipmentTuning = Field(default_factory=EquipmentTuning)
    events: EventTuning = Field(default_factory=EventTuning)
    phase: PhaseTuning = Field(default_factory=PhaseTuning)
    consumables: ConsumableTuning = Field(default_factory=ConsumableTuning)
    credits: CreditTuning = Field(default_factory=CreditTuning)


DEFAULT_RULESET_ID = "ER_S10"

RULESET_PRESETS: dict[str, Ruleset] = {
    "ER_S10": Ruleset(),
    "LEGACY": Ruleset(
        id="LEGACY",
        label="Legacy (simple rules)",
        credits=CreditTuning(base_per_phase=10, kill=0),
    ),
}


def merge_deep(base: Any, patch: Any) -> Any:
    """Merge ``patch`` into ``base``.

    Mappings merge key by key; lists and scalars in ``patch`` replace the
    base value; a ``None`` patch keeps the base.
    """
    if patch is None:
        return base
    if not isinstance(patch, Mapping):
        return patch
    merged = dict(base) if isinstance(base, Mapping) else {}
    for key, value in patch.items():
        merged[key] = merge_deep(merged.get(key), value)
    return merged


def _canonical_weight_keys(weights: Mapping[str, Any]) -> dict[str, Any]:
    """Rewrite long stat-weight names to their short aliases."""
    long_to_short = {name: stat.value for stat, name in _WEIGHT_FIELD_BY_STAT.items()}
    return {long_to_short.get(str(k), str(k)): v for k, v in weights.items()}


def get_ruleset(
    ruleset_id: str | None = None,
    overrides: Mapping[str, Any] | None = None,
) -> Ruleset:
    """Resolve a ruleset preset and apply an optional override.

    Args:
        ruleset_id: Preset id. None selects ``Settings.default_ruleset_id``;
            unknown ids fall back to ER_S10.
        overrides: Partial ruleset mapping merged over the preset.

    Returns:
        The validated, immutable ruleset.

    Raises:
        ConfigurationError: If the merged ruleset fails validation.
    """
    if ruleset_id is None:
        ruleset_id = get_settings().default_ruleset_id
    preset_id = ruleset_id if ruleset_id in RULESET_PRESETS else DEFAULT_RULESET_ID
    base = RULESET_PRESETS[preset_id]
    if not overrides:
        return base

    patch = dict(overrides)
    weights = patch.get("stat_weights")
    if isinstance(weights, Mapping):
        patch["stat_weights"] = _canonical_weight_keys(weights)
    patch.pop("id", None)

    merged = merge_deep(base.model_dump(by_alias=True), patch)
    try:
        return Ruleset.model_validate(merged)
    except PydanticValidationError as exc:
        raise ConfigurationError(
            f"Invalid ruleset override for {preset_id}",
            config_key="ruleset",
            details={"errors": exc.error_count()},
        ) from exc


__all__ = [
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
    "merge_deep",
    "get_ruleset",
]
