"""Minor-event generation.

Each actor that neither battles nor shares a flavor encounter gets one
weighted-random minor event. Category weights shift with HP (hurt actors
rest and patch up more), time of day (nights are riskier) and match day
(late days are riskier still).

Drops are always taken from the supplied catalog. When the catalog has no
matching entry the event degrades to its fallback (a small heal, a few
credits, or nothing) instead of inventing an item.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from royale_engine.core.constants import LEGENDARY_MATERIAL_KEYS, MIN_TIER
from royale_engine.core.logging import get_logger
from royale_engine.engine.items import food_poisoning
from royale_engine.engine.rng import RandomSource, chance, pick, pick_weighted, rand_int
from royale_engine.engine.stats import effective_stats
from royale_engine.models.components import ItemStack
from royale_engine.models.entities import Actor
from royale_engine.models.enums import EventCategory, ItemCategory, TimeOfDay
from royale_engine.models.outcomes import EventOutcome
from royale_engine.models.ruleset import EventTuning, Ruleset


logger = get_logger(__name__)


# =============================================================================
# Category Weights
# =============================================================================


def category_weights(
    actor: Actor,
    day: int,
    time_of_day: TimeOfDay,
    tuning: EventTuning,
) -> list[tuple[EventCategory, float]]:
    """Modulate the base category weights for one actor and phase."""
    weights = {category: tuning.weights.get(category, 0.0) for category in EventCategory}

    ratio = actor.hp_ratio
    if ratio < tuning.low_hp_ratio:
        weights[EventCategory.REST] *= tuning.low_hp_rest_mult
        weights[EventCategory.MEDICAL] *= tuning.low_hp_medical_mult
    elif ratio < tuning.mid_hp_ratio:
        weights[EventCategory.REST] *= tuning.mid_hp_rest_mult
        weights[EventCategory.MEDICAL] *= tuning.mid_hp_medical_mult

    risk = min(tuning.day_risk_cap, 1 + max(0, day - 1) * tuning.day_risk_per_day)
    if time_of_day.is_night:
        risk *= tuning.night_risk_mult
    for category in EventCategory:
        if category.is_risk:
            weights[category] *= risk

    return [(category, weights[category]) for category in EventCategory]


# =============================================================================
# Catalog Queries
# =============================================================================


def _is_usable_goods(item: ItemStack) -> bool:
    return item.category not in (ItemCategory.WEAPON, ItemCategory.ARMOR) and item.equip_slot is None


def medical_candidates(catalog: Sequence[ItemStack]) -> list[ItemStack]:
    return [item for item in catalog if item.is_medical and _is_usable_goods(item)]


def food_candidates(catalog: Sequence[ItemStack]) -> list[ItemStack]:
    return [
        item
        for item in catalog
        if item.is_food and not item.is_medical and _is_usable_goods(item)
    ]


def material_candidates(catalog: Sequence[ItemStack]) -> list[ItemStack]:
    """Tier-1 materials, excluding legendary cores reserved for world spawns."""
    return [
        item
        for item in catalog
        if (item.category is ItemCategory.MATERIAL or item.has_tag("material"))
        and item.effective_tier == MIN_TIER
        and not item.has_tag("special", *LEGENDARY_MATERIAL_KEYS)
    ]


# =============================================================================
# Category Handlers
# =============================================================================


@dataclass
class _EventContext:
    actor: Actor
    day: int
    time_of_day: TimeOfDay
    catalog: Sequence[ItemStack]
    rng: RandomSource
    tuning: EventTuning
    power: float


def _clamp_int(value: float, low: int, high: int) -> int:
    return int(max(low, min(high, round(value))))


def _rest(ctx: _EventContext) -> EventOutcome:
    tuning = ctx.tuning
    night = ctx.time_of_day.is_night
    if (
        not night
        and ctx.actor.hp_ratio >= tuning.rest_suppress_hp_ratio
        and chance(ctx.rng, tuning.rest_suppress_chance)
    ):
        return EventOutcome.quiet(EventCategory.REST)

    base = tuning.rest_max_night if night else tuning.rest_max_day
    bonus = min(tuning.rest_power_bonus_max, int(ctx.power / tuning.rest_power_div))
    heal = _clamp_int(rand_int(ctx.rng, tuning.rest_min, base) + bonus, tuning.rest_min, tuning.rest_cap)
    where = "a hidden corner" if night else "the shade"
    return EventOutcome(
        category=EventCategory.REST,
        recovery=heal,
        log=f"💤 [{ctx.actor.name}] catches their breath in {where}. (HP +{heal})",
    )


def _medical(ctx: _EventContext) -> EventOutcome:
    item = pick(ctx.rng, medical_candidates(ctx.catalog))
    if item is not None:
        return EventOutcome(
            category=EventCategory.MEDICAL,
            drop=item,
            drop_quantity=1,
            log=f"🩹 [{ctx.actor.name}] finds [{item.name}] in an abandoned clinic.",
        )
    low, high = ctx.tuning.medical_fallback_heal
    heal = rand_int(ctx.rng, low, high)
    return EventOutcome(
        category=EventCategory.MEDICAL,
        recovery=heal,
        log=f"🩹 [{ctx.actor.name}] improvises a dressing for their wounds. (HP +{heal})",
    )


def _scavenge(ctx: _EventContext) -> EventOutcome:
    item = pick(ctx.rng, material_candidates(ctx.catalog))
    if item is not None:
        return EventOutcome(
            category=EventCategory.SCAVENGE,
            drop=item,
            drop_quantity=1,
            log=f"🔍 [{ctx.actor.name}] scavenges [{item.name}].",
        )
    low, high = ctx.tuning.scavenge_fallback_credits
    credits = rand_int(ctx.rng, low, high)
    return EventOutcome(
        category=EventCategory.SCAVENGE,
        earned_credits=credits,
        log=f"🔍 [{ctx.actor.name}] picks through the rubble and pockets {credits} Cr.",
    )


def _food(ctx: _EventContext) -> EventOutcome:
    item = pick(ctx.rng, food_candidates(ctx.catalog))
    name = ctx.actor.name
    if item is None:
        return EventOutcome(
            category=EventCategory.FOOD,
            log=f"🍂 [{name}] searches for food but comes back empty-handed.",
        )
    if item.has_tag("poison"):
        tuning = ctx.tuning
        if effective_stats(ctx.actor).intelligence > tuning.poison_int_threshold:
            return EventOutcome(
                category=EventCategory.FOOD,
                log=f"🧠 [{name}] sees that [{item.name}] is poisoned and throws it away.",
            )
        return EventOutcome(
            category=EventCategory.FOOD,
            damage=tuning.poison_damage,
            new_effect=food_poisoning(tuning.poison_duration),
            log=f"🤢 [{name}] eats the poisoned [{item.name}] and gets food poisoning!",
        )
    return EventOutcome(
        category=EventCategory.FOOD,
        drop=item,
        drop_quantity=1,
        log=f"🍎 [{name}] finds [{item.name}] and stows it away.",
    )


def _mishap(ctx: _EventContext) -> EventOutcome:
    tuning = ctx.tuning
    ceiling = tuning.mishap_max_night if ctx.time_of_day.is_night else tuning.mishap_max_day
    raw = (
        rand_int(ctx.rng, tuning.mishap_min, ceiling)
        + max(0, ctx.day - 1) * tuning.mishap_day_scale
        - ctx.power * tuning.power_reduction
    )
    damage = _clamp_int(raw, tuning.mishap_min, tuning.mishap_cap)
    return EventOutcome(
        category=EventCategory.MISHAP,
        damage=damage,
        log=f"🩼 [{ctx.actor.name}] takes a bad fall. (HP -{damage})",
    )


def _minor_fight(ctx: _EventContext) -> EventOutcome:
    tuning = ctx.tuning
    low, high = tuning.fight_damage
    raw = (
        rand_int(ctx.rng, low, high)
        + (tuning.fight_night_bonus if ctx.time_of_day.is_night else 0)
        + max(0, ctx.day - 1) * tuning.fight_day_scale
        - ctx.power * tuning.power_reduction
    )
    damage = _clamp_int(raw, tuning.fight_min, tuning.fight_cap)
    credit_low, credit_high = tuning.fight_credits
    credits = rand_int(ctx.rng, credit_low, credit_high)
    return EventOutcome(
        category=EventCategory.MINOR_FIGHT,
        damage=damage,
        earned_credits=credits,
        log=f"🗡️ [{ctx.actor.name}] fends off a skirmisher. (HP -{damage}, +{credits} Cr)",
    )


def _nothing(ctx: _EventContext) -> EventOutcome:
    return EventOutcome.quiet(EventCategory.NOTHING)


_HANDLERS = {
    EventCategory.NOTHING: _nothing,
    EventCategory.REST: _rest,
    EventCategory.MEDICAL: _medical,
    EventCategory.SCAVENGE: _scavenge,
    EventCategory.FOOD: _food,
    EventCategory.MISHAP: _mishap,
    EventCategory.MINOR_FIGHT: _minor_fight,
}


def generate_event(
    actor: Actor,
    day: int,
    ruleset: Ruleset,
    time_of_day: TimeOfDay,
    catalog: Sequence[ItemStack],
    rng: RandomSource,
    *,
    category: EventCategory | None = None,
) -> EventOutcome:
    """Roll and materialize one minor event for ``actor``.

    Args:
        actor: The acting actor (not modified).
        day: Current match day.
        ruleset: Supplies event tuning.
        time_of_day: Current phase.
        catalog: Item definitions drops may be taken from.
        rng: Random source.
        category: Force a category instead of rolling one.

    Returns:
        The event outcome for the orchestrator to apply.
    """
    tuning = ruleset.events
    if category is None:
        weights = category_weights(actor, day, time_of_day, tuning)
        category = pick_weighted(rng, weights) or EventCategory.NOTHING

    outcome = _HANDLERS[category](
        _EventContext(
            actor=actor,
            day=day,
            time_of_day=time_of_day,
            catalog=catalog,
            rng=rng,
            tuning=tuning,
            power=effective_stats(actor).power,
        )
    )
    logger.debug(
        "Event generated",
        actor_id=actor.id,
        category=category.value,
        silent=outcome.silent,
        damage=outcome.damage,
        recovery=outcome.recovery,
    )
    return outcome


__all__ = [
    "category_weights",
    "medical_candidates",
    "food_candidates",
    "material_candidates",
    "generate_event",
]
