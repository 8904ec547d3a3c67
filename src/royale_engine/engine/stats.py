"""Stat aggregation and status-effect ticking.

``effective_stats`` is a pure function of an actor and its effects.
``tick_effects`` is the per-phase update the orchestrator runs on every
living actor: periodic damage first, then duration decrement and expiry.
"""

from __future__ import annotations

import math

from royale_engine.core.constants import (
    BLEED_DEFAULT_DOT,
    FOOD_POISONING_DOT,
    FOOD_POISONING_END_FACTOR,
    MIN_EFFECTIVE_STAT,
)
from royale_engine.core.exceptions import InvalidGameStateError
from royale_engine.core.logging import get_logger
from royale_engine.models.components import StatBlock, StatusEffect
from royale_engine.models.entities import Actor
from royale_engine.models.enums import EffectName, Stat
from royale_engine.models.outcomes import EffectTickResult


logger = get_logger(__name__)


def effective_stats(actor: Actor) -> StatBlock:
    """Derive an actor's effective base stats.

    Each effect's flat modifiers are added first; food poisoning then
    halves endurance (floored). Every stat is finally clamped to at least 1.

    Args:
        actor: The actor to evaluate.

    Returns:
        A new StatBlock; the actor is not modified.

    Example:
        >>> poison = StatusEffect(name="food poisoning", effect=EffectName.FOOD_POISONING)
        >>> poisoned = Actor(id="a", name="A", stats=StatBlock(end=9), effects=[poison])
        >>> effective_stats(poisoned).endurance
        4
    """
    values = actor.stats.as_dict()
    for effect in actor.effects:
        for stat, delta in effect.stat_modifiers.items():
            values[stat] = values.get(stat, 0) + delta
        if effect.has_behavior(EffectName.FOOD_POISONING):
            values[Stat.END] = math.floor(values[Stat.END] * FOOD_POISONING_END_FACTOR)

    return StatBlock.from_mapping(
        {stat: max(MIN_EFFECTIVE_STAT, value) for stat, value in values.items()}
    )


def tick_damage(effect: StatusEffect) -> int:
    """HP an effect removes per phase."""
    if effect.has_behavior(EffectName.FOOD_POISONING):
        return FOOD_POISONING_DOT
    if effect.has_behavior(EffectName.BLEEDING):
        dot = effect.dot_damage if effect.dot_damage is not None else BLEED_DEFAULT_DOT
        return max(1, int(dot))
    if effect.dot_damage:
        return max(0, int(effect.dot_damage))
    return 0


def tick_effects(actor: Actor) -> EffectTickResult:
    """Advance every effect on ``actor`` by one phase.

    Periodic damage is applied before durations decrement. Effects whose
    duration reaches 0 are removed; permanent effects never decrement.
    An effect that already sits at 0 has run out: it is removed without
    dealing damage.

    Args:
        actor: The actor to update in place.

    Returns:
        Damage dealt and the names of expired effects.

    Raises:
        InvalidGameStateError: If an effect would be left with a negative
            remaining duration.
    """
    result = EffectTickResult()
    if not actor.effects:
        return result

    active: list[StatusEffect] = []
    for effect in actor.effects:
        if effect.remaining_duration == 0:
            result.expired.append(effect.name)
        else:
            active.append(effect)

    damage = sum(tick_damage(effect) for effect in active)

    remaining: list[StatusEffect] = []
    for effect in active:
        if effect.is_permanent:
            remaining.append(effect)
            continue
        left = effect.remaining_duration - 1
        if left < 0:
            raise InvalidGameStateError(
                f"Effect '{effect.name}' on {actor.name} has negative remaining duration",
                current_state=f"remaining_duration={left}",
                details={"actor_id": actor.id},
            )
        if left == 0:
            result.expired.append(effect.name)
        else:
            remaining.append(effect.model_copy(update={"remaining_duration": left}))

    actor.effects = remaining
    if damage:
        result.damage = actor.take_damage(damage)
        result.logs.append(f"🩸 [{actor.name}] suffers {result.damage} damage from lingering effects.")
    for name in result.expired:
        result.logs.append(f"✨ [{actor.name}] is no longer affected by {name}.")

    if damage or result.expired:
        logger.debug(
            "Effects ticked",
            actor_id=actor.id,
            damage=result.damage,
            expired=result.expired,
        )
    return result


__all__ = [
    "effective_stats",
    "tick_damage",
    "tick_effects",
]
