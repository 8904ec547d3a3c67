"""One-shot battle resolution.

Two actors are scored with the same formula, roles swapped:

1. Effective stats plus equipment deltas.
2. Skill bonus (dispatched on ``SkillKind``) and weapon bonus, scaled by
   the sudden-death multiplier ``1 + day * 0.1``.
3. Ranged exchange (shooting vs. agility and armor) and melee exchange
   (strength and dexterity vs. endurance).
4. Luck, crit and lifesteal rolls on top of the offense base.

A margin below ``max(5, 30 - 3 * day)`` is a draw.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field

from royale_engine.core.exceptions import CombatError
from royale_engine.core.logging import get_logger
from royale_engine.engine.equipment import (
    EquipmentDeltas,
    EquipmentTotals,
    apply_deltas,
    equipment_deltas,
    equipment_stat_totals,
)
from royale_engine.engine.rng import RandomSource, chance, draw, pick
from royale_engine.engine.stats import effective_stats
from royale_engine.models.entities import Actor
from royale_engine.models.enums import SkillKind, Stat
from royale_engine.models.outcomes import BattleOutcome
from royale_engine.models.ruleset import BattleTuning, Ruleset


logger = get_logger(__name__)


DRAW_LOGS: tuple[str, ...] = (
    "🤝 [{a}] and [{b}] fight to a standstill and break off.",
    "🛡️ [{b}] barely turns aside [{a}]'s ambush and backs away.",
    "⚔️ [{a}] and [{b}] clash hard, but neither lands a decisive blow.",
)
WIN_LOG = "💀 [{winner}] takes down [{loser}] and wins the fight!"
ESCALATED_WIN_LOG = "🔥 [{winner}]'s critical blow utterly crushes [{loser}]!"


# =============================================================================
# Skill Formulas
# =============================================================================


@dataclass(frozen=True)
class SkillContext:
    """Inputs a skill formula may read.

    Attributes:
        actor: The skill's owner.
        stats: Effective stats plus equipment deltas.
        skill_mult: Intelligence weight reduced by the opponent's mentality.
        tuning: Battle constants.
    """

    actor: Actor
    stats: dict[Stat, float]
    skill_mult: float
    tuning: BattleTuning


SkillFormula = Callable[[SkillContext], tuple[float, str | None]]


def _no_skill(ctx: SkillContext) -> tuple[float, str | None]:
    return 0.0, None


def _drone_support(ctx: SkillContext) -> tuple[float, str | None]:
    bonus = ctx.stats[Stat.SHT] * ctx.tuning.drone_sht_scale * ctx.skill_mult
    return bonus, f"🚁 [{ctx.actor.name}] calls in drone support fire!"


def _abyss(ctx: SkillContext) -> tuple[float, str | None]:
    actor = ctx.actor
    if actor.hp_ratio >= ctx.tuning.abyss_hp_ratio:
        return 0.0, None
    missing = max(0, actor.max_hp - actor.hp)
    bonus = missing * ctx.tuning.abyss_missing_hp_scale * ctx.skill_mult
    if bonus > ctx.tuning.abyss_log_min:
        return bonus, f"🌑 The abyss within [{actor.name}] erupts!"
    return bonus, None


def _iaido(ctx: SkillContext) -> tuple[float, str | None]:
    bonus = (ctx.stats[Stat.AGI] + ctx.stats[Stat.DEX]) * ctx.tuning.iaido_scale * ctx.skill_mult
    return bonus, f"⚡ [{ctx.actor.name}] opens with a lightning-fast draw!"


SKILL_FORMULAS: dict[SkillKind, SkillFormula] = {
    SkillKind.NONE: _no_skill,
    SkillKind.DRONE_SUPPORT: _drone_support,
    SkillKind.ABYSS: _abyss,
    SkillKind.IAIDO: _iaido,
}


# =============================================================================
# Scoring
# =============================================================================


@dataclass
class CombatProfile:
    """Pre-roll view of one combatant."""

    actor: Actor
    stats: dict[Stat, float]
    deltas: EquipmentDeltas
    totals: EquipmentTotals


@dataclass
class ScoreBreakdown:
    """Score contributions of one combatant.

    Attributes:
        skill_bonus: Capped, amplified skill bonus (before sudden death).
        weapon_bonus: Weapon bonus (before sudden death).
        ranged: Ranged exchange score.
        melee: Melee exchange score.
        luck: Luck roll.
        crit: Crit bonus (0 when the roll missed).
        lifesteal: Lifesteal bonus.
        offense_base: Bonus, ranged and melee score before crit.
        logs: Highlight lines produced while scoring.
    """

    skill_bonus: float = 0.0
    weapon_bonus: float = 0.0
    ranged: float = 0.0
    melee: float = 0.0
    luck: float = 0.0
    crit: float = 0.0
    lifesteal: float = 0.0
    offense_base: float = 0.0
    logs: list[str] = field(default_factory=list)

    @property
    def total(self) -> float:
        return self.offense_base + self.crit + self.luck + self.lifesteal


def build_profile(actor: Actor, ruleset: Ruleset) -> CombatProfile:
    """Collect effective stats and equipment for one actor."""
    deltas = equipment_deltas(actor, ruleset)
    return CombatProfile(
        actor=actor,
        stats=apply_deltas(effective_stats(actor), deltas),
        deltas=deltas,
        totals=equipment_stat_totals(actor),
    )


def sudden_death_multiplier(day: int, tuning: BattleTuning) -> float:
    return 1 + max(0, day) * tuning.sudden_death_per_day


def draw_threshold(day: int, tuning: BattleTuning) -> float:
    """Minimum score margin for a decisive result."""
    return max(tuning.draw_floor, tuning.draw_base - day * tuning.draw_per_day)


def skill_bonus(me: CombatProfile, opponent: CombatProfile, ruleset: Ruleset) -> tuple[float, str | None]:
    """Compute the capped skill bonus of ``me`` against ``opponent``."""
    weights = ruleset.stat_weights
    tuning = ruleset.battle
    skill_mult = max(
        tuning.skill_mult_floor,
        weights.intelligence
        - opponent.stats[Stat.MEN] * weights.mentality * tuning.men_resist_scale,
    )
    formula = SKILL_FORMULAS.get(me.actor.skill.kind, _no_skill)
    raw, log = formula(SkillContext(me.actor, me.stats, skill_mult, tuning))
    amplified = raw * (1 + me.totals.skill_amp)
    return min(tuning.skill_bonus_cap, max(0.0, amplified)), log


def weapon_bonus(me: CombatProfile, ruleset: Ruleset) -> float:
    """Weapon bonus scaling with shooting (ranged) or strength (melee)."""
    if me.deltas.weapon_tier <= 0:
        return 0.0
    weights = ruleset.stat_weights
    tuning = ruleset.battle
    if me.deltas.weapon_is_ranged:
        base = me.stats[Stat.SHT] * weights.shooting
    else:
        base = me.stats[Stat.STR] * weights.strength
    tier_mult = 1 + tuning.weapon_tier_step * (me.deltas.weapon_tier - 1)
    return base * tuning.weapon_stat_scale * tier_mult * (1 + me.totals.atk_speed)


def score_combatant(
    me: CombatProfile,
    opponent: CombatProfile,
    day: int,
    ruleset: Ruleset,
    rng: RandomSource,
) -> ScoreBreakdown:
    """Score one side of a battle.

    Draws from ``rng`` in a fixed order: luck, then crit (only when the
    crit chance is positive).
    """
    weights = ruleset.stat_weights
    tuning = ruleset.battle
    sudden = sudden_death_multiplier(day, tuning)
    logs: list[str] = []

    skill, skill_log = skill_bonus(me, opponent, ruleset)
    if skill_log:
        logs.append(skill_log)
    weapon = weapon_bonus(me, ruleset)

    ranged = max(
        0.0,
        me.stats[Stat.SHT] * weights.shooting
        - opponent.stats[Stat.AGI] * weights.agility
        - opponent.deltas.armor_def,
    ) * sudden
    melee = max(
        0.0,
        me.stats[Stat.STR] * weights.strength
        + me.stats[Stat.DEX] * weights.dexterity
        - opponent.stats[Stat.END] * weights.endurance,
    ) * sudden
    luck = draw(rng) * me.stats[Stat.LUK] * weights.luck * tuning.luck_scale

    offense_base = (skill + weapon) * sudden + ranged + melee
    crit = 0.0
    if chance(rng, me.totals.crit_chance):
        crit = offense_base * tuning.crit_damage_scale
        logs.append(f"💥 [{me.actor.name}] lands a critical hit! (+{crit:.1f})")

    offense = offense_base + crit
    lifesteal = offense * me.totals.lifesteal * tuning.lifesteal_heal_scale
    if lifesteal > 0 and lifesteal >= tuning.lifesteal_log_min:
        logs.append(f"🩸 [{me.actor.name}] feeds on the exchange. (+{lifesteal:.1f})")

    return ScoreBreakdown(
        skill_bonus=skill,
        weapon_bonus=weapon,
        ranged=ranged,
        melee=melee,
        luck=luck,
        crit=crit,
        lifesteal=lifesteal,
        offense_base=offense_base,
        logs=logs,
    )


# =============================================================================
# Resolver
# =============================================================================


def resolve_battle(
    actor_a: Actor | None,
    actor_b: Actor | None,
    day: int,
    ruleset: Ruleset,
    rng: RandomSource,
) -> BattleOutcome:
    """Resolve a battle between two actors.

    Neither actor is modified; the orchestrator applies the outcome.

    Args:
        actor_a: First combatant.
        actor_b: Second combatant.
        day: Current match day.
        ruleset: Weights and tuning for the match.
        rng: Source for luck, crit and draw-line rolls.

    Returns:
        A draw, or a winner/loser pair with a transcript line.

    Raises:
        CombatError: If fewer than two distinct actors are supplied.
    """
    if actor_a is None or actor_b is None:
        missing = actor_a.id if actor_a is not None else (actor_b.id if actor_b else None)
        raise CombatError("Battle needs two actors", actor_id=missing, day=day)
    if actor_a is actor_b or actor_a.id == actor_b.id:
        raise CombatError("An actor cannot battle itself", actor_id=actor_a.id, day=day)

    profile_a = build_profile(actor_a, ruleset)
    profile_b = build_profile(actor_b, ruleset)
    score_a = score_combatant(profile_a, profile_b, day, ruleset, rng)
    score_b = score_combatant(profile_b, profile_a, day, ruleset, rng)
    total_a, total_b = score_a.total, score_b.total
    highlights = [*score_a.logs, *score_b.logs]

    logger.debug(
        "Battle scored",
        actor_a=actor_a.id,
        actor_b=actor_b.id,
        day=day,
        score_a=round(total_a, 2),
        score_b=round(total_b, 2),
    )

    threshold = draw_threshold(day, ruleset.battle)
    if abs(total_a - total_b) < threshold:
        template = pick(rng, DRAW_LOGS) or DRAW_LOGS[0]
        return BattleOutcome(
            draw=True,
            log=template.format(a=actor_a.name, b=actor_b.name),
            scores=(total_a, total_b),
            highlights=highlights,
        )

    winner, loser = (actor_a, actor_b) if total_a > total_b else (actor_b, actor_a)
    template = ESCALATED_WIN_LOG if day >= ruleset.battle.escalation_day else WIN_LOG
    return BattleOutcome(
        draw=False,
        winner=winner,
        loser=loser,
        log=template.format(winner=winner.name, loser=loser.name),
        scores=(total_a, total_b),
        highlights=highlights,
    )


__all__ = [
    "DRAW_LOGS",
    "SKILL_FORMULAS",
    "SkillContext",
    "SkillFormula",
    "CombatProfile",
    "ScoreBreakdown",
    "build_profile",
    "sudden_death_multiplier",
    "draw_threshold",
    "skill_bonus",
    "weapon_bonus",
    "score_combatant",
    "resolve_battle",
]
