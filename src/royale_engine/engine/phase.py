"""Phase orchestration: the per-phase driver of a match.

Each call to ``PhaseOrchestrator.advance_phase`` resolves exactly one
half-day:

1. Toggle the clock (night -> morning starts a new day).
2. Tick status effects and apply forbidden-zone damage; actors who drop
   here fall before anyone acts.
3. Derive the battle and encounter probabilities for the day.
4. Shuffle the survivors into a turn queue. Each actor may auto-heal, then
   battles the next queued actor, shares a flavor encounter with them, or
   gets a solo minor event. An encounter roll with no qualifying template
   falls back to a solo event and leaves the partner queued.
5. Split the base credits among survivors and finish the match once at
   most one actor is left.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass, field

from royale_engine.core.config import get_settings
from royale_engine.core.exceptions import InvalidGameStateError
from royale_engine.core.logging import bind_context, clear_context, get_logger
from royale_engine.engine.battle import resolve_battle
from royale_engine.engine.events import generate_event
from royale_engine.engine.flavor import pick_flavor_line
from royale_engine.engine.items import add_item, consume_item, find_healing_item
from royale_engine.engine.rng import RandomSource, SeededRandom, draw, shuffled
from royale_engine.engine.stats import tick_effects
from royale_engine.models.components import ItemStack
from royale_engine.models.entities import Actor
from royale_engine.models.enums import LogKind, MatchStatus, TimeOfDay
from royale_engine.models.game_state import FlavorEvent, MatchState, MatchSummary
from royale_engine.models.ruleset import PhaseTuning, Ruleset


logger = get_logger(__name__)

DEFAULT_MAX_PHASES = 500


@dataclass
class PhaseReport:
    """What happened during one phase.

    Attributes:
        day: Day of the phase.
        time_of_day: Morning or night.
        casualties: Ids of actors who fell this phase, in death order.
        battles: Battles resolved.
        draws: Battles that ended in a draw.
        encounters: Flavor encounters logged.
        events: Solo minor events resolved.
        finished: Whether the match ended this phase.
        winner_id: Winner, once finished.
    """

    day: int
    time_of_day: TimeOfDay
    casualties: list[str] = field(default_factory=list)
    battles: int = 0
    draws: int = 0
    encounters: int = 0
    events: int = 0
    finished: bool = False
    winner_id: str | None = None


def battle_probability(day: int, tuning: PhaseTuning) -> float:
    """Chance that an actor with company starts a battle."""
    return min(tuning.battle_max, tuning.battle_base + day * tuning.battle_day_scale)


def event_probability(day: int, tuning: PhaseTuning) -> float:
    """Cumulative chance of a battle or a flavor encounter."""
    return min(tuning.event_max, battle_probability(day, tuning) + tuning.event_offset)


def zone_damage(day: int, tuning: PhaseTuning) -> int:
    """Forbidden-zone damage for ``day`` (0 before the zone opens), rounded half up."""
    if day < tuning.forbidden_zone_start_day:
        return 0
    return math.floor(day * tuning.forbidden_zone_damage_base + 0.5)


class PhaseOrchestrator:
    """Drives one match phase by phase.

    The orchestrator exclusively owns the match state while a phase runs.
    Catalog and flavor templates are read-only inputs.

    Example:
        >>> orchestrator = PhaseOrchestrator.new_match(actors, get_ruleset("ER_S10"))
        >>> while not orchestrator.state.is_finished:
        ...     orchestrator.advance_phase()
        >>> orchestrator.state.summary().winner_id
    """

    def __init__(
        self,
        state: MatchState,
        ruleset: Ruleset,
        *,
        catalog: Sequence[ItemStack] = (),
        flavor_events: Sequence[FlavorEvent] = (),
        rng: RandomSource | None = None,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            state: Match state to drive.
            ruleset: Tuning for the whole match.
            catalog: Item definitions for event drops.
            flavor_events: Templates for two-actor encounters.
            rng: Random source; defaults to a ``SeededRandom`` seeded from
                ``Settings.random_seed``.
        """
        self._state = state
        self._ruleset = ruleset
        self._catalog = tuple(catalog)
        self._flavor_events = tuple(flavor_events)
        self._rng = rng if rng is not None else SeededRandom(get_settings().random_seed)

        logger.info(
            "PhaseOrchestrator initialized",
            match_id=state.match_id,
            ruleset=ruleset.id,
            actors=len(state.actors),
        )

    @classmethod
    def new_match(
        cls,
        actors: Sequence[Actor],
        ruleset: Ruleset,
        *,
        catalog: Sequence[ItemStack] = (),
        flavor_events: Sequence[FlavorEvent] = (),
        rng: RandomSource | None = None,
    ) -> PhaseOrchestrator:
        """Start a fresh match for ``actors``."""
        state = MatchState(
            ruleset_id=ruleset.id,
            actors=list(actors),
            kills={actor.id: 0 for actor in actors},
        )
        return cls(state, ruleset, catalog=catalog, flavor_events=flavor_events, rng=rng)

    @property
    def state(self) -> MatchState:
        return self._state

    @property
    def ruleset(self) -> Ruleset:
        return self._ruleset

    # -------------------------------------------------------------------------
    # Phase loop
    # -------------------------------------------------------------------------

    def advance_phase(self) -> PhaseReport:
        """Resolve exactly one phase.

        Returns:
            A report of the phase.

        Raises:
            InvalidGameStateError: If the match already finished, or if
                there is nobody alive and no casualty to report.
        """
        state = self._state
        if state.is_finished:
            raise InvalidGameStateError(
                "Match already finished",
                current_state=state.status.value,
                expected_states=[MatchStatus.NOT_STARTED.value, MatchStatus.IN_PROGRESS.value],
            )
        if not state.alive_actors() and not state.casualties:
            raise InvalidGameStateError(
                "Phase advanced with no living actors and no casualties",
                current_state=state.status.value,
                details={"match_id": state.match_id},
            )

        self._toggle_clock()
        report = PhaseReport(day=state.day, time_of_day=state.time_of_day)
        bind_context(match_id=state.match_id, day=state.day, phase=state.time_of_day.value)
        try:
            self._run_phase(report)
        finally:
            clear_context()
        return report

    def run_to_completion(self, *, max_phases: int = DEFAULT_MAX_PHASES) -> MatchSummary:
        """Advance phases until the match finishes.

        Raises:
            InvalidGameStateError: If the match is still running after
                ``max_phases`` phases.
        """
        for _ in range(max_phases):
            if self._state.is_finished:
                break
            self.advance_phase()
        if not self._state.is_finished:
            raise InvalidGameStateError(
                "Match did not finish within the phase limit",
                current_state=self._state.status.value,
                details={"max_phases": max_phases},
            )
        return self._state.summary()

    def _toggle_clock(self) -> None:
        state = self._state
        if state.time_of_day.is_night:
            state.day += 1
            state.time_of_day = TimeOfDay.MORNING
        else:
            state.time_of_day = TimeOfDay.NIGHT
        state.status = MatchStatus.IN_PROGRESS
        label = "Night" if state.time_of_day.is_night else "Morning"
        state.add_log(f"=== Day {state.day} {label} ===", LogKind.DAY_HEADER)

    def _run_phase(self, report: PhaseReport) -> None:
        state = self._state
        tuning = self._ruleset.phase

        if self._time_limit_reached():
            state.add_log(
                f"⏹️ Night {state.day} reached: the match ends on the time limit.",
                LogKind.HIGHLIGHT,
            )
            self._finish(report, time_limit=True)
            return

        self._apply_upkeep(report)

        battle_p = battle_probability(state.day, tuning)
        event_p = event_probability(state.day, tuning)
        queue = shuffled(self._rng, state.alive_actors())

        while queue:
            actor = queue.pop()
            if not actor.is_alive:
                continue
            self._auto_consume(actor)

            if queue:
                roll = draw(self._rng)
                if roll < battle_p:
                    self._battle(actor, queue.pop(0), report)
                    continue
                if roll < event_p and self._encounter(actor, queue[0], report):
                    queue.pop(0)
                    continue
            self._solo_event(actor, report)

        self._pay_base_credits()
        logger.info(
            "Phase resolved",
            alive=state.alive_count,
            casualties=len(report.casualties),
            battles=report.battles,
            events=report.events,
        )
        if state.alive_count <= 1:
            self._finish(report)

    def _time_limit_reached(self) -> bool:
        limit = self._ruleset.phase.time_limit_day
        state = self._state
        return limit is not None and state.time_of_day.is_night and state.day >= limit

    # -------------------------------------------------------------------------
    # Steps
    # -------------------------------------------------------------------------

    def _apply_upkeep(self, report: PhaseReport) -> None:
        """Tick effects, then apply zone damage; the fallen leave at once."""
        state = self._state
        for actor in state.alive_actors():
            for line in tick_effects(actor).logs:
                state.add_log(line, LogKind.NORMAL)

        damage = zone_damage(state.day, self._ruleset.phase)
        if damage > 0:
            state.add_log(f"⚠️ The forbidden zone closes in. (HP -{damage} for everyone)", LogKind.SYSTEM)
            for actor in state.alive_actors():
                actor.take_damage(damage)

        for actor in state.actors:
            if not actor.is_alive and actor.id not in state.casualties:
                self._record_casualty(actor, report, f"☠️ [{actor.name}] collapses and is out of the match.")

    def _auto_consume(self, actor: Actor) -> None:
        tuning = self._ruleset.consumables
        if not tuning.enabled or actor.hp >= tuning.use_hp_below:
            return
        item = find_healing_item(actor)
        if item is None:
            return
        outcome = consume_item(actor, item.id, self._ruleset)
        if outcome is not None and outcome.consumed:
            self._state.add_log(outcome.log, LogKind.NORMAL)

    def _battle(self, actor: Actor, opponent: Actor, report: PhaseReport) -> None:
        state = self._state
        outcome = resolve_battle(actor, opponent, state.day, self._ruleset, self._rng)
        report.battles += 1
        for line in outcome.highlights:
            state.add_log(line, LogKind.HIGHLIGHT)

        if outcome.draw or outcome.winner is None or outcome.loser is None:
            report.draws += 1
            state.add_log(outcome.log, LogKind.NORMAL)
            return

        winner, loser = outcome.winner, outcome.loser
        loser.hp = 0
        state.record_kill(winner.id)
        winner.credits += self._ruleset.credits.kill
        self._record_casualty(loser, report, outcome.log)

    def _encounter(self, actor: Actor, other: Actor, report: PhaseReport) -> bool:
        """Log a two-actor flavor line; False when no template qualifies."""
        line = pick_flavor_line(self._flavor_events, self._state.time_of_day, actor, other, self._rng)
        if line is None:
            return False
        report.encounters += 1
        self._state.add_log(line, LogKind.NORMAL)
        return True

    def _solo_event(self, actor: Actor, report: PhaseReport) -> None:
        state = self._state
        outcome = generate_event(
            actor, state.day, self._ruleset, state.time_of_day, self._catalog, self._rng
        )
        report.events += 1
        if outcome.silent:
            return

        if outcome.damage:
            actor.take_damage(outcome.damage)
        if outcome.recovery:
            actor.heal(outcome.recovery)
        if outcome.drop is not None:
            add_item(actor, outcome.drop, outcome.drop_quantity or 1)
        if outcome.earned_credits:
            actor.credits += outcome.earned_credits
        if outcome.new_effect is not None:
            actor.effects = [*actor.effects, outcome.new_effect]
        if outcome.log:
            state.add_log(outcome.log, LogKind.NORMAL)

        if not actor.is_alive:
            self._record_casualty(actor, report, f"☠️ [{actor.name}] succumbs to their injuries.")

    def _record_casualty(self, actor: Actor, report: PhaseReport, line: str) -> None:
        state = self._state
        state.casualties.append(actor.id)
        report.casualties.append(actor.id)
        state.add_log(line, LogKind.DEATH)

    def _pay_base_credits(self) -> None:
        survivors = self._state.alive_actors()
        pool = self._ruleset.credits.base_per_phase
        if not survivors or pool <= 0:
            return
        share, remainder = divmod(pool, len(survivors))
        for index, actor in enumerate(survivors):
            actor.credits += share + (remainder if index == 0 else 0)

    def _finish(self, report: PhaseReport, *, time_limit: bool = False) -> None:
        state = self._state
        alive = state.alive_actors()
        if time_limit:
            alive.sort(key=lambda a: (-a.hp, a.name))
        winner = alive[0] if len(alive) == 1 or (time_limit and alive) else None

        state.status = MatchStatus.FINISHED
        state.winner_id = winner.id if winner else None
        report.finished = True
        report.winner_id = state.winner_id

        if winner is not None:
            state.add_log(f"🏆 [{winner.name}] is the last one standing!", LogKind.HIGHLIGHT)
        else:
            state.add_log("🕯️ Nobody survived the match.", LogKind.HIGHLIGHT)
        logger.info("Match finished", winner_id=state.winner_id, casualties=len(state.casualties))


__all__ = [
    "DEFAULT_MAX_PHASES",
    "PhaseReport",
    "battle_probability",
    "event_probability",
    "zone_damage",
    "PhaseOrchestrator",
]
