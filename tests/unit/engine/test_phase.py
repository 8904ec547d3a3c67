"""Tests for the phase orchestrator."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from royale_engine.core.exceptions import InvalidGameStateError
from royale_engine.engine.phase import (
    PhaseOrchestrator,
    battle_probability,
    event_probability,
    zone_damage,
)
from royale_engine.engine.rng import SeededRandom, SequenceRandom
from royale_engine.models import (
    EffectName,
    ItemStack,
    LogKind,
    MatchState,
    MatchStatus,
    StatusEffect,
    TimeOfDay,
    get_ruleset,
)


if TYPE_CHECKING:
    from collections.abc import Callable

    from royale_engine.models import Actor, FlavorEvent, Ruleset


class TestProbabilities:
    """Tests for per-day probabilities and zone damage."""

    def test_battle_probability(self, ruleset: Ruleset) -> None:
        """Test battle chance grows daily up to its cap."""
        assert battle_probability(1, ruleset.phase) == pytest.approx(0.35)
        assert battle_probability(30, ruleset.phase) == pytest.approx(0.85)

    def test_event_probability(self, ruleset: Ruleset) -> None:
        """Test encounter chance stacks on battle chance up to its cap."""
        assert event_probability(1, ruleset.phase) == pytest.approx(0.65)
        assert event_probability(30, ruleset.phase) == pytest.approx(0.95)

    @pytest.mark.parametrize(("day", "expected"), [(1, 0), (2, 0), (3, 5), (4, 6), (10, 15)])
    def test_zone_damage(self, ruleset: Ruleset, day: int, expected: int) -> None:
        """Test zone damage starts on day 3 and rounds half up."""
        assert zone_damage(day, ruleset.phase) == expected


class TestAdvancePhase:
    """Tests for resolving single phases."""

    def test_first_phase_is_day_one_morning(
        self,
        make_actor: Callable[..., Actor],
        ruleset: Ruleset,
        zero_rng: SequenceRandom,
    ) -> None:
        """Test a new match opens on day 1 morning."""
        orchestrator = PhaseOrchestrator.new_match(
            [make_actor("alice"), make_actor("bob")], ruleset, rng=zero_rng
        )
        assert orchestrator.state.kills == {"alice": 0, "bob": 0}

        report = orchestrator.advance_phase()

        state = orchestrator.state
        assert (state.day, state.time_of_day) == (1, TimeOfDay.MORNING)
        assert state.status is MatchStatus.IN_PROGRESS
        assert state.log[0].kind is LogKind.DAY_HEADER
        assert report.battles == 1
        assert report.draws == 1
        assert not report.finished

    def test_clock_alternates(
        self,
        make_actor: Callable[..., Actor],
        ruleset: Ruleset,
        zero_rng: SequenceRandom,
    ) -> None:
        """Test phases alternate morning and night."""
        orchestrator = PhaseOrchestrator.new_match(
            [make_actor("alice"), make_actor("bob")], ruleset, rng=zero_rng
        )
        clocks = []
        for _ in range(3):
            report = orchestrator.advance_phase()
            clocks.append((report.day, report.time_of_day))
        assert clocks == [
            (1, TimeOfDay.MORNING),
            (1, TimeOfDay.NIGHT),
            (2, TimeOfDay.MORNING),
        ]

    def test_decisive_battle_ends_match(
        self,
        make_actor: Callable[..., Actor],
        ruleset: Ruleset,
        zero_rng: SequenceRandom,
    ) -> None:
        """Test a lopsided battle removes the loser and finishes the match."""
        strong, weak = make_actor("strong", stat=50), make_actor("weak", stat=5)
        orchestrator = PhaseOrchestrator.new_match([strong, weak], ruleset, rng=zero_rng)

        report = orchestrator.advance_phase()

        state = orchestrator.state
        assert report.casualties == ["weak"]
        assert report.finished
        assert report.winner_id == "strong"
        assert weak.hp == 0
        assert state.kills == {"strong": 1, "weak": 0}
        assert strong.credits == 25 + 10
        assert state.is_finished
        assert state.log[-1].kind is LogKind.HIGHLIGHT
        assert any(entry.kind is LogKind.DEATH for entry in state.log)

    def test_legacy_pays_no_kill_credits(
        self,
        make_actor: Callable[..., Actor],
        zero_rng: SequenceRandom,
    ) -> None:
        """Test the legacy ruleset pays only base credits."""
        strong, weak = make_actor("strong", stat=50), make_actor("weak", stat=5)
        orchestrator = PhaseOrchestrator.new_match([strong, weak], get_ruleset("LEGACY"), rng=zero_rng)
        orchestrator.advance_phase()
        assert strong.credits == 10

    def test_advance_after_finish_raises(
        self,
        make_actor: Callable[..., Actor],
        ruleset: Ruleset,
        zero_rng: SequenceRandom,
    ) -> None:
        """Test a finished match cannot advance."""
        orchestrator = PhaseOrchestrator.new_match(
            [make_actor("strong", stat=50), make_actor("weak", stat=5)], ruleset, rng=zero_rng
        )
        orchestrator.advance_phase()
        with pytest.raises(InvalidGameStateError):
            orchestrator.advance_phase()

    def test_empty_match_raises(self, ruleset: Ruleset, zero_rng: SequenceRandom) -> None:
        """Test an empty roster cannot advance."""
        orchestrator = PhaseOrchestrator.new_match([], ruleset, rng=zero_rng)
        with pytest.raises(InvalidGameStateError):
            orchestrator.advance_phase()

    def test_base_credits_split(
        self,
        make_actor: Callable[..., Actor],
        zero_rng: SequenceRandom,
    ) -> None:
        """Test base credits are shared, remainder to the first survivor."""
        ruleset = get_ruleset("ER_S10", {"credits": {"base_per_phase": 11}})
        actors = [make_actor("alice"), make_actor("bob")]
        orchestrator = PhaseOrchestrator.new_match(actors, ruleset, rng=zero_rng)

        orchestrator.advance_phase()

        assert [actor.credits for actor in actors] == [6, 5]

    def test_flavor_encounter(
        self,
        make_actor: Callable[..., Actor],
        flavor_events: list[FlavorEvent],
        zero_rng: SequenceRandom,
    ) -> None:
        """Test an encounter roll logs a pair flavor line."""
        ruleset = get_ruleset("ER_S10", {"phase": {"battle_base": 0.0, "battle_day_scale": 0.0}})
        orchestrator = PhaseOrchestrator.new_match(
            [make_actor("alice"), make_actor("bob")],
            ruleset,
            flavor_events=flavor_events,
            rng=zero_rng,
        )

        report = orchestrator.advance_phase()

        assert report.encounters == 1
        assert report.battles == 0
        texts = [entry.text for entry in orchestrator.state.log]
        assert "[Alice] and [Bob] share a can of beans." in texts

    def test_encounter_without_templates_falls_back_to_solo_events(
        self,
        make_actor: Callable[..., Actor],
        zero_rng: SequenceRandom,
    ) -> None:
        """Test both actors still act when no flavor template qualifies."""
        ruleset = get_ruleset("ER_S10", {"phase": {"battle_base": 0.0, "battle_day_scale": 0.0}})
        orchestrator = PhaseOrchestrator.new_match(
            [make_actor("alice"), make_actor("bob")],
            ruleset,
            rng=zero_rng,
        )

        report = orchestrator.advance_phase()

        assert report.encounters == 0
        assert report.battles == 0
        assert report.events == 2

    def test_lone_actor_gets_solo_event_and_wins(
        self,
        make_actor: Callable[..., Actor],
        ruleset: Ruleset,
        zero_rng: SequenceRandom,
    ) -> None:
        """Test a lone actor gets a solo event and wins."""
        orchestrator = PhaseOrchestrator.new_match([make_actor("alice")], ruleset, rng=zero_rng)

        report = orchestrator.advance_phase()

        assert report.events == 1
        assert report.finished
        assert report.winner_id == "alice"

    def test_auto_consume_before_acting(
        self,
        make_actor: Callable[..., Actor],
        ruleset: Ruleset,
        zero_rng: SequenceRandom,
    ) -> None:
        """Test a hurt actor eats a healing item before acting."""
        apple = ItemStack(id="apple", name="Apple", tags=("food",))
        alice = make_actor("alice", hp=50, inventory=[apple])
        orchestrator = PhaseOrchestrator.new_match([alice, make_actor("bob")], ruleset, rng=zero_rng)

        orchestrator.advance_phase()

        assert alice.hp == 65
        assert alice.inventory == []
        assert any("Apple" in entry.text for entry in orchestrator.state.log)


class TestUpkeep:
    """Tests for effect ticks and zone damage at phase start."""

    def test_zone_casualty_before_turns(
        self,
        make_actor: Callable[..., Actor],
        ruleset: Ruleset,
        zero_rng: SequenceRandom,
    ) -> None:
        """Test an actor killed by the zone falls before anyone acts."""
        alice = make_actor("alice", hp=4)
        bob, carol = make_actor("bob"), make_actor("carol")
        state = MatchState(actors=[alice, bob, carol], day=2, time_of_day=TimeOfDay.NIGHT)
        orchestrator = PhaseOrchestrator(state, ruleset, rng=zero_rng)

        report = orchestrator.advance_phase()

        assert report.day == 3
        assert report.casualties == ["alice"]
        assert state.casualties == ["alice"]
        assert bob.hp == 95
        assert carol.hp == 95
        assert report.battles == 1
        assert alice.credits == 0

    def test_effect_tick_casualty(
        self,
        make_actor: Callable[..., Actor],
        ruleset: Ruleset,
        zero_rng: SequenceRandom,
    ) -> None:
        """Test effect damage can kill an actor at upkeep."""
        poison = StatusEffect(name="food poisoning", effect=EffectName.FOOD_POISONING, remaining_duration=2)
        alice = make_actor("alice", hp=10, effects=[poison])
        orchestrator = PhaseOrchestrator.new_match(
            [alice, make_actor("bob"), make_actor("carol")], ruleset, rng=zero_rng
        )

        report = orchestrator.advance_phase()

        assert report.casualties[0] == "alice"
        assert not alice.is_alive

    def test_spent_effect_expires_at_upkeep(
        self,
        make_actor: Callable[..., Actor],
        ruleset: Ruleset,
        zero_rng: SequenceRandom,
    ) -> None:
        """Test an effect already at zero duration is cleared, not fatal."""
        dazed = StatusEffect(name="Dazed", remaining_duration=0)
        alice = make_actor("alice", effects=[dazed])
        orchestrator = PhaseOrchestrator.new_match([alice, make_actor("bob")], ruleset, rng=zero_rng)

        report = orchestrator.advance_phase()

        assert report.day == 1
        assert report.time_of_day is TimeOfDay.MORNING
        assert alice.effects == []
        assert any("no longer affected by Dazed" in entry.text for entry in orchestrator.state.log)


class TestTimeLimit:
    """Tests for the optional time limit."""

    def test_highest_hp_wins(
        self,
        make_actor: Callable[..., Actor],
        zero_rng: SequenceRandom,
    ) -> None:
        """Test the time limit crowns the healthiest survivor."""
        ruleset = get_ruleset("ER_S10", {"phase": {"time_limit_day": 1}})
        alice, bob = make_actor("alice", hp=80), make_actor("bob", hp=90)
        orchestrator = PhaseOrchestrator.new_match([alice, bob], ruleset, rng=zero_rng)

        first = orchestrator.advance_phase()
        second = orchestrator.advance_phase()

        assert not first.finished
        assert second.finished
        assert second.time_of_day is TimeOfDay.NIGHT
        assert orchestrator.state.winner_id == "bob"


class TestRunToCompletion:
    """Tests for running whole matches."""

    def test_seeded_match_finishes(
        self,
        make_actor: Callable[..., Actor],
        ruleset: Ruleset,
        catalog: list[ItemStack],
        flavor_events: list[FlavorEvent],
    ) -> None:
        """Test a seeded match runs to a single survivor or none."""
        actors = [make_actor(f"p{i}", stat=5 + 4 * i) for i in range(6)]
        orchestrator = PhaseOrchestrator.new_match(
            actors,
            ruleset,
            catalog=catalog,
            flavor_events=flavor_events,
            rng=SeededRandom(2024),
        )

        summary = orchestrator.run_to_completion()

        assert orchestrator.state.alive_count <= 1
        assert len(summary.casualties) == len(set(summary.casualties))
        assert len(summary.casualties) >= 5
        assert sum(summary.kills.values()) <= len(summary.casualties)
        if summary.winner_id is not None:
            assert summary.winner_id not in summary.casualties

    def test_phase_limit(
        self,
        make_actor: Callable[..., Actor],
        ruleset: Ruleset,
        zero_rng: SequenceRandom,
    ) -> None:
        """Test an unfinished match raises at the phase limit."""
        orchestrator = PhaseOrchestrator.new_match(
            [make_actor("alice"), make_actor("bob")], ruleset, rng=zero_rng
        )
        with pytest.raises(InvalidGameStateError):
            orchestrator.run_to_completion(max_phases=1)

    def test_default_rng_uses_settings_seed(
        self,
        make_actor: Callable[..., Actor],
        ruleset: Ruleset,
        mock_env_vars: dict[str, str],
    ) -> None:
        """Test two matches seeded from settings replay identically."""
        transcripts = []
        for _ in range(2):
            actors = [make_actor(f"p{i}", stat=5 + 3 * i) for i in range(4)]
            summary = PhaseOrchestrator.new_match(actors, ruleset).run_to_completion()
            transcripts.append([entry.text for entry in summary.log])
        assert transcripts[0] == transcripts[1]
