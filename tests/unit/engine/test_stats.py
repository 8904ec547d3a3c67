"""Tests for stat aggregation and effect ticking."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from royale_engine.core.exceptions import InvalidGameStateError
from royale_engine.engine.stats import effective_stats, tick_damage, tick_effects
from royale_engine.models import EffectKind, EffectName, Stat, StatBlock, StatusEffect


if TYPE_CHECKING:
    from collections.abc import Callable

    from royale_engine.models import Actor


def poisoning(duration: int | None = 2) -> StatusEffect:
    return StatusEffect(
        name="Food Poisoning",
        effect=EffectName.FOOD_POISONING,
        remaining_duration=duration,
    )


class TestEffectiveStats:
    """Tests for effective stat derivation."""

    def test_no_effects_returns_raw(self, make_actor: Callable[..., Actor]) -> None:
        """Test stats without effects equal the raw stats."""
        actor = make_actor("a1", stat=12)
        assert effective_stats(actor) == StatBlock.uniform(12)

    def test_modifiers_added(self, make_actor: Callable[..., Actor]) -> None:
        """Test effect modifiers are added to raw stats."""
        buff = StatusEffect(
            name="Studied",
            kind=EffectKind.BUFF,
            remaining_duration=None,
            stat_modifiers={Stat.INT: 5},
        )
        actor = make_actor("a1", effects=[buff])
        assert effective_stats(actor).get(Stat.INT) == 15

    def test_food_poisoning_halves_endurance(self, make_actor: Callable[..., Actor]) -> None:
        """Test endurance is halved and floored while poisoned."""
        actor = make_actor("a1", stats=StatBlock(end=9), effects=[poisoning()])
        assert effective_stats(actor).endurance == 4

    def test_clamped_to_one(self, make_actor: Callable[..., Actor]) -> None:
        """Test effective stats never fall below 1."""
        debuff = StatusEffect(name="Crippled", stat_modifiers={Stat.STR: -50})
        actor = make_actor("a1", stats=StatBlock(str=-2), effects=[debuff])
        stats = effective_stats(actor)
        assert stats.strength == 1
        assert all(value >= 1 for value in stats.as_dict().values())

    def test_actor_not_mutated(self, make_actor: Callable[..., Actor]) -> None:
        """Test deriving stats leaves the actor untouched."""
        actor = make_actor("a1", effects=[poisoning()])
        effective_stats(actor)
        assert actor.stats.endurance == 10


class TestTickDamage:
    """Tests for per-effect periodic damage."""

    def test_food_poisoning(self) -> None:
        """Test food poisoning deals its fixed damage."""
        assert tick_damage(poisoning()) == 10

    def test_bleeding_default(self) -> None:
        """Test bleeding without a value deals the default damage."""
        assert tick_damage(StatusEffect(name="Bleeding", effect=EffectName.BLEEDING)) == 6

    def test_bleeding_minimum_one(self) -> None:
        """Test bleeding always deals at least 1."""
        effect = StatusEffect(name="Bleeding", effect=EffectName.BLEEDING, dot_damage=0.2)
        assert tick_damage(effect) == 1

    def test_generic_dot(self) -> None:
        """Test other effects deal their truncated damage."""
        assert tick_damage(StatusEffect(name="Burn", dot_damage=3.7)) == 3
        assert tick_damage(StatusEffect(name="Dazed")) == 0


class TestTickEffects:
    """Tests for the per-phase effect update."""

    def test_damage_then_decrement(self, make_actor: Callable[..., Actor]) -> None:
        """Test damage applies and duration drops by one."""
        actor = make_actor("a1", hp=50, effects=[poisoning(2)])

        result = tick_effects(actor)

        assert result.damage == 10
        assert actor.hp == 40
        assert actor.effects[0].remaining_duration == 1
        assert result.expired == []

    def test_expiry_still_deals_damage(self, make_actor: Callable[..., Actor]) -> None:
        """Test an effect on its last phase deals damage before expiring."""
        actor = make_actor("a1", hp=50, effects=[poisoning(1)])

        result = tick_effects(actor)

        assert result.damage == 10
        assert result.expired == ["Food Poisoning"]
        assert actor.effects == []
        assert len(result.logs) == 2

    def test_permanent_never_decrements(self, make_actor: Callable[..., Actor]) -> None:
        """Test permanent effects keep their duration."""
        buff = StatusEffect(name="Studied", remaining_duration=None)
        actor = make_actor("a1", effects=[buff])

        tick_effects(actor)
        tick_effects(actor)

        assert actor.effects == [buff]

    def test_damage_never_below_zero(self, make_actor: Callable[..., Actor]) -> None:
        """Test effect damage floors HP at 0."""
        actor = make_actor("a1", hp=4, effects=[poisoning(3)])
        result = tick_effects(actor)
        assert actor.hp == 0
        assert result.damage == 4

    def test_zero_duration_expires_without_damage(self, make_actor: Callable[..., Actor]) -> None:
        """Test a spent effect is dropped and deals no further damage."""
        dazed = StatusEffect(name="Dazed", remaining_duration=0)
        actor = make_actor("a1", hp=50, effects=[poisoning(0), dazed, poisoning(2)])

        result = tick_effects(actor)

        assert result.expired == ["Food Poisoning", "Dazed"]
        assert result.damage == 10
        assert actor.hp == 40
        assert [effect.remaining_duration for effect in actor.effects] == [1]

    def test_negative_duration_rejected(self, make_actor: Callable[..., Actor]) -> None:
        """Test an effect pushed below zero outside validation is fatal."""
        broken = poisoning(1).model_copy(update={"remaining_duration": -1})
        actor = make_actor("a1", effects=[broken])
        with pytest.raises(InvalidGameStateError):
            tick_effects(actor)

    def test_no_effects(self, make_actor: Callable[..., Actor]) -> None:
        """Test ticking without effects does nothing."""
        result = tick_effects(make_actor("a1"))
        assert result.damage == 0
        assert result.logs == []
