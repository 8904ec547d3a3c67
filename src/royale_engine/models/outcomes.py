"""Value objects returned by the resolution components.

Battle and event resolution never mutate actors; they return one of these
records and the phase orchestrator applies it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from royale_engine.models.enums import EventCategory


if TYPE_CHECKING:
    from royale_engine.models.components import ItemStack, StatusEffect
    from royale_engine.models.entities import Actor


@dataclass
class BattleOutcome:
    """Result of a one-shot battle.

    A draw carries neither winner nor loser and never advances kill counts.

    Attributes:
        draw: True if neither actor prevailed.
        winner: The winning actor (None on a draw).
        loser: The losing actor (None on a draw).
        log: Transcript line describing the result.
        scores: Final scores of (actor_a, actor_b) in call order.
        highlights: Extra transcript lines (crits, skills, lifesteal).
    """

    draw: bool
    winner: Actor | None = None
    loser: Actor | None = None
    log: str = ""
    scores: tuple[float, float] = (0.0, 0.0)
    highlights: list[str] = field(default_factory=list)

    @property
    def margin(self) -> float:
        return abs(self.scores[0] - self.scores[1])


@dataclass
class EventOutcome:
    """State delta produced by the event generator.

    Attributes:
        category: The category that was rolled.
        damage: HP to remove.
        recovery: HP to restore.
        drop: Catalog item handed to the actor.
        drop_quantity: Units of ``drop``.
        earned_credits: Credits to add.
        new_effect: Status effect to attach.
        log: Transcript line; empty for silent outcomes.
        silent: True when the outcome carries no log and no state change.
    """

    category: EventCategory
    damage: int = 0
    recovery: int = 0
    drop: ItemStack | None = None
    drop_quantity: int = 0
    earned_credits: int = 0
    new_effect: StatusEffect | None = None
    log: str = ""
    silent: bool = False

    @classmethod
    def quiet(cls, category: EventCategory) -> EventOutcome:
        """Build a silent outcome with no state change."""
        return cls(category=category, silent=True)

    @property
    def has_state_change(self) -> bool:
        return bool(
            self.damage
            or self.recovery
            or self.drop is not None
            or self.earned_credits
            or self.new_effect is not None
        )


@dataclass
class ItemUseOutcome:
    """Result of consuming one unit of an item.

    Attributes:
        item_id: Id of the consumed stack.
        item_name: Display name of the consumed item.
        recovery: HP actually restored.
        cured: Names of effects removed.
        new_effect: Effect attached by the item, if any.
        consumed: False when the item had no usable effect.
        log: Transcript line.
    """

    item_id: str
    item_name: str
    recovery: int = 0
    cured: list[str] = field(default_factory=list)
    new_effect: StatusEffect | None = None
    consumed: bool = True
    log: str = ""


@dataclass
class EffectTickResult:
    """Result of one status-effect tick on one actor.

    Attributes:
        damage: HP lost to periodic effects.
        expired: Names of effects removed this tick.
        logs: Transcript lines.
    """

    damage: int = 0
    expired: list[str] = field(default_factory=list)
    logs: list[str] = field(default_factory=list)


__all__ = [
    "BattleOutcome",
    "EventOutcome",
    "ItemUseOutcome",
    "EffectTickResult",
]
