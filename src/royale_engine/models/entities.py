"""Actor entity: a participant in a match.

Actors are created by the surrounding application and mutated only by the
phase orchestrator (HP, inventory, effects, credits). Battle and event
resolution read actors and return outcome values instead of mutating them.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, computed_field

from royale_engine.core.constants import DEFAULT_MAX_HP
from royale_engine.models.components import ItemStack, SpecialSkill, StatBlock, StatusEffect
from royale_engine.models.enums import EffectName, EquipSlot


class Actor(BaseModel):
    """A character taking part in the simulation.

    Attributes:
        id: Stable identifier (kill counts and summaries are keyed by it).
        name: Display name.
        stats: Raw base stats.
        hp: Current hit points.
        max_hp: Maximum hit points.
        inventory: Owned item stacks.
        equipped: Slot -> item id of an inventory stack.
        effects: Active status effects.
        skill: Special skill, if any.
        credits: Credits earned during the match.
        total_kills: Lifetime kill counter, maintained outside the engine.
        total_wins: Lifetime win counter, maintained outside the engine.
    """

    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    stats: StatBlock = Field(default_factory=StatBlock)
    hp: int = DEFAULT_MAX_HP
    max_hp: int = Field(default=DEFAULT_MAX_HP, ge=1)
    inventory: list[ItemStack] = Field(default_factory=list)
    equipped: dict[EquipSlot, str] = Field(default_factory=dict)
    effects: list[StatusEffect] = Field(default_factory=list)
    skill: SpecialSkill = Field(default_factory=SpecialSkill)
    credits: int = 0
    total_kills: int = 0
    total_wins: int = 0

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_alive(self) -> bool:
        return self.hp > 0

    @property
    def hp_ratio(self) -> float:
        """Current HP as a fraction of max HP (clamped to 0..1)."""
        return max(0.0, min(1.0, self.hp / self.max_hp))

    def find_item(self, item_id: str | None) -> ItemStack | None:
        """Look up an inventory stack by id."""
        if not item_id:
            return None
        for item in self.inventory:
            if item.id == item_id:
                return item
        return None

    def equipped_item(self, slot: EquipSlot) -> ItemStack | None:
        """Resolve the stack referenced by an equipment slot.

        A slot pointing at an item that is no longer in the inventory
        counts as empty.
        """
        return self.find_item(self.equipped.get(slot))

    def has_effect(self, effect: EffectName) -> bool:
        return any(e.has_behavior(effect) for e in self.effects)

    def heal(self, amount: int) -> int:
        """Restore HP up to max HP.

        Returns:
            HP actually restored.
        """
        if amount <= 0 or self.hp <= 0:
            return 0
        before = self.hp
        self.hp = min(self.max_hp, self.hp + amount)
        return self.hp - before

    def take_damage(self, amount: int) -> int:
        """Remove HP, never going below zero.

        Returns:
            HP actually lost.
        """
        if amount <= 0:
            return 0
        before = self.hp
        self.hp = max(0, self.hp - amount)
        return before - self.hp


__all__ = ["Actor"]
