"""Component models composed into actors.

Components:
    StatBlock: The eight base stats.
    ItemStats: Catalog-style combat stats carried by an item.
    ItemStack: An item definition plus quantity, owned by one inventory.
    StatusEffect: A timed modifier on an actor.
    SpecialSkill: A named skill resolved to a ``SkillKind``.

Stat fields use descriptive names with the short storage keys
(``str``, ``agi``, ...) as aliases, so both spellings validate.
"""

from __future__ import annotations

from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, computed_field

from royale_engine.core.constants import (
    BANDAGE_KEYWORDS,
    FOOD_TAGS,
    MAX_TIER,
    MEDICAL_TAGS,
    MIN_TIER,
    RANGED_MARKERS,
)
from royale_engine.models.enums import (
    EffectKind,
    EffectName,
    EquipSlot,
    ItemCategory,
    SkillKind,
    Stat,
)


Tier = Annotated[int, Field(ge=MIN_TIER, le=MAX_TIER, description="Item tier (1-6)")]


# =============================================================================
# Stats
# =============================================================================


_FIELD_BY_STAT: dict[Stat, str] = {
    Stat.STR: "strength",
    Stat.AGI: "agility",
    Stat.INT: "intelligence",
    Stat.MEN: "mentality",
    Stat.LUK: "luck",
    Stat.DEX: "dexterity",
    Stat.SHT: "shooting",
    Stat.END: "endurance",
}


class StatBlock(BaseModel):
    """The eight base stats of an actor.

    Raw stats may be zero or negative; only effective stats are clamped.

    Example:
        >>> block = StatBlock(str=12, agi=8)
        >>> block.get(Stat.STR)
        12
    """

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    strength: int = Field(default=0, alias="str")
    agility: int = Field(default=0, alias="agi")
    intelligence: int = Field(default=0, alias="int")
    mentality: int = Field(default=0, alias="men")
    luck: int = Field(default=0, alias="luk")
    dexterity: int = Field(default=0, alias="dex")
    shooting: int = Field(default=0, alias="sht")
    endurance: int = Field(default=0, alias="end")

    def get(self, stat: Stat) -> int:
        """Read one stat by its enum key."""
        return getattr(self, _FIELD_BY_STAT[stat])

    def as_dict(self) -> dict[Stat, int]:
        """Return all stats keyed by ``Stat``."""
        return {stat: self.get(stat) for stat in Stat}

    @classmethod
    def from_mapping(cls, values: dict[Stat, int]) -> StatBlock:
        """Build a block from a ``Stat``-keyed mapping; missing stats are 0."""
        return cls(**{_FIELD_BY_STAT[stat]: int(values.get(stat, 0)) for stat in Stat})

    @classmethod
    def uniform(cls, value: int) -> StatBlock:
        """Build a block with every stat set to ``value``."""
        return cls.from_mapping({stat: value for stat in Stat})

    @computed_field  # type: ignore[prop-decorator]
    @property
    def power(self) -> float:
        """Aggregate physical power used by the event generator.

        Returns:
            ``str + agi + sht + end + 0.5 * men``.
        """
        return (
            self.strength + self.agility + self.shooting + self.endurance + 0.5 * self.mentality
        )


# =============================================================================
# Items
# =============================================================================


class ItemStats(BaseModel):
    """Combat stats carried by an equipment item.

    Attributes:
        atk: Flat attack.
        hp: Bonus HP.
        skill_amp: Skill amplification ratio.
        atk_speed: Attack speed ratio.
        crit_chance: Critical hit probability.
        cdr: Cooldown reduction ratio.
        lifesteal: Lifesteal ratio.
        move_speed: Movement speed ratio.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    atk: float = 0.0
    hp: float = 0.0
    skill_amp: float = 0.0
    atk_speed: float = 0.0
    crit_chance: float = 0.0
    cdr: float = 0.0
    lifesteal: float = 0.0
    move_speed: float = 0.0


class ItemStack(BaseModel):
    """An item definition plus quantity.

    The same model serves as a catalog entry (quantity is then the default
    drop size) and as an inventory stack owned by exactly one actor.

    Attributes:
        id: Stable item identifier.
        name: Display name.
        category: Canonical category.
        tags: Free-form tags (``weapon``, ``ranged``, ``medical``, ``food``...).
        tier: Optional tier 1-6.
        quantity: Units in the stack.
        stats: Optional combat stats.
        equip_slot: Slot the item can be equipped into.
        weapon_type: Weapon family for weapons (``pistol``, ``sword``...).
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: str = Field(min_length=1)
    name: str = ""
    category: ItemCategory = ItemCategory.MISC
    tags: tuple[str, ...] = ()
    tier: Tier | None = None
    quantity: int = Field(default=1, ge=0)
    stats: ItemStats | None = None
    equip_slot: EquipSlot | None = None
    weapon_type: str = ""

    def has_tag(self, *tags: str) -> bool:
        """Check whether the item carries any of the given tags."""
        return any(tag in self.tags for tag in tags)

    @property
    def effective_tier(self) -> int:
        """Tier with a missing value read as 1."""
        return self.tier if self.tier is not None else MIN_TIER

    @property
    def is_weapon(self) -> bool:
        """Weapon by category, slot or tag."""
        return (
            self.category is ItemCategory.WEAPON
            or self.equip_slot is EquipSlot.WEAPON
            or self.has_tag("weapon")
        )

    @property
    def is_ranged(self) -> bool:
        """Ranged weapon by marker tag."""
        return any(tag in RANGED_MARKERS for tag in self.tags)

    @property
    def is_medical(self) -> bool:
        return any(tag in MEDICAL_TAGS for tag in self.tags)

    @property
    def is_food(self) -> bool:
        return any(tag in FOOD_TAGS for tag in self.tags)

    @property
    def is_bandage_like(self) -> bool:
        """Medical items whose name marks them as wound dressing."""
        lowered = self.name.lower()
        return self.has_tag("bandage") or any(key in lowered for key in BANDAGE_KEYWORDS)

    def with_quantity(self, quantity: int) -> ItemStack:
        """Return a copy of this stack holding ``quantity`` units."""
        return self.model_copy(update={"quantity": max(0, quantity)})


# =============================================================================
# Status Effects
# =============================================================================


class StatusEffect(BaseModel):
    """A timed modifier on an actor.

    ``remaining_duration`` counts phases; ``None`` means the effect lasts
    until cured.

    Attributes:
        name: Display name.
        effect: Engine-defined behavior, if any.
        kind: Buff or debuff.
        remaining_duration: Phases left, or None for permanent effects.
        stat_modifiers: Flat additive stat changes.
        dot_damage: HP lost per phase, if periodic.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(min_length=1)
    effect: EffectName | None = None
    kind: EffectKind = EffectKind.DEBUFF
    remaining_duration: int | None = Field(default=1, ge=0)
    stat_modifiers: dict[Stat, int] = Field(default_factory=dict)
    dot_damage: float | None = None

    @property
    def is_permanent(self) -> bool:
        return self.remaining_duration is None

    def has_behavior(self, effect: EffectName) -> bool:
        """Check whether this effect has the given engine behavior."""
        return self.effect is effect


class SpecialSkill(BaseModel):
    """A named special skill."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = ""
    kind: SkillKind = SkillKind.NONE
    description: str = ""


__all__ = [
    "Tier",
    "StatBlock",
    "ItemStats",
    "ItemStack",
    "StatusEffect",
    "SpecialSkill",
]
