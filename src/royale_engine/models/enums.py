"""Enumeration types for the resolution engine.

These enums are the canonical vocabulary the engine operates on. Raw
records from storage are mapped onto them once, at ingestion time.
"""

from __future__ import annotations

from enum import StrEnum


class Stat(StrEnum):
    """The eight base stats."""

    STR = "str"
    AGI = "agi"
    INT = "int"
    MEN = "men"
    LUK = "luk"
    DEX = "dex"
    SHT = "sht"
    END = "end"


class EquipSlot(StrEnum):
    """Equipment slots an actor can fill."""

    WEAPON = "weapon"
    HEAD = "head"
    CLOTHES = "clothes"
    ARM = "arm"
    SHOES = "shoes"

    @property
    def is_armor(self) -> bool:
        """Check whether the slot holds armor.

        Returns:
            True for every slot except the weapon slot.
        """
        return self is not EquipSlot.WEAPON


class ItemCategory(StrEnum):
    """Canonical item categories."""

    WEAPON = "weapon"
    ARMOR = "armor"
    CONSUMABLE = "consumable"
    MATERIAL = "material"
    MISC = "misc"


class SkillKind(StrEnum):
    """Special skills with a battle formula.

    Resolved once when an actor is loaded; the battle resolver dispatches
    on this value through a lookup table.
    """

    NONE = "none"
    DRONE_SUPPORT = "drone_support"
    """Support fire scaling with shooting."""

    ABYSS = "abyss"
    """Triggers below an HP-ratio threshold, scaling with missing HP."""

    IAIDO = "iaido"
    """Quick-draw opener scaling with agility and dexterity."""


class EffectName(StrEnum):
    """Status effects with engine-defined behavior."""

    FOOD_POISONING = "food_poisoning"
    BLEEDING = "bleeding"
    STUDIED = "studied"


class EffectKind(StrEnum):
    """Whether an effect helps or hurts."""

    BUFF = "buff"
    DEBUFF = "debuff"


class TimeOfDay(StrEnum):
    """Half-day phases of a match."""

    MORNING = "morning"
    NIGHT = "night"

    @property
    def is_night(self) -> bool:
        """Check whether this is the night phase.

        Returns:
            True at night.
        """
        return self is TimeOfDay.NIGHT


class MatchStatus(StrEnum):
    """Lifecycle of a match."""

    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    FINISHED = "finished"


class EventCategory(StrEnum):
    """Minor events the event generator can pick."""

    NOTHING = "nothing"
    REST = "rest"
    MEDICAL = "medical"
    SCAVENGE = "scavenge"
    FOOD = "food"
    MISHAP = "mishap"
    MINOR_FIGHT = "minor_fight"

    @property
    def is_risk(self) -> bool:
        """Check whether the category can hurt the actor.

        Returns:
            True for mishaps and minor fights.
        """
        return self in (EventCategory.MISHAP, EventCategory.MINOR_FIGHT)


class FlavorEventType(StrEnum):
    """Flavor text template types."""

    NORMAL = "normal"
    DEATH = "death"


class FlavorTime(StrEnum):
    """When a flavor template may be used."""

    BOTH = "both"
    DAY = "day"
    NIGHT = "night"


class LogKind(StrEnum):
    """Presentation class of a transcript line."""

    DAY_HEADER = "day-header"
    SYSTEM = "system"
    NORMAL = "normal"
    HIGHLIGHT = "highlight"
    DEATH = "death"


__all__ = [
    "Stat",
    "EquipSlot",
    "ItemCategory",
    "SkillKind",
    "EffectName",
    "EffectKind",
    "TimeOfDay",
    "MatchStatus",
    "EventCategory",
    "FlavorEventType",
    "FlavorTime",
    "LogKind",
]
