"""Item use.

Food heals a little, medical supplies heal a lot (and bandages stop
bleeding), books teach a permanent intelligence bonus. Everything else is
inspected and put back.
"""

from __future__ import annotations

from royale_engine.core.logging import get_logger
from royale_engine.models.components import ItemStack, StatusEffect
from royale_engine.models.entities import Actor
from royale_engine.models.enums import EffectKind, EffectName, Stat
from royale_engine.models.outcomes import ItemUseOutcome
from royale_engine.models.ruleset import Ruleset


logger = get_logger(__name__)


def food_poisoning(duration: int) -> StatusEffect:
    """Build a food-poisoning debuff lasting ``duration`` phases."""
    return StatusEffect(
        name="food poisoning",
        effect=EffectName.FOOD_POISONING,
        kind=EffectKind.DEBUFF,
        remaining_duration=duration,
    )


def studied(int_bonus: int) -> StatusEffect:
    """Build the permanent buff granted by reading a book."""
    return StatusEffect(
        name="studied",
        effect=EffectName.STUDIED,
        kind=EffectKind.BUFF,
        remaining_duration=None,
        stat_modifiers={Stat.INT: int_bonus},
    )


def apply_item_effect(actor: Actor, item: ItemStack, ruleset: Ruleset) -> ItemUseOutcome:
    """Work out what using ``item`` would do to ``actor``.

    Does not modify the actor; ``consume_item`` applies the result.

    Args:
        actor: The user.
        item: The item to use.
        ruleset: Supplies heal amounts and the book bonus.

    Returns:
        The planned outcome. ``consumed`` is False for items without a
        usable effect.
    """
    tuning = ruleset.consumables
    name = item.name or item.id

    if item.is_food:
        heal = tuning.healthy_food_heal if item.has_tag("healthy") else tuning.food_heal
        return ItemUseOutcome(
            item_id=item.id,
            item_name=name,
            recovery=heal,
            log=f"🍱 [{actor.name}] eats [{name}] from the bag. (HP +{heal})",
        )
    if item.is_medical:
        cured = []
        if item.is_bandage_like:
            cured = [e.name for e in actor.effects if e.has_behavior(EffectName.BLEEDING)]
        return ItemUseOutcome(
            item_id=item.id,
            item_name=name,
            recovery=tuning.medical_heal,
            cured=cured,
            log=f"🚑 [{actor.name}] patches up with [{name}]. (HP +{tuning.medical_heal})",
        )
    if item.has_tag("book"):
        return ItemUseOutcome(
            item_id=item.id,
            item_name=name,
            new_effect=studied(tuning.book_int_bonus),
            log=f"📖 [{actor.name}] reads [{name}] and learns something. (INT +{tuning.book_int_bonus})",
        )
    return ItemUseOutcome(
        item_id=item.id,
        item_name=name,
        consumed=False,
        log=f"📦 [{actor.name}] looks over [{name}] but finds no use for it.",
    )


def find_healing_item(actor: Actor) -> ItemStack | None:
    """Pick the best healing stack for an automatic heal.

    A bleeding actor reaches for a bandage first. Otherwise medical items
    are preferred over food.
    """
    stocked = [item for item in actor.inventory if item.quantity > 0]
    if actor.has_effect(EffectName.BLEEDING):
        for item in stocked:
            if item.is_medical and item.is_bandage_like:
                return item
    for item in stocked:
        if item.is_medical:
            return item
    for item in stocked:
        if item.is_food and not item.has_tag("poison"):
            return item
    return None


def remove_one(actor: Actor, item_id: str) -> None:
    """Take one unit out of a stack, dropping the stack when it empties."""
    inventory: list[ItemStack] = []
    for item in actor.inventory:
        if item.id == item_id:
            item = item.with_quantity(item.quantity - 1)
            if item.quantity <= 0:
                actor.equipped = {
                    slot: ref for slot, ref in actor.equipped.items() if ref != item_id
                }
                continue
        inventory.append(item)
    actor.inventory = inventory


def add_item(actor: Actor, item: ItemStack, quantity: int = 1) -> None:
    """Add ``quantity`` units of ``item``, merging into an existing stack."""
    if quantity <= 0:
        return
    for index, owned in enumerate(actor.inventory):
        if owned.id == item.id:
            inventory = list(actor.inventory)
            inventory[index] = owned.with_quantity(owned.quantity + quantity)
            actor.inventory = inventory
            return
    actor.inventory = [*actor.inventory, item.with_quantity(quantity)]


def consume_item(actor: Actor, item_id: str, ruleset: Ruleset) -> ItemUseOutcome | None:
    """Use one unit of an inventory stack.

    Args:
        actor: The user; HP, effects and inventory are updated in place.
        item_id: Id of the stack to use.
        ruleset: Supplies heal amounts.

    Returns:
        The applied outcome, or None if the actor holds no such item.
    """
    item = actor.find_item(item_id)
    if item is None or item.quantity <= 0:
        return None

    planned = apply_item_effect(actor, item, ruleset)
    if not planned.consumed:
        return planned

    remove_one(actor, item.id)
    if planned.cured:
        actor.effects = [e for e in actor.effects if e.name not in planned.cured]
    if planned.new_effect is not None:
        actor.effects = [*actor.effects, planned.new_effect]
    planned.recovery = actor.heal(planned.recovery)

    logger.debug(
        "Item consumed",
        actor_id=actor.id,
        item_id=item.id,
        recovery=planned.recovery,
        cured=planned.cured,
    )
    return planned


__all__ = [
    "food_poisoning",
    "studied",
    "apply_item_effect",
    "find_healing_item",
    "remove_one",
    "add_item",
    "consume_item",
]
