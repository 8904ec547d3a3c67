"""Two-actor flavor encounters.

Flavor encounters have no mechanical effect; they only add a line to the
transcript with ``{1}``/``{2}`` replaced by the two actors' names.
"""

from __future__ import annotations

from collections.abc import Sequence

from royale_engine.engine.rng import RandomSource, pick
from royale_engine.models.entities import Actor
from royale_engine.models.enums import FlavorEventType, TimeOfDay
from royale_engine.models.game_state import FlavorEvent


def is_pair_template(event: FlavorEvent) -> bool:
    """Check whether a template describes two survivors and no victims.

    Legacy templates without counts qualify when they mention ``{2}``.
    """
    survivors = event.survivor_count
    if survivors is None:
        survivors = 2 if "{2}" in event.text else 1
    return survivors == 2 and (event.victim_count or 0) == 0


def eligible_flavor_events(
    events: Sequence[FlavorEvent],
    time_of_day: TimeOfDay,
) -> list[FlavorEvent]:
    """Templates usable for a two-actor encounter in this phase."""
    return [
        event
        for event in events
        if event.type is not FlavorEventType.DEATH
        and event.allows(time_of_day)
        and is_pair_template(event)
    ]


def render_flavor(event: FlavorEvent, first: Actor, second: Actor) -> str:
    return event.text.replace("{1}", f"[{first.name}]").replace("{2}", f"[{second.name}]")


def pick_flavor_line(
    events: Sequence[FlavorEvent],
    time_of_day: TimeOfDay,
    first: Actor,
    second: Actor,
    rng: RandomSource,
) -> str | None:
    """Render a random eligible template, or None if none qualifies."""
    event = pick(rng, eligible_flavor_events(events, time_of_day))
    if event is None:
        return None
    return render_flavor(event, first, second)


__all__ = [
    "is_pair_template",
    "eligible_flavor_events",
    "render_flavor",
    "pick_flavor_line",
]
