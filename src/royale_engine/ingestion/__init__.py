"""Data ingestion boundary.

Raw roster, catalog, flavor-text and settings records are normalized
into canonical models here before a match starts.

Example:
    >>> from royale_engine.ingestion import normalize_roster, ruleset_from_settings
    >>> actors = normalize_roster(raw_characters)
    >>> ruleset = ruleset_from_settings(raw_settings)
"""

from __future__ import annotations

from royale_engine.ingestion.normalizer import (
    normalize_actor,
    normalize_catalog,
    normalize_effect,
    normalize_flavor_event,
    normalize_flavor_events,
    normalize_item,
    normalize_roster,
    normalize_stats,
    resolve_effect_name,
    resolve_skill_kind,
    ruleset_from_settings,
)


__all__ = [
    "normalize_actor",
    "normalize_catalog",
    "normalize_effect",
    "normalize_flavor_event",
    "normalize_flavor_events",
    "normalize_item",
    "normalize_roster",
    "normalize_stats",
    "resolve_effect_name",
    "resolve_skill_kind",
    "ruleset_from_settings",
]
