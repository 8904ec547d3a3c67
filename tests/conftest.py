"""Pytest configuration and shared fixtures.

This module provides common fixtures for the resolution engine test
suite. Randomness is always injected through a ``RandomSource``; no test
patches the ``random`` module.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import pytest

from royale_engine.engine.rng import SeededRandom, SequenceRandom
from royale_engine.models import (
    Actor,
    EquipSlot,
    FlavorEvent,
    ItemCategory,
    ItemStack,
    ItemStats,
    Ruleset,
    StatBlock,
    get_ruleset,
)


if TYPE_CHECKING:
    from collections.abc import Callable, Generator


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_settings_cache() -> Generator[None, None, None]:
    """Reset the settings cache before and after each test."""
    from royale_engine.core.config import clear_settings_cache

    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def mock_env_vars(monkeypatch: pytest.MonkeyPatch) -> dict[str, str]:
    """Set up mock environment variables for testing.

    Returns:
        Dictionary of environment variables that were set.
    """
    env_vars = {
        "ROYALE_ENGINE_DEBUG": "true",
        "ROYALE_ENGINE_LOG_LEVEL": "DEBUG",
        "ROYALE_ENGINE_DEFAULT_RULESET_ID": "LEGACY",
        "ROYALE_ENGINE_RANDOM_SEED": "1234",
    }
    for key, value in env_vars.items():
        monkeypatch.setenv(key, value)
    return env_vars


@pytest.fixture
def ruleset() -> Ruleset:
    """Default ER_S10 ruleset."""
    return get_ruleset("ER_S10")


# =============================================================================
# Randomness Fixtures
# =============================================================================


@pytest.fixture
def seeded_rng() -> SeededRandom:
    """Seeded random source for reproducible runs."""
    return SeededRandom(42)


@pytest.fixture
def zero_rng() -> SequenceRandom:
    """Random source that always yields 0.0 (lowest roll everywhere)."""
    return SequenceRandom([0.0])


@pytest.fixture
def high_rng() -> SequenceRandom:
    """Random source that always yields a value just below 1.0."""
    return SequenceRandom([0.999])


# =============================================================================
# Model Fixtures
# =============================================================================


@pytest.fixture
def make_actor() -> Callable[..., Actor]:
    """Factory for actors with uniform stats.

    Returns:
        A callable ``make_actor(actor_id, stat=10, **overrides)``.
    """

    def _make(actor_id: str, stat: int = 10, **overrides: Any) -> Actor:
        data: dict[str, Any] = {
            "id": actor_id,
            "name": overrides.pop("name", actor_id.capitalize()),
            "stats": StatBlock.uniform(stat),
        }
        data.update(overrides)
        return Actor(**data)

    return _make


@pytest.fixture
def sword() -> ItemStack:
    """Tier-3 melee weapon."""
    return ItemStack(
        id="wpn_sword",
        name="Katana",
        category=ItemCategory.WEAPON,
        tags=("weapon", "sword"),
        tier=3,
        equip_slot=EquipSlot.WEAPON,
        weapon_type="sword",
        stats=ItemStats(atk=20, atk_speed=0.1),
    )


@pytest.fixture
def pistol() -> ItemStack:
    """Tier-2 ranged weapon."""
    return ItemStack(
        id="wpn_pistol",
        name="Glock 17",
        category=ItemCategory.WEAPON,
        tags=("weapon", "pistol", "ranged", "gun"),
        tier=2,
        equip_slot=EquipSlot.WEAPON,
        weapon_type="pistol",
        stats=ItemStats(atk=15, crit_chance=0.2),
    )


@pytest.fixture
def bandage() -> ItemStack:
    return ItemStack(
        id="bandage",
        name="Bandage",
        category=ItemCategory.CONSUMABLE,
        tags=("medical", "bandage"),
        quantity=2,
    )


@pytest.fixture
def catalog() -> list[ItemStack]:
    """A small item catalog covering every event category."""
    return [
        ItemStack(id="first_aid", name="First Aid Kit", category=ItemCategory.CONSUMABLE, tags=("medical",)),
        ItemStack(id="apple", name="Fresh Apple", category=ItemCategory.CONSUMABLE, tags=("food", "healthy")),
        ItemStack(id="leather", name="Leather", category=ItemCategory.MATERIAL, tags=("material",), tier=1),
        ItemStack(id="meteor", name="Meteorite", category=ItemCategory.MATERIAL, tags=("material", "meteor"), tier=1),
        ItemStack(id="mithril", name="Mithril", category=ItemCategory.MATERIAL, tags=("material", "mithril"), tier=4),
    ]


@pytest.fixture
def flavor_events() -> list[FlavorEvent]:
    return [
        FlavorEvent(id="e1", text="{1} and {2} share a can of beans.", survivor_count=2, victim_count=0),
        FlavorEvent(id="e2", text="{1} ambushes {2}.", type="death", survivor_count=1, victim_count=1),
        FlavorEvent(id="e3", text="{1} stargazes with {2}.", time_of_day="night"),
    ]
