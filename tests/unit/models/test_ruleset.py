"""Tests for ruleset presets and overrides."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from royale_engine.core.exceptions import ConfigurationError
from royale_engine.models import EventCategory, Stat
from royale_engine.models.ruleset import RULESET_PRESETS, Ruleset, get_ruleset, merge_deep


class TestPresets:
    """Tests for the shipped presets."""

    def test_er_s10_defaults(self) -> None:
        """Test the default preset values."""
        ruleset = get_ruleset("ER_S10")
        assert ruleset.id == "ER_S10"
        assert ruleset.battle.skill_bonus_cap == 40
        assert ruleset.phase.forbidden_zone_start_day == 3
        assert ruleset.credits.kill == 25
        assert ruleset.stat_weights.get(Stat.STR) == 1.0

    def test_legacy_has_no_kill_credits(self) -> None:
        """Test the legacy preset pays no kill credits."""
        assert get_ruleset("LEGACY").credits.kill == 0

    def test_unknown_id_falls_back(self) -> None:
        """Test an unknown preset id falls back to the default."""
        assert get_ruleset("SEASON_99") is RULESET_PRESETS["ER_S10"]

    def test_none_uses_settings_default(self, mock_env_vars: dict[str, str]) -> None:
        """Test the settings default ruleset is used when no id is given."""
        assert get_ruleset(None).id == "LEGACY"

    def test_frozen(self) -> None:
        """Test rulesets are immutable."""
        with pytest.raises(ValidationError):
            Ruleset().phase.battle_base = 0.9  # type: ignore[misc]


class TestOverrides:
    """Tests for layered ruleset overrides."""

    def test_partial_override(self) -> None:
        """Test an override changes only the named values."""
        ruleset = get_ruleset("ER_S10", {"phase": {"battle_base": 0.5}})
        assert ruleset.phase.battle_base == 0.5
        assert ruleset.phase.battle_max == 0.85

    def test_override_keeps_preset_id(self) -> None:
        """Test overriding a preset keeps its id."""
        ruleset = get_ruleset("LEGACY", {"id": "HACKED", "credits": {"base_per_phase": 3}})
        assert ruleset.id == "LEGACY"
        assert ruleset.credits.base_per_phase == 3
        assert ruleset.credits.kill == 0

    def test_stat_weight_long_and_short_keys(self) -> None:
        """Test stat weights accept long and short keys."""
        ruleset = get_ruleset("ER_S10", {"stat_weights": {"shooting": 2.0, "int": 0.5}})
        assert ruleset.stat_weights.get(Stat.SHT) == 2.0
        assert ruleset.stat_weights.get(Stat.INT) == 0.5
        assert ruleset.stat_weights.get(Stat.STR) == 1.0

    def test_event_weight_override(self) -> None:
        """Test one event weight can be overridden alone."""
        ruleset = get_ruleset("ER_S10", {"events": {"weights": {"mishap": 0}}})
        assert ruleset.events.weights[EventCategory.MISHAP] == 0
        assert ruleset.events.weights[EventCategory.REST] == 18

    def test_invalid_override_raises(self) -> None:
        """Test an invalid override raises a configuration error."""
        with pytest.raises(ConfigurationError) as exc_info:
            get_ruleset("ER_S10", {"phase": {"battle_base": 3.0}})
        assert exc_info.value.details["config_key"] == "ruleset"


class TestMergeDeep:
    """Tests for the deep merge helper."""

    def test_nested_merge(self) -> None:
        """Test nested mappings merge key by key."""
        merged = merge_deep({"a": {"b": 1, "c": 2}}, {"a": {"c": 3}})
        assert merged == {"a": {"b": 1, "c": 3}}

    def test_none_keeps_base(self) -> None:
        """Test a None patch keeps the base."""
        assert merge_deep({"a": 1}, None) == {"a": 1}

    def test_lists_replace(self) -> None:
        """Test lists are replaced rather than merged."""
        assert merge_deep({"a": [1, 2]}, {"a": [3]}) == {"a": [3]}
