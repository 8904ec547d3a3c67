"""Tests for procedural equipment generation."""

from __future__ import annotations

from royale_engine.engine.loot import (
    LEGENDARY_NAMES,
    NameHistory,
    create_equipment_item,
    get_grade,
    make_armor_stats,
    make_weapon_stats,
    roll_tier,
)
from royale_engine.engine.rng import SeededRandom, SequenceRandom
from royale_engine.models import EquipSlot, ItemCategory


class TestGrades:
    """Tests for grade lookup and tier rolls."""

    def test_get_grade_clamps(self) -> None:
        """Test out-of-range tiers clamp to the nearest grade."""
        assert get_grade(0).label == "Common"
        assert get_grade(9).label == "Transcendent"
        assert get_grade(3).mult == 1.85

    def test_roll_tier_extremes(self) -> None:
        """Test the lowest and highest rolls map to tiers 1 and 6."""
        assert roll_tier(1, SequenceRandom([0.0])) == 1
        assert roll_tier(1, SequenceRandom([0.999])) == 6

    def test_roll_tier_range(self, seeded_rng: SeededRandom) -> None:
        """Test rolled tiers always fall in 1 to 6."""
        tiers = {roll_tier(day, seeded_rng) for day in range(1, 200)}
        assert tiers <= set(range(1, 7))


class TestStats:
    """Tests for stat builders."""

    def test_amp_only_weapon(self, seeded_rng: SeededRandom) -> None:
        """Test amp weapons carry skill amp instead of attack."""
        stats = make_weapon_stats(3, "amp_only", seeded_rng)
        assert stats.atk == 0
        assert stats.skill_amp > 0

    def test_attack_speed_weapon(self, seeded_rng: SeededRandom) -> None:
        """Test attack-speed weapons roll attack and speed."""
        stats = make_weapon_stats(1, "atk_speed", seeded_rng)
        assert 10 <= stats.atk <= 18
        assert stats.atk_speed > 0

    def test_high_tier_armor_has_all_affixes(self, seeded_rng: SeededRandom) -> None:
        """Test tier-6 body armor rolls every affix."""
        stats = make_armor_stats(5, EquipSlot.CLOTHES, seeded_rng)
        assert stats.crit_chance > 0
        assert stats.cdr > 0
        assert stats.lifesteal > 0
        assert stats.move_speed == 0

    def test_shoes_get_move_speed(self, seeded_rng: SeededRandom) -> None:
        """Test shoes always roll move speed."""
        assert make_armor_stats(1, EquipSlot.SHOES, seeded_rng).move_speed > 0


class TestCreateEquipmentItem:
    """Tests for the equipment factory."""

    def test_ranged_weapon_tags(self, seeded_rng: SeededRandom) -> None:
        """Test a generated gun is tagged ranged and graded."""
        item = create_equipment_item(EquipSlot.WEAPON, seeded_rng, tier=2, weapon_type="pistol")

        assert item.category is ItemCategory.WEAPON
        assert item.id.startswith("wpn_")
        assert item.name.startswith("Uncommon ")
        assert item.is_weapon
        assert item.is_ranged
        assert item.has_tag("gun")
        assert item.tier == 2

    def test_melee_weapon_not_ranged(self, seeded_rng: SeededRandom) -> None:
        """Test a generated blade is not ranged."""
        item = create_equipment_item(EquipSlot.WEAPON, seeded_rng, tier=1, weapon_type="sword")
        assert not item.is_ranged

    def test_armor(self, seeded_rng: SeededRandom) -> None:
        """Test generated armor keeps its slot and tier."""
        item = create_equipment_item(EquipSlot.HEAD, seeded_rng, tier=9)

        assert item.category is ItemCategory.ARMOR
        assert item.tier == 6
        assert item.equip_slot is EquipSlot.HEAD
        assert item.weapon_type == ""
        assert item.has_tag("armor", "head")

    def test_legendary_name(self, seeded_rng: SeededRandom) -> None:
        """Test legendary items take a name from the legendary pool."""
        history = NameHistory()
        item = create_equipment_item(
            EquipSlot.WEAPON, seeded_rng, tier=5, weapon_type="sword", history=history
        )
        base_name = item.name.removeprefix("Legendary ")
        assert base_name in LEGENDARY_NAMES[EquipSlot.WEAPON]
        assert history.recent("legend:weapon:sword") == (base_name,)


class TestNameHistory:
    """Tests for the bounded name memory."""

    def test_minimum_capacity(self) -> None:
        """Test capacity never drops below three."""
        assert NameHistory(capacity=1).capacity == 3

    def test_per_key_capacity(self) -> None:
        """Test each key keeps only its most recent names."""
        history = NameHistory(capacity=3)
        for name in ("a", "b", "c", "d"):
            history.remember("k", name)
        assert history.recent("k") == ("b", "c", "d")

    def test_key_eviction(self) -> None:
        """Test the least recently used key is evicted."""
        history = NameHistory(max_keys=2)
        history.remember("a", "x")
        history.remember("b", "x")
        history.remember("a", "y")
        history.remember("c", "x")

        assert len(history) == 2
        assert history.recent("b") == ()
        assert history.recent("a") == ("x", "y")

    def test_pick_unique_avoids_recent(self) -> None:
        """Test a recently used name is skipped."""
        history = NameHistory()
        history.remember("k", "Gram")
        rng = SequenceRandom([0.0, 0.6])

        assert history.pick_unique(("Gram", "Tyrfing"), "k", rng) == "Tyrfing"

    def test_pick_unique_falls_back_when_exhausted(self) -> None:
        """Test a used name is reused once the pool is exhausted."""
        history = NameHistory()
        history.remember("k", "Gram")
        assert history.pick_unique(("Gram",), "k", SequenceRandom([0.0])) == "Gram"

    def test_pick_unique_empty_pool(self) -> None:
        """Test an empty pool yields None."""
        assert NameHistory().pick_unique((), "k", SequenceRandom([0.0])) is None

    def test_clear(self) -> None:
        """Test clearing forgets every key."""
        history = NameHistory()
        history.remember("k", "Gram")
        history.clear()
        assert len(history) == 0
