"""Tests for core entities."""

import pytest

from vault_curator.core import (
    Action,
    ArmorItem,
    ArmorStats,
    ItemCategory,
    ItemLocation,
    OtherItem,
    Recommendation,
    WeaponItem,
)
from vault_curator.core.entities import stats_of


def test_armor_stats_total_defaults_to_sum() -> None:
    """Test that total is computed when the snapshot does not supply it."""
    stats = ArmorStats(2, 20, 26, 15, 6, 8)

    assert stats.total == 77
    assert stats.values() == [2, 20, 26, 15, 6, 8]
    assert stats.named()[2] == ("Recovery", 26)
    assert stats.compact() == "M2 R20 Rc26 D15 I6 S8"


def test_armor_stats_keeps_supplied_total() -> None:
    """Test that a total from the snapshot is kept as-is."""
    stats = ArmorStats(10, 10, 10, 10, 10, 10, total=62)
    assert stats.total == 62


def test_armor_stats_rejects_negative() -> None:
    """Test that negative stats are rejected."""
    with pytest.raises(ValueError):
        ArmorStats(-1, 10, 10, 10, 10, 10)


def test_item_variants_category() -> None:
    """Test that category follows the item variant."""
    weapon = WeaponItem(instance_id="1", item_hash=10)
    armor = ArmorItem(instance_id="2", item_hash=20, stats=ArmorStats(10, 10, 10, 10, 10, 10))
    other = OtherItem(instance_id="3", item_hash=30)

    assert weapon.category == ItemCategory.WEAPON
    assert armor.category == ItemCategory.ARMOR
    assert other.category == ItemCategory.OTHER
    assert stats_of(armor).total == 60
    assert stats_of(weapon) is None


def test_item_defaults() -> None:
    """Test default name and location handling."""
    item = WeaponItem(instance_id="1", item_hash=1234, location=ItemLocation.VAULT)

    assert item.name == "Unknown Item (1234)"
    assert item.in_vault
    assert not item.is_locked


def test_item_requires_instance_id() -> None:
    """Test that an empty instance ID is rejected."""
    with pytest.raises(ValueError):
        WeaponItem(instance_id="", item_hash=1)


def test_protected_recommendation_must_be_keep() -> None:
    """Test that protection reasons are only allowed on KEEP."""
    item = WeaponItem(instance_id="1", item_hash=1)

    Recommendation(item, Action.KEEP, "Protected: Locked in game", protected_by=["Locked in game"])
    with pytest.raises(ValueError):
        Recommendation(item, Action.JUNK, "nope", protected_by=["Locked in game"])
