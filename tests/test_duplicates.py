"""Tests for duplicate detection and resolution."""

import pytest

from vault_curator.core import (
    ArmorItem,
    ArmorSlot,
    ArmorStats,
    DuplicateOptions,
    DuplicateResolver,
    OtherItem,
    WeaponItem,
    find_duplicates,
    summarize_duplicates,
)


def make_weapon(instance_id: str, item_hash: int = 1, power: int = 1800, **kwargs) -> WeaponItem:
    return WeaponItem(
        instance_id=instance_id, item_hash=item_hash, name="Fatebringer", power_level=power, **kwargs
    )


def make_armor(instance_id: str, stats: tuple, item_hash: int = 2, **kwargs) -> ArmorItem:
    return ArmorItem(
        instance_id=instance_id,
        item_hash=item_hash,
        name="Iron Helm",
        stats=ArmorStats(*stats),
        slot=ArmorSlot.HELMET,
        **kwargs,
    )


def test_weapon_duplicates_keep_highest_power() -> None:
    """Test that the highest power copy is kept and the rest discarded."""
    items = [make_weapon("a", power=1805), make_weapon("b", power=1810), make_weapon("c", power=1800)]

    groups = find_duplicates(items)

    assert len(groups) == 1
    rec = groups[0].recommendation
    assert [i.instance_id for i in rec.keep] == ["b"]
    assert [i.instance_id for i in rec.discard] == ["a", "c"]
    assert rec.review == []
    assert rec.reasoning[0] == "Keep Fatebringer (PL: 1810)"


def test_weapon_ranking_prefers_masterwork_then_lock() -> None:
    """Test weapon priority ordering."""
    items = [
        make_weapon("high", power=1810),
        make_weapon("locked", power=1800, is_locked=True),
        make_weapon("mw", power=1790, is_masterworked=True),
    ]

    rec = find_duplicates(items)[0].recommendation

    assert [i.instance_id for i in rec.keep] == ["mw"]
    # Locked copies go to review instead of discard
    assert [i.instance_id for i in rec.review] == ["locked"]
    assert [i.instance_id for i in rec.discard] == ["high"]
    assert "Review Fatebringer (PL: 1800, locked)" in rec.reasoning


def test_weapon_ties_keep_first_copy() -> None:
    """Test that identical weapons keep exactly one copy."""
    rec = find_duplicates([make_weapon("a"), make_weapon("b")])[0].recommendation

    assert [i.instance_id for i in rec.keep] == ["a"]
    assert [i.instance_id for i in rec.discard] == ["b"]


def test_armor_duplicates_split() -> None:
    """Test keep/discard/review split for armor."""
    items = [
        make_armor("mid", (20, 7, 7, 7, 7, 7)),
        make_armor("best", (2, 20, 26, 15, 6, 8)),
        make_armor("twin", (2, 20, 26, 15, 6, 8)),
        make_armor("trash", (0, 0, 0, 0, 0, 0), is_locked=True),
        ArmorItem(instance_id="bare", item_hash=2, name="Iron Helm"),
    ]

    rec = find_duplicates(items)[0].recommendation

    assert [i.instance_id for i in rec.keep] == ["best"]
    assert [i.instance_id for i in rec.discard] == ["mid"]
    assert [i.instance_id for i in rec.review] == ["twin", "bare", "trash"]
    assert rec.reasoning == [
        "Keep Iron Helm (score: 75, stats: 77)",
        "Review Iron Helm (score: 75, may be useful for specific builds)",
        "Discard Iron Helm (score: 53, significantly worse than best)",
        "Discard Iron Helm (score: 0, significantly worse than best)",
        "Review Iron Helm (no stats available)",
        "Moved Iron Helm to review (locked)",
    ]


def test_armor_low_quality_discard() -> None:
    """Test close but low scoring copies are discarded."""
    items = [
        make_armor("a", (8, 8, 8, 8, 8, 8)),
        make_armor("b", (12, 12, 12, 7, 7, 7)),
    ]

    rec = find_duplicates(items)[0].recommendation

    assert [i.instance_id for i in rec.keep] == ["b"]
    assert [i.instance_id for i in rec.discard] == ["a"]
    assert rec.reasoning[-1] == "Discard Iron Helm (score: 31, low quality)"


def test_grouping_respects_definitions_and_minimum() -> None:
    """Test groups never mix definitions or fall below the minimum size."""
    items = [
        make_weapon("w1", item_hash=1),
        make_weapon("w2", item_hash=1),
        make_weapon("w3", item_hash=1),
        make_weapon("x1", item_hash=9),
        make_armor("a1", (10, 10, 10, 10, 10, 10)),
        make_armor("a2", (10, 10, 10, 10, 10, 10)),
        OtherItem(instance_id="o1", item_hash=5),
        OtherItem(instance_id="o2", item_hash=5),
    ]

    groups = find_duplicates(items)

    assert [g.item_hash for g in groups] == [1, 2]
    for group in groups:
        assert len({item.item_hash for item in group.items}) == 1
        assert len(group.items) >= 2

    assert groups[1].slot == ArmorSlot.HELMET
    assert groups[0].slot is None


def test_options_filter_categories() -> None:
    """Test include flags and minimum size options."""
    items = [
        make_weapon("w1"),
        make_weapon("w2"),
        make_armor("a1", (10, 10, 10, 10, 10, 10)),
        make_armor("a2", (10, 10, 10, 10, 10, 10)),
    ]

    weapons_only = find_duplicates(items, DuplicateOptions(include_armor=False))
    assert [g.item_hash for g in weapons_only] == [1]

    assert find_duplicates(items, DuplicateOptions(min_duplicates=3)) == []


def test_keep_count() -> None:
    """Test keeping more than one copy per group."""
    items = [make_weapon("a", power=1800), make_weapon("b", power=1810), make_weapon("c", power=1805)]
    resolver = DuplicateResolver(DuplicateOptions(keep_count=2))

    rec = resolver.find_duplicates(items)[0].recommendation

    assert [i.instance_id for i in rec.keep] == ["b", "c"]
    assert [i.instance_id for i in rec.discard] == ["a"]


def test_invalid_options() -> None:
    """Test option validation."""
    with pytest.raises(ValueError):
        DuplicateOptions(min_duplicates=0)
    with pytest.raises(ValueError):
        DuplicateOptions(keep_count=-1)


def test_summarize_duplicates() -> None:
    """Test duplicate summary totals."""
    items = [
        make_weapon("w1", power=1810, is_masterworked=True),
        make_weapon("w2", power=1800),
        make_weapon("w3", power=1790, is_locked=True),
        make_armor("a1", (2, 20, 26, 15, 6, 8)),
        make_armor("a2", (0, 0, 0, 0, 0, 0)),
    ]

    groups = find_duplicates(items)
    summary = summarize_duplicates(groups)

    weapons = groups[0].recommendation
    assert [i.instance_id for i in weapons.keep] == ["w1"]
    assert [i.instance_id for i in weapons.review] == ["w3"]
    assert [i.instance_id for i in weapons.discard] == ["w2"]

    assert summary.total_groups == 2
    assert summary.total_duplicates == 3
    assert summary.total_discard == 2
    assert summary.total_review == 1
    assert summary.by_slot == {ArmorSlot.HELMET: 2}
