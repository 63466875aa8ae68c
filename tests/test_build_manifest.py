"""Tests for build manifest parsing and lookups."""

from dataclasses import FrozenInstanceError

import pytest

from vault_curator.core import (
    BuildManifest,
    DestinyClass,
    ManifestParseError,
    ManifestTag,
    parse_manifest,
    parse_manifest_text,
)

BACKUP = {
    "loadouts-v3.0": [
        {
            "id": "l1",
            "name": "PvP Build",
            "classType": 1,
            "equipped": [{"id": "100", "hash": 1}, {"id": "101", "hash": 2}],
            "unequipped": [{"id": "102", "hash": 3}],
        },
        {
            "id": "l2",
            "name": "Raid",
            "classType": 9,
            "equipped": [{"id": "100", "hash": 1}],
        },
        {
            "id": "l3",
            "name": "Shaders only",
            "equipped": [{"hash": 55}],
        },
    ],
    "tags-v1.0": [
        {"id": "100", "tag": "junk"},
        {"id": "200", "tag": "keep"},
    ],
    "item-annotations": [
        {"id": "200", "tag": "favorite", "notes": "god roll"},
        {"id": "300", "tag": "bogus"},
        {"id": "400", "notes": "for infusion"},
    ],
    "settings": {"ignored": True},
}


def test_parse_manifest_loadouts() -> None:
    """Test loadout parsing and dropping of item-less loadouts."""
    manifest = parse_manifest(BACKUP)

    assert [loadout.name for loadout in manifest.loadouts] == ["PvP Build", "Raid"]
    assert manifest.loadouts[0].item_ids == ("100", "101", "102")
    assert manifest.loadouts[0].class_type == DestinyClass.HUNTER
    # Unknown class values fall back to UNKNOWN
    assert manifest.loadouts[1].class_type == DestinyClass.UNKNOWN


def test_item_lookups() -> None:
    """Test item to loadout, tag and note lookups."""
    manifest = parse_manifest(BACKUP)

    assert [loadout.name for loadout in manifest.loadouts_for_item("100")] == ["PvP Build", "Raid"]
    assert manifest.loadouts_for_item("999") == []
    assert manifest.is_in_loadout("102")
    assert not manifest.is_in_loadout("200")
    assert manifest.note_for_item("200") == "god roll"
    assert manifest.note_for_item("100") is None


def test_annotations_override_legacy_tags() -> None:
    """Test that newer annotations win over legacy tags."""
    manifest = parse_manifest(BACKUP)

    assert manifest.tag_for_item("200") == ManifestTag.FAVORITE
    assert manifest.tag_for_item("100") == ManifestTag.JUNK
    # Unknown tag values are ignored
    assert manifest.tag_for_item("300") is None


def test_set_queries_and_summary() -> None:
    """Test set-valued queries and the summary."""
    manifest = parse_manifest(BACKUP)

    assert manifest.loadout_item_ids() == frozenset({"100", "101", "102"})
    assert manifest.favorite_item_ids() == frozenset({"200"})
    assert manifest.junk_item_ids() == frozenset({"100"})
    assert manifest.keep_item_ids() == frozenset()

    summary = manifest.summary()
    assert summary.loadout_count == 2
    assert summary.tagged_item_count == 2
    assert summary.noted_item_count == 2
    assert summary.loadout_item_count == 3


def test_missing_sections_default_to_empty() -> None:
    """Test that an empty object gives an empty manifest."""
    manifest = parse_manifest({})

    assert manifest.loadouts == ()
    assert manifest.tags == {}
    assert manifest.tag_for_item("1") is None


@pytest.mark.parametrize(
    "document",
    [
        [],
        "backup",
        {"loadouts-v3.0": {"id": "l1"}},
        {"loadouts-v3.0": ["not an object"]},
        {"loadouts-v3.0": [{"name": "No id"}]},
        {"loadouts-v3.0": [{"id": "l1", "equipped": [{"id": "1"}]}]},
        {"tags-v1.0": [{"id": "1"}]},
        {"item-annotations": [{"tag": "junk"}]},
    ],
)
def test_parse_manifest_rejects_malformed(document) -> None:
    """Test that malformed documents raise a typed error."""
    with pytest.raises(ManifestParseError):
        parse_manifest(document)


def test_parse_manifest_text() -> None:
    """Test parsing from a JSON string."""
    manifest = parse_manifest_text('{"tags-v1.0": [{"id": "5", "tag": "keep"}]}')
    assert manifest.keep_item_ids() == frozenset({"5"})

    with pytest.raises(ManifestParseError):
        parse_manifest_text("{not json")


def test_manifest_is_immutable() -> None:
    """Test that lookups cannot drift from the data they were built on."""
    tags = {"1": ManifestTag.JUNK}
    manifest = BuildManifest(tags=tags)

    # Changing the caller's dict does not reach the manifest
    tags["2"] = ManifestTag.FAVORITE
    assert manifest.tag_for_item("2") is None
    assert manifest.favorite_item_ids() == frozenset()

    with pytest.raises(TypeError):
        manifest.tags["3"] = ManifestTag.KEEP
    with pytest.raises(FrozenInstanceError):
        manifest.loadouts = ()
