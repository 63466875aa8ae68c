"""Build manifest: loadouts, tags and notes taken from a DIM backup export."""

import json
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Optional, Sequence

from vault_curator.core.entities import DestinyClass, ManifestTag
from vault_curator.core.errors import ManifestParseError

LOADOUTS_KEY = "loadouts-v3.0"
LEGACY_TAGS_KEY = "tags-v1.0"
ANNOTATIONS_KEY = "item-annotations"

_KNOWN_TAGS = {tag.value: tag for tag in ManifestTag}


@dataclass(frozen=True)
class Loadout:
    """Saved loadout referencing item instance IDs."""

    id: str
    name: str
    class_type: DestinyClass
    item_ids: tuple[str, ...]


@dataclass
class ManifestSummary:
    loadout_count: int
    tagged_item_count: int
    noted_item_count: int
    loadout_item_count: int


@dataclass(frozen=True)
class BuildManifest:
    """Read-only view over loadouts, tags and notes.

    Inputs are copied into immutable containers and the item-to-loadout and
    tag-to-items indexes are built once in ``__post_init__``, so every lookup
    is a dictionary hit and can never go stale.
    """

    loadouts: Sequence[Loadout] = field(default_factory=tuple)
    tags: Mapping[str, ManifestTag] = field(default_factory=dict)
    notes: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "loadouts", tuple(self.loadouts))
        object.__setattr__(self, "tags", MappingProxyType(dict(self.tags)))
        object.__setattr__(self, "notes", MappingProxyType(dict(self.notes)))

        by_item: dict[str, list[Loadout]] = {}
        for loadout in self.loadouts:
            for item_id in dict.fromkeys(loadout.item_ids):
                by_item.setdefault(item_id, []).append(loadout)

        grouped: dict[ManifestTag, set[str]] = {}
        for item_id, tag in self.tags.items():
            grouped.setdefault(tag, set()).add(item_id)

        object.__setattr__(self, "_by_item", {k: tuple(v) for k, v in by_item.items()})
        object.__setattr__(self, "_by_tag", {k: frozenset(v) for k, v in grouped.items()})

    def loadouts_for_item(self, instance_id: str) -> list[Loadout]:
        """Loadouts that reference the item, in manifest order."""
        return list(self._by_item.get(instance_id, ()))

    def is_in_loadout(self, instance_id: str) -> bool:
        return instance_id in self._by_item

    def tag_for_item(self, instance_id: str) -> Optional[ManifestTag]:
        return self.tags.get(instance_id)

    def note_for_item(self, instance_id: str) -> Optional[str]:
        return self.notes.get(instance_id)

    def loadout_item_ids(self) -> frozenset[str]:
        return frozenset(self._by_item)

    def item_ids_with_tag(self, tag: ManifestTag) -> frozenset[str]:
        return self._by_tag.get(tag, frozenset())

    def favorite_item_ids(self) -> frozenset[str]:
        return self.item_ids_with_tag(ManifestTag.FAVORITE)

    def junk_item_ids(self) -> frozenset[str]:
        return self.item_ids_with_tag(ManifestTag.JUNK)

    def keep_item_ids(self) -> frozenset[str]:
        return self.item_ids_with_tag(ManifestTag.KEEP)

    def summary(self) -> ManifestSummary:
        return ManifestSummary(
            loadout_count=len(self.loadouts),
            tagged_item_count=len(self.tags),
            noted_item_count=len(self.notes),
            loadout_item_count=len(self._by_item),
        )


def parse_manifest(document: Any) -> BuildManifest:
    """Build a manifest from a decoded backup document.

    Args:
        document: Decoded JSON export. Unknown top-level fields are ignored
            and missing sections default to empty.

    Returns:
        Fully populated BuildManifest.

    Raises:
        ManifestParseError: If the document or one of its known sections is
            malformed. Nothing is returned in that case.
    """
    if not isinstance(document, dict):
        raise ManifestParseError(
            f"Backup must be a JSON object, got {type(document).__name__}"
        )

    loadouts = [
        loadout
        for loadout in (
            _parse_loadout(raw) for raw in _section(document, LOADOUTS_KEY)
        )
        if loadout.item_ids
    ]

    tags: dict[str, ManifestTag] = {}
    notes: dict[str, str] = {}

    for raw in _section(document, LEGACY_TAGS_KEY):
        item_id = _require_id(raw, LEGACY_TAGS_KEY)
        if "tag" not in raw:
            raise ManifestParseError(f"Tag record {item_id} has no tag")
        tag = _tag(raw["tag"])
        if tag is not None:
            tags[item_id] = tag

    # Annotations are newer than legacy tags and win on collision
    for raw in _section(document, ANNOTATIONS_KEY):
        item_id = _require_id(raw, ANNOTATIONS_KEY)
        tag = _tag(raw.get("tag"))
        if tag is not None:
            tags[item_id] = tag
        if raw.get("notes"):
            notes[item_id] = str(raw["notes"])

    return BuildManifest(loadouts=loadouts, tags=tags, notes=notes)


def parse_manifest_text(text: str) -> BuildManifest:
    """Parse a backup export given as a JSON string."""
    try:
        document = json.loads(text)
    except json.JSONDecodeError as e:
        raise ManifestParseError(f"Failed to parse backup: {e}") from e
    return parse_manifest(document)


def _section(document: dict, key: str) -> list[dict]:
    value = document.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise ManifestParseError(f"Section '{key}' must be a list")
    for entry in value:
        if not isinstance(entry, dict):
            raise ManifestParseError(f"Section '{key}' contains a non-object entry")
    return value


def _tag(value: Any) -> Optional[ManifestTag]:
    if not isinstance(value, str):
        return None
    return _KNOWN_TAGS.get(value)


def _require_id(raw: dict, section: str) -> str:
    item_id = raw.get("id")
    if not item_id:
        raise ManifestParseError(f"Entry in '{section}' has no id")
    return str(item_id)


def _parse_loadout(raw: dict) -> Loadout:
    loadout_id = _require_id(raw, LOADOUTS_KEY)
    if "name" not in raw:
        raise ManifestParseError(f"Loadout {loadout_id} has no name")

    item_ids: list[str] = []
    for bucket in ("equipped", "unequipped"):
        entries = raw.get(bucket) or []
        if not isinstance(entries, list):
            raise ManifestParseError(f"Loadout {loadout_id} '{bucket}' must be a list")
        for entry in entries:
            # Generic (non-instanced) entries carry only a hash
            if isinstance(entry, dict) and entry.get("id"):
                item_ids.append(str(entry["id"]))

    try:
        class_type = DestinyClass(raw.get("classType", DestinyClass.UNKNOWN))
    except ValueError:
        class_type = DestinyClass.UNKNOWN

    return Loadout(
        id=loadout_id,
        name=str(raw["name"]),
        class_type=class_type,
        item_ids=tuple(item_ids),
    )
