"""Inventory snapshot read from a JSON export."""

import json
from enum import IntEnum
from pathlib import Path
from typing import Any, Optional, Type, TypeVar

from vault_curator.core import (
    ArmorItem,
    ArmorSlot,
    ArmorStats,
    DestinyClass,
    InventorySource,
    Item,
    ItemLocation,
    ItemTier,
    OtherItem,
    SnapshotFormatError,
    WeaponItem,
)

E = TypeVar("E", bound=IntEnum)


class JsonSnapshotSource(InventorySource):
    """Read items from a JSON file produced by the inventory fetcher.

    The file holds either a list of item records or an object with an
    ``items`` list. Records use the camelCase field names of the game API.
    """

    emoji = "📦"
    name = "JSON snapshot"

    def __init__(self, path: Path) -> None:
        self.path = path

    async def fetch_items(self) -> list[Item]:
        """Load and convert every record in the snapshot."""
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise SnapshotFormatError(f"Failed to read snapshot {self.path}: {e}") from e

        records = data.get("items") if isinstance(data, dict) else data
        if not isinstance(records, list):
            raise SnapshotFormatError("Snapshot must be a list of items or an object with 'items'")

        return [item_from_record(record) for record in records]


def item_from_record(record: Any) -> Item:
    """Convert one snapshot record into the matching item variant."""
    if not isinstance(record, dict):
        raise SnapshotFormatError(f"Item record must be an object, got {type(record).__name__}")

    try:
        common = dict(
            instance_id=str(record["itemInstanceId"]),
            item_hash=int(record["itemHash"]),
            name=record.get("name") or "",
            tier=_enum(ItemTier, record.get("tier"), ItemTier.UNKNOWN),
            location=_enum(ItemLocation, record.get("location"), ItemLocation.UNKNOWN),
            character_id=record.get("characterId"),
            is_equipped=_flag(record, "isEquipped"),
            is_locked=_flag(record, "isLocked"),
            is_masterworked=_flag(record, "isMasterworked"),
            power_level=int(record.get("powerLevel", 0)),
        )
        item_type = record.get("itemType", "other")

        if item_type == "armor":
            return ArmorItem(
                **common,
                stats=_stats(record.get("stats")),
                slot=_enum(ArmorSlot, record.get("armorSlot"), None),
                class_type=_enum(DestinyClass, record.get("classType"), None),
            )
        if item_type == "weapon":
            return WeaponItem(
                **common,
                damage_type=record.get("damageType"),
                weapon_type=record.get("weaponType"),
            )
        return OtherItem(**common)
    except (AttributeError, KeyError, TypeError, ValueError) as e:
        item_id = record.get("itemInstanceId", "?")
        raise SnapshotFormatError(f"Malformed item record {item_id}: {e}") from e


def _stats(raw: Any) -> Optional[ArmorStats]:
    if not raw:
        return None
    return ArmorStats(
        mobility=int(raw["mobility"]),
        resilience=int(raw["resilience"]),
        recovery=int(raw["recovery"]),
        discipline=int(raw["discipline"]),
        intellect=int(raw["intellect"]),
        strength=int(raw["strength"]),
        total=int(raw["total"]) if raw.get("total") is not None else None,
    )


def _flag(record: dict, key: str) -> bool:
    value = record.get(key, False)
    if not isinstance(value, bool):
        raise ValueError(f"{key} must be true or false, got {value!r}")
    return value


def _enum(enum_cls: Type[E], value: Any, default: Optional[E]) -> Optional[E]:
    """Accept an enum by value (int) or by name ("vault", "Exotic")."""
    if value is None:
        return default
    if isinstance(value, str) and not value.isdigit():
        try:
            return enum_cls[value.upper()]
        except KeyError:
            raise ValueError(f"Unknown {enum_cls.__name__}: {value}") from None
    return enum_cls(int(value))
