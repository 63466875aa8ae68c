"""Item definition lookup backed by the game's inventory item definitions."""

import dataclasses
import json
from pathlib import Path
from typing import Any, Optional

import httpx

from vault_curator.core import DefinitionLookup, Item

BUNGIE_BASE_URL = "https://www.bungie.net"
# Class restriction value meaning "any class"
ANY_CLASS = 3


class ManifestDefinitions(DefinitionLookup):
    """Resolve item hashes using ``DestinyInventoryItemDefinition`` data."""

    def __init__(self, definitions: Optional[dict[int, dict[str, Any]]] = None) -> None:
        self.definitions = definitions or {}

    @classmethod
    def from_file(cls, path: Path) -> "ManifestDefinitions":
        """Load definitions from a downloaded JSON file; empty lookup on failure."""
        try:
            return cls(_index(json.loads(path.read_text(encoding="utf-8"))))
        except (OSError, ValueError) as e:
            print(f"⚠️  Could not load item definitions: {e}")
            return cls()

    @classmethod
    async def from_url(
        cls,
        url: str,
        api_key: Optional[str] = None,
        timeout: float = 60.0,
    ) -> "ManifestDefinitions":
        """Download definitions; an empty lookup is returned on failure.

        Args:
            url: Absolute URL or a content path relative to bungie.net
            api_key: Optional API key sent as ``X-API-Key``
            timeout: Request timeout in seconds
        """
        if url.startswith("/"):
            url = f"{BUNGIE_BASE_URL}{url}"
        headers = {"X-API-Key": api_key} if api_key else {}

        async with httpx.AsyncClient(timeout=timeout) as client:
            try:
                response = await client.get(url, headers=headers)
                response.raise_for_status()
                return cls(_index(response.json()))
            except (httpx.HTTPError, ValueError) as e:
                print(f"⚠️  Could not load item definitions: {e}")
                return cls()

    @property
    def loaded(self) -> bool:
        return bool(self.definitions)

    def get_item_name(self, item_hash: int) -> Optional[str]:
        definition = self.definitions.get(item_hash)
        if not definition:
            return None
        return definition.get("displayProperties", {}).get("name") or None

    def get_tier_name(self, item_hash: int) -> Optional[str]:
        definition = self.definitions.get(item_hash)
        if not definition:
            return None
        return definition.get("inventory", {}).get("tierTypeName") or None

    def get_item_type_name(self, item_hash: int) -> Optional[str]:
        definition = self.definitions.get(item_hash)
        if not definition:
            return None
        return definition.get("itemTypeDisplayName") or None

    def get_class_type(self, item_hash: int) -> Optional[int]:
        """Class restriction, None when the item is usable by any class."""
        definition = self.definitions.get(item_hash)
        if not definition:
            return None
        class_type = definition.get("classType")
        return None if class_type == ANY_CLASS else class_type


def enrich_names(items: list[Item], lookup: DefinitionLookup) -> list[Item]:
    """Return copies of ``items`` with display names filled from ``lookup``."""
    enriched: list[Item] = []
    for item in items:
        name = lookup.get_item_name(item.item_hash)
        enriched.append(dataclasses.replace(item, name=name) if name else item)
    return enriched


def _index(raw: Any) -> dict[int, dict[str, Any]]:
    if not isinstance(raw, dict):
        raise ValueError("Definitions must be a JSON object keyed by item hash")
    return {int(item_hash): definition for item_hash, definition in raw.items()}
