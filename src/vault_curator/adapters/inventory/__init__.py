"""Inventory source adapters."""

from vault_curator.adapters.inventory.json_snapshot import JsonSnapshotSource, item_from_record

__all__ = ["JsonSnapshotSource", "item_from_record"]
