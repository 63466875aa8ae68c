"""Adapters around the core: snapshots, backups, definitions, reports."""
