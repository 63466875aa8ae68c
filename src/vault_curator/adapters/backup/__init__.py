"""Backup export adapters."""

from vault_curator.adapters.backup.dim_backup import load_backup_file, load_backup_text

__all__ = ["load_backup_file", "load_backup_text"]
