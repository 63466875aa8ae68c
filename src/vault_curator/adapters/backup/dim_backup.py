"""DIM backup export loading."""

from pathlib import Path

from vault_curator.core import BuildManifest, ManifestParseError, parse_manifest_text


def load_backup_file(path: Path) -> BuildManifest:
    """Read a DIM backup JSON file and parse it into a build manifest."""
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ManifestParseError(f"Failed to load backup {path}: {e}") from e
    return parse_manifest_text(content)


def load_backup_text(content: str) -> BuildManifest:
    """Parse a DIM backup given as raw JSON text."""
    return parse_manifest_text(content)
