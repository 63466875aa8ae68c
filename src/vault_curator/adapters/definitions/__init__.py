"""Item definition adapters."""

from vault_curator.adapters.definitions.manifest_definitions import ManifestDefinitions, enrich_names

__all__ = ["ManifestDefinitions", "enrich_names"]
