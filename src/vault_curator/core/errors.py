"""Typed failures surfaced to the host."""


class VaultCuratorError(Exception):
    """Base error for the curator."""


class ManifestParseError(VaultCuratorError):
    """Backup document could not be turned into a build manifest."""


class SnapshotFormatError(VaultCuratorError):
    """Inventory snapshot record is malformed."""


class ItemNotFoundError(VaultCuratorError):
    """No item with the given instance ID in the current snapshot."""

    def __init__(self, instance_id: str) -> None:
        super().__init__(f"Item not found: {instance_id}")
        self.instance_id = instance_id


class PlanNotGeneratedError(VaultCuratorError):
    """A plan query was made before any plan was generated."""

    def __init__(self) -> None:
        super().__init__("No cleanup plan generated. Run generate_plan first.")
