"""Core interfaces for adapters."""

from abc import ABC, abstractmethod
from typing import Optional

from vault_curator.core.entities import Item, Plan


class InventorySource(ABC):
    """Interface for obtaining a materialised inventory snapshot."""

    @abstractmethod
    async def fetch_items(self) -> list[Item]:
        """Fetch every item in the account."""
        pass


class DefinitionLookup(ABC):
    """Interface for resolving item hashes to definition data."""

    @abstractmethod
    def get_item_name(self, item_hash: int) -> Optional[str]:
        """Display name for a hash, None when unknown."""
        pass

    @abstractmethod
    def get_tier_name(self, item_hash: int) -> Optional[str]:
        """Tier display name (Legendary, Exotic, ...)."""
        pass


class PlanFormatter(ABC):
    """Interface for rendering plans as text."""

    @abstractmethod
    def format_plan(self, plan: Plan) -> str:
        """Render the whole plan."""
        pass
