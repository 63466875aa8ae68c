"""Core domain entities."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, IntEnum
from typing import Optional, Union


class ItemCategory(str, Enum):
    """Broad category of an inventory item."""

    WEAPON = "weapon"
    ARMOR = "armor"
    OTHER = "other"


class ItemTier(IntEnum):
    """Rarity tier of an item."""

    UNKNOWN = 0
    CURRENCY = 1
    BASIC = 2
    COMMON = 3
    RARE = 4
    LEGENDARY = 5
    EXOTIC = 6


class ItemLocation(IntEnum):
    """Where an item currently lives."""

    UNKNOWN = 0
    INVENTORY = 1
    VAULT = 2
    VENDOR = 3
    POSTMASTER = 4


class DestinyClass(IntEnum):
    TITAN = 0
    HUNTER = 1
    WARLOCK = 2
    UNKNOWN = 3


class ArmorSlot(IntEnum):
    """Armor slot keyed by inventory bucket hash."""

    HELMET = 3448274439
    GAUNTLETS = 3551918588
    CHEST = 14239492
    LEGS = 20886954
    CLASS_ITEM = 1585787867


ARMOR_SLOT_NAMES: dict[ArmorSlot, str] = {
    ArmorSlot.HELMET: "Helmet",
    ArmorSlot.GAUNTLETS: "Gauntlets",
    ArmorSlot.CHEST: "Chest Armor",
    ArmorSlot.LEGS: "Leg Armor",
    ArmorSlot.CLASS_ITEM: "Class Item",
}

CLASS_NAMES: dict[DestinyClass, str] = {
    DestinyClass.TITAN: "Titan",
    DestinyClass.HUNTER: "Hunter",
    DestinyClass.WARLOCK: "Warlock",
    DestinyClass.UNKNOWN: "Unknown",
}


class Action(str, Enum):
    """Disposition recommended for an item."""

    KEEP = "KEEP"
    REVIEW = "REVIEW"
    JUNK = "JUNK"


# Plan ordering: JUNK first, then REVIEW, then KEEP
ACTION_ORDER: dict[Action, int] = {Action.JUNK: 0, Action.REVIEW: 1, Action.KEEP: 2}


class ManifestTag(str, Enum):
    """Tag values a build manifest may attach to an item."""

    FAVORITE = "favorite"
    KEEP = "keep"
    JUNK = "junk"
    INFUSE = "infuse"
    ARCHIVE = "archive"


STAT_NAMES: tuple[str, ...] = (
    "mobility",
    "resilience",
    "recovery",
    "discipline",
    "intellect",
    "strength",
)


@dataclass(frozen=True)
class ArmorStats:
    """Six-stat armor roll plus its total."""

    mobility: int
    resilience: int
    recovery: int
    discipline: int
    intellect: int
    strength: int
    total: Optional[int] = None

    def __post_init__(self) -> None:
        for name in STAT_NAMES:
            if getattr(self, name) < 0:
                raise ValueError(f"Stat {name} cannot be negative")
        if self.total is None:
            object.__setattr__(self, "total", sum(self.values()))

    def values(self) -> list[int]:
        """Stat values in canonical order."""
        return [getattr(self, name) for name in STAT_NAMES]

    def named(self) -> list[tuple[str, int]]:
        """(Display name, value) pairs in canonical order."""
        return [(name.capitalize(), getattr(self, name)) for name in STAT_NAMES]

    def compact(self) -> str:
        return (
            f"M{self.mobility} R{self.resilience} Rc{self.recovery} "
            f"D{self.discipline} I{self.intellect} S{self.strength}"
        )


@dataclass(frozen=True)
class BaseItem:
    """Fields shared by every item snapshot."""

    instance_id: str
    item_hash: int
    name: str = ""
    tier: ItemTier = ItemTier.UNKNOWN
    location: ItemLocation = ItemLocation.UNKNOWN
    character_id: Optional[str] = None
    is_equipped: bool = False
    is_locked: bool = False
    is_masterworked: bool = False
    power_level: int = 0

    def __post_init__(self) -> None:
        if not self.instance_id:
            raise ValueError("Instance ID cannot be empty")
        if not self.name:
            object.__setattr__(self, "name", f"Unknown Item ({self.item_hash})")

    @property
    def category(self) -> ItemCategory:
        return ItemCategory.OTHER

    @property
    def in_vault(self) -> bool:
        return self.location == ItemLocation.VAULT


@dataclass(frozen=True)
class WeaponItem(BaseItem):
    damage_type: Optional[int] = None
    weapon_type: Optional[str] = None

    @property
    def category(self) -> ItemCategory:
        return ItemCategory.WEAPON


@dataclass(frozen=True)
class ArmorItem(BaseItem):
    """Armor piece; `stats` is None when the snapshot carried no roll."""

    stats: Optional[ArmorStats] = None
    slot: Optional[ArmorSlot] = None
    class_type: Optional[DestinyClass] = None

    @property
    def category(self) -> ItemCategory:
        return ItemCategory.ARMOR


@dataclass(frozen=True)
class OtherItem(BaseItem):
    pass


Item = Union[WeaponItem, ArmorItem, OtherItem]


def stats_of(item: Item) -> Optional[ArmorStats]:
    """Armor stats of an item, or None for anything without a roll."""
    if isinstance(item, ArmorItem):
        return item.stats
    return None


@dataclass(frozen=True)
class ProtectionRules:
    """Rules that force KEEP regardless of score."""

    protect_loadout_items: bool = True
    protect_locked: bool = True
    protect_masterworked: bool = True
    protect_exotics: bool = True
    protect_high_stat_armor: bool = True
    high_stat_threshold: int = 65
    protected_ids: frozenset[str] = field(default_factory=frozenset)


@dataclass
class Recommendation:
    """Disposition for a single item."""

    item: Item
    action: Action
    reason: str
    score: Optional[int] = None
    protected_by: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.protected_by and self.action != Action.KEEP:
            raise ValueError("Protected items must be kept")


@dataclass
class PlanSummary:
    total_analyzed: int
    keep: int
    review: int
    junk: int
    protected_items: int


@dataclass
class Plan:
    """Disposition plan for one planning run."""

    generated_at: datetime
    summary: PlanSummary
    recommendations: list[Recommendation]

    def by_action(self, action: Action) -> list[Recommendation]:
        return [r for r in self.recommendations if r.action == action]


@dataclass(frozen=True)
class TransferRequest:
    """Item move the host may execute; the core never performs it."""

    instance_id: str
    item_hash: int
    target: str = "vault"


@dataclass
class VaultSummary:
    total_items: int
    weapons: int
    armor: int
    other: int
    capacity: int
    used_percent: int


@dataclass
class BuildSafety:
    """Whether an item can be dismantled without breaking a build."""

    item: Item
    safe_to_dismantle: bool
    reasons: list[str]
    loadouts: list[str]
    tag: Optional[ManifestTag] = None
    note: Optional[str] = None
