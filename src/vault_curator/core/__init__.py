"""Core domain layer."""

from vault_curator.core.build_manifest import (
    BuildManifest,
    Loadout,
    ManifestSummary,
    parse_manifest,
    parse_manifest_text,
)
from vault_curator.core.duplicates import (
    DuplicateGroup,
    DuplicateOptions,
    DuplicateRecommendation,
    DuplicateResolver,
    DuplicateSummary,
    find_duplicates,
    summarize_duplicates,
)
from vault_curator.core.entities import (
    Action,
    ArmorItem,
    ArmorSlot,
    ArmorStats,
    BuildSafety,
    DestinyClass,
    Item,
    ItemCategory,
    ItemLocation,
    ItemTier,
    ManifestTag,
    OtherItem,
    Plan,
    PlanSummary,
    ProtectionRules,
    Recommendation,
    TransferRequest,
    VaultSummary,
    WeaponItem,
)
from vault_curator.core.errors import (
    ItemNotFoundError,
    ManifestParseError,
    PlanNotGeneratedError,
    SnapshotFormatError,
    VaultCuratorError,
)
from vault_curator.core.interfaces import DefinitionLookup, InventorySource, PlanFormatter
from vault_curator.core.planner import (
    DispositionPlanner,
    generate_plan,
    generate_transfer_plan,
    get_junk_items,
    get_review_items,
)
from vault_curator.core.scoring import (
    STAT_PROFILES,
    ArmorAnalysis,
    ArmorScore,
    ArmorScorer,
    ComparisonResult,
    ScoringThresholds,
    StatProfile,
    compare_armor,
    score_armor,
)

__all__ = [
    "Action",
    "ArmorAnalysis",
    "ArmorItem",
    "ArmorScore",
    "ArmorScorer",
    "ArmorSlot",
    "ArmorStats",
    "BuildManifest",
    "BuildSafety",
    "ComparisonResult",
    "DefinitionLookup",
    "DestinyClass",
    "DispositionPlanner",
    "DuplicateGroup",
    "DuplicateOptions",
    "DuplicateRecommendation",
    "DuplicateResolver",
    "DuplicateSummary",
    "InventorySource",
    "Item",
    "ItemCategory",
    "ItemLocation",
    "ItemNotFoundError",
    "ItemTier",
    "Loadout",
    "ManifestParseError",
    "ManifestSummary",
    "ManifestTag",
    "OtherItem",
    "Plan",
    "PlanFormatter",
    "PlanNotGeneratedError",
    "PlanSummary",
    "ProtectionRules",
    "Recommendation",
    "STAT_PROFILES",
    "ScoringThresholds",
    "SnapshotFormatError",
    "StatProfile",
    "TransferRequest",
    "VaultCuratorError",
    "VaultSummary",
    "WeaponItem",
    "compare_armor",
    "find_duplicates",
    "generate_plan",
    "generate_transfer_plan",
    "get_junk_items",
    "get_review_items",
    "parse_manifest",
    "parse_manifest_text",
    "score_armor",
    "summarize_duplicates",
]
