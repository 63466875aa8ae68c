"""Business logic use cases."""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from vault_curator.adapters.backup import load_backup_file, load_backup_text
from vault_curator.adapters.definitions import enrich_names
from vault_curator.adapters.report import MarkdownPlanReport
from vault_curator.core import (
    ArmorScore,
    ArmorScorer,
    BuildManifest,
    BuildSafety,
    ComparisonResult,
    DefinitionLookup,
    DispositionPlanner,
    DuplicateGroup,
    DuplicateOptions,
    DuplicateResolver,
    InventorySource,
    Item,
    ItemCategory,
    ItemLocation,
    ItemNotFoundError,
    ManifestSummary,
    ManifestTag,
    Plan,
    PlanNotGeneratedError,
    ProtectionRules,
    TransferRequest,
    VaultCuratorError,
    VaultSummary,
    generate_transfer_plan,
    get_junk_items,
    get_review_items,
)
from vault_curator.core.entities import stats_of
from vault_curator.core.scoring import DEFAULT_SCORER

VAULT_CAPACITY = 600


@dataclass
class ArmorReport:
    """Score and printable summary for one armor piece."""

    item: Item
    score: Optional[ArmorScore]
    summary: Optional[str]


class VaultCurator:
    """Session service: snapshot, build manifest and latest plan."""

    def __init__(
        self,
        scorer: ArmorScorer = DEFAULT_SCORER,
        only_vault: bool = True,
        report: Optional[MarkdownPlanReport] = None,
    ) -> None:
        self.scorer = scorer
        self.only_vault = only_vault
        self.report = report or MarkdownPlanReport(scorer)
        self.inventory: list[Item] = []
        self.manifest: Optional[BuildManifest] = None
        self._plan: Optional[Plan] = None

    # Snapshot and manifest

    async def load_inventory(self, source: InventorySource) -> list[Item]:
        """Replace the current snapshot with items from ``source``."""
        emoji = getattr(source, "emoji", "•")
        name = getattr(source, "name", source.__class__.__name__)
        print(f"\n{emoji} Loading inventory: {name}")

        self.inventory = await source.fetch_items()
        # A new snapshot invalidates the previous plan
        self._plan = None

        print(f"  └─ Items: {len(self.inventory)}")
        return self.inventory

    def set_inventory(self, items: list[Item]) -> None:
        self.inventory = list(items)
        self._plan = None

    def enrich_names(self, lookup: DefinitionLookup) -> None:
        self.inventory = enrich_names(self.inventory, lookup)
        self._plan = None

    def load_backup(self, path: Optional[Path] = None, text: Optional[str] = None) -> ManifestSummary:
        """Load a DIM backup from a file or raw JSON text."""
        if text is not None:
            manifest = load_backup_text(text)
        elif path is not None:
            manifest = load_backup_file(path)
        else:
            raise VaultCuratorError("Either a backup path or backup text must be provided")

        self.manifest = manifest
        summary = manifest.summary()
        print(
            f"✓ Backup loaded: {summary.loadout_count} loadouts, "
            f"{summary.tagged_item_count} tagged items, "
            f"{summary.loadout_item_count} items in loadouts"
        )
        return summary

    def manifest_summary(self) -> Optional[ManifestSummary]:
        """Summary of the loaded backup, None when nothing is loaded."""
        if self.manifest is None:
            return None
        return self.manifest.summary()

    def vault_summary(self, capacity: int = VAULT_CAPACITY) -> VaultSummary:
        vault = [i for i in self.inventory if i.location == ItemLocation.VAULT]
        return VaultSummary(
            total_items=len(vault),
            weapons=sum(1 for i in vault if i.category == ItemCategory.WEAPON),
            armor=sum(1 for i in vault if i.category == ItemCategory.ARMOR),
            other=sum(1 for i in vault if i.category == ItemCategory.OTHER),
            capacity=capacity,
            used_percent=round(len(vault) / capacity * 100) if capacity else 0,
        )

    def find_item(self, instance_id: str) -> Item:
        for item in self.inventory:
            if item.instance_id == instance_id:
                return item
        raise ItemNotFoundError(instance_id)

    # Analysis

    def analyze_armor(self, instance_id: str) -> ArmorReport:
        """Score one armor piece; score is None when it cannot be scored."""
        item = self.find_item(instance_id)
        score = self.scorer.score_armor(item)
        summary = self.report.format_armor_summary(item, score) if score else None
        return ArmorReport(item=item, score=score, summary=summary)

    def compare_armor(self, instance_id1: str, instance_id2: str) -> ComparisonResult:
        """Compare two pieces by ID; unknown IDs give a result with no winner."""
        for instance_id in (instance_id1, instance_id2):
            if not any(i.instance_id == instance_id for i in self.inventory):
                return ComparisonResult(None, f"Item not found: {instance_id}", None, None)

        return self.scorer.compare_armor(
            self.find_item(instance_id1), self.find_item(instance_id2)
        )

    def find_duplicates(self, options: Optional[DuplicateOptions] = None) -> list[DuplicateGroup]:
        return DuplicateResolver(options, self.scorer).find_duplicates(self.inventory)

    # Planning

    def generate_plan(self, rules: Optional[ProtectionRules] = None) -> Plan:
        """Generate and remember a plan for the current snapshot."""
        print("\n" + "=" * 70)
        print("🧹 CLEANUP PLAN")
        print("=" * 70)

        planner = DispositionPlanner(self.manifest, self.scorer, self.only_vault)
        plan = planner.generate_plan(self.inventory, rules)
        self._plan = plan

        summary = plan.summary
        print(f"✓ Analyzed: {summary.total_analyzed}")
        print(f"  • Keep: {summary.keep} ({summary.protected_items} protected)")
        print(f"  • Review: {summary.review}")
        print(f"  • Junk: {summary.junk}")
        return plan

    @property
    def current_plan(self) -> Plan:
        if self._plan is None:
            raise PlanNotGeneratedError()
        return self._plan

    def junk_items(self, location: Optional[ItemLocation] = None) -> list[Item]:
        return get_junk_items(self.current_plan, location)

    def review_items(self) -> list[Item]:
        return get_review_items(self.current_plan)

    def transfer_plan(self, target: str, max_items: int = 10) -> list[TransferRequest]:
        """Vault JUNK moves toward ``target``, capped at ``max_items``."""
        return generate_transfer_plan(self.current_plan, target)[:max_items]

    def format_plan(self) -> str:
        return self.report.format_plan(self.current_plan)

    # Queries

    def search_items(
        self,
        name: Optional[str] = None,
        category: Optional[ItemCategory] = None,
        min_stats: Optional[int] = None,
        max_stats: Optional[int] = None,
        in_vault: Optional[bool] = None,
        is_locked: Optional[bool] = None,
    ) -> list[Item]:
        """Filter the snapshot; stat bounds only match items with stats."""
        results = list(self.inventory)

        if name:
            needle = name.lower()
            results = [i for i in results if needle in i.name.lower()]
        if category is not None:
            results = [i for i in results if i.category == category]
        if in_vault is not None:
            results = [i for i in results if i.in_vault == in_vault]
        if is_locked is not None:
            results = [i for i in results if i.is_locked == is_locked]
        if min_stats is not None:
            results = [i for i in results if stats_of(i) and stats_of(i).total >= min_stats]
        if max_stats is not None:
            results = [i for i in results if stats_of(i) and stats_of(i).total <= max_stats]

        return results

    def check_build_safety(self, instance_id: str) -> BuildSafety:
        """Report whether dismantling the item could break a saved build."""
        item = self.find_item(instance_id)

        loadouts: list[str] = []
        tag = None
        note = None
        if self.manifest is not None:
            loadouts = [loadout.name for loadout in self.manifest.loadouts_for_item(instance_id)]
            tag = self.manifest.tag_for_item(instance_id)
            note = self.manifest.note_for_item(instance_id)

        reasons: list[str] = []
        if loadouts:
            reasons.append(f"Used in {len(loadouts)} loadout(s): {', '.join(loadouts)}")
        if tag is not None:
            reasons.append(f"Tag: {tag.value}")
        if note:
            reasons.append("Has note")
        if item.is_locked:
            reasons.append("Item is locked")
        if item.is_masterworked:
            reasons.append("Item is masterworked")

        safe = (
            not loadouts
            and tag not in (ManifestTag.FAVORITE, ManifestTag.KEEP)
            and not item.is_locked
            and not item.is_masterworked
        )

        return BuildSafety(
            item=item,
            safe_to_dismantle=safe,
            reasons=reasons,
            loadouts=loadouts,
            tag=tag,
            note=note,
        )
