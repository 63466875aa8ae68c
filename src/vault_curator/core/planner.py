"""Disposition planner: KEEP / REVIEW / JUNK for every vault item."""

from datetime import datetime, timezone
from typing import Optional

from vault_curator.core.build_manifest import BuildManifest
from vault_curator.core.duplicates import group_by_definition, rank_copies
from vault_curator.core.entities import (
    ACTION_ORDER,
    Action,
    Item,
    ItemCategory,
    ItemLocation,
    ItemTier,
    ManifestTag,
    Plan,
    PlanSummary,
    ProtectionRules,
    Recommendation,
    TransferRequest,
    stats_of,
)
from vault_curator.core.scoring import DEFAULT_SCORER, ArmorScore, ArmorScorer

EXCELLENT_SCORE = 75
DECENT_SCORE = 50
BELOW_AVERAGE_SCORE = 30
# A duplicate must beat a decent piece by more than this to demote it to REVIEW
BETTER_DUPLICATE_MARGIN = 10


class DispositionPlanner:
    """Turns an inventory snapshot into a disposition plan.

    The planner holds only configuration; each ``generate_plan`` call works on
    its own inputs, so repeated calls with the same inputs give the same plan.
    """

    def __init__(
        self,
        manifest: Optional[BuildManifest] = None,
        scorer: ArmorScorer = DEFAULT_SCORER,
        only_vault: bool = True,
    ) -> None:
        self.manifest = manifest
        self.scorer = scorer
        self.only_vault = only_vault

    def generate_plan(
        self,
        items: list[Item],
        rules: Optional[ProtectionRules] = None,
        generated_at: Optional[datetime] = None,
    ) -> Plan:
        rules = rules or ProtectionRules()
        candidates = [item for item in items if self._is_candidate(item)]
        run = _PlanRun(self, rules, candidates)

        recommendations = [run.analyze(item) for item in candidates]
        recommendations.sort(key=lambda r: ACTION_ORDER[r.action])

        summary = PlanSummary(
            total_analyzed=len(recommendations),
            keep=sum(1 for r in recommendations if r.action == Action.KEEP),
            review=sum(1 for r in recommendations if r.action == Action.REVIEW),
            junk=sum(1 for r in recommendations if r.action == Action.JUNK),
            protected_items=sum(1 for r in recommendations if r.protected_by),
        )

        return Plan(
            generated_at=generated_at or datetime.now(timezone.utc),
            summary=summary,
            recommendations=recommendations,
        )

    def _is_candidate(self, item: Item) -> bool:
        if self.only_vault and item.location != ItemLocation.VAULT:
            return False
        return item.category in (ItemCategory.WEAPON, ItemCategory.ARMOR)


class _PlanRun:
    """Per-call state: definition index and memoised scores."""

    def __init__(
        self, planner: DispositionPlanner, rules: ProtectionRules, candidates: list[Item]
    ) -> None:
        self.manifest = planner.manifest
        self.scorer = planner.scorer
        self.rules = rules
        self.copies = group_by_definition(candidates)
        self._scores: dict[str, Optional[ArmorScore]] = {}

    def score(self, item: Item) -> Optional[ArmorScore]:
        if item.instance_id not in self._scores:
            self._scores[item.instance_id] = self.scorer.score_armor(item)
        return self._scores[item.instance_id]

    def analyze(self, item: Item) -> Recommendation:
        protected_by, reasons = self.protection(item)

        if protected_by:
            return Recommendation(
                item=item,
                action=Action.KEEP,
                reason=f"Protected: {', '.join(protected_by)}",
                protected_by=protected_by,
            )

        if item.category == ItemCategory.ARMOR:
            return self.analyze_armor(item, reasons)
        return self.analyze_weapon(item, reasons)

    def protection(self, item: Item) -> tuple[list[str], list[str]]:
        """Every protection reason that applies, plus non-protective notes."""
        rules = self.rules
        protected_by: list[str] = []
        reasons: list[str] = []

        if rules.protect_loadout_items and self.manifest is not None:
            loadouts = self.manifest.loadouts_for_item(item.instance_id)
            if loadouts:
                protected_by.append(f"Loadouts: {', '.join(loadout.name for loadout in loadouts)}")

        if rules.protect_locked and item.is_locked:
            protected_by.append("Locked in game")

        if rules.protect_masterworked and item.is_masterworked:
            protected_by.append("Masterworked")

        if rules.protect_exotics and item.tier == ItemTier.EXOTIC:
            protected_by.append("Exotic item")

        if item.instance_id in rules.protected_ids:
            protected_by.append("Custom protection")

        if self.manifest is not None:
            tag = self.manifest.tag_for_item(item.instance_id)
            if tag == ManifestTag.FAVORITE:
                protected_by.append("Favorite tag")
            elif tag == ManifestTag.KEEP:
                protected_by.append("Keep tag")
            elif tag == ManifestTag.JUNK:
                reasons.append("Tagged as junk")

        return protected_by, reasons

    def analyze_armor(self, item: Item, reasons: list[str]) -> Recommendation:
        score = self.score(item)
        if score is None:
            reasons.append("Unable to score (no stats)")
            return Recommendation(item, Action.REVIEW, ". ".join(reasons))

        total_stats = stats_of(item).total
        if self.rules.protect_high_stat_armor and total_stats >= self.rules.high_stat_threshold:
            return Recommendation(
                item,
                Action.KEEP,
                f"High stat armor ({total_stats} total)",
                score=score.total_score,
                protected_by=[f"High stats: {total_stats} total"],
            )

        value = score.total_score
        if value >= EXCELLENT_SCORE:
            reasons.append(f"Excellent armor score: {value}/100")
            action = Action.KEEP
        elif value >= DECENT_SCORE:
            reasons.append(f"Decent armor score: {value}/100")
            action = Action.KEEP
            if self.has_better_duplicate(item, value):
                reasons.append("Better duplicate exists")
                action = Action.REVIEW
        elif value >= BELOW_AVERAGE_SCORE:
            reasons.append(f"Below average armor score: {value}/100")
            action = Action.REVIEW
        else:
            reasons.append(f"Poor armor score: {value}/100")
            action = Action.JUNK

        return Recommendation(item, action, ". ".join(reasons), score=value)

    def has_better_duplicate(self, item: Item, value: int) -> bool:
        for other in self.copies.get(item.item_hash, ()):
            if other.instance_id == item.instance_id or other.category != ItemCategory.ARMOR:
                continue
            other_score = self.score(other)
            if other_score is not None and other_score.total_score > value + BETTER_DUPLICATE_MARGIN:
                return True
        return False

    def analyze_weapon(self, item: Item, reasons: list[str]) -> Recommendation:
        copies = [c for c in self.copies.get(item.item_hash, ()) if c.category == ItemCategory.WEAPON]
        others = len(copies) - 1

        if others <= 0:
            reasons.append("Only copy of this weapon")
            return Recommendation(item, Action.KEEP, ". ".join(reasons))

        best = rank_copies(copies)[0]
        if best.instance_id == item.instance_id:
            reasons.append(f"Best copy among {len(copies)} duplicates")
            return Recommendation(item, Action.KEEP, ". ".join(reasons))

        reasons.append(f"Duplicate ({others} others exist)")
        reasons.append("Not the best copy")
        return Recommendation(item, Action.JUNK, ". ".join(reasons))


def generate_plan(
    items: list[Item],
    rules: Optional[ProtectionRules] = None,
    manifest: Optional[BuildManifest] = None,
    scorer: ArmorScorer = DEFAULT_SCORER,
    only_vault: bool = True,
) -> Plan:
    return DispositionPlanner(manifest, scorer, only_vault).generate_plan(items, rules)


def get_junk_items(plan: Plan, location: Optional[ItemLocation] = None) -> list[Item]:
    """Items recommended as JUNK, optionally only those at ``location``."""
    return [
        r.item
        for r in plan.by_action(Action.JUNK)
        if location is None or r.item.location == location
    ]


def get_review_items(plan: Plan) -> list[Item]:
    return [r.item for r in plan.by_action(Action.REVIEW)]


def generate_transfer_plan(plan: Plan, target: str = "vault") -> list[TransferRequest]:
    """Moves that would pull every vault JUNK item to ``target``."""
    return [
        TransferRequest(instance_id=item.instance_id, item_hash=item.item_hash, target=target)
        for item in get_junk_items(plan, ItemLocation.VAULT)
    ]
