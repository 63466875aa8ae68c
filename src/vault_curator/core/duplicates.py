"""Duplicate detection and keep/discard/review resolution."""

from dataclasses import dataclass, field
from typing import Optional

from vault_curator.core.entities import (
    ArmorItem,
    ArmorSlot,
    DestinyClass,
    Item,
    ItemCategory,
    stats_of,
)
from vault_curator.core.scoring import DEFAULT_SCORER, ArmorScore, ArmorScorer

# Discard a non-kept copy outright when the best copy beats it by more than this
SIGNIFICANT_SCORE_GAP = 15
# Non-kept copies at or above this score are worth a second look
REVIEW_SCORE_FLOOR = 60


@dataclass(frozen=True)
class DuplicateOptions:
    include_weapons: bool = True
    include_armor: bool = True
    min_duplicates: int = 2
    keep_count: int = 1

    def __post_init__(self) -> None:
        if self.min_duplicates < 1:
            raise ValueError("min_duplicates must be at least 1")
        if self.keep_count < 0:
            raise ValueError("keep_count cannot be negative")


@dataclass
class DuplicateRecommendation:
    keep: list[Item] = field(default_factory=list)
    discard: list[Item] = field(default_factory=list)
    review: list[Item] = field(default_factory=list)
    reasoning: list[str] = field(default_factory=list)


@dataclass
class DuplicateGroup:
    """Copies of one item definition and what to do with them."""

    item_hash: int
    name: str
    items: list[Item]
    recommendation: DuplicateRecommendation
    slot: Optional[ArmorSlot] = None
    class_type: Optional[DestinyClass] = None

    @property
    def category(self) -> ItemCategory:
        return self.items[0].category


@dataclass
class DuplicateSummary:
    total_groups: int
    total_duplicates: int
    total_discard: int
    total_review: int
    by_slot: dict[ArmorSlot, int]


def weapon_priority(item: Item) -> tuple[bool, bool, int]:
    """Sort key, descending: masterworked, then locked, then power."""
    return (item.is_masterworked, item.is_locked, item.power_level)


def rank_copies(items: list[Item]) -> list[Item]:
    """Best copy first; ties keep input order."""
    return sorted(items, key=weapon_priority, reverse=True)


def group_by_definition(items: list[Item]) -> dict[int, list[Item]]:
    """Weapons and armor keyed by item hash, in first-seen order."""
    groups: dict[int, list[Item]] = {}
    for item in items:
        if item.category == ItemCategory.OTHER:
            continue
        groups.setdefault(item.item_hash, []).append(item)
    return groups


class DuplicateResolver:
    """Find identical items and decide which copies to keep."""

    def __init__(
        self,
        options: Optional[DuplicateOptions] = None,
        scorer: ArmorScorer = DEFAULT_SCORER,
    ) -> None:
        self.options = options or DuplicateOptions()
        self.scorer = scorer

    def find_duplicates(self, items: list[Item]) -> list[DuplicateGroup]:
        """Group copies by definition, largest groups first."""
        wanted = [item for item in items if self._included(item)]

        groups: list[DuplicateGroup] = []
        for item_hash, copies in group_by_definition(wanted).items():
            if len(copies) < self.options.min_duplicates:
                continue

            first = copies[0]
            groups.append(
                DuplicateGroup(
                    item_hash=item_hash,
                    name=first.name,
                    items=copies,
                    recommendation=self.recommend(copies),
                    slot=first.slot if isinstance(first, ArmorItem) else None,
                    class_type=first.class_type if isinstance(first, ArmorItem) else None,
                )
            )

        groups.sort(key=lambda g: len(g.items), reverse=True)
        return groups

    def recommend(self, items: list[Item]) -> DuplicateRecommendation:
        if items[0].category == ItemCategory.ARMOR:
            return self._recommend_armor(items)
        return self._recommend_weapons(items)

    def _included(self, item: Item) -> bool:
        if item.category == ItemCategory.WEAPON:
            return self.options.include_weapons
        if item.category == ItemCategory.ARMOR:
            return self.options.include_armor
        return False

    def _recommend_armor(self, items: list[Item]) -> DuplicateRecommendation:
        rec = DuplicateRecommendation()
        keep_count = self.options.keep_count

        scored: list[tuple[Item, ArmorScore]] = []
        unscored: list[Item] = []
        for item in items:
            score = self.scorer.score_armor(item)
            if score is None:
                unscored.append(item)
            else:
                scored.append((item, score))
        scored.sort(key=lambda pair: pair[1].total_score, reverse=True)

        for item, score in scored[:keep_count]:
            rec.keep.append(item)
            rec.reasoning.append(
                f"Keep {item.name} (score: {score.total_score}, stats: {stats_of(item).total})"
            )

        tentative_discard: list[Item] = []
        if scored:
            best = scored[0][1].total_score
            for item, score in scored[keep_count:]:
                if best - score.total_score > SIGNIFICANT_SCORE_GAP:
                    tentative_discard.append(item)
                    rec.reasoning.append(
                        f"Discard {item.name} (score: {score.total_score}, "
                        "significantly worse than best)"
                    )
                elif score.total_score >= REVIEW_SCORE_FLOOR:
                    rec.review.append(item)
                    rec.reasoning.append(
                        f"Review {item.name} (score: {score.total_score}, "
                        "may be useful for specific builds)"
                    )
                else:
                    tentative_discard.append(item)
                    rec.reasoning.append(
                        f"Discard {item.name} (score: {score.total_score}, low quality)"
                    )

        for item in unscored:
            rec.review.append(item)
            rec.reasoning.append(f"Review {item.name} (no stats available)")

        # Locked or masterworked copies are never discarded outright
        for item in tentative_discard:
            if item.is_locked or item.is_masterworked:
                rec.review.append(item)
                rec.reasoning.append(
                    f"Moved {item.name} to review "
                    f"({'locked' if item.is_locked else 'masterworked'})"
                )
            else:
                rec.discard.append(item)

        return rec

    def _recommend_weapons(self, items: list[Item]) -> DuplicateRecommendation:
        rec = DuplicateRecommendation()
        ranked = rank_copies(items)
        keep_count = self.options.keep_count

        for item in ranked[:keep_count]:
            rec.keep.append(item)
            rec.reasoning.append(f"Keep {item.name} ({_weapon_label(item)})")

        for item in ranked[keep_count:]:
            if item.is_locked or item.is_masterworked:
                rec.review.append(item)
                rec.reasoning.append(
                    f"Review {item.name} ({_weapon_label(item)}, "
                    f"{'locked' if item.is_locked else 'masterworked'})"
                )
            else:
                rec.discard.append(item)
                rec.reasoning.append(
                    f"Discard {item.name} ({_weapon_label(item)}, lower-priority duplicate)"
                )

        return rec


def _weapon_label(item: Item) -> str:
    return f"PL: {item.power_level}{', MW' if item.is_masterworked else ''}"


def find_duplicates(
    items: list[Item],
    options: Optional[DuplicateOptions] = None,
    scorer: ArmorScorer = DEFAULT_SCORER,
) -> list[DuplicateGroup]:
    return DuplicateResolver(options, scorer).find_duplicates(items)


def summarize_duplicates(groups: list[DuplicateGroup]) -> DuplicateSummary:
    """Totals across groups; the first copy of each group is not a duplicate."""
    by_slot: dict[ArmorSlot, int] = {}
    for group in groups:
        if group.slot is not None:
            by_slot[group.slot] = by_slot.get(group.slot, 0) + len(group.items)

    return DuplicateSummary(
        total_groups=len(groups),
        total_duplicates=sum(len(g.items) - 1 for g in groups),
        total_discard=sum(len(g.recommendation.discard) for g in groups),
        total_review=sum(len(g.recommendation.review) for g in groups),
        by_slot=by_slot,
    )
