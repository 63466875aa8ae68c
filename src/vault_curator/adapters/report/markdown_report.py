"""Markdown rendering of plans, duplicate groups and armor summaries."""

from typing import Optional

from vault_curator.core import (
    Action,
    ArmorItem,
    ArmorScore,
    ArmorScorer,
    DuplicateGroup,
    Item,
    Plan,
    PlanFormatter,
    Recommendation,
)
from vault_curator.core.entities import ARMOR_SLOT_NAMES, CLASS_NAMES, stats_of
from vault_curator.core.scoring import DEFAULT_SCORER


class MarkdownPlanReport(PlanFormatter):
    """Generate markdown text for the host to display."""

    def __init__(self, scorer: ArmorScorer = DEFAULT_SCORER) -> None:
        self.scorer = scorer

    def format_plan(self, plan: Plan) -> str:
        """Render a plan: summary, then JUNK and REVIEW items with reasons."""
        summary = plan.summary
        lines = [
            "# Vault Cleanup Plan",
            f"Generated: {plan.generated_at.isoformat()}",
            "",
            "## Summary",
            f"- Total analyzed: {summary.total_analyzed}",
            f"- Keep: {summary.keep}",
            f"- Review: {summary.review}",
            f"- Junk: {summary.junk}",
            f"- Protected items: {summary.protected_items}",
            "",
        ]

        if summary.junk:
            lines.append("## JUNK (Safe to Dismantle)")
            for rec in plan.by_action(Action.JUNK):
                lines.extend(self._format_recommendation(rec))
            lines.append("")

        if summary.review:
            lines.append("## REVIEW (Need Manual Decision)")
            for rec in plan.by_action(Action.REVIEW):
                lines.extend(self._format_recommendation(rec))
            lines.append("")

        lines.append("## KEEP")
        lines.append(f"{summary.keep} items protected or high quality")

        return "\n".join(lines)

    def format_group(self, group: DuplicateGroup) -> str:
        """Render one duplicate group with its keep/discard/review split."""
        slot_name = ARMOR_SLOT_NAMES.get(group.slot, "") if group.slot is not None else ""
        slot_part = f" ({slot_name})" if slot_name else ""
        lines = [f"## {group.name}{slot_part} - {len(group.items)} copies", ""]

        rec = group.recommendation
        sections = (
            ("**KEEP:**", rec.keep, True),
            ("**DISCARD:**", rec.discard, False),
            ("**REVIEW:**", rec.review, True),
        )
        for title, items, show_flags in sections:
            if not items:
                continue
            lines.append(title)
            for item in items:
                lines.append(self._format_copy(item, show_flags))

        if rec.reasoning:
            lines.append("")
            lines.append("**Reasoning:**")
            lines.extend(f"- {line}" for line in rec.reasoning)

        return "\n".join(lines)

    def format_armor_summary(self, item: Item, score: ArmorScore) -> str:
        """Short human-readable description of a scored armor piece."""
        slot_name = "Unknown"
        class_name = "Any"
        if isinstance(item, ArmorItem):
            if item.slot is not None:
                slot_name = ARMOR_SLOT_NAMES[item.slot]
            if item.class_type is not None:
                class_name = CLASS_NAMES[item.class_type]

        lines = [
            f"{item.name} ({slot_name} - {class_name})",
            f"Overall Score: {score.total_score}/100",
            f"Total Stats: {score.analysis.total_stats}",
        ]

        stats = stats_of(item)
        if stats is not None:
            lines.append(f"Stats: {stats.compact()}")

        top = score.analysis.top_stats[0]
        if score.analysis.has_super_spike:
            lines.append(f"⭐ Super Spike: {top.stat} ({top.value})")
        elif score.analysis.has_spike:
            lines.append(f"✓ Spike: {top.stat} ({top.value})")

        profile_name = self.scorer.profile_name(score.best_profile)
        lines.append(f"Best for: {profile_name} ({score.best_profile_score})")

        return "\n".join(lines)

    def _format_recommendation(self, rec: Recommendation) -> list[str]:
        return [
            f"- {rec.item.name}{_stats_suffix(rec.item, 'stats')}",
            f"  Reason: {rec.reason}",
        ]

    def _format_copy(self, item: Item, show_flags: bool) -> str:
        line = f"  - {item.instance_id}{_stats_suffix(item, 'total')}"
        if show_flags:
            flags = ("🔒" if item.is_locked else "") + ("⭐" if item.is_masterworked else "")
            if flags:
                line = f"{line} {flags}"
        return line


def _stats_suffix(item: Item, label: str) -> str:
    stats = stats_of(item)
    return f" [{stats.total} {label}]" if stats is not None else ""


def format_plan(plan: Plan) -> str:
    return MarkdownPlanReport().format_plan(plan)


def format_group(group: DuplicateGroup, scorer: Optional[ArmorScorer] = None) -> str:
    return MarkdownPlanReport(scorer or DEFAULT_SCORER).format_group(group)
