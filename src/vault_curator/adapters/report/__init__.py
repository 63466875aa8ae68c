"""Report formatting adapters."""

from vault_curator.adapters.report.markdown_report import MarkdownPlanReport, format_group, format_plan

__all__ = ["MarkdownPlanReport", "format_group", "format_plan"]
