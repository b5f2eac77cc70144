"""Markdown rendering of computed PR metrics.

The heading and table layout produced here is what downstream consumers parse,
so section order and row labels are fixed.
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import List, Optional, Sequence, Tuple

from .insights import generate_insights
from .models import ContributorStats, Metrics
from .stats import bar_length, format_fixed, percentage

BAR_CHAR = "█"
CHART_WIDTH = 50

FOOTER = "*Generated by [PR Metrics Dashboard](https://github.com/rkneela0912/pr-metrics-dashboard)*"

SIZE_ROWS: Tuple[Tuple[str, str, str], ...] = (
    ("xs", "**XS** (0-10 lines)", "XS:  "),
    ("s", "**S** (11-100 lines)", "S:   "),
    ("m", "**M** (101-500 lines)", "M:   "),
    ("l", "**L** (501-1000 lines)", "L:   "),
    ("xl", "**XL** (1000+ lines)", "XL:  "),
)


def _bar(length: int) -> str:
    return BAR_CHAR * length


def _scaled_bar(count: int, total: int) -> int:
    if not total:
        return 0
    return bar_length(count / total * CHART_WIDTH)


def contributor_merge_rate(contributor: ContributorStats) -> str:
    """Per-contributor merge rate rounded to a whole percent."""
    return format_fixed(percentage(contributor.merged, contributor.prs), 0)


def _title_block(days: int, owner: str, repo: str, generated_on: date) -> List[str]:
    return [
        "# 📊 PR Metrics Dashboard",
        "",
        f"**Repository:** {owner}/{repo}  ",
        f"**Period:** Last {days} days  ",
        f"**Generated:** {generated_on.isoformat()}",
    ]


def _overview_table(metrics: Metrics) -> List[str]:
    return [
        "## 📈 Overview",
        "",
        "| Metric | Value |",
        "|--------|-------|",
        f"| **Total PRs** | {metrics.total_prs} |",
        f"| **Merged PRs** | {metrics.merged_prs} ✅ |",
        f"| **Open PRs** | {metrics.open_prs} 🔄 |",
        f"| **Closed PRs** | {metrics.closed_prs} |",
        f"| **Closed (Not Merged)** | {metrics.closed_not_merged} ❌ |",
        f"| **Merge Rate** | {format_fixed(metrics.merge_rate)}% |",
        f"| **Avg Time to Merge** | {format_fixed(metrics.avg_time_to_merge)} hours |",
        f"| **Median Time to Merge** | {format_fixed(metrics.median_time_to_merge)} hours |",
    ]


def _contributors_table(contributors: Sequence[ContributorStats]) -> List[str]:
    lines = [
        "## 👥 Top Contributors",
        "",
        "| Rank | Author | PRs | Merged | Merge Rate |",
        "|------|--------|-----|--------|------------|",
    ]
    for rank, contributor in enumerate(contributors, start=1):
        lines.append(
            f"| {rank} | @{contributor.author} | {contributor.prs} | {contributor.merged} "
            f"| {contributor_merge_rate(contributor)}% |"
        )
    return lines


def _size_table(metrics: Metrics) -> List[str]:
    lines = [
        "## 📏 PRs by Size",
        "",
        "| Size | Count | Percentage |",
        "|------|-------|------------|",
    ]
    for key, label, _ in SIZE_ROWS:
        count = getattr(metrics.size_buckets, key)
        pct = format_fixed(percentage(count, metrics.total_prs))
        lines.append(f"| {label} | {count} | {pct}% |")
    return lines


def _weekday_table(metrics: Metrics) -> List[str]:
    lines = [
        "## 📅 PRs by Day of Week",
        "",
        "| Day | Count | Percentage |",
        "|-----|-------|------------|",
    ]
    for day, count in metrics.activity_by_weekday.items():
        pct = format_fixed(percentage(count, metrics.total_prs))
        lines.append(f"| {day} | {count} | {pct}% |")
    return lines


def _charts(metrics: Metrics) -> List[str]:
    total = metrics.total_prs
    merged_pct = metrics.merge_rate
    not_merged_pct = percentage(total - metrics.merged_prs, total)

    lines = [
        "## 📊 Visual Charts",
        "",
        "### Merge Rate",
        "```",
        f"Merged:     {_bar(bar_length(merged_pct / 2))} {format_fixed(merged_pct)}%",
        f"Not Merged: {_bar(bar_length(not_merged_pct / 2))} {format_fixed(not_merged_pct)}%",
        "```",
        "",
        "### PR Size Distribution",
        "```",
    ]
    for key, _, prefix in SIZE_ROWS:
        count = getattr(metrics.size_buckets, key)
        length = _scaled_bar(count, total)
        lines.append(f"{prefix}{_bar(length)} {count}")
    lines.extend(["```", "", "### Activity by Day", "```"])
    for day, count in metrics.activity_by_weekday.items():
        length = _scaled_bar(count, total)
        lines.append(f"{day}: {_bar(length)} {count}")
    lines.append("```")
    return lines


def _insights_section(metrics: Metrics) -> List[str]:
    lines = ["## 💡 Insights", ""]
    lines.extend(f"- {insight}" for insight in generate_insights(metrics))
    return lines


def generate_report(
    metrics: Metrics,
    days: int,
    owner: str,
    repo: str,
    include_charts: bool = True,
    generated_on: Optional[date] = None,
) -> str:
    """Render a Markdown metrics report for a repository.

    The report contains, in order: a title block, the overview table, the top
    contributors table, size and weekday distribution tables, optional text bar
    charts, insights and a footer. Percentages of an empty PR set render as
    ``0.0%``.

    Args:
        metrics: Aggregated metrics snapshot.
        days: Window length in days shown in the title block.
        owner: Repository owner.
        repo: Repository name.
        include_charts: Whether to include the bar chart section.
        generated_on: Date stamp for the title block; today's UTC date when omitted.

    Returns:
        The Markdown document, ending with a newline.
    """
    if generated_on is None:
        generated_on = datetime.now(timezone.utc).date()

    sections = [
        _title_block(days, owner, repo, generated_on),
        _overview_table(metrics),
        _contributors_table(metrics.top_contributors),
        _size_table(metrics),
        _weekday_table(metrics),
    ]
    if include_charts:
        sections.append(_charts(metrics))
    sections.append(_insights_section(metrics))
    sections.append([FOOTER])

    separator = ["", "---", ""]
    lines: List[str] = []
    for index, section in enumerate(sections):
        if index:
            lines.extend(separator)
        lines.extend(section)

    return "\n".join(lines) + "\n"
