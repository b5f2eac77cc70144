"""Threshold-based advisory lines derived from computed metrics."""

from __future__ import annotations

from typing import List

from .models import Metrics
from .stats import format_fixed, percentage

FAST_MERGE_HOURS = 24
SLOW_MERGE_HOURS = 72
HIGH_MERGE_RATE = 80
LOW_MERGE_RATE = 50
GOOD_SMALL_PR_SHARE = 60
LOW_SMALL_PR_SHARE = 30
WEEKEND_SHARE = 20


def small_pr_share(metrics: Metrics) -> float:
    """Percentage of PRs in the ``xs`` and ``s`` size buckets."""
    buckets = metrics.size_buckets
    return percentage(buckets.xs + buckets.s, metrics.total_prs)


def weekend_share(metrics: Metrics) -> float:
    """Percentage of PRs created on Saturday or Sunday."""
    return percentage(metrics.activity_by_weekday.weekend, metrics.total_prs)


def generate_insights(metrics: Metrics) -> List[str]:
    """Return the advisory lines that apply to ``metrics``.

    Each metric is checked independently, so several lines can be returned at
    once. Within one metric the low and high messages exclude each other and
    values on a threshold trigger neither. Percentage-based checks are skipped
    entirely when there are no PRs.
    """
    insights: List[str] = []

    if metrics.avg_time_to_merge < FAST_MERGE_HOURS:
        insights.append("✅ **Fast merge times!** Average time to merge is under 24 hours.")
    elif metrics.avg_time_to_merge > SLOW_MERGE_HOURS:
        insights.append("⚠️ **Slow merge times.** Consider reviewing PR review processes.")

    if metrics.total_prs == 0:
        return insights

    if metrics.merge_rate > HIGH_MERGE_RATE:
        insights.append(
            f"✅ **High merge rate!** {format_fixed(metrics.merge_rate, 0)}% of PRs are being merged."
        )
    elif metrics.merge_rate < LOW_MERGE_RATE:
        insights.append("⚠️ **Low merge rate.** Many PRs are being closed without merging.")

    small_share = small_pr_share(metrics)
    if small_share > GOOD_SMALL_PR_SHARE:
        insights.append(
            f"✅ **Good PR sizes!** {format_fixed(small_share, 0)}% of PRs are small (< 100 lines)."
        )
    elif small_share < LOW_SMALL_PR_SHARE:
        insights.append("⚠️ **Large PRs.** Consider breaking down PRs into smaller chunks.")

    weekend = weekend_share(metrics)
    if weekend > WEEKEND_SHARE:
        insights.append(
            f"📅 **Weekend activity:** {format_fixed(weekend, 0)}% of PRs created on weekends."
        )

    return insights
