"""Statistics helpers and the metrics aggregator.

This module provides utilities for:
- Computing the median of hours-to-merge samples.
- Guarded percentages that resolve to ``0`` instead of dividing by zero.
- Half-up rounding and fixed-point formatting used by the report.
- Aggregating a collection of pull requests into a ``Metrics`` snapshot.
"""

from __future__ import annotations

import logging
import math
from collections import Counter
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Iterable, List, Optional, Sequence

from .models import (
    SIZE_LABELS,
    WEEKDAY_LABELS,
    ContributorStats,
    Metrics,
    PullRequest,
    SizeBuckets,
    WeekdayActivity,
)

logger = logging.getLogger(__name__)

# Display label for PRs without an author. GitHub logins cannot contain
# parentheses, so this never matches a real contributor.
UNKNOWN_AUTHOR = "(unknown)"
TOP_CONTRIBUTORS_LIMIT = 10

# Inclusive upper bounds for each size bucket; anything larger is ``xl``.
SIZE_THRESHOLDS = (
    (10, "xs"),
    (100, "s"),
    (500, "m"),
    (1000, "l"),
)


def calculate_median(values: Sequence[float]) -> float:
    """Calculate the median of unsorted samples.

    Empty input returns ``0.0``. For an even number of samples the two middle
    values are averaged.
    """
    if not values:
        return 0.0

    sorted_values = sorted(values)
    middle = len(sorted_values) // 2
    if len(sorted_values) % 2 == 0:
        return (sorted_values[middle - 1] + sorted_values[middle]) / 2
    return float(sorted_values[middle])


def calculate_mean(values: Sequence[float]) -> float:
    if not values:
        return 0.0
    return math.fsum(values) / len(values)


def percentage(part: float, total: float) -> float:
    """Return ``part`` as a percentage of ``total``, or ``0.0`` when ``total`` is zero."""
    if not total:
        return 0.0
    return part / total * 100


def round_half_up(value: float, digits: int = 0) -> Decimal:
    """Round ``value`` half away from zero on its exact binary value.

    Python's ``round`` rounds ties to even; report figures round ties up
    (``round_half_up(12.5) == 13``).
    """
    exponent = Decimal(1).scaleb(-digits)
    return Decimal(value).quantize(exponent, rounding=ROUND_HALF_UP)


def format_fixed(value: float, digits: int = 1) -> str:
    """Format ``value`` with exactly ``digits`` decimals using half-up rounding."""
    return f"{round_half_up(value, digits):.{digits}f}"


def bar_length(value: float) -> int:
    """Return a non-negative integer bar length for a chart value."""
    return max(0, int(round_half_up(value)))


def hours_between(start: datetime, end: datetime) -> float:
    """Return the fractional number of hours from ``start`` to ``end``."""
    return (end - start).total_seconds() / 3600


def size_bucket_for(changes: int) -> str:
    """Return the size bucket label for a number of changed lines."""
    for upper_bound, label in SIZE_THRESHOLDS:
        if changes <= upper_bound:
            return label
    return "xl"


def weekday_label(value: datetime) -> str:
    """Return the ``Mon``..``Sun`` label of ``value`` in UTC.

    Naive datetimes are taken to already be in UTC.
    """
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return WEEKDAY_LABELS[value.weekday()]


def _change_size(pr: PullRequest) -> int:
    return max(0, pr.additions or 0) + max(0, pr.deletions or 0)


def rank_contributors(
    prs: Iterable[PullRequest],
    limit: int = TOP_CONTRIBUTORS_LIMIT,
) -> List[ContributorStats]:
    """Group PRs by author and rank by PR count.

    Ties keep the order in which authors first appear in ``prs`` because
    ``sorted`` is stable and dicts preserve insertion order. PRs with no
    author share one bucket keyed by ``None``, separate from every real login.
    """
    counts: Dict[Optional[str], List[int]] = {}
    for pr in prs:
        author = pr.author or None
        entry = counts.setdefault(author, [0, 0])
        entry[0] += 1
        if pr.is_merged:
            entry[1] += 1

    ranked = sorted(counts.items(), key=lambda item: item[1][0], reverse=True)
    return [
        ContributorStats(author=author or UNKNOWN_AUTHOR, prs=prs_count, merged=merged_count)
        for author, (prs_count, merged_count) in ranked[:limit]
    ]


def aggregate(prs: Sequence[PullRequest]) -> Metrics:
    """Aggregate pull requests into a ``Metrics`` snapshot.

    Business logic:
    - Counts are taken over the whole collection; window filtering happens
      before this call.
    - A PR counts as merged whenever ``merged_at`` is set, regardless of its
      ``state``.
    - Rates are ``0`` when their denominator is zero.
    - Size buckets use ``additions + deletions``; weekday buckets use the UTC
      day of ``created_at``.
    """
    total = len(prs)
    open_count = sum(1 for pr in prs if pr.state == "open")
    closed_count = sum(1 for pr in prs if pr.state == "closed")

    merge_hours: List[float] = [
        hours_between(pr.created_at, pr.merged_at)
        for pr in prs
        if pr.merged_at is not None
    ]
    merged_count = len(merge_hours)

    sizes = Counter(size_bucket_for(_change_size(pr)) for pr in prs)
    weekdays = Counter(weekday_label(pr.created_at) for pr in prs)

    metrics = Metrics(
        total_prs=total,
        open_prs=open_count,
        closed_prs=closed_count,
        merged_prs=merged_count,
        closed_not_merged=closed_count - merged_count,
        avg_time_to_merge=calculate_mean(merge_hours),
        median_time_to_merge=calculate_median(merge_hours),
        merge_rate=percentage(merged_count, total),
        top_contributors=tuple(rank_contributors(prs)),
        size_buckets=SizeBuckets(**{label: sizes[label] for label in SIZE_LABELS}),
        activity_by_weekday=WeekdayActivity(
            **{label.lower(): weekdays[label] for label in WEEKDAY_LABELS}
        ),
    )

    if metrics.closed_not_merged < 0:
        logger.warning(
            "More merged PRs than closed PRs; some merged PRs are not marked closed",
            extra={"closed_prs": closed_count, "merged_prs": merged_count},
        )

    logger.debug(
        "Aggregated PR metrics",
        extra={
            "prs_total": total,
            "prs_open": open_count,
            "prs_closed": closed_count,
            "prs_merged": merged_count,
            "contributors": len(metrics.top_contributors),
        },
    )

    return metrics
