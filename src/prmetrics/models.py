"""Domain models for pull request metrics processing.

Input records model only the subset of GitHub pull request fields needed for
the metrics; result models are frozen so a computed ``Metrics`` snapshot cannot
change after aggregation.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Tuple

SIZE_LABELS: Tuple[str, ...] = ("xs", "s", "m", "l", "xl")
WEEKDAY_LABELS: Tuple[str, ...] = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")


@dataclass(frozen=True, slots=True)
class PullRequest:
    """Represents the minimal pull request data required for metrics."""

    number: int
    author: Optional[str]
    state: str
    created_at: datetime
    merged_at: Optional[datetime] = None
    additions: int = 0
    deletions: int = 0

    @property
    def is_merged(self) -> bool:
        return self.merged_at is not None


@dataclass(frozen=True, slots=True)
class ContributorStats:
    """PR and merge counts for one author."""

    author: str
    prs: int
    merged: int


@dataclass(frozen=True, slots=True)
class SizeBuckets:
    """Histogram of PR sizes (additions + deletions)."""

    xs: int = 0
    s: int = 0
    m: int = 0
    l: int = 0  # noqa: E741
    xl: int = 0

    def items(self) -> Tuple[Tuple[str, int], ...]:
        return tuple((label, getattr(self, label)) for label in SIZE_LABELS)

    @property
    def total(self) -> int:
        return self.xs + self.s + self.m + self.l + self.xl


@dataclass(frozen=True, slots=True)
class WeekdayActivity:
    """Histogram of PR creation by day of week (UTC)."""

    mon: int = 0
    tue: int = 0
    wed: int = 0
    thu: int = 0
    fri: int = 0
    sat: int = 0
    sun: int = 0

    def items(self) -> Tuple[Tuple[str, int], ...]:
        return tuple((label, getattr(self, label.lower())) for label in WEEKDAY_LABELS)

    @property
    def total(self) -> int:
        return sum(count for _, count in self.items())

    @property
    def weekend(self) -> int:
        return self.sat + self.sun


@dataclass(frozen=True, slots=True)
class Metrics:
    """Immutable snapshot of all statistics derived from one set of PRs."""

    total_prs: int = 0
    open_prs: int = 0
    closed_prs: int = 0
    merged_prs: int = 0
    closed_not_merged: int = 0
    avg_time_to_merge: float = 0.0
    median_time_to_merge: float = 0.0
    merge_rate: float = 0.0
    top_contributors: Tuple[ContributorStats, ...] = ()
    size_buckets: SizeBuckets = field(default_factory=SizeBuckets)
    activity_by_weekday: WeekdayActivity = field(default_factory=WeekdayActivity)
