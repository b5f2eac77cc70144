"""Pull request metrics dashboard for GitHub repositories."""

from .models import ContributorStats, Metrics, PullRequest, SizeBuckets, WeekdayActivity
from .report import generate_report
from .stats import aggregate

__version__ = "0.1.0"

__all__ = [
    "ContributorStats",
    "Metrics",
    "PullRequest",
    "SizeBuckets",
    "WeekdayActivity",
    "aggregate",
    "generate_report",
]
