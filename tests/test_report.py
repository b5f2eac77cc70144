"""Tests for Markdown report rendering and insights."""

import re
import sys
from datetime import date
from pathlib import Path

# Add src directory to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from prmetrics.insights import generate_insights
from prmetrics.models import ContributorStats, Metrics, SizeBuckets, WeekdayActivity
from prmetrics.report import generate_report

GENERATED_ON = date(2026, 3, 2)


def _metrics(**overrides) -> Metrics:
    values = dict(
        total_prs=4,
        open_prs=1,
        closed_prs=3,
        merged_prs=2,
        closed_not_merged=1,
        avg_time_to_merge=6.0,
        median_time_to_merge=6.0,
        merge_rate=50.0,
        top_contributors=(
            ContributorStats(author="A", prs=2, merged=2),
            ContributorStats(author="B", prs=2, merged=0),
        ),
        size_buckets=SizeBuckets(xs=4),
        activity_by_weekday=WeekdayActivity(mon=4),
    )
    values.update(overrides)
    return Metrics(**values)


def _render(metrics: Metrics, include_charts: bool = True) -> str:
    return generate_report(
        metrics,
        days=30,
        owner="octo",
        repo="widgets",
        include_charts=include_charts,
        generated_on=GENERATED_ON,
    )


def test_generate_report_title_block_and_overview():
    """Verify the title block and overview table carry repository, window and scalar metrics."""
    report = _render(_metrics())

    assert report.startswith("# 📊 PR Metrics Dashboard\n")
    assert "**Repository:** octo/widgets  " in report
    assert "**Period:** Last 30 days  " in report
    assert "**Generated:** 2026-03-02" in report
    assert "| **Total PRs** | 4 |" in report
    assert "| **Merged PRs** | 2 ✅ |" in report
    assert "| **Open PRs** | 1 🔄 |" in report
    assert "| **Closed PRs** | 3 |" in report
    assert "| **Closed (Not Merged)** | 1 ❌ |" in report
    assert "| **Merge Rate** | 50.0% |" in report
    assert "| **Avg Time to Merge** | 6.0 hours |" in report
    assert "| **Median Time to Merge** | 6.0 hours |" in report


def test_generate_report_sections_in_fixed_order():
    """Verify sections are emitted in the documented order and end with the footer."""
    report = _render(_metrics())

    headings = [
        "## 📈 Overview",
        "## 👥 Top Contributors",
        "## 📏 PRs by Size",
        "## 📅 PRs by Day of Week",
        "## 📊 Visual Charts",
        "## 💡 Insights",
    ]
    positions = [report.index(heading) for heading in headings]
    assert positions == sorted(positions)
    assert report.rstrip("\n").endswith(
        "*Generated by [PR Metrics Dashboard](https://github.com/rkneela0912/pr-metrics-dashboard)*"
    )


def test_generate_report_contributor_rows_with_rounded_rate():
    """Verify contributor rows are ranked by position and show whole-percent merge rates."""
    metrics = _metrics(
        top_contributors=(
            ContributorStats(author="A", prs=8, merged=1),
            ContributorStats(author="B", prs=3, merged=2),
        )
    )

    report = _render(metrics)

    assert "| 1 | @A | 8 | 1 | 13% |" in report
    assert "| 2 | @B | 3 | 2 | 67% |" in report


def test_generate_report_size_and_weekday_tables():
    """Verify size and weekday tables list every bucket in fixed order with percentages."""
    metrics = _metrics(
        size_buckets=SizeBuckets(xs=1, s=1, m=1, l=1, xl=0),
        activity_by_weekday=WeekdayActivity(mon=2, sat=1, sun=1),
    )

    report = _render(metrics)

    assert "| **XS** (0-10 lines) | 1 | 25.0% |" in report
    assert "| **XL** (1000+ lines) | 0 | 0.0% |" in report
    assert "| Mon | 2 | 50.0% |" in report
    assert "| Tue | 0 | 0.0% |" in report
    assert "| Sun | 1 | 25.0% |" in report
    days = re.findall(r"^\| (Mon|Tue|Wed|Thu|Fri|Sat|Sun) \|", report, flags=re.MULTILINE)
    assert days == ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]


def test_generate_report_chart_bars_use_half_up_rounding():
    """Verify chart bar lengths follow the 50-character scale and round ties up."""
    metrics = _metrics(
        merged_prs=1,
        merge_rate=25.0,
        size_buckets=SizeBuckets(xs=1, s=3),
        activity_by_weekday=WeekdayActivity(mon=4),
    )

    report = _render(metrics)

    assert "Merged:     " + "█" * 13 + " 25.0%" in report
    assert "Not Merged: " + "█" * 38 + " 75.0%" in report
    assert "XS:  " + "█" * 13 + " 1" in report
    assert "S:   " + "█" * 38 + " 3" in report
    assert "M:    0" in report
    assert "Mon: " + "█" * 50 + " 4" in report
    assert "Tue:  0" in report


def test_generate_report_without_charts_omits_chart_section():
    """Verify disabling charts drops the chart section but keeps insights."""
    report = _render(_metrics(), include_charts=False)

    assert "## 📊 Visual Charts" not in report
    assert "█" not in report
    assert "## 💡 Insights" in report


def test_generate_report_empty_metrics_renders_zero_percentages():
    """Verify an empty PR set renders every percentage as 0.0% without failing."""
    report = _render(Metrics())

    percentages = re.findall(r"\| ([0-9.]+)% \|", report)
    assert percentages
    assert set(percentages) == {"0.0"}
    assert "Not Merged:  0.0%" in report
    assert "Low merge rate" not in report
    assert "Large PRs" not in report
    assert "Weekend activity" not in report
    assert "nan" not in report.lower()


def test_generate_report_uses_today_when_date_omitted():
    """Verify a generation date is always present in the title block."""
    report = generate_report(Metrics(), days=7, owner="o", repo="r")

    assert re.search(r"\*\*Generated:\*\* \d{4}-\d{2}-\d{2}", report)
    assert "**Period:** Last 7 days  " in report


def test_generate_insights_thresholds_fire_independently():
    """Verify fast merges, high merge rate, good sizing and weekend notes can fire together."""
    metrics = _metrics(
        total_prs=10,
        merged_prs=9,
        merge_rate=90.0,
        avg_time_to_merge=5.0,
        size_buckets=SizeBuckets(xs=5, s=2, m=3),
        activity_by_weekday=WeekdayActivity(mon=7, sat=2, sun=1),
    )

    insights = generate_insights(metrics)

    assert insights == [
        "✅ **Fast merge times!** Average time to merge is under 24 hours.",
        "✅ **High merge rate!** 90% of PRs are being merged.",
        "✅ **Good PR sizes!** 70% of PRs are small (< 100 lines).",
        "📅 **Weekend activity:** 30% of PRs created on weekends.",
    ]


def test_generate_insights_warning_thresholds():
    """Verify slow merges, low merge rate and large PR warnings."""
    metrics = _metrics(
        total_prs=10,
        merged_prs=4,
        merge_rate=40.0,
        avg_time_to_merge=100.0,
        size_buckets=SizeBuckets(xs=1, s=1, m=4, l=2, xl=2),
        activity_by_weekday=WeekdayActivity(mon=10),
    )

    insights = generate_insights(metrics)

    assert insights == [
        "⚠️ **Slow merge times.** Consider reviewing PR review processes.",
        "⚠️ **Low merge rate.** Many PRs are being closed without merging.",
        "⚠️ **Large PRs.** Consider breaking down PRs into smaller chunks.",
    ]


def test_generate_insights_boundaries_trigger_nothing():
    """Verify values exactly on thresholds fall between the low and high messages."""
    metrics = _metrics(
        total_prs=10,
        merged_prs=8,
        merge_rate=80.0,
        avg_time_to_merge=24.0,
        size_buckets=SizeBuckets(xs=3, s=3, m=4),
        activity_by_weekday=WeekdayActivity(mon=8, sun=2),
    )

    assert generate_insights(metrics) == []


def test_generate_insights_lower_boundaries_trigger_nothing():
    """Verify slow-merge, low-merge-rate and large-PR warnings stay quiet exactly on their thresholds."""
    metrics = _metrics(
        total_prs=10,
        merged_prs=5,
        merge_rate=50.0,
        avg_time_to_merge=72.0,
        size_buckets=SizeBuckets(xs=3, m=7),
        activity_by_weekday=WeekdayActivity(mon=10),
    )

    assert generate_insights(metrics) == []

def test_generate_insights_empty_metrics_skip_percentage_checks():
    """Verify no percentage-based insights are produced when there are no PRs."""
    insights = generate_insights(Metrics())

    assert insights == ["✅ **Fast merge times!** Average time to merge is under 24 hours."]
