"""Report persistence and CI outputs for a finished metrics run.

When running inside GitHub Actions the scalar outputs are appended to the file
named by ``GITHUB_OUTPUT`` and a summary table to ``GITHUB_STEP_SUMMARY``.
Outside of Actions both are skipped.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from .models import Metrics
from .stats import format_fixed

logger = logging.getLogger(__name__)


def write_report(report: str, output_file: str) -> Path:
    """Write the rendered report to ``output_file`` and return its path."""
    path = Path(output_file)
    if path.parent != Path("."):
        path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(report, encoding="utf-8")
    return path


def build_outputs(metrics: Metrics, report_file: str) -> Dict[str, str]:
    """Return the named outputs exposed to the calling workflow."""
    return {
        "total_prs": str(metrics.total_prs),
        "merged_prs": str(metrics.merged_prs),
        "avg_time_to_merge": format_fixed(metrics.avg_time_to_merge, 2),
        "report_file": report_file,
    }


def summary_rows(metrics: Metrics) -> List[Tuple[str, str]]:
    return [
        ("Total PRs", str(metrics.total_prs)),
        ("Merged PRs", str(metrics.merged_prs)),
        ("Open PRs", str(metrics.open_prs)),
        ("Closed (Not Merged)", str(metrics.closed_not_merged)),
        ("Avg Time to Merge", f"{format_fixed(metrics.avg_time_to_merge)} hours"),
        ("Merge Rate", f"{format_fixed(metrics.merge_rate)}%"),
    ]


def build_step_summary(metrics: Metrics) -> str:
    """Render the short Markdown summary shown on the workflow run page."""
    lines = [
        "## 📊 PR Metrics Summary",
        "",
        "| Metric | Value |",
        "|--------|-------|",
    ]
    lines.extend(f"| {label} | {value} |" for label, value in summary_rows(metrics))
    return "\n".join(lines) + "\n"


def _append(path: str, text: str) -> None:
    with open(path, "a", encoding="utf-8") as handle:
        handle.write(text)


def write_outputs(metrics: Metrics, report_file: str, output_path: Optional[str] = None) -> bool:
    """Append ``key=value`` outputs to the workflow output file.

    Returns:
        ``True`` when outputs were written, ``False`` when no output file is configured.
    """
    output_path = output_path or os.getenv("GITHUB_OUTPUT")
    if not output_path:
        logger.debug("GITHUB_OUTPUT not set; skipping workflow outputs")
        return False

    outputs = build_outputs(metrics, report_file)
    _append(output_path, "".join(f"{key}={value}\n" for key, value in outputs.items()))
    return True


def write_step_summary(metrics: Metrics, summary_path: Optional[str] = None) -> bool:
    """Append the Markdown summary to the workflow step summary file."""
    summary_path = summary_path or os.getenv("GITHUB_STEP_SUMMARY")
    if not summary_path:
        logger.debug("GITHUB_STEP_SUMMARY not set; skipping step summary")
        return False

    _append(summary_path, build_step_summary(metrics))
    return True
