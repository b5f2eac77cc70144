"""Command-line argument parsing for the PR metrics dashboard."""

from __future__ import annotations

import argparse
from typing import Optional, Sequence

from .config import DEFAULT_DAYS, DEFAULT_OUTPUT_FILE


def _positive_int(value: str) -> int:
    """Parse and validate a positive integer CLI value.

    Args:
        value: Raw command-line argument value.

    Returns:
        The validated positive integer.

    Raises:
        argparse.ArgumentTypeError: If value is not a positive integer.
    """
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError("must be an integer") from exc

    if parsed <= 0:
        raise argparse.ArgumentTypeError("must be greater than 0")

    return parsed


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments for report generation.

    Returns:
        Parsed CLI arguments containing the repository slug, window length,
        output path, chart toggle and verbosity.
    """
    parser = argparse.ArgumentParser(
        prog="pr-metrics-dashboard",
        description=(
            "Generate a Markdown dashboard of GitHub pull-request metrics "
            "(throughput, cycle time, contributors, size and weekday activity)."
        ),
    )

    parser.add_argument(
        "--repo",
        default=None,
        help="Repository as owner/name (default: $GITHUB_REPOSITORY).",
    )
    parser.add_argument(
        "--days",
        type=_positive_int,
        default=DEFAULT_DAYS,
        help=f"Number of days of PR history to analyze (default: {DEFAULT_DAYS}).",
    )
    parser.add_argument(
        "--output-file",
        default=DEFAULT_OUTPUT_FILE,
        help=f"Path of the Markdown report (default: {DEFAULT_OUTPUT_FILE}).",
    )
    parser.add_argument(
        "--no-charts",
        dest="include_charts",
        action="store_false",
        help="Omit the text bar charts from the report.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging.",
    )

    return parser.parse_args(argv)
