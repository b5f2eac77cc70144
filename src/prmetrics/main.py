"""Entry point that wires retrieval, aggregation, rendering and outputs together."""

from __future__ import annotations

import logging
import sys
from datetime import datetime, timedelta, timezone
from typing import Optional, Sequence

from .cli import parse_args
from .config import load_config
from .errors import ApiError, AuthenticationError, ConfigurationError
from .github_client import GitHubClient
from .outputs import write_outputs, write_report, write_step_summary
from .report import generate_report
from .stats import aggregate, format_fixed

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_UNEXPECTED = 1
EXIT_CONFIGURATION = 2
EXIT_AUTHENTICATION = 3
EXIT_API = 4
EXIT_WRITE = 5


def configure_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def orchestrate_report_generation(argv: Optional[Sequence[str]] = None) -> int:
    """Run one report generation and map failures to process exit codes.

    Returns:
        ``0`` on success, ``2`` for configuration errors, ``3`` for
        authentication errors, ``4`` for GitHub API errors, ``5`` when the
        report cannot be written and ``1`` for anything unexpected.
    """
    try:
        args = parse_args(argv)
        configure_logging(args.verbose)

        config = load_config(
            repository=args.repo,
            days=args.days,
            output_file=args.output_file,
            include_charts=args.include_charts,
        )

        print(f"📊 Generating PR metrics for {config.full_name} over the last {config.days} days...")
        since = datetime.now(timezone.utc) - timedelta(days=config.days)

        client = GitHubClient(config=config)
        prs = client.list_pull_requests(since=since)
        print(f"Found {len(prs)} PRs in the last {config.days} days")

        metrics = aggregate(prs)
        report = generate_report(
            metrics,
            days=config.days,
            owner=config.owner,
            repo=config.repo,
            include_charts=config.include_charts,
        )

        path = write_report(report, config.output_file)
        print(f"✅ Metrics report written to {path}")

        write_outputs(metrics, config.output_file)
        write_step_summary(metrics)

        logger.info(
            "Report generated",
            extra={
                "repo": config.full_name,
                "prs_total": metrics.total_prs,
                "prs_merged": metrics.merged_prs,
                "avg_time_to_merge": format_fixed(metrics.avg_time_to_merge, 2),
            },
        )
        return EXIT_OK
    except ConfigurationError as exc:
        logger.error("Configuration error: %s", exc)
        return EXIT_CONFIGURATION
    except AuthenticationError as exc:
        logger.error("Authentication error: %s", exc)
        return EXIT_AUTHENTICATION
    except ApiError as exc:
        logger.error("GitHub API error: %s", exc)
        return EXIT_API
    except OSError as exc:
        logger.error("Failed to write report: %s", exc)
        return EXIT_WRITE
    except Exception:
        logger.exception("Unexpected error while generating the PR metrics report")
        return EXIT_UNEXPECTED


def main() -> None:
    sys.exit(orchestrate_report_generation())


if __name__ == "__main__":
    main()
