"""Configuration parsing and validation for the PR metrics dashboard."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional, Tuple

from .errors import AuthenticationError, ConfigurationError

DEFAULT_DAYS = 30
DEFAULT_OUTPUT_FILE = "PR_METRICS.md"


@dataclass(frozen=True)
class Config:
    """Validated runtime settings used by the report generator."""

    owner: str
    repo: str
    token: str
    days: int = DEFAULT_DAYS
    output_file: str = DEFAULT_OUTPUT_FILE
    include_charts: bool = True

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"


def split_repository(repository: str) -> Tuple[str, str]:
    """Split an ``owner/name`` slug into its two parts.

    Raises:
        ConfigurationError: If the slug does not have exactly two non-empty parts.
    """
    parts = [part.strip() for part in repository.strip().split("/")]
    if len(parts) != 2 or not all(parts):
        raise ConfigurationError(
            f"Invalid repository '{repository}': expected the form 'owner/name'."
        )
    return parts[0], parts[1]


def load_config(
    repository: Optional[str],
    days: int = DEFAULT_DAYS,
    output_file: str = DEFAULT_OUTPUT_FILE,
    include_charts: bool = True,
) -> Config:
    """Build and validate application configuration.

    Args:
        repository: ``owner/name`` slug; falls back to ``GITHUB_REPOSITORY``.
        days: Positive number of days of history to report on.
        output_file: Path the Markdown report is written to.
        include_charts: Whether the report includes text bar charts.

    Returns:
        A validated ``Config`` instance.

    Raises:
        ConfigurationError: If ``days`` is not greater than ``0``, or no valid
            repository slug is available.
        AuthenticationError: If ``GITHUB_TOKEN`` is not configured.
    """
    if days <= 0:
        raise ConfigurationError("Invalid value for 'days': expected an integer greater than 0.")

    repository = repository or os.getenv("GITHUB_REPOSITORY", "")
    if not repository:
        raise ConfigurationError(
            "Missing repository. Pass --repo owner/name or set 'GITHUB_REPOSITORY'."
        )
    owner, repo = split_repository(repository)

    if not output_file:
        raise ConfigurationError("Invalid value for 'output_file': expected a file path.")

    token: str = os.getenv("GITHUB_TOKEN", "").strip()
    if not token:
        raise AuthenticationError(
            "Missing required GitHub token. "
            "Set the 'GITHUB_TOKEN' environment variable before running the report generator."
        )

    return Config(
        owner=owner,
        repo=repo,
        token=token,
        days=days,
        output_file=output_file,
        include_charts=include_charts,
    )
