"""GitHub REST API client for pull request retrieval."""

from __future__ import annotations

import logging
import time
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import requests

from .config import Config
from .errors import ApiError, AuthenticationError
from .models import PullRequest

logger = logging.getLogger(__name__)


class GitHubClient:
    """Small, typed client for the GitHub pull requests API."""

    _BASE_URL = "https://api.github.com"
    _API_VERSION = "2022-11-28"
    _PULL_REQUEST_PAGE_SIZE = 100
    _MAX_RETRIES = 5
    _MAX_BACKOFF_SECONDS = 30

    def __init__(self, config: Config, timeout_seconds: int = 30) -> None:
        """Initialize an authenticated GitHub API client.

        Args:
            config: Validated runtime configuration including owner/repo/token.
            timeout_seconds: Per-request timeout in seconds.
        """
        self._config = config
        self._timeout_seconds = timeout_seconds

        self._session = requests.Session()
        self._session.headers.update(
            {
                "Accept": "application/vnd.github+json",
                "Authorization": f"Bearer {config.token}",
                "X-GitHub-Api-Version": self._API_VERSION,
                "User-Agent": "pr-metrics-dashboard",
            }
        )

    def _build_url(self, path: str) -> str:
        """Build a fully qualified API URL from a path below the API root."""
        return f"{self._BASE_URL}/{path.lstrip('/')}"

    def _parse_datetime(self, value: Optional[str]) -> Optional[datetime]:
        """Parse GitHub ISO8601 timestamps into timezone-aware datetimes."""
        if not value:
            return None

        normalized = value[:-1] + "+00:00" if value.endswith("Z") else value
        parsed = datetime.fromisoformat(normalized)
        if parsed.tzinfo is None:
            return parsed.replace(tzinfo=timezone.utc)
        return parsed

    def _is_rate_limited(self, response: requests.Response) -> bool:
        """GitHub signals primary rate limits with 403 and zero remaining requests."""
        if response.status_code == 429:
            return True
        return (
            response.status_code == 403
            and response.headers.get("X-RateLimit-Remaining") == "0"
        )

    def _extract_backoff_seconds(self, response: requests.Response, attempt: int) -> int:
        """Compute exponential backoff seconds, honoring Retry-After when available."""
        retry_after_header = response.headers.get("Retry-After")
        if retry_after_header:
            try:
                retry_after_seconds = int(retry_after_header)
                return min(self._MAX_BACKOFF_SECONDS, max(1, retry_after_seconds))
            except ValueError:
                logger.debug("Ignoring non-numeric Retry-After header", extra={"value": retry_after_header})

        return min(self._MAX_BACKOFF_SECONDS, 2 ** (attempt - 1))

    def _get_json(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """Execute a GET request with retry logic for rate limits and 5xx responses.

        Raises:
            AuthenticationError: If GitHub rejects the token (HTTP 401).
            ApiError: If the request repeatedly fails, returns HTTP >= 400,
                or does not return valid JSON.
        """
        url = self._build_url(path)
        query = dict(params or {})

        last_error: Optional[Exception] = None

        for attempt in range(1, self._MAX_RETRIES + 1):
            try:
                response = self._session.get(url, params=query, timeout=self._timeout_seconds)
            except requests.RequestException as exc:
                last_error = exc
                if attempt == self._MAX_RETRIES:
                    raise ApiError(f"GitHub request failed after retries: GET {url}") from exc
                time.sleep(min(self._MAX_BACKOFF_SECONDS, 2 ** (attempt - 1)))
                continue

            status_code = response.status_code
            is_retryable = self._is_rate_limited(response) or 500 <= status_code <= 599

            if is_retryable and attempt < self._MAX_RETRIES:
                backoff = self._extract_backoff_seconds(response, attempt)
                logger.warning(
                    "Retrying GitHub request",
                    extra={"url": url, "status_code": status_code, "attempt": attempt, "backoff": backoff},
                )
                time.sleep(backoff)
                continue

            if status_code == 401:
                raise AuthenticationError(
                    f"GitHub rejected the configured token: GET {url} returned 401."
                )

            if status_code >= 400:
                raise ApiError(
                    "GitHub API request failed: "
                    f"GET {url} returned {status_code} - {response.text}"
                )

            try:
                return response.json()
            except ValueError as exc:
                raise ApiError(f"GitHub API returned invalid JSON: GET {url}") from exc

        raise ApiError(f"GitHub request failed after retries: GET {url}") from last_error

    def _to_pull_request(self, item: Dict[str, Any]) -> PullRequest:
        number = item.get("number")
        created_at = self._parse_datetime(item.get("created_at"))
        state = item.get("state")

        if number is None or created_at is None or not state:
            raise ApiError(
                "GitHub pull request payload is missing required fields: "
                f"repo={self._config.full_name}, payload={item}"
            )

        user = item.get("user") or {}
        return PullRequest(
            number=int(number),
            author=user.get("login"),
            state=str(state),
            created_at=created_at,
            merged_at=self._parse_datetime(item.get("merged_at")),
            additions=int(item.get("additions") or 0),
            deletions=int(item.get("deletions") or 0),
        )

    def _list_by_state(self, state: str, since: datetime) -> List[Dict[str, Any]]:
        """Page through pull requests in one state until the window start is passed.

        Open pull requests are sorted by creation date and closed ones by update
        date, newest first. A record updated before ``since`` cannot have been
        created inside the window, so either ordering allows stopping early.
        """
        sort_field = "created" if state == "open" else "updated"
        cutoff_key = "created_at" if state == "open" else "updated_at"
        path = f"repos/{self._config.owner}/{self._config.repo}/pulls"

        items: List[Dict[str, Any]] = []
        page = 1

        while True:
            payload = self._get_json(
                path,
                params={
                    "state": state,
                    "sort": sort_field,
                    "direction": "desc",
                    "per_page": self._PULL_REQUEST_PAGE_SIZE,
                    "page": page,
                },
            )
            if not isinstance(payload, list):
                raise ApiError(f"GitHub API returned unexpected payload shape: GET {path}")

            items.extend(payload)
            logger.debug(
                "Fetched pull request page",
                extra={"state": state, "page": page, "items": len(payload)},
            )

            if len(payload) < self._PULL_REQUEST_PAGE_SIZE:
                break

            oldest = self._parse_datetime(payload[-1].get(cutoff_key))
            if oldest is not None and oldest < since:
                break

            page += 1

        return items

    def list_pull_requests(self, since: datetime) -> List[PullRequest]:
        """List open and closed pull requests created at or after ``since``.

        Results are deduplicated by pull request number, keeping the first
        occurrence; open pull requests come before closed ones.
        """
        pull_requests: List[PullRequest] = []
        seen: set = set()

        for state in ("open", "closed"):
            for item in self._list_by_state(state, since):
                pr = self._to_pull_request(item)
                if pr.created_at < since or pr.number in seen:
                    continue
                seen.add(pr.number)
                pull_requests.append(pr)

        logger.info(
            "Fetched pull requests",
            extra={"repo": self._config.full_name, "prs_total": len(pull_requests)},
        )

        return pull_requests
