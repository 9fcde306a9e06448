"""
github_client.py — Thin GitHub REST wrapper feeding the statistics collector.

Responsibilities:
  - Authenticate requests (token or unauthenticated)
  - Fetch user profile, repositories, recent public events and repo languages
  - Count a user's commits in one repository via the Link header trick
  - Raise typed exceptions for clean error handling upstream
"""

import logging
from concurrent.futures import ThreadPoolExecutor

import requests

from config import (
    GITHUB_API_BASE,
    GITHUB_API_VERSION,
    GITHUB_EVENTS_PER_PAGE,
    GITHUB_REPOS_PER_PAGE,
    GITHUB_REQUEST_TIMEOUT,
    GITHUB_USER_AGENT,
)
from utils.utils import parse_last_page, retry

logger = logging.getLogger(__name__)


# ─── Custom Exceptions ────────────────────────────────────────────────────────

class GitHubError(Exception):
    """Base class for GitHub API failures."""


class GitHubUserNotFoundError(GitHubError):
    """Raised when the GitHub username (or resource) does not exist (404)."""


class GitHubRateLimitError(GitHubError):
    """Raised when the GitHub API rate limit is exceeded (403/429)."""
    def __init__(self, reset_timestamp: int | None = None):
        self.reset_timestamp = reset_timestamp
        super().__init__("GitHub API rate limit exceeded.")


class GitHubAuthError(GitHubError):
    """Raised when the provided token is invalid (401)."""


class GitHubAPIError(GitHubError):
    """Generic GitHub API error for unexpected status codes."""


# ─── Client ──────────────────────────────────────────────────────────────────

class GitHubClient:
    """
    Usage:
        client = GitHubClient(token="ghp_...")
        raw = client.fetch_all("octocat")
    """

    def __init__(self, token: str | None = None, session: requests.Session | None = None):
        self.session = session or requests.Session()
        self.session.headers.update({
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": GITHUB_API_VERSION,
            "User-Agent": GITHUB_USER_AGENT,
        })
        if token:
            self.session.headers["Authorization"] = f"Bearer {token}"
        else:
            logger.warning(
                "No GitHub token configured. Using unauthenticated requests "
                "(subject to rate limiting)."
            )

    # ── Internal request helper ───────────────────────────────────────────────

    @retry(max_attempts=2, delay=1.5, exceptions=(requests.Timeout, requests.ConnectionError))
    def _get(self, path: str, params: dict | None = None) -> requests.Response:
        """
        Make a GET request to the GitHub API.
        Raises typed exceptions for known error codes.
        """
        url = f"{GITHUB_API_BASE}{path}"
        response = self.session.get(url, params=params, timeout=GITHUB_REQUEST_TIMEOUT)

        if response.status_code == 200:
            return response
        elif response.status_code == 404:
            raise GitHubUserNotFoundError(f"Not found: {path}")
        elif response.status_code == 401:
            raise GitHubAuthError("Invalid or expired GitHub token.")
        elif response.status_code in (403, 429):
            reset_ts = response.headers.get("X-RateLimit-Reset")
            raise GitHubRateLimitError(
                reset_timestamp=int(reset_ts) if reset_ts else None
            )
        else:
            raise GitHubAPIError(
                f"GitHub API returned {response.status_code} for {url}"
            )

    def _get_json(self, path: str, params: dict | None = None) -> dict | list:
        return self._get(path, params).json()

    # ── Public fetch methods ──────────────────────────────────────────────────

    def fetch_profile(self, username: str) -> dict:
        """Fetch the public user profile."""
        logger.info(f"Fetching profile for: {username}")
        return self._get_json(f"/users/{username}")

    def fetch_repos(self, username: str) -> list[dict]:
        """Fetch up to GITHUB_REPOS_PER_PAGE public repositories."""
        logger.info(f"Fetching repos for: {username}")
        return self._get_json(
            f"/users/{username}/repos",
            params={"per_page": GITHUB_REPOS_PER_PAGE},
        )

    def fetch_events(self, username: str) -> list[dict]:
        """Fetch the most recent page of public events."""
        logger.info(f"Fetching events for: {username}")
        return self._get_json(
            f"/users/{username}/events",
            params={"per_page": GITHUB_EVENTS_PER_PAGE},
        )

    def count_author_commits(self, full_name: str, username: str) -> int:
        """
        Count commits authored by `username` in one repository.

        With per_page=1 the page number of the rel="last" link equals the
        commit count; without a last link, the returned list is all there is.
        """
        response = self._get(
            f"/repos/{full_name}/commits",
            params={"author": username, "per_page": 1},
        )
        last_page = parse_last_page(response.headers.get("Link"))
        if last_page is not None:
            count = last_page
        else:
            count = len(response.json())
        logger.info(f"Found {count} commits in {full_name}")
        return count

    def fetch_languages(self, full_name: str) -> dict[str, int]:
        """Bytes of code per language for one repository."""
        return self._get_json(f"/repos/{full_name}/languages") or {}

    # ── Aggregate fetch (repos + events in parallel) ──────────────────────────

    def fetch_all(self, username: str) -> dict:
        """
        Fetch profile, repos, and events for a username.
        Repos and events are fetched concurrently.

        Returns:
            {"profile": {...}, "repos": [...] or None, "events": [...]}

        "repos" is None when the repository listing failed, so callers can
        tell a failed fetch apart from a user with no repositories.

        Raises:
            GitHubUserNotFoundError, GitHubRateLimitError, GitHubAuthError,
            GitHubAPIError, requests.Timeout
        """
        # Profile must come first to validate the user exists
        profile = self.fetch_profile(username)

        with ThreadPoolExecutor(max_workers=2) as executor:
            future_repos  = executor.submit(self._fetch_optional, self.fetch_repos, username)
            future_events = executor.submit(self._fetch_optional, self.fetch_events, username)
            repos  = future_repos.result()
            events = future_events.result() or []

        logger.info(
            f"Fetched {'no' if repos is None else len(repos)} repos, "
            f"{len(events)} events for {username}."
        )

        return {
            "profile": profile,
            "repos":   repos,
            "events":  events,
        }

    @staticmethod
    def _fetch_optional(fetch, username: str) -> list[dict] | None:
        """Repos and events are best-effort once the profile exists. None on failure."""
        try:
            return fetch(username) or []
        except (GitHubAPIError, GitHubUserNotFoundError) as exc:
            logger.warning(f"{fetch.__name__} failed for {username}: {exc}")
            return None
