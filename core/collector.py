"""
collector.py — Reduce raw GitHub API payloads to RawActivityStats.

Input:  raw dict from GitHubClient.fetch_all()
Output: (RawActivityStats, additional_data dict)

Commit counts are best-effort estimates, not exact totals:
  1. Commits listed in recent PushEvents
  2. If fewer than MIN_TRUSTED_COMMITS: sample author commit counts from the
     first few repos and scale up by repos / sampled
  3. If still too few: account age (months) × repos × 2, at least MIN_TRUSTED_COMMITS

Steps 2 and 3 need the repository listing. When that fetch failed
("repos" is None) the event count is kept as is.
"""

import logging
import math
from collections import Counter
from datetime import datetime

import requests

from config import COMMIT_SAMPLE_REPOS, LANGUAGE_SAMPLE_REPOS, MIN_TRUSTED_COMMITS
from core.cache import CollectedStats, load_collection, store_collection
from core.github_client import GitHubClient, GitHubError
from core.models import RawActivityStats
from utils.utils import days_since, safe_divide

logger = logging.getLogger(__name__)


def collect_stats(raw_data: dict, commit_counter=None, language_fetcher=None,
                  now: datetime | None = None) -> tuple[RawActivityStats, dict]:
    """
    Build activity stats and profile extras from raw GitHub data.

    Args:
        raw_data:         dict with keys 'profile', 'repos', 'events'
        commit_counter:   optional callable(repo dict) -> int used to sample
                          per-repo commit counts; skipped when None
        language_fetcher: optional callable(repo dict) -> {language: bytes}
                          for repos with no primary language; skipped when None
        now:              reference time for account age (defaults to UTC now)
    """
    profile = raw_data.get("profile") or {}
    fetched = raw_data.get("repos")
    repos   = fetched or []
    events  = raw_data.get("events") or []

    additional = _profile_extras(profile, now)

    commits = count_push_commits(events)
    logger.info(f"Found {commits} recent commits from events")

    if fetched is not None:
        commits = estimate_commits(
            commits, repos, additional["account_age_days"], commit_counter
        )
    else:
        logger.warning("Repository listing unavailable, keeping the event commit count")

    stats = RawActivityStats(
        commits=commits,
        stars=total_stars(repos),
        repos=profile.get("public_repos", 0),
        followers=profile.get("followers", 0),
    )
    additional["languages"] = language_stats(repos, language_fetcher)

    logger.debug(f"Collected stats: {stats.to_dict()}")
    return stats, additional


# ─── Signals ──────────────────────────────────────────────────────────────────

def count_push_commits(events: list[dict]) -> int:
    """Sum of commits carried by PushEvent payloads."""
    total = 0
    for event in events:
        if event.get("type") != "PushEvent":
            continue
        commits = (event.get("payload") or {}).get("commits") or []
        total += len(commits)
    return total


def total_stars(repos: list[dict]) -> int:
    return sum(r.get("stargazers_count") or 0 for r in repos)


def language_stats(repos: list[dict], language_fetcher=None) -> dict[str, int]:
    """
    Language counts over the first few repos, most used first.

    A repo with a primary language counts once for it. A repo without one
    counts once for every language `language_fetcher` reports for it.
    """
    counter = Counter()
    for repo in repos[:LANGUAGE_SAMPLE_REPOS]:
        if repo.get("language"):
            counter[repo["language"]] += 1
        elif language_fetcher is not None:
            try:
                languages = language_fetcher(repo) or {}
            except (GitHubError, requests.RequestException) as exc:
                logger.warning(f"Could not fetch languages for {repo.get('name')}: {exc}")
                continue
            # byte counts are ignored, each language counts once per repo
            counter.update(list(languages))
    return dict(counter.most_common())


def estimate_commits(event_commits: int, repos: list[dict], account_age_days: int,
                     commit_counter=None) -> int:
    """Apply the sampling and account-age fallbacks when event data is thin."""
    commits = event_commits

    if commits < MIN_TRUSTED_COMMITS and commit_counter is not None:
        sampled = repos[:COMMIT_SAMPLE_REPOS]
        total = commits
        for repo in sampled:
            try:
                total += commit_counter(repo)
            except (GitHubError, requests.RequestException) as exc:
                logger.warning(
                    f"Could not fetch commits for {repo.get('full_name', repo.get('name'))}: {exc}"
                )
        if total > 0:
            multiplier = max(1.0, safe_divide(len(repos), len(sampled), default=1.0))
            commits = _round_half_up(total * multiplier)
            logger.info(f"Estimated total commits: {commits}")

    if commits < MIN_TRUSTED_COMMITS:
        estimate = math.floor(account_age_days / 30 * len(repos) * 2)
        commits = max(estimate, MIN_TRUSTED_COMMITS)
        logger.info(f"Using fallback commit estimate: {commits}")

    return commits


# ─── Profile Extras ───────────────────────────────────────────────────────────

def _profile_extras(profile: dict, now: datetime | None) -> dict:
    return {
        "following":        profile.get("following") or 0,
        "created_at":       profile.get("created_at"),
        "location":         profile.get("location"),
        "company":          profile.get("company"),
        "blog":             profile.get("blog") or None,
        "bio":              profile.get("bio"),
        "twitter_username": profile.get("twitter_username"),
        "public_gists":     profile.get("public_gists") or 0,
        "account_age_days": days_since(profile.get("created_at"), now),
    }


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


# ─── Live collection ──────────────────────────────────────────────────────────

def collect(username: str, client: GitHubClient | None = None,
            use_cache: bool = True) -> dict:
    """
    Fetch and reduce a user's GitHub activity.

    Returns:
        {"login": str, "githubStats": {...}, "additionalData": {...}}

    Raises the GitHubClient exceptions for the profile request.
    """
    if use_cache:
        cached = load_collection(username)
        if cached is not None:
            return cached.to_dict()

    client = client or GitHubClient()
    raw_data = client.fetch_all(username)
    login = raw_data["profile"].get("login", username)

    def _full_name(repo: dict) -> str:
        return repo.get("full_name") or f"{login}/{repo.get('name', '')}"

    stats, additional = collect_stats(
        raw_data,
        commit_counter=lambda repo: client.count_author_commits(_full_name(repo), login),
        language_fetcher=lambda repo: client.fetch_languages(_full_name(repo)),
    )
    collected = CollectedStats(login=login, stats=stats, additional=additional)

    if use_cache:
        store_collection(username, collected)
    return collected.to_dict()
