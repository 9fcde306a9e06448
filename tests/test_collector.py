"""
tests/test_collector.py — Unit tests for collector.py

Tests use mock GitHub API data (no network calls).
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from datetime import datetime, timezone

import pytest
import requests
from core import cache
from core.collector import (
    collect,
    collect_stats,
    count_push_commits,
    estimate_commits,
    language_stats,
    total_stars,
)
from core.github_client import GitHubAPIError


# ─── Mock data ────────────────────────────────────────────────────────────────

NOW = datetime(2020, 3, 1, tzinfo=timezone.utc)

MOCK_PROFILE = {
    "login":            "testuser",
    "created_at":       "2020-01-01T00:00:00Z",
    "public_repos":     15,
    "followers":        42,
    "following":        20,
    "blog":             "https://testuser.dev",
    "bio":              "I write code.",
    "location":         "Earth",
    "company":          None,
    "twitter_username": None,
    "public_gists":     3,
}

MOCK_REPOS = [
    {
        "name":             f"repo-{i}",
        "full_name":        f"testuser/repo-{i}",
        "language":         ["Python", "Python", "Go", None][i % 4],
        "stargazers_count": i * 5,
    }
    for i in range(10)
]

MOCK_EVENTS = [
    {"type": "PushEvent", "payload": {"commits": [{"sha": "a"}, {"sha": "b"}]}},
    {"type": "PushEvent", "payload": {"commits": [{"sha": "c"}] * 10}},
    {"type": "PullRequestEvent", "payload": {}},
    {"type": "WatchEvent"},
]

MOCK_RAW = {
    "profile": MOCK_PROFILE,
    "repos":   MOCK_REPOS,
    "events":  MOCK_EVENTS,
}


def fixed_counter(count):
    def counter(repo):
        return count
    return counter


def exploding_counter(repo):
    raise AssertionError("counter should not be called")


# ─── Signals ──────────────────────────────────────────────────────────────────

class TestSignals:
    def test_push_commits(self):
        assert count_push_commits(MOCK_EVENTS) == 12

    def test_malformed_events(self):
        bad = [{"type": "PushEvent"}, {"type": "PushEvent", "payload": None}, {}]
        assert count_push_commits(bad) == 0

    def test_total_stars(self):
        assert total_stars(MOCK_REPOS) == sum(i * 5 for i in range(10))
        assert total_stars([{"stargazers_count": None}, {}]) == 0

    def test_language_stats_sorted(self):
        langs = language_stats(MOCK_REPOS)
        assert list(langs) == ["Python", "Go"]
        assert langs == {"Python": 6, "Go": 2}

    def test_language_fetch_for_repos_without_primary(self):
        seen = []

        def fetcher(repo):
            seen.append(repo["name"])
            return {"Rust": 9000, "Python": 12}

        langs = language_stats(MOCK_REPOS, fetcher)
        assert seen == ["repo-3", "repo-7"]
        assert langs == {"Python": 8, "Go": 2, "Rust": 2}
        assert list(langs)[0] == "Python"

    def test_failed_language_fetch_is_skipped(self):
        def fetcher(repo):
            raise GitHubAPIError("500")

        assert language_stats(MOCK_REPOS, fetcher) == {"Python": 6, "Go": 2}


# ─── Commit estimation ───────────────────────────────────────────────────────

class TestEstimateCommits:
    def test_trusted_event_count_is_kept(self):
        assert estimate_commits(15, MOCK_REPOS, 60, exploding_counter) == 15

    def test_sampling_scales_up(self):
        # 2 from events + 5 sampled repos × 4 = 22, scaled by 10 / 5
        assert estimate_commits(2, MOCK_REPOS, 60, fixed_counter(4)) == 44

    def test_small_repo_list_is_not_scaled(self):
        assert estimate_commits(0, MOCK_REPOS[:3], 60, fixed_counter(5)) == 15

    def test_age_fallback(self):
        # 90 days / 30 × 3 repos × 2
        assert estimate_commits(0, MOCK_REPOS[:3], 90, fixed_counter(0)) == 18

    def test_fallback_floor(self):
        assert estimate_commits(0, MOCK_REPOS[:1], 0, None) == 10

    def test_failed_samples_are_skipped(self):
        calls = []

        def flaky(repo):
            calls.append(repo["name"])
            if len(calls) == 1:
                raise GitHubAPIError("409 empty repository")
            if len(calls) == 2:
                raise requests.ConnectionError("reset")
            return 3

        # 1 + 3 × 3 = 10, scaled by 10 / 5
        assert estimate_commits(1, MOCK_REPOS, 60, flaky) == 20
        assert len(calls) == 5


# ─── collect_stats ───────────────────────────────────────────────────────────

class TestCollectStats:
    def test_stats(self):
        stats, _ = collect_stats(MOCK_RAW, commit_counter=exploding_counter, now=NOW)
        assert stats.commits == 12
        assert stats.stars == 225
        assert stats.repos == 15
        assert stats.followers == 42

    def test_additional_data(self):
        _, extra = collect_stats(MOCK_RAW, now=NOW)
        assert extra["account_age_days"] == 60
        assert extra["following"] == 20
        assert extra["public_gists"] == 3
        assert extra["blog"] == "https://testuser.dev"
        assert extra["languages"] == {"Python": 6, "Go": 2}

    def test_no_repos_still_gets_commit_floor(self):
        raw = {**MOCK_RAW, "repos": [], "events": MOCK_EVENTS[:1]}
        stats, extra = collect_stats(raw, commit_counter=exploding_counter, now=NOW)
        assert stats.commits == 10
        assert stats.stars == 0
        assert extra["languages"] == {}

    def test_failed_repo_listing_keeps_event_count(self):
        raw = {**MOCK_RAW, "repos": None, "events": MOCK_EVENTS[:1]}
        stats, extra = collect_stats(raw, commit_counter=exploding_counter, now=NOW)
        assert stats.commits == 2
        assert stats.stars == 0
        assert extra["languages"] == {}

    def test_thin_events_use_estimate(self):
        raw = {**MOCK_RAW, "events": []}
        stats, _ = collect_stats(raw, commit_counter=fixed_counter(0), now=NOW)
        # 60 days / 30 × 10 repos × 2
        assert stats.commits == 40

    def test_empty_payload(self):
        stats, extra = collect_stats({"profile": {}, "repos": [], "events": []})
        # the fallback floor still applies with no repositories
        assert stats.to_dict() == {"commits": 10, "stars": 0, "repos": 0, "followers": 0}
        assert extra["account_age_days"] == 0


# ─── collect (live path with a fake client) ──────────────────────────────────

class FakeClient:
    def __init__(self, raw):
        self.raw = raw
        self.fetches = 0
        self.commit_calls = []
        self.language_calls = []

    def fetch_all(self, username):
        self.fetches += 1
        return self.raw

    def count_author_commits(self, full_name, username):
        self.commit_calls.append((full_name, username))
        return 1

    def fetch_languages(self, full_name):
        self.language_calls.append(full_name)
        return {"Rust": 100}


class TestCollect:
    def test_result_shape(self, tmp_path, monkeypatch):
        monkeypatch.setattr(cache, "_cache_dir", str(tmp_path))
        result = collect("testuser", client=FakeClient(MOCK_RAW))
        assert result["login"] == "testuser"
        assert result["githubStats"]["commits"] == 12
        assert "languages" in result["additionalData"]

    def test_commit_sampling_uses_full_name(self):
        client = FakeClient({**MOCK_RAW, "events": []})
        collect("testuser", client=client, use_cache=False)
        assert client.commit_calls[0] == ("testuser/repo-0", "testuser")
        assert len(client.commit_calls) == 5

    def test_language_fetch_uses_full_name(self):
        client = FakeClient(MOCK_RAW)
        result = collect("testuser", client=client, use_cache=False)
        assert client.language_calls == ["testuser/repo-3", "testuser/repo-7"]
        assert result["additionalData"]["languages"]["Rust"] == 2

    def test_second_call_hits_cache(self, tmp_path, monkeypatch):
        monkeypatch.setattr(cache, "_cache_dir", str(tmp_path))
        client = FakeClient(MOCK_RAW)
        first = collect("TestUser", client=client)
        second = collect("testuser", client=client)
        assert first == second
        assert client.fetches == 1
