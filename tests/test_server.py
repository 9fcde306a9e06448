"""
tests/test_server.py — API tests for api/server.py using FastAPI's TestClient.
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from fastapi.testclient import TestClient

from api.server import app, get_composer, get_github_client
from core import cache
from core.composer import HoroscopeComposer, utc_today
from core.github_client import GitHubRateLimitError, GitHubUserNotFoundError
from core.models import GENEROUS, STRICT


def first_k(population, k):
    return population[:k]


MAX_STATS = {"commits": 1000, "stars": 1000, "repos": 100, "followers": 1000}


@pytest.fixture
def client():
    app.dependency_overrides[get_composer] = lambda: HoroscopeComposer(STRICT)
    yield TestClient(app)
    app.dependency_overrides.clear()


class FakeGitHub:
    def __init__(self, raw=None, error=None):
        self.raw = raw
        self.error = error

    def fetch_all(self, username):
        if self.error:
            raise self.error
        return self.raw

    def count_author_commits(self, full_name, username):
        return 0

    def fetch_languages(self, full_name):
        return {}


# ─── Horoscope route ──────────────────────────────────────────────────────────

class TestHoroscopeRoute:
    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert response.json() == {"message": "Welcome to AstroGit API"}

    def test_missing_github_data(self, client):
        response = client.post("/api/horoscope", json={"userId": "u1"})
        assert response.status_code == 400
        assert response.json() == {"error": "GitHub data is required"}

    def test_null_github_data(self, client):
        response = client.post("/api/horoscope", json={"githubData": None})
        assert response.status_code == 400

    def test_huge_integer_is_not_an_error(self, client):
        response = client.post("/api/horoscope", json={"githubData": {"commits": 10 ** 400}})
        assert response.status_code == 200
        assert response.json()["traits"]["energy"] == 10

    @pytest.mark.parametrize("value", [False, 0, ""])
    def test_falsy_github_data_is_missing(self, client, value):
        response = client.post("/api/horoscope", json={"githubData": value})
        assert response.status_code == 400
        assert response.json() == {"error": "GitHub data is required"}

    def test_non_object_github_data_counts_as_empty(self, client):
        response = client.post("/api/horoscope", json={"githubData": [1, 2]})
        assert response.status_code == 200
        assert set(response.json()["traits"].values()) == {1}

    def test_wire_format(self, client):
        response = client.post("/api/horoscope", json={"userId": "u1", "githubData": MAX_STATS})
        assert response.status_code == 200
        body = response.json()
        assert set(body) == {"date", "traits", "message"}
        assert body["traits"] == {"energy": 10, "charisma": 10, "creativity": 10, "collaboration": 10}
        assert body["date"] == utc_today().isoformat()
        assert body["message"]

    def test_empty_stats_are_zeros(self, client):
        response = client.post("/api/horoscope", json={"githubData": {}})
        assert response.status_code == 200
        assert set(response.json()["traits"].values()) == {1}

    def test_junk_values_are_sanitized(self, client):
        response = client.post(
            "/api/horoscope",
            json={"githubData": {"commits": -5, "stars": "many", "repos": None}},
        )
        assert response.status_code == 200
        assert set(response.json()["traits"].values()) == {1}

    def test_generous_preset(self):
        app.dependency_overrides[get_composer] = lambda: HoroscopeComposer(GENEROUS, first_k)
        try:
            response = TestClient(app).post("/api/horoscope", json={"githubData": {}})
        finally:
            app.dependency_overrides.clear()
        assert set(response.json()["traits"].values()) == {4}

    def test_internal_failure_is_500(self, client):
        class Broken:
            def compose(self, stats):
                raise RuntimeError("boom")

        app.dependency_overrides[get_composer] = lambda: Broken()
        response = client.post("/api/horoscope", json={"githubData": {}})
        assert response.status_code == 500
        assert response.json() == {"error": "Failed to generate horoscope"}


# ─── GitHub user route ───────────────────────────────────────────────────────

class TestGitHubUserRoute:
    @pytest.fixture(autouse=True)
    def tmp_cache(self, tmp_path, monkeypatch):
        monkeypatch.setattr(cache, "_cache_dir", str(tmp_path))

    def use_github(self, fake):
        app.dependency_overrides[get_github_client] = lambda: fake

    def test_collects_stats(self, client):
        self.use_github(FakeGitHub({
            "profile": {"login": "octocat", "public_repos": 2, "followers": 7},
            "repos":   [{"name": "a", "stargazers_count": 3, "language": "Go"}],
            "events":  [{"type": "PushEvent", "payload": {"commits": [{}] * 12}}],
        }))
        response = client.get("/api/github/user/octocat")
        assert response.status_code == 200
        body = response.json()
        assert body["login"] == "octocat"
        assert body["githubStats"] == {"commits": 12, "stars": 3, "repos": 2, "followers": 7}
        assert body["additionalData"]["languages"] == {"Go": 1}

    def test_user_without_repos_gets_commit_floor(self, client):
        self.use_github(FakeGitHub({
            "profile": {"login": "newbie", "public_repos": 0, "created_at": "2024-01-01T00:00:00Z"},
            "repos":   [],
            "events":  [],
        }))
        response = client.get("/api/github/user/newbie")
        assert response.status_code == 200
        assert response.json()["githubStats"]["commits"] == 10

    def test_invalid_username(self, client):
        response = client.get("/api/github/user/-bad-")
        assert response.status_code == 400

    def test_unknown_user(self, client):
        self.use_github(FakeGitHub(error=GitHubUserNotFoundError("nope")))
        response = client.get("/api/github/user/ghost")
        assert response.status_code == 404
        assert "ghost" in response.json()["error"]

    def test_rate_limited(self, client):
        self.use_github(FakeGitHub(error=GitHubRateLimitError(reset_timestamp=99)))
        response = client.get("/api/github/user/octocat")
        assert response.status_code == 429
