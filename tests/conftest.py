"""
Shared fixtures: canned GitHub payloads and a probe wired to an in-memory transport.
"""
from datetime import date
import httpx
import pytest
from gitscope.probes.github import GithubProbe

TODAY = date(2026, 10, 18)


@pytest.fixture(autouse=True)
def no_ambient_token(monkeypatch):
    """Tests decide explicitly whether a token is configured."""
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)


@pytest.fixture
def user_payload():
    return {
        "login": "octocat",
        "avatar_url": "https://avatars.githubusercontent.com/u/583231?v=4",
        "name": "The Octocat",
        "bio": None,
        "public_repos": 8,
        "followers": 120,
        "following": 9,
        "created_at": "2011-01-25T18:44:36Z",
    }


@pytest.fixture
def repos_payload():
    return [
        {
            "name": "Hello-World",
            "html_url": "https://github.com/octocat/Hello-World",
            "language": "Python",
            "stargazers_count": 80,
            "updated_at": "2026-10-01T12:00:00Z",
        },
        {
            "name": "Spoon-Knife",
            "html_url": "https://github.com/octocat/Spoon-Knife",
            "language": None,
            "stargazers_count": 3,
            "updated_at": "2025-01-01T00:00:00Z",
        },
    ]


@pytest.fixture
def make_probe():
    def _make(handler, token=None, today=TODAY):
        return GithubProbe(token=token, transport=httpx.MockTransport(handler), clock=lambda: today)
    return _make
