"""Pytest configuration and fixtures shared across all test modules.

Environment variables are set before anything imports the settings module,
so the .env file is never loaded and the GitHub client factory finds a token.
"""

import os

# CRITICAL: Set this before any imports that might load settings
os.environ["TESTING"] = "true"

os.environ.setdefault("GITHUB_TOKEN", "test-github-token")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from unittest.mock import AsyncMock, MagicMock

import pytest

from github_stats.adapters.github.base import AbstractGitHubClient
from github_stats.schemas.stats import UpstreamRepo, UserProfile


class FakeClock:
    """Deterministic clock used to test expiration logic."""

    def __init__(self, start: float = 1_000.0) -> None:
        self.current = start

    def __call__(self) -> float:
        return self.current

    def advance(self, seconds: float) -> None:
        self.current += seconds


def make_repo(name: str, stars: int = 0, forks: int = 0, open_issues: int = 0) -> UpstreamRepo:
    return UpstreamRepo(
        name=name,
        stargazers_count=stars,
        forks_count=forks,
        open_issues_count=open_issues,
    )


def make_github_client(
    *,
    followers: int = 10,
    following: int = 3,
    repos: list[UpstreamRepo] | None = None,
    orgs: list[str] | None = None,
) -> MagicMock:
    """Build a GitHub client mock whose methods are AsyncMocks."""
    client = MagicMock(spec=AbstractGitHubClient)
    client.get_user = AsyncMock(
        side_effect=lambda username: UserProfile(
            login=username, followers=followers, following=following
        )
    )
    client.list_repos = AsyncMock(return_value=repos if repos is not None else [])
    client.list_orgs = AsyncMock(return_value=orgs if orgs is not None else [])
    client.aclose = AsyncMock()
    return client


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def github_client() -> MagicMock:
    return make_github_client(
        repos=[make_repo("r1", stars=5, forks=1), make_repo("r2", stars=7, forks=0)],
        orgs=["acme"],
    )
