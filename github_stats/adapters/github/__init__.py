"""GitHub adapter layer - abstracts over the upstream REST API."""

from github_stats.adapters.github.base import (
    AbstractGitHubClient,
    GitHubAuthError,
    GitHubClientError,
    GitHubNetworkError,
    GitHubNotFoundError,
)
from github_stats.adapters.github.factory import create_github_client
from github_stats.adapters.github.httpx_client import HttpxGitHubClient

__all__ = [
    "AbstractGitHubClient",
    "GitHubAuthError",
    "GitHubClientError",
    "GitHubNetworkError",
    "GitHubNotFoundError",
    "HttpxGitHubClient",
    "create_github_client",
]
