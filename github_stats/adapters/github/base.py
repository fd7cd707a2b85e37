from __future__ import annotations

from abc import ABC, abstractmethod

from github_stats.schemas.stats import UpstreamRepo, UserProfile


class GitHubClientError(RuntimeError):
    """Raised when a GitHub API call fails.

    Attributes:
        status_code: HTTP status returned by GitHub, if any.
    """

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class GitHubAuthError(GitHubClientError):
    """Token missing, invalid, or lacking permission."""


class GitHubNotFoundError(GitHubClientError):
    """Requested user does not exist."""


class GitHubNetworkError(GitHubClientError):
    """Transport failure or timeout talking to GitHub."""


class AbstractGitHubClient(ABC):
    """Interface for the upstream code-hosting API used by the stats service."""

    @abstractmethod
    async def get_user(self, username: str) -> UserProfile:
        """Fetch a user's public profile.

        Raises:
            GitHubClientError: If the call fails.
        """
        ...

    @abstractmethod
    async def list_repos(self, username: str) -> list[UpstreamRepo]:
        """List a user's public repositories in upstream order.

        Raises:
            GitHubClientError: If the call fails.
        """
        ...

    @abstractmethod
    async def list_orgs(self, username: str) -> list[str]:
        """List the logins of the organizations a user publicly belongs to.

        Raises:
            GitHubClientError: If the call fails.
        """
        ...

    async def aclose(self) -> None:
        """Release network resources held by the client."""
        return None
