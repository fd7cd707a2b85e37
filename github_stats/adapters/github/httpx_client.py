"""GitHub REST API client adapter built on httpx."""

from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import ValidationError

from github_stats.adapters.github.base import (
    AbstractGitHubClient,
    GitHubAuthError,
    GitHubClientError,
    GitHubNetworkError,
    GitHubNotFoundError,
)
from github_stats.schemas.stats import UpstreamRepo, UserProfile

logger = logging.getLogger(__name__)

GITHUB_API_VERSION = "2022-11-28"


class HttpxGitHubClient(AbstractGitHubClient):
    """Client for the three GitHub endpoints the stats service reads.

    Makes a single attempt per call; failures are mapped onto the
    GitHubClientError hierarchy and never retried.
    """

    def __init__(
        self,
        token: str,
        *,
        base_url: str = "https://api.github.com",
        timeout_seconds: float = 10.0,
        per_page: int = 100,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the async HTTP client.

        Args:
            token: Personal access token sent as a bearer token.
            base_url: GitHub REST API base URL.
            timeout_seconds: Timeout for each request in seconds.
            per_page: Page size requested from listing endpoints.
            transport: Optional httpx transport (used by tests).
        """
        self.per_page = per_page
        self.client = httpx.AsyncClient(
            base_url=base_url,
            headers={
                "Accept": "application/vnd.github+json",
                "Authorization": f"Bearer {token}",
                "X-GitHub-Api-Version": GITHUB_API_VERSION,
            },
            timeout=timeout_seconds,
            transport=transport,
        )

    async def __aenter__(self) -> "HttpxGitHubClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self.client.aclose()

    async def _get_json(self, path: str, params: dict[str, Any] | None = None) -> Any:
        try:
            response = await self.client.get(path, params=params)
        except httpx.TimeoutException as exc:
            raise GitHubNetworkError(f"GitHub request timed out: {path}") from exc
        except httpx.HTTPError as exc:
            raise GitHubNetworkError(f"GitHub request failed: {exc}") from exc

        logger.debug(
            "github.request",
            extra={"path": path, "status_code": response.status_code},
        )

        status_code = response.status_code
        if status_code in (401, 403):
            raise GitHubAuthError(
                f"GitHub rejected the credentials for {path}",
                status_code=status_code,
            )
        if status_code == 404:
            raise GitHubNotFoundError(f"GitHub resource not found: {path}", status_code=404)
        if status_code >= 400:
            raise GitHubClientError(
                f"GitHub API error {status_code} for {path}",
                status_code=status_code,
            )

        try:
            return response.json()
        except ValueError as exc:
            raise GitHubClientError(f"GitHub returned invalid JSON for {path}") from exc

    async def get_user(self, username: str) -> UserProfile:
        data = await self._get_json(f"/users/{username}")
        try:
            return UserProfile.model_validate(data)
        except ValidationError as exc:
            raise GitHubClientError(f"Unexpected user payload for {username}") from exc

    async def list_repos(self, username: str) -> list[UpstreamRepo]:
        data = await self._get_json(
            f"/users/{username}/repos",
            params={"per_page": self.per_page},
        )
        if not isinstance(data, list):
            raise GitHubClientError(f"Unexpected repository payload for {username}")
        try:
            return [UpstreamRepo.model_validate(item) for item in data]
        except ValidationError as exc:
            raise GitHubClientError(f"Unexpected repository payload for {username}") from exc

    async def list_orgs(self, username: str) -> list[str]:
        data = await self._get_json(
            f"/users/{username}/orgs",
            params={"per_page": self.per_page},
        )
        if not isinstance(data, list):
            raise GitHubClientError(f"Unexpected organization payload for {username}")
        return [item["login"] for item in data if isinstance(item, dict) and "login" in item]
