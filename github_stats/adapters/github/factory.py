"""Factory for the upstream GitHub client."""

from github_stats.adapters.github.base import AbstractGitHubClient
from github_stats.adapters.github.httpx_client import HttpxGitHubClient
from github_stats.core.config import GitHubSettings, settings
from github_stats.core.errors import ValidationAppError


def create_github_client(github_settings: GitHubSettings | None = None) -> AbstractGitHubClient:
    """Instantiate the GitHub client from configuration.

    Args:
        github_settings: Optional settings; defaults to the global settings.

    Returns:
        AbstractGitHubClient: Configured client instance.

    Raises:
        ValidationAppError: If no GitHub token is configured.
    """
    cfg = github_settings or settings.github

    if not cfg.token:
        raise ValidationAppError(
            code="github_missing_token",
            message="GitHub client requires the GITHUB_TOKEN environment variable",
        )

    return HttpxGitHubClient(
        token=cfg.token,
        base_url=cfg.api_base_url,
        timeout_seconds=cfg.timeout_seconds,
        per_page=cfg.per_page,
    )
