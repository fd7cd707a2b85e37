"""GitHub statistics service orchestrating rate limiting, caching, and fetching.

For each request the service:
- Rejects an empty username before touching any shared state
- Consults the rate limiter guarding the upstream API
- Serves a cached result when one is still live
- Otherwise fetches profile, repositories, and organizations, assembles the
  result according to the include options, and caches it
"""

from __future__ import annotations

import asyncio
import logging
import time

from github_stats.adapters.github.base import AbstractGitHubClient, GitHubClientError
from github_stats.adapters.rate_limit.base import AbstractRateLimiter
from github_stats.core.errors import RateLimitAppError, UpstreamAppError, ValidationAppError
from github_stats.schemas.stats import (
    IncludeOptions,
    RepoStats,
    StatsResult,
    UpstreamRepo,
    UserProfile,
)
from github_stats.utils.ttl_cache import TTLCache

logger = logging.getLogger(__name__)


def build_stats(
    username: str,
    profile: UserProfile,
    repos: list[UpstreamRepo],
    orgs: list[str] | None,
    options: IncludeOptions,
) -> StatsResult:
    """Assemble a StatsResult from upstream data, honoring the include options.

    Stars are summed over every repository while the listed repositories are
    cut to the first ``include_first_n_repos`` entries (when positive).

    Args:
        username: Subject the stats belong to.
        profile: Upstream user profile.
        repos: Upstream repositories, in upstream order.
        orgs: Organization logins, or None when not fetched.
        options: Requested include options.

    Returns:
        StatsResult with only the requested fields populated.
    """
    stats = StatsResult(username=username)

    if options.include_followers:
        stats.followers = profile.followers
    if options.include_following:
        stats.following = profile.following

    if options.include_stars or options.include_repos:
        limit = options.include_first_n_repos
        for index, repo in enumerate(repos):
            if options.include_stars:
                stats.total_stars += repo.stargazers_count
            if options.include_repos and (limit <= 0 or index < limit):
                stats.repositories.append(
                    RepoStats(
                        name=repo.name,
                        stars=repo.stargazers_count,
                        forks=repo.forks_count,
                        open_issues=repo.open_issues_count,
                    )
                )

    if options.include_orgs and orgs:
        stats.organizations = list(orgs)

    return stats


class StatsService:
    """Service computing GitHub statistics behind a rate limiter and cache.

    Attributes:
        client: Upstream GitHub client.
        cache: TTL cache keyed by username.
        rate_limiter: Limiter guarding upstream calls.
        cache_ttl_seconds: TTL applied to freshly computed results.
        deadline_seconds: Deadline for the upstream fetch sequence, or None.
    """

    def __init__(
        self,
        client: AbstractGitHubClient,
        cache: TTLCache,
        rate_limiter: AbstractRateLimiter,
        *,
        cache_ttl_seconds: float = 3600,
        deadline_seconds: float | None = None,
    ) -> None:
        self.client = client
        self.cache = cache
        self.rate_limiter = rate_limiter
        self.cache_ttl_seconds = cache_ttl_seconds
        self.deadline_seconds = deadline_seconds

    def _validate_username(self, username: str | None) -> str:
        if not username or not username.strip():
            raise ValidationAppError(
                code="username_required",
                message="The username query parameter is required.",
            )
        return username.strip()

    def _admit(self) -> None:
        result = self.rate_limiter.check()
        if result.allowed:
            logger.info(
                "rate_limit.allowed",
                extra={"limit": result.limit, "remaining": result.remaining},
            )
            return

        logger.warning(
            "rate_limit.exceeded",
            extra={
                "limit": result.limit,
                "remaining": result.remaining,
                "retry_after_s": result.retry_after_seconds,
            },
        )
        retry_after = result.retry_after_seconds or 0
        raise RateLimitAppError(
            code="rate_limit_exceeded",
            message="Request limit exceeded. Try again later.",
            details={
                "limit": result.limit,
                "remaining": result.remaining,
                "reset_at": int(time.time()) + retry_after,
                "retry_after": retry_after,
            },
        )

    async def _fetch(
        self, username: str, options: IncludeOptions
    ) -> tuple[UserProfile, list[UpstreamRepo], list[str] | None]:
        profile = await self.client.get_user(username)
        repos = await self.client.list_repos(username)
        orgs = await self.client.list_orgs(username) if options.include_orgs else None
        return profile, repos, orgs

    async def get_stats(self, username: str | None, options: IncludeOptions) -> StatsResult:
        """Return statistics for a user.

        Args:
            username: GitHub login to compute statistics for.
            options: Which statistics to include.

        Returns:
            StatsResult, either cached or freshly computed.

        Raises:
            ValidationAppError: If the username is empty.
            RateLimitAppError: If the rate limiter refuses the request.
            UpstreamAppError: If any upstream call fails or the deadline expires.
        """
        # Step 1: Validate input
        username = self._validate_username(username)

        # Step 2: Rate limit
        self._admit()

        # Step 3: Check cache
        cached, found = self.cache.get(username)
        if found:
            logger.info("stats.cache_hit", extra={"username": username})
            return cached

        # Step 4: Fetch from upstream
        try:
            profile, repos, orgs = await asyncio.wait_for(
                self._fetch(username, options),
                timeout=self.deadline_seconds,
            )
        except (GitHubClientError, asyncio.TimeoutError) as exc:
            logger.warning(
                "stats.upstream_failed",
                extra={
                    "username": username,
                    "error_type": type(exc).__name__,
                    "error_msg": str(exc),
                },
            )
            raise UpstreamAppError(
                code="upstream_error",
                message="Failed to retrieve data from GitHub.",
                details={
                    "username": username,
                    "upstream_error": str(exc) or type(exc).__name__,
                },
            ) from exc

        # Step 5: Assemble
        stats = build_stats(username, profile, repos, orgs, options)

        # Step 6: Cache the result
        self.cache.set(username, stats, self.cache_ttl_seconds)
        logger.info(
            "stats.computed",
            extra={
                "username": username,
                "repositories": len(stats.repositories),
                "organizations": len(stats.organizations),
            },
        )

        return stats
