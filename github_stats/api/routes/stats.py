from __future__ import annotations

import re
from typing import Mapping

from fastapi import APIRouter, Depends, Query, Request

from github_stats.schemas.stats import IncludeOptions, StatsResult
from github_stats.services.stats_service import StatsService

DEFAULT_FIRST_N_REPOS = 5
_INTEGER_RE = re.compile(r"[+-]?[0-9]+")


def parse_include_options(query: Mapping[str, str]) -> IncludeOptions:
    """Build include options from raw query parameters.

    Flags are enabled only by the exact value ``"true"``. Anything but a plain
    ASCII integer in ``include_first_n_repos`` keeps the default.

    Args:
        query: Request query parameters.

    Returns:
        IncludeOptions parsed from the query.

    Examples:
        >>> parse_include_options({"include_stars": "true"}).include_stars
        True
        >>> parse_include_options({"include_first_n_repos": "abc"}).include_first_n_repos
        5
    """
    first_n = DEFAULT_FIRST_N_REPOS
    raw_first_n = query.get("include_first_n_repos")
    if raw_first_n and _INTEGER_RE.fullmatch(raw_first_n):
        first_n = int(raw_first_n)

    return IncludeOptions(
        include_stars=query.get("include_stars") == "true",
        include_followers=query.get("include_followers") == "true",
        include_following=query.get("include_following") == "true",
        include_repos=query.get("include_repos") == "true",
        include_orgs=query.get("include_orgs") == "true",
        include_first_n_repos=first_n,
    )


def get_stats_service(request: Request) -> StatsService:
    """Return the StatsService wired onto the running application."""
    return request.app.state.stats_service


async def github_stats(
    request: Request,
    username: str | None = Query(None, description="GitHub login (required)."),
    include_stars: str | None = Query(None, description='"true" to include total stars.'),
    include_followers: str | None = Query(None, description='"true" to include followers.'),
    include_following: str | None = Query(None, description='"true" to include following.'),
    include_repos: str | None = Query(None, description='"true" to list repositories.'),
    include_orgs: str | None = Query(None, description='"true" to list organizations.'),
    include_first_n_repos: str | None = Query(
        None,
        description="Number of repositories to list (default 5, 0 or less for all).",
    ),
    service: StatsService = Depends(get_stats_service),
) -> StatsResult:
    """Return aggregated GitHub statistics for a user.

    The individual query parameters are declared for documentation; parsing
    goes through parse_include_options so only the exact value "true"
    enables a flag.

    Raises:
        ValidationAppError: 400 when username is missing.
        RateLimitAppError: 429 when the request limit is exceeded.
        UpstreamAppError: 500 when GitHub cannot be reached or errors.
    """
    options = parse_include_options(request.query_params)
    return await service.get_stats(username, options)


def create_stats_router(path: str = "/stats") -> APIRouter:
    """Create the stats router serving GET on the configured path."""
    router = APIRouter(tags=["Stats"])
    router.add_api_route(
        path,
        github_stats,
        methods=["GET"],
        response_model=StatsResult,
    )
    return router
