"""Pydantic schemas for the stats endpoint and upstream records."""

from __future__ import annotations

from pydantic import BaseModel, Field


class IncludeOptions(BaseModel):
    """Which parts of the statistics a caller asked for."""

    include_stars: bool = False
    include_followers: bool = False
    include_following: bool = False
    include_repos: bool = False
    include_first_n_repos: int = Field(
        default=5,
        description="Number of repositories to list; 0 or less lists all of them.",
    )
    include_orgs: bool = False


class RepoStats(BaseModel):
    """Summary of a single repository."""

    name: str = Field(..., description="Repository name.")
    stars: int = Field(default=0, description="Stargazer count.")
    forks: int = Field(default=0, description="Fork count.")
    open_issues: int = Field(default=0, description="Open issue count.")
    contributors: dict[str, int] = Field(
        default_factory=dict,
        description="Contributor login mapped to contribution count.",
    )


class StatsResult(BaseModel):
    """Aggregated statistics for a GitHub user.

    Every field other than ``username`` stays at its zero value unless the
    matching include option was requested.
    """

    username: str = Field(..., description="GitHub login the stats were computed for.")
    followers: int = Field(default=0, description="Follower count.")
    following: int = Field(default=0, description="Following count.")
    total_stars: int = Field(
        default=0,
        description="Stars summed across every listed repository, not only the ones returned.",
    )
    repositories: list[RepoStats] = Field(
        default_factory=list,
        description="Repository summaries in upstream order.",
    )
    organizations: list[str] = Field(
        default_factory=list,
        description="Organization logins the user belongs to.",
    )


class UserProfile(BaseModel):
    """Subset of the upstream user profile the service consumes."""

    login: str
    followers: int = 0
    following: int = 0


class UpstreamRepo(BaseModel):
    """Subset of an upstream repository record the service consumes."""

    name: str
    stargazers_count: int = 0
    forks_count: int = 0
    open_issues_count: int = 0
