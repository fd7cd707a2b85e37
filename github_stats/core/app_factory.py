"""Application factory for the FastAPI app.

Builds the cache, rate limiter, GitHub client, and stats service for one
application instance and attaches them to ``app.state``, so every app (and
every test) owns isolated state.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from github_stats.adapters.github.base import AbstractGitHubClient
from github_stats.adapters.github.factory import create_github_client
from github_stats.adapters.rate_limit.base import AbstractRateLimiter
from github_stats.adapters.rate_limit.in_memory import InMemoryFixedWindowRateLimiter
from github_stats.api.routes import create_stats_router, health_router
from github_stats.core.config import Settings, settings as default_settings
from github_stats.core.exception_handlers import setup_exception_handlers
from github_stats.core.logging import configure_logging
from github_stats.core.middleware import request_id_middleware
from github_stats.core.openapi import apply_openapi_customizations
from github_stats.services.stats_service import StatsService
from github_stats.utils.ttl_cache import TTLCache


def build_stats_service(
    app_settings: Settings,
    *,
    client: AbstractGitHubClient | None = None,
    cache: TTLCache | None = None,
    rate_limiter: AbstractRateLimiter | None = None,
) -> StatsService:
    """Wire a StatsService from settings, accepting pre-built collaborators.

    Raises:
        ValidationAppError: If no client is given and no GitHub token is configured.
    """
    stats_cfg = app_settings.stats
    return StatsService(
        client=client or create_github_client(app_settings.github),
        cache=cache or TTLCache(max_entries=stats_cfg.cache_max_entries),
        rate_limiter=rate_limiter
        or InMemoryFixedWindowRateLimiter(
            limit=stats_cfg.rate_limit_requests,
            window_seconds=stats_cfg.rate_limit_window_seconds,
        ),
        cache_ttl_seconds=stats_cfg.cache_ttl_seconds,
        deadline_seconds=stats_cfg.upstream_deadline_seconds,
    )


def create_app(
    app_settings: Settings | None = None,
    *,
    stats_service: StatsService | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application instance.

    Args:
        app_settings: Settings to use; defaults to the global settings.
        stats_service: Pre-built service (tests inject fakes here).

    Returns:
        Configured FastAPI app with middleware, handlers, routers and docs.
    """
    cfg = app_settings or default_settings

    # Logging first so subsequent init logs are formatted as desired
    configure_logging(cfg.log)

    service = stats_service or build_stats_service(cfg)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await service.client.aclose()

    app = FastAPI(
        title="GitHub Stats API",
        description=(
            "Returns a filtered, aggregated JSON summary of a GitHub user's "
            "public metrics: followers, following, total stars, repositories "
            "and organizations. Results are cached per user and upstream calls "
            "are rate limited."
        ),
        version="0.1.0",
        license_info={
            "name": "MIT License",
            "url": "https://opensource.org/licenses/MIT",
        },
        lifespan=lifespan,
    )
    app.state.settings = cfg
    app.state.stats_service = service

    # Middleware
    app.middleware("http")(request_id_middleware)

    # Exception handlers
    setup_exception_handlers(app)

    # Routers
    app.include_router(create_stats_router(cfg.server.path))
    app.include_router(health_router)

    apply_openapi_customizations(app)

    return app
