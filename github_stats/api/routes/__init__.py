from __future__ import annotations

from github_stats.api.routes.health import router as health_router
from github_stats.api.routes.stats import create_stats_router

__all__ = ["create_stats_router", "health_router"]
