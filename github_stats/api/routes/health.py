from __future__ import annotations

from fastapi import APIRouter, Request

router = APIRouter(tags=["Health"])


@router.get("/health")
def health_check(request: Request) -> dict:
    """Liveness check.

    Returns:
        dict: ``status`` set to "ok" and the number of live cached subjects.
    """

    cache = request.app.state.stats_service.cache
    return {"status": "ok", "cached_subjects": cache.stats()["live_entries"]}
