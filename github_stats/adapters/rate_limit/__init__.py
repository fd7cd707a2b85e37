"""Rate limiting adapters.

This package provides a small abstraction layer so the service can start
with an in-memory limiter and later move to a shared store without
changing the service or API layers.
"""

from github_stats.adapters.rate_limit.base import AbstractRateLimiter, RateLimitResult
from github_stats.adapters.rate_limit.in_memory import InMemoryFixedWindowRateLimiter

__all__ = [
    "AbstractRateLimiter",
    "InMemoryFixedWindowRateLimiter",
    "RateLimitResult",
]
