"""Rate limiting adapters.

The chat endpoint starts with an in-memory limiter; the abstract interface
keeps the API layer independent of where window state is stored.
"""

from chat_proxy.adapters.rate_limit.base import AbstractRateLimiter, Decision, RateLimitResult
from chat_proxy.adapters.rate_limit.in_memory import InMemoryFixedWindowRateLimiter

__all__ = [
    "AbstractRateLimiter",
    "Decision",
    "InMemoryFixedWindowRateLimiter",
    "RateLimitResult",
]
