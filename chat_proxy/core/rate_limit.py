"""Rate limiting dependency for FastAPI routes.

This module wires the rate limiting adapter into the HTTP layer.

Design goals:
- Minimal coupling: routes depend on a dependency function only.
- Explicit ownership: the limiter instance lives on ``app.state`` and is
  built by the app factory, so every app (and every test) has its own state.

Strategy: fixed-window limit per client network address.
"""

from __future__ import annotations

import logging

from fastapi import Request

from chat_proxy.adapters.rate_limit.base import AbstractRateLimiter, RateLimitResult
from chat_proxy.adapters.rate_limit.in_memory import InMemoryFixedWindowRateLimiter
from chat_proxy.core.config import AppSettings
from chat_proxy.core.errors import RateLimitExceededError
from chat_proxy.core.logging import hash_identifier

logger = logging.getLogger(__name__)


def build_rate_limiter(app_settings: AppSettings) -> AbstractRateLimiter:
    """Create the limiter described by the application settings."""

    return InMemoryFixedWindowRateLimiter(
        limit=app_settings.rate_limit_requests,
        window_seconds=app_settings.rate_limit_window_seconds,
        max_entries=app_settings.rate_limit_max_clients,
    )


def get_client_identity(request: Request) -> str:
    """Return the identity used as the rate limit key (the peer address)."""

    return request.client.host if request.client else "unknown"


def _build_headers(result: RateLimitResult) -> dict[str, str]:
    return {
        "Retry-After": str(result.retry_after_seconds or 0),
        "X-RateLimit-Limit": str(result.limit),
        "X-RateLimit-Remaining": str(result.remaining),
        "X-RateLimit-Reset": str(result.reset_at),
    }


async def enforce_rate_limit(request: Request) -> None:
    """FastAPI dependency enforcing the per-client request budget.

    Counts one request for the caller. Over the limit, raises
    RateLimitExceededError, rendered as HTTP 429 with ``fallback: true``.

    Args:
        request: FastAPI request.

    Raises:
        RateLimitExceededError: When the client exceeded its window budget.
    """

    app_settings: AppSettings = request.app.state.settings.app
    if not app_settings.rate_limit_enabled:
        return

    limiter: AbstractRateLimiter = request.app.state.rate_limiter
    identity = get_client_identity(request)

    result = limiter.admit(identity)
    if result.allowed:
        logger.debug(
            "rate_limit.allowed",
            extra={
                "client_hash": hash_identifier(identity),
                "limit": result.limit,
                "remaining": result.remaining,
            },
        )
        return

    logger.warning(
        "rate_limit.exceeded",
        extra={
            "client_hash": hash_identifier(identity),
            "limit": result.limit,
            "window_s": app_settings.rate_limit_window_seconds,
            "retry_after_s": result.retry_after_seconds,
        },
    )

    raise RateLimitExceededError(
        code="rate_limit_exceeded",
        message="Rate limit exceeded. Please try again later.",
        details={"retry_after": result.retry_after_seconds or 0, "limit": result.limit},
        headers=_build_headers(result) if app_settings.rate_limit_include_headers else None,
    )
