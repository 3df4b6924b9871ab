"""CORS configuration.

Browsers call the proxy directly from the marketing site, so every endpoint
answers preflight requests. Origins come from ``APP_CORS_ORIGINS``.
"""

from __future__ import annotations

from typing import Any

from fastapi.middleware.cors import CORSMiddleware

from chat_proxy.core.config import AppSettings


def get_cors_middleware(app_settings: AppSettings) -> tuple[type[CORSMiddleware], dict[str, Any]]:
    """Return the CORS middleware class and its options."""

    return CORSMiddleware, {
        "allow_origins": app_settings.cors_origins,
        "allow_credentials": app_settings.cors_allow_credentials,
        "allow_methods": ["GET", "POST", "OPTIONS"],
        "allow_headers": ["*"],
        "expose_headers": [
            "X-Request-ID",
            "Retry-After",
            "X-RateLimit-Limit",
            "X-RateLimit-Remaining",
            "X-RateLimit-Reset",
        ],
        "max_age": 600,
    }
