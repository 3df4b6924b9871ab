"""Application factory for the FastAPI app.

Centralizes app construction (settings, shared services, middleware,
handlers, routers, static files). Everything with state (the rate limiter and
the upstream client) is created here and attached to ``app.state``, so each
app instance owns its own state.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from pathlib import Path

import httpx
from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from chat_proxy import __version__
from chat_proxy.adapters.llm.base import AbstractChatCompletionClient
from chat_proxy.adapters.llm.factory import create_chat_client
from chat_proxy.adapters.rate_limit.base import AbstractRateLimiter
from chat_proxy.api.routes import chat_router, company_router, health_router
from chat_proxy.core.config import Settings
from chat_proxy.core.config import settings as default_settings
from chat_proxy.core.cors import get_cors_middleware
from chat_proxy.core.exception_handlers import setup_exception_handlers
from chat_proxy.core.logging import configure_logging
from chat_proxy.core.middleware import request_id_middleware
from chat_proxy.core.rate_limit import build_rate_limiter
from chat_proxy.services.proxy_service import ChatProxyService

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    cfg: Settings = app.state.settings
    logger.info(
        "app.startup",
        extra={
            "environment": cfg.app.environment,
            "upstream_configured": app.state.proxy_service.client is not None,
            "rate_limit_requests": cfg.app.rate_limit_requests,
            "rate_limit_window_s": cfg.app.rate_limit_window_seconds,
        },
    )
    try:
        yield
    finally:
        client = app.state.proxy_service.client
        if client is not None:
            await client.aclose()
        logger.info("app.shutdown")


def create_app(
    app_settings: Settings | None = None,
    *,
    chat_client: AbstractChatCompletionClient | None = None,
    rate_limiter: AbstractRateLimiter | None = None,
    http_client: httpx.AsyncClient | None = None,
    configure_logs: bool = True,
) -> FastAPI:
    """Create and configure the FastAPI application instance.

    Args:
        app_settings: Settings to use; defaults to the process-wide settings.
        chat_client: Upstream client override. When omitted it is built from
            settings (None if no API key is configured).
        rate_limiter: Limiter override; defaults to the in-memory limiter.
        http_client: httpx client handed to the SDK when building the
            upstream client from settings.
        configure_logs: Whether to (re)configure root logging.

    Returns:
        Configured FastAPI app.
    """
    cfg = app_settings or default_settings

    # Logging first so subsequent init logs are formatted as desired
    if configure_logs:
        configure_logging(cfg.log)

    app = FastAPI(
        title="Chat Proxy API",
        description=(
            "Proxy between the company website and the Perplexity chat API. "
            "Keeps the API key server-side, rate limits clients per address, and "
            "degrades to canned answers when the AI service is unavailable."
        ),
        version=__version__,
        lifespan=lifespan,
    )

    if chat_client is None:
        chat_client = create_chat_client(cfg.upstream, http_client=http_client)

    app.state.settings = cfg
    app.state.rate_limiter = rate_limiter if rate_limiter is not None else build_rate_limiter(cfg.app)
    app.state.proxy_service = ChatProxyService(client=chat_client, upstream=cfg.upstream)

    # Middleware (last added runs first: CORS wraps request id/access logging)
    app.middleware("http")(request_id_middleware)
    cors_cls, cors_options = get_cors_middleware(cfg.app)
    app.add_middleware(cors_cls, **cors_options)

    setup_exception_handlers(app)

    app.include_router(health_router, prefix="/api")
    app.include_router(company_router, prefix="/api")
    app.include_router(chat_router, prefix="/api")

    if cfg.app.static_dir and Path(cfg.app.static_dir).is_dir():
        app.mount("/", StaticFiles(directory=cfg.app.static_dir, html=True), name="static")
        logger.info("app.static_mounted", extra={"static_dir": cfg.app.static_dir})

    return app
