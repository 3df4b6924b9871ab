"""FastAPI dependencies resolving per-app service instances from ``app.state``."""

from __future__ import annotations

from fastapi import Request

from chat_proxy.core.config import Settings
from chat_proxy.services.proxy_service import ChatProxyService


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_proxy_service(request: Request) -> ChatProxyService:
    return request.app.state.proxy_service
