"""Pytest configuration and fixtures shared across all test modules.

Environment variables are set before any application import so the
module-level settings object is built from test values and no developer
.env file is picked up.
"""

import os

# CRITICAL: Set this before any imports that might load settings
os.environ["APP_ENV"] = "testing"
os.environ.setdefault("PERPLEXITY_API_KEY", "test-key-123")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from typing import Any, Callable

import pytest
from fastapi.testclient import TestClient

from chat_proxy.adapters.llm.base import AbstractChatCompletionClient
from chat_proxy.core.app_factory import create_app
from chat_proxy.core.config import AppSettings, LogSettings, Settings, UpstreamSettings


UPSTREAM_SUCCESS_BODY: dict[str, Any] = {
    "id": "cmpl-123",
    "model": "sonar-pro",
    "object": "chat.completion",
    "created": 1700000000,
    "choices": [
        {
            "index": 0,
            "finish_reason": "stop",
            "message": {"role": "assistant", "content": "Halo dari AI"},
        }
    ],
    "citations": ["https://example.com/source"],
}


class StubChatClient(AbstractChatCompletionClient):
    """Upstream stand-in that records payloads and replays a scripted outcome."""

    def __init__(
        self,
        response: dict[str, Any] | None = None,
        error: Exception | None = None,
    ) -> None:
        self.response = response if response is not None else dict(UPSTREAM_SUCCESS_BODY)
        self.error = error
        self.payloads: list[dict[str, Any]] = []
        self.closed = False

    @property
    def calls(self) -> int:
        return len(self.payloads)

    async def complete(self, payload: dict[str, Any]) -> dict[str, Any]:
        self.payloads.append(payload)
        if self.error is not None:
            raise self.error
        return self.response

    async def aclose(self) -> None:
        self.closed = True


def build_settings(
    *,
    api_key: str | None = "test-key-123",
    upstream: dict[str, Any] | None = None,
    **app_overrides: Any,
) -> Settings:
    """Build isolated settings for a test app."""
    app_values: dict[str, Any] = {"static_dir": None, "environment": "testing"}
    app_values.update(app_overrides)
    return Settings(
        upstream=UpstreamSettings(api_key=api_key, **(upstream or {})),
        app=AppSettings(**app_values),
        log=LogSettings(level="WARNING"),
    )


@pytest.fixture
def stub_client() -> StubChatClient:
    return StubChatClient()


@pytest.fixture
def make_client() -> Callable[..., TestClient]:
    """Factory building a TestClient around a freshly created app."""

    def _make(
        *,
        chat_client: AbstractChatCompletionClient | None = None,
        settings: Settings | None = None,
        **create_kwargs: Any,
    ) -> TestClient:
        app = create_app(
            settings or build_settings(),
            chat_client=chat_client,
            configure_logs=False,
            **create_kwargs,
        )
        return TestClient(app)

    return _make


@pytest.fixture
def client(make_client, stub_client) -> TestClient:
    return make_client(chat_client=stub_client)


@pytest.fixture
def settings_factory() -> Callable[..., Settings]:
    return build_settings


@pytest.fixture
def stub_factory() -> type[StubChatClient]:
    return StubChatClient
