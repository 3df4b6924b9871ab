"""Perplexity chat-completion client adapter."""

import asyncio
import json
import logging
from typing import Any

import httpx
from openai import APIConnectionError, APIStatusError, APITimeoutError, AsyncOpenAI

from chat_proxy.adapters.llm.base import AbstractChatCompletionClient
from chat_proxy.core.errors import UpstreamAppError

logger = logging.getLogger(__name__)

# Parameters the SDK accepts as keyword arguments; everything else is
# Perplexity-specific and travels in ``extra_body``.
_SDK_PARAMS = frozenset(
    {
        "model",
        "messages",
        "max_tokens",
        "temperature",
        "top_p",
        "stream",
        "presence_penalty",
        "frequency_penalty",
    }
)


class PerplexityClient(AbstractChatCompletionClient):
    """Client for the Perplexity ``/chat/completions`` endpoint.

    Perplexity speaks the OpenAI wire format, so the official OpenAI SDK is
    used with a custom base URL. Responses are returned as the raw JSON body
    so fields the SDK does not model (``citations``) reach the caller intact.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.perplexity.ai",
        timeout_seconds: float = 30.0,
        user_agent: str | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the async SDK client.

        Args:
            api_key: Perplexity API key.
            base_url: API base URL.
            timeout_seconds: Upper bound for one upstream call.
            user_agent: Optional User-Agent header override.
            http_client: Optional preconfigured httpx client (tests inject a
                mock transport here).
        """
        headers = {"Accept": "application/json"}
        if user_agent:
            headers["User-Agent"] = user_agent

        self.client = AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            timeout=timeout_seconds,
            max_retries=0,
            default_headers=headers,
            http_client=http_client,
        )
        self.timeout_seconds = timeout_seconds

    async def complete(self, payload: dict[str, Any]) -> dict[str, Any]:
        """Forward a normalized payload and return the upstream body.

        Args:
            payload: Chat-completion request body.

        Returns:
            dict[str, Any]: Parsed JSON body of the upstream response.

        Raises:
            UpstreamAppError: If the upstream answers with a non-2xx status,
                is unreachable, exceeds the timeout, or returns invalid JSON.
        """
        params = {k: v for k, v in payload.items() if k in _SDK_PARAMS}
        extra_body = {k: v for k, v in payload.items() if k not in _SDK_PARAMS}

        try:
            raw = await asyncio.wait_for(
                self.client.chat.completions.with_raw_response.create(
                    **params,
                    extra_body=extra_body or None,
                ),
                timeout=self.timeout_seconds,
            )
        except (asyncio.TimeoutError, APITimeoutError) as exc:
            raise UpstreamAppError(
                code="upstream_timeout",
                message=f"Upstream did not respond within {self.timeout_seconds:g}s",
            ) from exc
        except APIStatusError as exc:
            raise UpstreamAppError(
                code="upstream_http_error",
                message=f"API Error: {exc.status_code}",
                details={"http_status": exc.status_code, "hint": _error_snippet(exc.response)},
                status_code=exc.status_code,
            ) from exc
        except APIConnectionError as exc:
            raise UpstreamAppError(
                code="upstream_unreachable",
                message=f"Upstream connection failed: {exc.__class__.__name__}",
            ) from exc

        logger.info(
            "upstream.response",
            extra={"status_code": raw.status_code, "model": params.get("model")},
        )

        try:
            body = json.loads(raw.http_response.content, parse_constant=_reject_constant)
        except ValueError as exc:
            raise UpstreamAppError(
                code="upstream_invalid_json",
                message="Upstream returned a non-JSON body",
                status_code=raw.status_code,
            ) from exc

        if not isinstance(body, dict):
            raise UpstreamAppError(
                code="upstream_invalid_json",
                message="Upstream returned an unexpected JSON document",
                status_code=raw.status_code,
            )
        return body

    async def aclose(self) -> None:
        await self.client.close()


def _error_snippet(response: httpx.Response, limit: int = 500) -> str:
    """Return the start of an upstream error body for operator logs."""
    try:
        return response.text[:limit]
    except httpx.ResponseNotRead:
        return ""


def _reject_constant(name: str) -> Any:
    """Refuse ``NaN``/``Infinity``; they cannot be re-encoded as strict JSON."""
    raise ValueError(f"Non-finite JSON constant: {name}")
