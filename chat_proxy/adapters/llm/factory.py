"""Factory for the chat-completion upstream client."""

import logging

import httpx

from chat_proxy.adapters.llm.base import AbstractChatCompletionClient
from chat_proxy.adapters.llm.perplexity_client import PerplexityClient
from chat_proxy.core.config import UpstreamSettings

logger = logging.getLogger(__name__)


def create_chat_client(
    upstream: UpstreamSettings,
    *,
    http_client: httpx.AsyncClient | None = None,
) -> AbstractChatCompletionClient | None:
    """Build the upstream client from settings.

    A missing API key is not fatal: the service starts in fallback-only mode
    and every chat request receives the degraded response.

    Args:
        upstream: Upstream settings (API key, base URL, timeout).
        http_client: Optional httpx client passed through to the SDK.

    Returns:
        Configured client, or None when no API key is configured.
    """
    if not upstream.api_key:
        logger.warning(
            "upstream.api_key_missing",
            extra={"hint": "Set PERPLEXITY_API_KEY; running in fallback mode only"},
        )
        return None

    logger.info("upstream.api_key_found", extra={"base_url_host": httpx.URL(upstream.base_url).host})
    return PerplexityClient(
        api_key=upstream.api_key,
        base_url=upstream.base_url,
        timeout_seconds=upstream.timeout_seconds,
        user_agent=upstream.user_agent,
        http_client=http_client,
    )
