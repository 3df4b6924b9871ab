"""Chat proxy service: validation, normalization and upstream outcome mapping.

The proxy never lets an upstream or internal failure reach the caller as an
error status. Any failure after validation becomes a ``DegradedResponse``
(HTTP 200 with ``fallback: true``) so the frontend can switch to its canned
conversation by looking at the payload alone.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

from chat_proxy.adapters.llm.base import AbstractChatCompletionClient
from chat_proxy.core.config import UpstreamSettings
from chat_proxy.core.errors import ConfigurationAppError, UpstreamAppError, ValidationAppError
from chat_proxy.schemas.chat import ChatRequest, DegradedResponse

logger = logging.getLogger(__name__)

# Apologies shown to end users; the site is Indonesian-language.
MAINTENANCE_MESSAGE = "Maaf, layanan AI sedang dalam pemeliharaan. Silakan coba lagi nanti."
UPSTREAM_ERROR_MESSAGE = (
    "Maaf, sistem AI sedang mengalami gangguan. Silakan coba lagi dalam beberapa saat."
)
INTERNAL_ERROR_MESSAGE = (
    "Maaf, terjadi kesalahan pada server. Tim teknis kami sedang menangani masalah ini."
)


def parse_chat_request(body: Any) -> ChatRequest:
    """Validate a decoded JSON body as a chat request.

    Args:
        body: Decoded request body.

    Returns:
        ChatRequest: Validated request.

    Raises:
        ValidationAppError: If ``messages`` is missing, not a list, empty, or
            any optional field has the wrong type.
    """
    if not isinstance(body, dict):
        raise ValidationAppError(
            code="invalid_request_format",
            message="Request body must be a JSON object with a 'messages' list",
        )
    try:
        return ChatRequest.model_validate(body)
    except ValidationError as exc:
        errors = [
            {"field": ".".join(str(p) for p in err["loc"]), "type": err["type"]}
            for err in exc.errors()
        ]
        raise ValidationAppError(
            code="invalid_request_format",
            message="'messages' must be a non-empty list of message objects",
            details={"errors": errors},
        ) from exc


def build_upstream_payload(request: ChatRequest, upstream: UpstreamSettings) -> dict[str, Any]:
    """Apply defaults, clamps and forced fields to a chat request.

    Args:
        request: Validated chat request.
        upstream: Upstream settings holding defaults and limits.

    Returns:
        dict[str, Any]: Body to send to ``/chat/completions``.
    """
    max_tokens = request.max_tokens if request.max_tokens is not None else upstream.default_max_tokens

    return {
        "model": request.model or upstream.default_model,
        "messages": request.messages,
        "max_tokens": min(max_tokens, upstream.max_tokens_cap),
        "temperature": (
            request.temperature if request.temperature is not None else upstream.default_temperature
        ),
        "top_p": request.top_p if request.top_p is not None else upstream.default_top_p,
        "return_citations": request.return_citations is not False,
        "return_images": False,
        "return_related_questions": False,
        "search_recency_filter": upstream.search_recency_filter,
        "stream": False,
        "presence_penalty": 0,
        "frequency_penalty": 1,
    }


class ChatProxyService:
    """Forward validated chat requests to the upstream completion API.

    Attributes:
        client: Upstream client, or None when no API key is configured.
        upstream: Upstream settings used for normalization.
    """

    def __init__(
        self,
        client: AbstractChatCompletionClient | None,
        upstream: UpstreamSettings,
    ) -> None:
        self.client = client
        self.upstream = upstream

    async def forward(self, body: Any) -> dict[str, Any] | DegradedResponse:
        """Validate, normalize and forward a chat request.

        Args:
            body: Decoded JSON request body.

        Returns:
            The upstream body on success, otherwise a DegradedResponse.

        Raises:
            ValidationAppError: If the request shape is invalid. This is the
                only error that escapes; it is raised before any upstream call.
        """
        request = parse_chat_request(body)

        try:
            return await self._complete(request)
        except ConfigurationAppError as exc:
            logger.error("chat.configuration_error", extra={"error_code": exc.code})
            return DegradedResponse(error="API configuration error", message=MAINTENANCE_MESSAGE)
        except UpstreamAppError as exc:
            logger.error(
                "chat.upstream_error",
                extra={
                    "error_code": exc.code,
                    "upstream_status": exc.status_code,
                    "error_message": exc.message,
                    "details": exc.details,
                },
            )
            if exc.status_code is not None:
                error = f"API Error: {exc.status_code}"
            else:
                error = "Upstream unavailable"
            return DegradedResponse(error=error, message=UPSTREAM_ERROR_MESSAGE)
        except Exception:
            logger.exception("chat.internal_error")
            return DegradedResponse(error="Internal server error", message=INTERNAL_ERROR_MESSAGE)

    async def _complete(self, request: ChatRequest) -> dict[str, Any]:
        if self.client is None:
            raise ConfigurationAppError(
                code="upstream_api_key_missing",
                message="PERPLEXITY_API_KEY is not configured",
            )

        payload = build_upstream_payload(request, self.upstream)
        logger.info(
            "chat.forwarding",
            extra={
                "model": payload["model"],
                "message_count": len(payload["messages"]),
                "max_tokens": payload["max_tokens"],
            },
        )
        body = await self.client.complete(payload)
        logger.info("chat.upstream_success", extra={"model": payload["model"]})
        return body
