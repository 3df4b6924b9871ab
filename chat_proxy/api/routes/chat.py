from typing import Any

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from chat_proxy.api.dependencies import get_proxy_service
from chat_proxy.core.errors import ValidationAppError
from chat_proxy.core.rate_limit import enforce_rate_limit
from chat_proxy.schemas.chat import (
    DegradedResponse,
    FallbackRequest,
    FallbackResponse,
    RateLimitedResponse,
)
from chat_proxy.services.fallback_service import build_fallback_response
from chat_proxy.services.proxy_service import ChatProxyService

router = APIRouter(tags=["Chat"])


@router.post(
    "/chat",
    dependencies=[Depends(enforce_rate_limit)],
    responses={
        200: {"description": "Upstream chat completion, or a degraded payload with fallback=true"},
        400: {"description": "Malformed request (missing or invalid 'messages')"},
        429: {"model": RateLimitedResponse, "description": "Per-client rate limit exceeded"},
    },
)
async def chat(
    request: Request,
    proxy: ChatProxyService = Depends(get_proxy_service),
) -> JSONResponse:
    """Proxy a chat conversation to the AI upstream.

    The body is read as raw JSON so that shape errors are reported with the
    same ``{error, message, fallback}`` body as every other client error.

    Upstream failures are answered with HTTP 200 and ``fallback: true``; the
    caller is expected to switch to ``/api/fallback`` based on that flag.

    Raises:
        ValidationAppError: Body is not JSON or has no usable ``messages``.
    """
    try:
        body: Any = await request.json()
    except ValueError as exc:
        raise ValidationAppError(
            code="invalid_json",
            message="Request body must be valid JSON",
        ) from exc

    result = await proxy.forward(body)
    if isinstance(result, DegradedResponse):
        return JSONResponse(content=result.model_dump())
    return JSONResponse(content=result)


@router.post("/fallback", response_model=FallbackResponse)
async def fallback(payload: FallbackRequest | None = None) -> FallbackResponse:
    """Return a canned answer picked by keyword from the user's message."""

    return build_fallback_response(payload.message if payload else None)
