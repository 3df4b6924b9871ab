"""Global exception handlers for consistent error responses.

Error bodies are flat JSON objects that frontend code can branch on:

- ValidationAppError → 400 ``{error, message, code, fallback: true}``
- RateLimitExceededError → 429 ``{error, message, code, fallback: true}``
- HTTPException for an unknown route or method → 404 ``{error, message}``
- Unexpected Exception → 500 ``{error, fallback: true}`` (safety net)

Upstream and configuration failures on ``/api/chat`` never reach these
handlers; the proxy service turns them into soft-success degraded responses.
"""

import logging

from fastapi import Request, status
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from chat_proxy.core.errors import AppError, RateLimitExceededError, ValidationAppError
from chat_proxy.core.logging import get_request_id

logger = logging.getLogger(__name__)

_ERROR_TITLES: dict[type[AppError], tuple[int, str]] = {
    ValidationAppError: (status.HTTP_400_BAD_REQUEST, "Invalid request format"),
    RateLimitExceededError: (status.HTTP_429_TOO_MANY_REQUESTS, "Too many requests"),
}

# A wrong method on a known path is reported the same way as an unknown path.
_NOT_FOUND_STATUSES = frozenset({status.HTTP_404_NOT_FOUND, status.HTTP_405_METHOD_NOT_ALLOWED})


def _status_and_title(exc: AppError) -> tuple[int, str]:
    for error_type, mapping in _ERROR_TITLES.items():
        if isinstance(exc, error_type):
            return mapping
    return status.HTTP_400_BAD_REQUEST, "Bad request"


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Handle domain application errors with a flat JSON body.

    Args:
        request: FastAPI request object.
        exc: AppError instance (or subclass).

    Returns:
        JSONResponse with the mapped status code.
    """
    status_code, title = _status_and_title(exc)

    logger.warning(
        "app_error_handled",
        extra={
            "error_code": exc.code,
            "status_code": status_code,
            "request_path": request.url.path,
            "has_details": bool(exc.details),
        },
    )

    content = {
        "error": title,
        "message": exc.message,
        "code": exc.code,
        "fallback": True,
        "request_id": get_request_id(),
    }
    if exc.details and isinstance(exc, ValidationAppError):
        content["details"] = exc.details

    headers = exc.headers if isinstance(exc, RateLimitExceededError) else None
    return JSONResponse(status_code=status_code, content=content, headers=headers)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render framework HTTP errors as ``{error, message}``.

    Unmatched routes answer 404 whether the path or only the method is
    unknown.
    """

    if exc.status_code in _NOT_FOUND_STATUSES:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={
                "error": "Endpoint not found",
                "message": "The requested endpoint does not exist",
            },
        )

    content = {"error": str(exc.detail), "message": str(exc.detail)}
    return JSONResponse(
        status_code=exc.status_code,
        content=content,
        headers=getattr(exc, "headers", None),
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Fallback handler for unexpected errors (safety net).

    Logs the failure for operators and returns a generic body. Nothing about
    the exception is sent to the client.
    """
    logger.error(
        "unhandled_exception",
        extra={
            "error_type": type(exc).__name__,
            "error_msg": str(exc),
            "request_path": request.url.path,
            "request_method": request.method,
        },
        exc_info=exc,
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "Internal server error",
            "fallback": True,
            "request_id": get_request_id(),
        },
    )


def setup_exception_handlers(app) -> None:
    """Register all exception handlers with the FastAPI app."""
    app.exception_handler(AppError)(app_error_handler)
    app.exception_handler(StarletteHTTPException)(http_exception_handler)
    app.exception_handler(Exception)(general_exception_handler)
