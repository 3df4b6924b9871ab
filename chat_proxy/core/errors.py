"""Application-level exception types.

This module defines domain errors used across services/adapters, enabling
consistent error handling, logging, and API responses.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, NotRequired, TypedDict


class ErrorDetails(TypedDict, total=False):
    """Structured error context for observability and clients."""

    code: str
    message: str
    hint: str
    field: str
    http_status: int
    retry_after: int
    limit: int
    model: str
    request_id: str
    errors: list[dict[str, Any]]
    context: NotRequired[dict[str, Any]]


@dataclass
class AppError(Exception):
    """Base error for application/domain failures.

    Attributes:
        code: Stable, machine-readable error code.
        message: Human-readable error message.
        details: Optional structured details for debugging/observability.
    """

    code: str
    message: str
    details: ErrorDetails | None = None

    def __post_init__(self) -> None:
        # Populate Exception args so str(error) is useful in logs/tracebacks.
        super().__init__(self.message)


class ValidationAppError(AppError):
    """Raised when a client request has the wrong shape."""


@dataclass
class RateLimitExceededError(AppError):
    """Raised when a client exceeds its request budget for the window."""

    headers: dict[str, str] | None = None


@dataclass
class UpstreamAppError(AppError):
    """Raised when the chat-completion upstream fails.

    ``status_code`` is the upstream HTTP status when one was received, and
    None for network failures and timeouts.
    """

    status_code: int | None = None


class ConfigurationAppError(AppError):
    """Raised when required runtime configuration is missing."""
