"""Request and response schemas for the chat proxy endpoints."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class ChatRequest(BaseModel):
    """Inbound chat request.

    Only ``messages`` is required. Unknown fields are ignored; they are never
    forwarded upstream.
    """

    messages: list[dict[str, Any]] = Field(
        ...,
        min_length=1,
        description="Ordered chat messages ({role, content} objects)",
    )
    model: str | None = Field(None, description="Upstream model name")
    max_tokens: int | None = Field(None, ge=1, description="Requested completion length")
    temperature: float | None = Field(None, description="Sampling temperature")
    top_p: float | None = Field(None, description="Nucleus sampling value")
    return_citations: bool | None = Field(
        None,
        description="Set to false to disable citations in the upstream answer",
    )

    model_config = ConfigDict(extra="ignore")


class DegradedResponse(BaseModel):
    """Soft-success payload telling the caller to use its canned fallback."""

    error: str
    fallback: Literal[True] = True
    message: str


class RateLimitedResponse(BaseModel):
    error: str = "Too many requests"
    message: str = "Rate limit exceeded. Please try again later."
    fallback: Literal[True] = True


class FallbackRequest(BaseModel):
    message: str | None = Field(None, description="User message to answer")

    model_config = ConfigDict(extra="ignore")


class FallbackMessage(BaseModel):
    content: str


class FallbackChoice(BaseModel):
    message: FallbackMessage


class FallbackResponse(BaseModel):
    """Canned answer shaped like a chat-completion response."""

    choices: list[FallbackChoice]
    fallback: Literal[True] = True


class HealthResponse(BaseModel):
    status: str
    timestamp: str
    service: str
