from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from chat_proxy.api.dependencies import get_settings
from chat_proxy.core.config import Settings
from chat_proxy.schemas.chat import HealthResponse

router = APIRouter(tags=["Health"])


@router.get("/health", response_model=HealthResponse)
def health_check(settings: Settings = Depends(get_settings)) -> HealthResponse:
    """Health check endpoint.

    Used by load balancers and uptime monitors. Does not contact the upstream.

    Returns:
        HealthResponse: status, current UTC timestamp and the service name.
    """

    return HealthResponse(
        status="healthy",
        timestamp=datetime.now(timezone.utc).isoformat(),
        service=settings.app.service_name,
    )
