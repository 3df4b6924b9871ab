from __future__ import annotations

from fastapi import APIRouter

from chat_proxy.schemas.company import CompanyResponse
from chat_proxy.services.company_service import get_company_data

router = APIRouter(tags=["Company"])


@router.get("/company", response_model=CompanyResponse)
def company() -> CompanyResponse:
    """Company profile and open job listings."""

    return get_company_data()
