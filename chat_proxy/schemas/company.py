from __future__ import annotations

from pydantic import BaseModel, Field


class CompanyProfile(BaseModel):
    name: str
    description: str
    vision: str
    mission: str
    established: str
    employees: str
    location: str


class JobListing(BaseModel):
    title: str
    department: str
    type: str
    location: str
    requirements: list[str] = Field(default_factory=list)
    salary_range: str


class CompanyResponse(BaseModel):
    """Company profile together with the open positions."""

    profile: CompanyProfile
    jobs: list[JobListing]
