"""
Pydantic schemas for Company API requests/responses.

Clients use camelCase field names (numEmployees, logoUrl); the aliases
below map them onto snake_case attributes.
"""

from typing import List, Optional
from urllib.parse import urlparse
from pydantic import BaseModel, Field, field_validator

from app.schemas.job import JobResponse


def _validate_logo_url(v: Optional[str]) -> Optional[str]:
    if v is None:
        return v
    parsed = urlparse(v)
    if not (parsed.scheme in ("http", "https") and parsed.netloc):
        raise ValueError("logoUrl must be an absolute http(s) URL")
    return v


class CompanyCreateRequest(BaseModel):
    """Schema for creating a new company"""
    handle: str = Field(..., min_length=1, max_length=25)
    name: str = Field(..., min_length=1)
    description: str
    num_employees: Optional[int] = Field(None, ge=0, alias="numEmployees")
    logo_url: Optional[str] = Field(None, alias="logoUrl")

    @field_validator("logo_url")
    @classmethod
    def check_logo_url(cls, v: Optional[str]) -> Optional[str]:
        return _validate_logo_url(v)

    class Config:
        extra = "forbid"
        populate_by_name = True


class CompanyUpdateRequest(BaseModel):
    """
    Schema for a partial company update.

    handle is not accepted: a company's handle never changes.
    """
    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    num_employees: Optional[int] = Field(None, ge=0, alias="numEmployees")
    logo_url: Optional[str] = Field(None, alias="logoUrl")

    @field_validator("logo_url")
    @classmethod
    def check_logo_url(cls, v: Optional[str]) -> Optional[str]:
        return _validate_logo_url(v)

    @field_validator("name", "description")
    @classmethod
    def reject_null(cls, v: Optional[str]) -> str:
        """Only runs for explicitly supplied values; these columns are NOT NULL."""
        if v is None:
            raise ValueError("field may not be null")
        return v

    class Config:
        extra = "forbid"
        populate_by_name = True


class CompanyResponse(BaseModel):
    """Schema for company response"""
    handle: str
    name: str
    description: str
    num_employees: Optional[int] = Field(None, alias="numEmployees")
    logo_url: Optional[str] = Field(None, alias="logoUrl")

    class Config:
        populate_by_name = True


class CompanyDetailResponse(CompanyResponse):
    """Company with the jobs it currently posts."""
    jobs: List[JobResponse] = []


class CompanyEnvelope(BaseModel):
    company: CompanyResponse


class CompanyDetailEnvelope(BaseModel):
    company: CompanyDetailResponse


class CompanyListResponse(BaseModel):
    companies: List[CompanyResponse]


class CompanyDeleteResponse(BaseModel):
    deleted: str
