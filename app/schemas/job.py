from pydantic import BaseModel, Field, field_validator
from typing import List, Optional
from decimal import Decimal


class JobCreateRequest(BaseModel):
    """Schema for creating a new job"""
    title: str = Field(..., min_length=1)
    salary: Optional[int] = Field(None, ge=0)
    equity: Optional[Decimal] = Field(None, ge=0, le=1, description="Fraction of the company, 0 to 1")
    company_handle: str = Field(..., min_length=1, max_length=25, alias="companyHandle")

    class Config:
        extra = "forbid"
        populate_by_name = True


class JobUpdateRequest(BaseModel):
    """
    Schema for a partial job update.

    id and companyHandle are not accepted; a job never moves between companies.
    salary and equity may be set to null explicitly.
    """
    title: Optional[str] = Field(None, min_length=1)
    salary: Optional[int] = Field(None, ge=0)
    equity: Optional[Decimal] = Field(None, ge=0, le=1)

    @field_validator("title")
    @classmethod
    def reject_null_title(cls, v: Optional[str]) -> str:
        if v is None:
            raise ValueError("title may not be null")
        return v

    class Config:
        extra = "forbid"


class JobResponse(BaseModel):
    """Schema for job response"""
    id: int
    title: str
    salary: Optional[int] = None
    equity: Optional[str] = Field(None, description="Decimal string, e.g. \"0.1\"")
    company_handle: str = Field(..., alias="companyHandle")

    class Config:
        populate_by_name = True


class JobCompany(BaseModel):
    """Company summary embedded in a job detail response"""
    handle: str
    name: str
    description: str
    num_employees: Optional[int] = Field(None, alias="numEmployees")
    logo_url: Optional[str] = Field(None, alias="logoUrl")

    class Config:
        populate_by_name = True


class JobDetailResponse(BaseModel):
    id: int
    title: str
    salary: Optional[int] = None
    equity: Optional[str] = None
    company: JobCompany


class JobEnvelope(BaseModel):
    job: JobResponse


class JobDetailEnvelope(BaseModel):
    job: JobDetailResponse


class JobListResponse(BaseModel):
    jobs: List[JobResponse]


class JobDeleteResponse(BaseModel):
    deleted: int
