from typing import Optional
from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.errors import ApiError
from app.crud import company as company_crud
from app.schemas.company import (
    CompanyCreateRequest,
    CompanyUpdateRequest,
    CompanyEnvelope,
    CompanyDetailEnvelope,
    CompanyListResponse,
    CompanyDeleteResponse,
)

router = APIRouter(prefix="/companies", tags=["Companies"])

SEARCH_PARAMS = {"minEmployees", "maxEmployees", "nameLike"}


@router.post("", status_code=201, response_model=CompanyEnvelope)
def create_company(request: CompanyCreateRequest, db: Session = Depends(get_db)):
    """
    Create a new company.

    Body: { handle, name, description, numEmployees, logoUrl }
    """
    company = company_crud.create(db, request.model_dump(by_alias=True, exclude_unset=True))
    return {"company": company}


@router.get("", response_model=CompanyListResponse)
def list_companies(
    request: Request,
    min_employees: Optional[int] = Query(None, alias="minEmployees", ge=0),
    max_employees: Optional[int] = Query(None, alias="maxEmployees", ge=0),
    name_like: Optional[str] = Query(None, alias="nameLike"),
    db: Session = Depends(get_db)
):
    """
    List companies ordered by name.

    Optional filters:
    - minEmployees / maxEmployees: bounds on numEmployees
    - nameLike: case-insensitive partial match on name
    """
    unknown = sorted(set(request.query_params) - SEARCH_PARAMS)
    if unknown:
        raise ApiError.invalid_input(f"Unknown search filter(s): {', '.join(unknown)}", fields=unknown)

    if min_employees is not None and max_employees is not None and min_employees > max_employees:
        raise ApiError.invalid_input("minEmployees cannot be greater than maxEmployees")

    filters = {
        "minEmployees": min_employees,
        "maxEmployees": max_employees,
        "nameLike": name_like,
    }
    companies = company_crud.find_all(db, filters)
    return {"companies": companies}


@router.get("/{handle}", response_model=CompanyDetailEnvelope)
def get_company(handle: str, db: Session = Depends(get_db)):
    """Retrieve a company and its jobs."""
    return {"company": company_crud.get(db, handle)}


@router.patch("/{handle}", response_model=CompanyEnvelope)
def update_company(handle: str, request: CompanyUpdateRequest, db: Session = Depends(get_db)):
    """
    Partially update a company.

    Body may include: { name, description, numEmployees, logoUrl }
    """
    company = company_crud.update(db, handle, request.model_dump(by_alias=True, exclude_unset=True))
    return {"company": company}


@router.delete("/{handle}", response_model=CompanyDeleteResponse)
def delete_company(handle: str, db: Session = Depends(get_db)):
    """Delete a company and, through the store, its jobs."""
    company_crud.remove(db, handle)
    return {"deleted": handle}
