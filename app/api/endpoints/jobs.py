from typing import Optional
from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.errors import ApiError
from app.crud import job as job_crud
from app.schemas.job import (
    JobCreateRequest,
    JobUpdateRequest,
    JobEnvelope,
    JobDetailEnvelope,
    JobListResponse,
    JobDeleteResponse,
)

router = APIRouter(prefix="/jobs", tags=["Jobs"])

SEARCH_PARAMS = {"title", "minSalary", "hasEquity"}


@router.post("", status_code=201, response_model=JobEnvelope)
def create_job(request: JobCreateRequest, db: Session = Depends(get_db)):
    """
    Create a new job posting.

    Body: { title, salary, equity, companyHandle }
    """
    job = job_crud.create(db, request.model_dump(by_alias=True, exclude_unset=True))
    return {"job": job}


@router.get("", response_model=JobListResponse)
def list_jobs(
    request: Request,
    title: Optional[str] = None,
    min_salary: Optional[int] = Query(None, alias="minSalary", ge=0),
    has_equity: Optional[bool] = Query(None, alias="hasEquity"),
    db: Session = Depends(get_db)
):
    """
    List jobs.

    Optional filters:
    - title: case-insensitive partial match
    - minSalary: minimum salary
    - hasEquity: when true, only jobs with non-zero equity; false applies no filter
    """
    unknown = sorted(set(request.query_params) - SEARCH_PARAMS)
    if unknown:
        raise ApiError.invalid_input(f"Unknown search filter(s): {', '.join(unknown)}", fields=unknown)

    filters = {
        "title": title,
        "minSalary": min_salary,
        "hasEquity": True if has_equity else None,
    }
    jobs = job_crud.find_all(db, filters)
    return {"jobs": jobs}


@router.get("/{job_id}", response_model=JobDetailEnvelope)
def get_job(job_id: int, db: Session = Depends(get_db)):
    """Retrieve a job and the company that posts it."""
    return {"job": job_crud.get(db, job_id)}


@router.patch("/{job_id}", response_model=JobEnvelope)
def update_job(job_id: int, request: JobUpdateRequest, db: Session = Depends(get_db)):
    """
    Partially update a job.

    Body may include: { title, salary, equity }
    """
    job = job_crud.update(db, job_id, request.model_dump(exclude_unset=True))
    return {"job": job}


@router.delete("/{job_id}", response_model=JobDeleteResponse)
def delete_job(job_id: int, db: Session = Depends(get_db)):
    """Delete a job by ID."""
    job_crud.remove(db, job_id)
    return {"deleted": job_id}
