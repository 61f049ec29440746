"""
CRUD operations for Job model.

Statements are written by hand with positional placeholders and executed
through app.core.database.run_query. Rows come back in the API's camelCase
shape, with equity as a decimal string.
"""

import logging
from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple
from sqlalchemy.orm import Session

from app.core.database import run_query
from app.core.errors import ApiError
from app.core.sql import WhereClause, is_integer, present, sql_for_partial_update

logger = logging.getLogger(__name__)

JOB_COLUMNS = """id,
                 title,
                 salary,
                 equity,
                 company_handle AS "companyHandle\""""

# Updatable fields map onto identically named columns
JS_TO_SQL = {
    "title": "title",
    "salary": "salary",
    "equity": "equity",
}


def format_equity(value: Any) -> Optional[str]:
    """Render a NUMERIC column value as a fixed-point string ("0.1")."""
    if value is None:
        return None
    return format(Decimal(str(value)), "f")


def equity_param(value: Any) -> Optional[str]:
    # Bound as text so the store parses it as NUMERIC; no float round trip
    if value is None:
        return None
    return format(Decimal(str(value)), "f")


def job_from_row(row: Dict[str, Any]) -> Dict[str, Any]:
    job = dict(row)
    job["equity"] = format_equity(job.get("equity"))
    return job


def build_filter_clause(filters: Optional[Dict[str, Any]] = None) -> Tuple[str, List[Any]]:
    """
    Build the WHERE clause for a job search.

    Recognized filters (others are ignored):
    - title: case-insensitive partial match
    - minSalary: salary >= value
    - hasEquity: only True is accepted; restricts to equity > 0

    Returns:
        (where_clause, values); ("", []) when no filter applies

    Raises:
        ApiError(INVALID_INPUT): If a filter has the wrong type
    """
    where = WhereClause()

    if present(filters, "title"):
        title = filters["title"]
        if not isinstance(title, str):
            raise ApiError.invalid_input("title must be a string", field="title")
        where.add("LOWER(title) LIKE LOWER({})", f"%{title}%")

    if present(filters, "minSalary"):
        min_salary = filters["minSalary"]
        if not is_integer(min_salary):
            raise ApiError.invalid_input("minSalary must be an integer", field="minSalary")
        where.add("salary >= {}", min_salary)

    if present(filters, "hasEquity"):
        if filters["hasEquity"] is not True:
            raise ApiError.invalid_input("hasEquity must be true", field="hasEquity")
        where.add("equity > 0", literal=True)

    return where.build()


def create(db: Session, data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Create a new job.

    Args:
        db: Database session
        data: {title, salary, equity, companyHandle}; salary and equity optional

    Returns:
        {id, title, salary, equity, companyHandle}
    """
    rows = run_query(
        db,
        f"""INSERT INTO jobs
            (title, salary, equity, company_handle)
            VALUES ($1, $2, $3, $4)
            RETURNING {JOB_COLUMNS}""",
        [
            data["title"],
            data.get("salary"),
            equity_param(data.get("equity")),
            data["companyHandle"],
        ],
    )
    db.commit()

    job = job_from_row(rows[0])
    logger.info(f"Created job {job['id']} for company {job['companyHandle']}")
    return job


def find_all(db: Session, filters: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
    """
    Find all jobs matching the optional filters (see build_filter_clause).

    Returns:
        [{id, title, salary, equity, companyHandle}, ...] in no particular order
    """
    where_clause, values = build_filter_clause(filters)

    rows = run_query(
        db,
        f"""SELECT {JOB_COLUMNS}
            FROM jobs
            {where_clause}""",
        values,
    )
    return [job_from_row(row) for row in rows]


def get(db: Session, job_id: int) -> Dict[str, Any]:
    """
    Retrieve a job together with its company.

    Returns:
        {id, title, salary, equity, company}
        where company is {handle, name, description, numEmployees, logoUrl}

    Raises:
        ApiError(NOT_FOUND): If no job has this id
    """
    rows = run_query(
        db,
        """SELECT j.id,
                  j.title,
                  j.salary,
                  j.equity,
                  c.handle,
                  c.name,
                  c.description,
                  c.num_employees AS "numEmployees",
                  c.logo_url AS "logoUrl"
           FROM jobs j
           JOIN companies c ON j.company_handle = c.handle
           WHERE j.id = $1""",
        [job_id],
    )
    if not rows:
        raise ApiError.not_found(f"No job: {job_id}", id=job_id)

    row = rows[0]
    return {
        "id": row["id"],
        "title": row["title"],
        "salary": row["salary"],
        "equity": format_equity(row["equity"]),
        "company": {
            "handle": row["handle"],
            "name": row["name"],
            "description": row["description"],
            "numEmployees": row["numEmployees"],
            "logoUrl": row["logoUrl"],
        },
    }


def update(db: Session, job_id: int, data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Partially update a job: only the supplied fields change.

    Args:
        db: Database session
        job_id: Job ID to update
        data: Any of {title, salary, equity}

    Returns:
        {id, title, salary, equity, companyHandle}

    Raises:
        ApiError(INVALID_INPUT): If data is empty
        ApiError(NOT_FOUND): If no job has this id
    """
    fields = dict(data)
    if "equity" in fields:
        fields["equity"] = equity_param(fields["equity"])

    set_cols, values = sql_for_partial_update(fields, JS_TO_SQL)
    id_var_idx = f"${len(values) + 1}"

    rows = run_query(
        db,
        f"""UPDATE jobs
            SET {set_cols}
            WHERE id = {id_var_idx}
            RETURNING {JOB_COLUMNS}""",
        [*values, job_id],
    )
    if not rows:
        db.rollback()
        raise ApiError.not_found(f"No job: {job_id}", id=job_id)

    db.commit()
    logger.info(f"Updated job {job_id}: {', '.join(fields)}")
    return job_from_row(rows[0])


def remove(db: Session, job_id: int) -> None:
    """
    Delete a job by ID.

    Raises:
        ApiError(NOT_FOUND): If no job has this id
    """
    rows = run_query(
        db,
        """DELETE
           FROM jobs
           WHERE id = $1
           RETURNING id""",
        [job_id],
    )
    if not rows:
        db.rollback()
        raise ApiError.not_found(f"No job: {job_id}", id=job_id)

    db.commit()
    logger.info(f"Deleted job {job_id}")
