"""
CRUD operations for Company model.

Duplicate handles are detected by the store's primary key constraint, not
by a read before the insert, so two concurrent creates cannot both succeed.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.database import run_query
from app.core.errors import ApiError
from app.core.sql import WhereClause, is_integer, present, sql_for_partial_update
from app.crud.job import JOB_COLUMNS, job_from_row

logger = logging.getLogger(__name__)

COMPANY_COLUMNS = """handle,
                     name,
                     description,
                     num_employees AS "numEmployees",
                     logo_url AS "logoUrl\""""

JS_TO_SQL = {
    "numEmployees": "num_employees",
    "logoUrl": "logo_url",
}


def build_filter_clause(filters: Optional[Dict[str, Any]] = None) -> Tuple[str, List[Any]]:
    """
    Build the WHERE clause for a company search.

    Recognized filters (others are ignored):
    - minEmployees: num_employees >= value
    - maxEmployees: num_employees <= value
    - nameLike: case-insensitive partial match on name

    Returns:
        (where_clause, values); ("", []) when no filter applies

    Raises:
        ApiError(INVALID_INPUT): If a filter has the wrong type
    """
    where = WhereClause()

    if present(filters, "minEmployees"):
        min_employees = filters["minEmployees"]
        if not is_integer(min_employees):
            raise ApiError.invalid_input("minEmployees must be an integer", field="minEmployees")
        where.add("num_employees >= {}", min_employees)

    if present(filters, "maxEmployees"):
        max_employees = filters["maxEmployees"]
        if not is_integer(max_employees):
            raise ApiError.invalid_input("maxEmployees must be an integer", field="maxEmployees")
        where.add("num_employees <= {}", max_employees)

    if present(filters, "nameLike"):
        name_like = filters["nameLike"]
        if not isinstance(name_like, str):
            raise ApiError.invalid_input("nameLike must be a string", field="nameLike")
        where.add("LOWER(name) LIKE LOWER({})", f"%{name_like}%")

    return where.build()


def _exists(db: Session, handle: str) -> bool:
    return bool(run_query(db, "SELECT handle FROM companies WHERE handle = $1", [handle]))


def create(db: Session, data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Create a new company.

    Args:
        db: Database session
        data: {handle, name, description, numEmployees, logoUrl};
              numEmployees and logoUrl optional

    Returns:
        {handle, name, description, numEmployees, logoUrl}

    Raises:
        ApiError(CONFLICT): If a company with this handle already exists
    """
    handle = data["handle"]
    try:
        rows = run_query(
            db,
            f"""INSERT INTO companies
                (handle, name, description, num_employees, logo_url)
                VALUES ($1, $2, $3, $4, $5)
                RETURNING {COMPANY_COLUMNS}""",
            [
                handle,
                data["name"],
                data["description"],
                data.get("numEmployees"),
                data.get("logoUrl"),
            ],
        )
        db.commit()
    except IntegrityError:
        db.rollback()
        # Any other constraint failure is not ours to classify
        if not _exists(db, handle):
            raise
        logger.warning(f"Rejected duplicate company handle: {handle}")
        raise ApiError.conflict(f"Duplicate company: {handle}", handle=handle)

    logger.info(f"Created company {handle}")
    return rows[0]


def find_all(db: Session, filters: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
    """
    Find all companies matching the optional filters, ordered by name.

    Returns:
        [{handle, name, description, numEmployees, logoUrl}, ...]
    """
    where_clause, values = build_filter_clause(filters)

    return run_query(
        db,
        f"""SELECT {COMPANY_COLUMNS}
            FROM companies
            {where_clause}
            ORDER BY name""",
        values,
    )


def get(db: Session, handle: str) -> Dict[str, Any]:
    """
    Retrieve a company and the jobs it posts.

    Returns:
        {handle, name, description, numEmployees, logoUrl, jobs}
        where jobs is [{id, title, salary, equity, companyHandle}, ...] ordered by id

    Raises:
        ApiError(NOT_FOUND): If no company has this handle
    """
    rows = run_query(
        db,
        f"""SELECT {COMPANY_COLUMNS}
            FROM companies
            WHERE handle = $1""",
        [handle],
    )
    if not rows:
        raise ApiError.not_found(f"No company: {handle}", handle=handle)

    company = rows[0]
    job_rows = run_query(
        db,
        f"""SELECT {JOB_COLUMNS}
            FROM jobs
            WHERE company_handle = $1
            ORDER BY id""",
        [handle],
    )
    company["jobs"] = [job_from_row(row) for row in job_rows]
    return company


def update(db: Session, handle: str, data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Partially update a company: only the supplied fields change.

    Args:
        db: Database session
        handle: Handle of the company to update
        data: Any of {name, description, numEmployees, logoUrl}

    Returns:
        {handle, name, description, numEmployees, logoUrl}

    Raises:
        ApiError(INVALID_INPUT): If data is empty
        ApiError(NOT_FOUND): If no company has this handle
    """
    set_cols, values = sql_for_partial_update(data, JS_TO_SQL)
    handle_var_idx = f"${len(values) + 1}"

    rows = run_query(
        db,
        f"""UPDATE companies
            SET {set_cols}
            WHERE handle = {handle_var_idx}
            RETURNING {COMPANY_COLUMNS}""",
        [*values, handle],
    )
    if not rows:
        db.rollback()
        raise ApiError.not_found(f"No company: {handle}", handle=handle)

    db.commit()
    logger.info(f"Updated company {handle}: {', '.join(data)}")
    return rows[0]


def remove(db: Session, handle: str) -> None:
    """
    Delete a company by handle. Its jobs are removed by the store (ON DELETE CASCADE).

    Raises:
        ApiError(NOT_FOUND): If no company has this handle
    """
    rows = run_query(
        db,
        """DELETE
           FROM companies
           WHERE handle = $1
           RETURNING handle""",
        [handle],
    )
    if not rows:
        db.rollback()
        raise ApiError.not_found(f"No company: {handle}", handle=handle)

    db.commit()
    logger.info(f"Deleted company {handle}")
