"""
Pytest configuration and fixtures for testing.

This file provides reusable test fixtures for:
- Database setup/teardown (in-memory SQLite, foreign keys on)
- Seed companies and jobs
- FastAPI test clients
"""

import os

# Must be set before app.core.config is imported
os.environ.setdefault("DATABASE_URL_OVERRIDE", "sqlite://")
os.environ.setdefault("JSON_LOGS", "false")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, text
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.database import Base, enable_sqlite_foreign_keys, get_db
from app.models import Company, Job  # noqa: F401  register tables on Base.metadata
from main import app


# Use in-memory SQLite for testing (fast, isolated)
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
enable_sqlite_foreign_keys(engine)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session():
    """
    Create a fresh database session for each test.
    Tables are dropped after the test completes.
    """
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def seeded_db(db_session):
    """
    Database with three companies (c1, c2, c3) and three jobs, all at c1:

    j1: salary 100000, equity 0.1
    j2: salary 200000, equity 0.2
    j3: salary 300000, equity 0.3
    """
    db_session.execute(
        text(
            "INSERT INTO companies (handle, name, description, num_employees, logo_url) "
            "VALUES (:handle, :name, :description, :num_employees, :logo_url)"
        ),
        [
            {"handle": f"c{n}", "name": f"C{n}", "description": f"Desc{n}",
             "num_employees": n, "logo_url": f"http://c{n}.img"}
            for n in (1, 2, 3)
        ],
    )
    db_session.execute(
        text(
            "INSERT INTO jobs (title, salary, equity, company_handle) "
            "VALUES (:title, :salary, :equity, :company_handle)"
        ),
        [
            {"title": f"j{n}", "salary": n * 100000, "equity": f"0.{n}", "company_handle": "c1"}
            for n in (1, 2, 3)
        ],
    )
    db_session.commit()
    return db_session


def _override_get_db(db_session):
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    return override_get_db


@pytest.fixture
def client(seeded_db):
    """
    FastAPI test client over the seeded database.
    """
    app.dependency_overrides[get_db] = _override_get_db(seeded_db)

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def unsafe_client(seeded_db):
    """
    Test client that returns 500 responses instead of re-raising server errors.
    """
    app.dependency_overrides[get_db] = _override_get_db(seeded_db)

    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def sample_company_data():
    """Sample company data for testing"""
    return {
        "handle": "new",
        "name": "New",
        "description": "DescNew",
        "numEmployees": 1,
        "logoUrl": "http://new.img",
    }


@pytest.fixture
def sample_job_data():
    """Sample job data for testing"""
    return {
        "title": "new",
        "salary": 100000,
        "equity": 0.1,
        "companyHandle": "c1",
    }
