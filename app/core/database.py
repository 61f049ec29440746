import logging
import re
from typing import Any, Dict, List, Sequence

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from app.core.config import settings

logger = logging.getLogger(__name__)


def enable_sqlite_foreign_keys(engine: Engine) -> None:
    """Turn on foreign key enforcement for every new SQLite connection."""
    if engine.dialect.name != "sqlite":
        return

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn: Any, _: Any) -> None:
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def _engine_options(url: str) -> Dict[str, Any]:
    if url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}
    return {
        "pool_pre_ping": True,  # Verify connections before using them
        "pool_size": 10,  # Connection pool size
        "max_overflow": 20  # Allow up to 20 connections beyond pool_size
    }


# Create SQLAlchemy engine
engine = create_engine(
    settings.DATABASE_URL,
    echo=settings.SQL_ECHO,
    **_engine_options(settings.DATABASE_URL)
)
enable_sqlite_foreign_keys(engine)

# Create SessionLocal class
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Create Base class for models
Base = declarative_base()


def get_db():
    """
    Dependency function to get database session.
    Used in FastAPI endpoints with Depends(get_db)
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db(bind: Engine = engine):
    """
    Initialize database.

    Importing the models registers the companies and jobs tables on
    Base.metadata. Tables are only created when CREATE_TABLES_ON_STARTUP
    is set; otherwise the schema is expected to exist already.
    """
    from app.models import company, job  # noqa: F401  Import models to register them
    if settings.CREATE_TABLES_ON_STARTUP:
        logger.info("Creating database tables")
        Base.metadata.create_all(bind=bind)


_POSITIONAL_PARAM = re.compile(r"\$(\d+)")


def run_query(db: Session, sql: str, values: Sequence[Any] = ()) -> List[Dict[str, Any]]:
    """
    Execute SQL written with positional placeholders.

    $n is rewritten to the named bind :pn and bound to values[n - 1].

    Args:
        db: Database session
        sql: Statement using $1..$n placeholders
        values: Ordered parameter list

    Returns:
        List of rows as column name -> value dicts (empty for statements
        that return no rows)
    """
    params = {f"p{idx}": value for idx, value in enumerate(values, start=1)}
    statement = text(_POSITIONAL_PARAM.sub(lambda m: f":p{m.group(1)}", sql))

    result = db.execute(statement, params)
    if not result.returns_rows:
        return []
    return [dict(row) for row in result.mappings().all()]
