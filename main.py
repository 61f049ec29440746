from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from typing import Any, Dict, Optional

from app.core.config import settings
from app.core.database import init_db
from app.core.errors import ApiError, ErrorKind
from app.core.logging_config import setup_logging, get_logger
from app.api.endpoints import companies, health, jobs

# Configure logging
setup_logging(settings.LOG_LEVEL, json_logs=settings.JSON_LOGS)
logger = get_logger(__name__)

STATUS_BY_KIND = {
    ErrorKind.INVALID_INPUT: 400,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.CONFLICT: 400,
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup and shutdown events.
    """
    logger.info("Starting up Jobly API...")
    init_db()
    logger.info("Database initialized successfully")

    yield

    logger.info("Shutting down Jobly API...")


# Create FastAPI application
app = FastAPI(
    title=settings.PROJECT_NAME,
    version="1.0.0",
    description="Companies and the jobs they post",
    lifespan=lifespan
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.BACKEND_CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def error_response(status_code: int, kind: str, message: str, detail: Optional[Dict[str, Any]] = None) -> JSONResponse:
    error = {"kind": kind, "message": message, "status": status_code}
    if detail:
        error["detail"] = detail
    return JSONResponse(status_code=status_code, content={"error": error})


@app.exception_handler(ApiError)
async def api_error_handler(request: Request, exc: ApiError):
    status_code = STATUS_BY_KIND[exc.kind]
    logger.info(f"{request.method} {request.url.path} -> {status_code}: {exc.message}")
    return error_response(status_code, exc.kind.value, exc.message, exc.detail)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = [
        {"loc": [str(part) for part in err.get("loc", ())], "msg": err.get("msg", "")}
        for err in exc.errors()
    ]
    message = "; ".join(f"{'.'.join(err['loc'])}: {err['msg']}" for err in errors)
    return error_response(400, ErrorKind.INVALID_INPUT.value, message, {"errors": errors})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return error_response(500, "internal", "Internal server error")


# Include routers
app.include_router(health.router)
app.include_router(companies.router, prefix=settings.API_V1_STR)
app.include_router(jobs.router, prefix=settings.API_V1_STR)


@app.get("/")
async def root():
    """Root endpoint - API health check"""
    return {
        "message": "Jobly API",
        "version": "1.0.0",
        "status": "healthy"
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,  # Enable auto-reload during development
        log_level="info"
    )
