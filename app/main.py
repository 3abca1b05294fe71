"""Main FastAPI application."""
from contextlib import asynccontextmanager
from time import perf_counter
import logging
import uuid

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text

from app.core.config import settings
from app.core.database import Base, SessionLocal, engine
from app.core.exceptions import (
    DuplicateParticipantError,
    InvalidStateError,
    NotFoundError,
    SurveyDomainError,
)
from app.core.logging_config import configure_logging
from app.api import surveys, responses
from app import models  # noqa: F401 - register models with Base

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    configure_logging()
    if settings.is_sqlite:
        # Local development database; Postgres schemas come from alembic.
        Base.metadata.create_all(bind=engine)
        logger.info("SQLite schema ensured at %s", settings.DATABASE_URL)
    yield


# Create FastAPI app
app = FastAPI(
    title="Online Survey API",
    description="API for managing online surveys and collecting responses",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

_DOMAIN_STATUS = {
    NotFoundError: status.HTTP_404_NOT_FOUND,
    DuplicateParticipantError: status.HTTP_409_CONFLICT,
    InvalidStateError: status.HTTP_409_CONFLICT,
}


def _error_payload(
    request: Request,
    *,
    code: str,
    message: str,
    retriable: bool,
) -> dict:
    return {
        "code": code,
        "message": message,
        "retriable": retriable,
        "request_id": getattr(request.state, "request_id", "unknown"),
    }


def _request_id_header(request: Request) -> dict:
    return {"X-Request-Id": getattr(request.state, "request_id", "unknown")}


@app.middleware("http")
async def request_context(request: Request, call_next):
    request_id = request.headers.get("X-Request-Id") or str(uuid.uuid4())
    request.state.request_id = request_id
    start = perf_counter()

    response = await call_next(request)

    elapsed_ms = (perf_counter() - start) * 1000
    response.headers["X-Request-Id"] = request_id
    logger.debug("%s %s -> %s (%.1f ms)", request.method, request.url.path,
                 response.status_code, elapsed_ms)
    return response


@app.exception_handler(SurveyDomainError)
async def domain_exception_handler(request: Request, exc: SurveyDomainError):
    status_code = next(
        (code for exc_type, code in _DOMAIN_STATUS.items() if isinstance(exc, exc_type)),
        status.HTTP_400_BAD_REQUEST,
    )
    logger.info("Handled %s: %s", type(exc).__name__, exc.message)
    return JSONResponse(
        status_code=status_code,
        content=_error_payload(
            request,
            code=exc.code,
            message=exc.message,
            retriable=False,
        ),
        headers=_request_id_header(request),
    )


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    retriable = exc.status_code in {408, 409, 425, 429} or exc.status_code >= 500
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_payload(
            request,
            code=f"http_{exc.status_code}",
            message=str(exc.detail),
            retriable=retriable,
        ),
        headers=_request_id_header(request),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    message = "Request validation failed"
    if errors:
        location = ".".join(str(part) for part in errors[0].get("loc", ()))
        message = f"{message}: {location} {errors[0].get('msg', '')}".strip()
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=_error_payload(
            request,
            code="validation_error",
            message=message,
            retriable=False,
        ),
        headers=_request_id_header(request),
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_payload(
            request,
            code="internal_error",
            message="Unexpected server error",
            retriable=True,
        ),
        headers=_request_id_header(request),
    )


# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Accept", "Origin", "X-Requested-With", "X-Request-Id"],
)

# Include routers
app.include_router(surveys.router)
app.include_router(responses.router)


@app.get("/health", tags=["Health"])
def health():
    """Health check endpoint with real DB connectivity test."""
    result = {"status": "healthy", "database": "disconnected"}
    http_status = 200

    try:
        db = SessionLocal()
        try:
            db.execute(text("SELECT 1"))
            result["database"] = "connected"
        finally:
            db.close()
    except Exception as exc:
        logger.warning("Health check database failure: %s", exc)
        result["status"] = "degraded"
        result["database"] = f"error: {str(exc)[:120]}"
        http_status = 503

    return JSONResponse(content=result, status_code=http_status)
