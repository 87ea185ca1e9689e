"""FastAPI application entry point for the customer search API."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Annotated

from fastapi import Depends, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import InterfaceError, OperationalError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.api.deps import get_db
from app.api.router import router as api_router
from app.config import get_settings
from app.database import engine
from app.services.customer import STORE_UNAVAILABLE_MESSAGE
from app.services.errors import (
    CustomerConflictError,
    CustomerNotFoundError,
    CustomerServiceError,
    InvalidArgumentError,
    StorageUnavailableError,
)

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

VALIDATION_FAILED_MESSAGE = "One or more validation errors occurred."

_SERVICE_ERROR_STATUS = {
    CustomerNotFoundError: status.HTTP_404_NOT_FOUND,
    CustomerConflictError: status.HTTP_409_CONFLICT,
    InvalidArgumentError: status.HTTP_400_BAD_REQUEST,
    StorageUnavailableError: status.HTTP_503_SERVICE_UNAVAILABLE,
}


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan - startup and shutdown events."""
    logger.info("Starting Customer API...")
    logger.info(f"Environment: {settings.app_env}")
    logger.info(f"Database: {settings.async_database_url.split('@')[-1]}")  # Hide credentials

    # Test database connection
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        logger.info("Database connection successful")
    except (SQLAlchemyError, OSError) as e:
        logger.error(f"Database connection failed: {e}")

    yield

    logger.info("Shutting down Customer API...")
    await engine.dispose()


app = FastAPI(
    title="Customer API",
    description="Search, manage and bulk-generate customer records",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router, prefix="/api")


def _field_name(loc: tuple) -> str:
    """Turn a pydantic error location into a field name (``("body", "email")`` -> ``email``)."""
    parts = [str(part) for part in loc[1:]] if len(loc) > 1 else [str(part) for part in loc]
    return ".".join(parts)


def _clean_message(msg: str) -> str:
    return msg.removeprefix("Value error, ")


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Render request validation failures as 400 with per-field messages."""
    errors: dict[str, list[str]] = {}
    for error in exc.errors():
        errors.setdefault(_field_name(tuple(error.get("loc", ()))), []).append(
            _clean_message(error.get("msg", "Invalid value"))
        )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"message": VALIDATION_FAILED_MESSAGE, "errors": errors},
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render HTTP errors as ``{"message": ...}``."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(CustomerServiceError)
async def service_exception_handler(request: Request, exc: CustomerServiceError) -> JSONResponse:
    """Fallback for service errors a route did not translate itself."""
    status_code = _SERVICE_ERROR_STATUS.get(type(exc), status.HTTP_500_INTERNAL_SERVER_ERROR)
    return JSONResponse(status_code=status_code, content={"message": exc.message})


@app.exception_handler(SQLAlchemyError)
async def database_exception_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """Log database failures without leaking their details to the client."""
    logger.error(f"Database error on {request.method} {request.url.path}", exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": "An unexpected error occurred. Please try again later."},
    )


async def storage_unavailable_handler(request: Request, exc: Exception) -> JSONResponse:
    """Lost or refused database connections that escaped the service layer."""
    logger.error(f"Customer store unavailable on {request.method} {request.url.path}: {exc!r}")
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"message": STORE_UNAVAILABLE_MESSAGE},
    )


for _exc_class in (OperationalError, InterfaceError, OSError):
    app.add_exception_handler(_exc_class, storage_unavailable_handler)


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint."""
    return {
        "name": "Customer API",
        "version": "0.1.0",
        "description": "Customer search and management",
    }


@app.get("/health")
async def health(db: Annotated[AsyncSession, Depends(get_db)]) -> JSONResponse:
    """Liveness/readiness check including the database connection."""
    try:
        await db.execute(text("SELECT 1"))
    except (SQLAlchemyError, OSError) as e:
        logger.error(f"Health check failed: {e}")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "unhealthy", "database": "unreachable"},
        )
    return JSONResponse(content={"status": "healthy", "database": "connected"})
