"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from fincore.app_context import AppContext
from fincore.config.settings import get_settings
from fincore.config.logging_config import setup_logging
from fincore.repositories.sqlalchemy.database import init_db
from fincore.api.routers import assets_router, indicators_router, transactions_router
from fincore.core.exceptions import (
    AppError,
    NotFoundError,
    UpstreamUnavailableError,
    ValidationError,
)
from fincore.services import SimulationScheduler

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    setup_logging()
    init_db()

    current = get_settings()
    scheduler = None
    if current.simulation_enabled:
        scheduler = SimulationScheduler(
            context_factory=AppContext,
            interval_seconds=current.simulation_interval_seconds,
            backfill_days=current.backfill_days,
        )
        scheduler.start()

    yield

    # Shutdown
    if scheduler is not None:
        scheduler.stop()


settings = get_settings()

app = FastAPI(
    title=settings.app_name,
    description="Market quotes, technical indicators and a transaction ledger",
    version=settings.app_version,
    lifespan=lifespan,
)

# Include routers
app.include_router(assets_router)
app.include_router(indicators_router)
app.include_router(transactions_router)


def _error_response(status_code: int, exc: AppError) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": exc.code, "message": exc.message},
    )


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    return _error_response(400, exc)


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    return _error_response(404, exc)


@app.exception_handler(UpstreamUnavailableError)
async def upstream_unavailable_handler(
    request: Request, exc: UpstreamUnavailableError
) -> JSONResponse:
    logger.warning(f"Upstream unavailable on {request.url.path}: {exc.message}")
    return _error_response(503, exc)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Global handler for application errors."""
    return _error_response(400, exc)


@app.exception_handler(SQLAlchemyError)
async def store_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """Driver errors that escaped repository translation."""
    logger.error(f"Store failure on {request.url.path}: {exc}")
    return _error_response(503, UpstreamUnavailableError("Data store unavailable"))


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"Unhandled error on {request.url.path}", exc_info=exc)
    return _error_response(500, AppError("An unexpected error occurred", code="INTERNAL_ERROR"))


@app.get("/health")
def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy"}


@app.get("/")
def root() -> dict[str, str]:
    """Root endpoint with API info."""
    return {
        "app": settings.app_name,
        "version": settings.app_version,
        "docs": "/docs",
    }
