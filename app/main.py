from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.rate_limiter import RequestBudgets
from app.api.security_headers import add_security_headers
from app.config import RateLimitSettings, get_cors_settings, get_rate_limit_settings
from db.session import Database

logger = logging.getLogger(__name__)


def _validate_env() -> None:
    """
    Validate all required environment variables at startup.

    Raises RuntimeError listing every missing variable so the operator can
    fix all problems in one restart cycle.
    """

    from db.config import load_env_files

    load_env_files()

    errors: list[str] = []

    database_url = os.getenv("DATABASE_URL", "").strip()
    cloud_database_url = os.getenv("CLOUD_DATABASE_URL", "").strip()
    local_database_url = os.getenv("LOCAL_DATABASE_URL", "").strip()
    if not (database_url or cloud_database_url or local_database_url):
        errors.append(
            "No database URL configured. Set DATABASE_URL, CLOUD_DATABASE_URL "
            "or LOCAL_DATABASE_URL."
        )

    if not os.getenv("SUPABASE_JWT_SECRET", "").strip():
        errors.append(
            "SUPABASE_JWT_SECRET is not set. Access tokens cannot be verified without it."
        )

    if errors:
        raise RuntimeError(
            "Startup validation failed - missing or invalid environment variables:\n"
            + "\n".join(f"  - {e}" for e in errors)
        )


def _configure_logging() -> None:
    """
    Configure root logging once for the API process.
    """

    log_level = os.getenv("LOG_LEVEL", "INFO").strip().upper()
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


@asynccontextmanager
async def _lifespan(application: FastAPI) -> AsyncIterator[None]:
    """Open the storage client on boot and dispose it on exit."""
    database: Database | None = application.state.database
    owns_database = database is None
    if owns_database:
        _validate_env()
        database = Database.from_settings()
        application.state.database = database

    database.ping()
    logger.info("Database connectivity confirmed")
    try:
        yield
    finally:
        if owns_database:
            database.close()
            application.state.database = None


def create_app(
    *,
    database: Database | None = None,
    rate_limits: RateLimitSettings | None = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Run with ``uvicorn app.main:create_app --factory``. When ``database`` is
    omitted it is built from the environment during startup.
    """

    _configure_logging()

    application = FastAPI(
        title="Inspection Ingest API",
        version="1.0.0",
        lifespan=_lifespan,
    )

    limits = rate_limits or get_rate_limit_settings()
    application.state.database = database
    application.state.request_budgets = RequestBudgets(
        default_calls=limits.default_calls,
        bulk_calls=limits.bulk_calls,
        window_seconds=limits.window_seconds,
    )

    cors = get_cors_settings()
    if cors.frontend_url:
        application.add_middleware(
            CORSMiddleware,
            allow_origins=[cors.frontend_url],
            allow_methods=["GET", "POST"],
            allow_headers=["Authorization", "Content-Type"],
            allow_credentials=True,
            max_age=cors.max_age_seconds,
        )

    add_security_headers(application)

    from app.api.routers import inspections_router

    application.include_router(inspections_router)

    @application.get("/health")
    def healthcheck() -> dict[str, str]:
        return {"status": "ok"}

    return application
