"""Main FastAPI application."""

import logging
import time
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .database import engine, get_db, init_db, is_postgresql, SessionLocal, DATABASE_URL
from .api import feeds_router, revisions_router, uis_router
from .core.config import settings, ConfigurationError, Environment
from .core.logging_config import redact, setup_logging
from .middleware.exception_handler import (
    editor_exception_handler,
    unhandled_exception_handler,
    validation_exception_handler,
)
from .middleware.request_context import RequestContextMiddleware
from .exceptions import EditorException
from .repositories import UiRepository

setup_logging(log_level=settings.log_level, log_format=settings.log_format)
logger = logging.getLogger(__name__)

_VERSION = "1.0.0"


# ---------------------------------------------------------------------------
# Startup validation: fail fast with an actionable message when the database
# is unreachable, then create any missing tables.
# ---------------------------------------------------------------------------

def _validate_database_connection() -> None:
    masked = redact(DATABASE_URL)
    logger.info(f"Connecting to database: {masked}")

    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        logger.info("Database connection verified")
    except SQLAlchemyError as e:
        error_str = redact(str(e))
        if is_postgresql():
            if "could not connect" in error_str or "Connection refused" in error_str:
                hint = "Verify PostgreSQL is running and DATABASE_URL points at it."
            elif "authentication failed" in error_str:
                hint = "Check the username and password in DATABASE_URL."
            elif "does not exist" in error_str:
                hint = "Create the database first: createdb <database_name>"
            else:
                hint = "Check DATABASE_URL."
        else:
            hint = "Check that the SQLite file's directory exists and is writable."
        logger.critical(
            "Database connection failed.\n"
            f"  DATABASE_URL: {masked}\n"
            f"  {hint}\n"
            f"  Error: {error_str}"
        )
        raise SystemExit(1) from e


_validate_database_connection()
init_db()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup checks and development seeding."""
    logger.info(f"Environment: {settings.environment.value}")
    try:
        settings.validate_production_config()
    except ConfigurationError as e:
        logger.critical(f"STARTUP BLOCKED: {e}")
        raise SystemExit(1) from e

    if settings.environment == Environment.DEVELOPMENT:
        if settings.uses_default_secret():
            if settings.auth_enabled:
                logger.critical(
                    "SECURITY: AUTH_ENABLED=true but JWT_SECRET_KEY is the default. "
                    "Anyone can forge tokens. Generate a secure key: openssl rand -hex 32"
                )
            else:
                logger.warning("SECURITY: JWT_SECRET_KEY is the default.")

        if not settings.auth_enabled:
            logger.warning(
                "SECURITY: Authentication is disabled (AUTH_ENABLED=false). "
                "Every request acts as %s.",
                settings.dev_user_id,
            )

    if not settings.auth_enabled:
        from .core.seeder import seed_dev_user

        db = SessionLocal()
        try:
            seed_dev_user(db, settings.dev_user_id)
        except SQLAlchemyError as e:
            db.rollback()
            logger.warning(f"Development user seeding failed (non-fatal): {e}")
        finally:
            db.close()

    yield


app = FastAPI(
    title="Website Editor API",
    description=(
        "Backend for an AI website editor. Each UI holds a tree of prompt "
        "revisions with their generated code; UIs can be forked, liked and "
        "browsed through ranked feeds.\n\n"
        "**Authentication:** when `AUTH_ENABLED=true`, write endpoints require a "
        "`Bearer` token. With `AUTH_ENABLED=false` requests act as the development user."
    ),
    version=_VERSION,
    lifespan=lifespan,
)

# Outermost first: CORS wraps request context.
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins(),
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["Content-Type", "Authorization", "X-Request-ID"],
)
app.add_middleware(RequestContextMiddleware)

app.add_exception_handler(EditorException, editor_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)

logger.info(
    "Website Editor API started | env=%s | db=%s | auth=%s | cors=%s",
    settings.environment.value,
    "PostgreSQL" if is_postgresql() else "SQLite",
    "enabled" if settings.auth_enabled else "disabled",
    ",".join(settings.get_cors_origins()),
)

# Feeds first: /uis/home must not be captured by /uis/{ui_id}.
app.include_router(feeds_router)
app.include_router(uis_router)
app.include_router(revisions_router)


@app.get("/")
def root():
    """Service info."""
    return {"name": "Website Editor API", "version": _VERSION, "status": "running"}


_startup_time = time.monotonic()


@app.get("/health")
def health_check(db: Session = Depends(get_db)):
    """Database status, uptime and UI count.

    Never raises, so load balancers get a degraded body instead of a 5xx.
    """
    db_status = "ok"
    ui_count = 0
    try:
        db.execute(text("SELECT 1"))
        ui_count = UiRepository(db).count()
    except SQLAlchemyError:
        db.rollback()
        db_status = "error"

    return {
        "status": "healthy" if db_status == "ok" else "degraded",
        "db": db_status,
        "uptime_seconds": round(time.monotonic() - _startup_time),
        "version": _VERSION,
        "ui_count": ui_count,
    }
