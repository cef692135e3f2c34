"""
Contact Inbox FastAPI Application
Main entry point for the contact message API.
"""

from contextlib import asynccontextmanager
from typing import Any

import structlog
from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from backend.api import health, messages
from backend.core.config import Settings, settings
from backend.core.exceptions import StartupError, StorageError, ValidationError
from backend.core.logging import configure_logging
from backend.core.sentry import init_sentry, last_event_id
from backend.storage import SubmissionStore, create_store

logger = structlog.get_logger(__name__)

MIN_ADMIN_SECRET_LENGTH = 16


# =============================================================================
# Startup
# =============================================================================


def validate_security_settings() -> None:
    """
    Check admin and database settings at startup.
    Raises RuntimeError if insecure configuration detected in production.
    """
    is_production = settings.environment.lower() in ("production", "prod")
    warnings = []
    errors = []

    if not settings.admin_secret:
        warnings.append("ADMIN_SECRET is not set - the listing endpoint will reject every request")
    elif len(settings.admin_secret) < MIN_ADMIN_SECRET_LENGTH:
        msg = f"ADMIN_SECRET is shorter than {MIN_ADMIN_SECRET_LENGTH} characters"
        if is_production:
            errors.append(msg)
        else:
            warnings.append(msg)

    if is_production and settings.debug:
        errors.append("DEBUG mode must be disabled in production (set DEBUG=false)")

    if is_production and settings.storage_backend == "sql" and not settings.db_ssl:
        warnings.append("DB_SSL is false - database traffic is not encrypted")

    for warning in warnings:
        logger.warning("security_warning", detail=warning)

    if errors:
        for error in errors:
            logger.error("security_error", detail=error)
        raise RuntimeError(f"Cannot start in production with insecure configuration: {'; '.join(errors)}")


def log_storage_settings(config: Settings) -> None:
    """Log where the store will connect; the password only by length."""
    if config.storage_backend == "mongo":
        logger.info(
            "storage_settings",
            backend="mongo",
            database=config.mongo_db_name,
            collection=config.mongo_collection,
        )
        return

    logger.info(
        "storage_settings",
        backend="sql",
        driver=config.db_driver,
        host=config.db_host or None,
        port=config.db_port,
        user=config.db_user or None,
        database=config.db_name or None,
        password_length=len(config.db_password),
        ssl=config.db_ssl,
        url_override=config.database_url is not None,
    )


async def start_storage(config: Settings) -> SubmissionStore:
    """
    Build, connect and prepare the configured store.

    Any failure is fatal: the caller must not serve requests.
    """
    log_storage_settings(config)
    store = create_store(config)
    try:
        await store.connect()
        await store.ensure_schema()
    except StorageError as e:
        logger.error("storage_startup_failed", backend=store.name, error=str(e))
        await store.close()
        raise StartupError(f"Storage backend '{store.name}' failed to start") from e
    return store


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Handle application startup and shutdown events.

    Startup:
    - Configure logging and error tracking
    - Validate security settings
    - Connect the storage backend and ensure its schema

    Uvicorn only starts accepting connections after this completes, so a
    failure here stops the process before any request is served.

    Shutdown:
    - Close storage connections
    """
    configure_logging(settings.log_level, settings.log_json)
    logger.info(
        "startup",
        app=settings.app_name,
        environment=settings.environment,
        debug=settings.debug,
        version=settings.app_version,
    )

    validate_security_settings()

    if init_sentry():
        logger.info("sentry_enabled")

    store = await start_storage(settings)
    app.state.store = store
    logger.info("startup_complete", backend=store.name)

    yield

    logger.info("shutdown", backend=store.name)
    app.state.store = None
    await store.close()
    logger.info("storage_closed")


# =============================================================================
# FastAPI Application
# =============================================================================

app = FastAPI(
    title="Contact Inbox API",
    description="""
    Contact form backend.

    - **POST /api/mensajes**: store a message from the public contact form
    - **GET /api/mensajes**: list stored messages (admin key required)
    """,
    version=settings.app_version,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
    openapi_url="/openapi.json" if settings.debug else None,
    lifespan=lifespan,
)

# =============================================================================
# CORS Middleware
# =============================================================================

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)

# =============================================================================
# Exception Handlers
# =============================================================================


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Handle HTTP exceptions with consistent format."""
    content: dict[str, Any] = {
        "error": True,
        "message": exc.detail,
        "status_code": exc.status_code,
    }
    if isinstance(exc, ValidationError):
        content["errors"] = exc.errors
    return JSONResponse(status_code=exc.status_code, content=content, headers=exc.headers)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed bodies are client errors like any other validation failure."""
    errors = [str(error.get("msg", "Invalid request")) for error in exc.errors()]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": True,
            "message": "Invalid request body.",
            "status_code": status.HTTP_400_BAD_REQUEST,
            "errors": errors,
        },
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions."""
    logger.exception("unexpected_error", path=request.url.path, method=request.method)

    event_id = last_event_id()

    # Don't expose internal errors in production
    if settings.debug:
        detail = str(exc)
    else:
        detail = f"Internal server error (ref: {event_id})" if event_id else "Internal server error"

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": True,
            "message": detail,
            "status_code": 500,
            "error_id": event_id,
        },
    )


# =============================================================================
# API Routers
# =============================================================================

app.include_router(health.router)
app.include_router(messages.router)


@app.get(
    "/",
    tags=["Root"],
    summary="API root",
)
async def root() -> dict[str, Any]:
    """Basic API information and links."""
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "messages_url": messages.router.prefix,
        "health_url": "/health",
        "readiness_url": "/health/ready",
    }


def run() -> None:
    """Console entry point: serve the app with uvicorn."""
    import uvicorn

    uvicorn.run(
        "backend.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level="debug" if settings.debug else "info",
    )


if __name__ == "__main__":
    run()
