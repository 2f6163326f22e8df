"""
Vacancies FastAPI Application
Main entry point for the grants/vacancies catalog API.
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from vacancies.api import categories, grants, health
from vacancies.core.config import settings
from vacancies.core.context import REQUEST_ID_HEADER, new_request_id
from vacancies.core.exceptions import GENERIC_SERVER_ERROR, ApiError, UnavailableError
from vacancies.core.sentry import capture_exception, init_sentry
from vacancies.database import close_db, init_db

# =============================================================================
# Logging Configuration
# =============================================================================

logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# =============================================================================
# Lifespan Events
# =============================================================================

INSECURE_KEYS = (
    "CHANGE-THIS-IN-PRODUCTION-REQUIRED",
    "secret",
    "changeme",
)


def validate_security_settings() -> None:
    """
    Validate critical security settings at startup.
    Raises RuntimeError if insecure configuration detected in production.
    """
    is_production = settings.environment.lower() in ("production", "prod")
    warnings = []
    errors = []

    if settings.secret_key in INSECURE_KEYS or len(settings.secret_key) < 32:
        msg = "SECRET_KEY is insecure or too short (minimum 32 characters required)"
        if is_production and settings.auth_enabled:
            errors.append(msg)
        elif settings.auth_enabled:
            warnings.append(msg)

    if is_production and settings.debug:
        errors.append("DEBUG mode must be disabled in production (set DEBUG=false)")

    if is_production and not settings.auth_enabled:
        warnings.append("AUTH_ENABLED is false - category changes are open to anonymous callers")

    for warning in warnings:
        logger.warning(f"SECURITY WARNING: {warning}")

    if errors:
        for error in errors:
            logger.error(f"SECURITY ERROR: {error}")
        raise RuntimeError(f"Cannot start in production with insecure configuration: {'; '.join(errors)}")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Handle application startup and shutdown events.

    Startup:
    - Validate security settings
    - Initialize error tracking
    - Create tables if needed (debug only)

    Shutdown:
    - Close database connections
    """
    logger.info("Starting Vacancies API...")
    logger.info(f"Environment: {settings.environment}")
    logger.info(f"Debug mode: {settings.debug}")
    logger.info(f"Version: {settings.app_version}")

    validate_security_settings()

    if init_sentry():
        logger.info("Sentry error tracking enabled")
    else:
        logger.info("Sentry error tracking disabled (no DSN configured)")

    # In production the schema comes from alembic migrations
    if settings.debug:
        await init_db()
        logger.info("Database initialized successfully")

    logger.info("Application startup complete")

    yield

    logger.info("Shutting down Vacancies API...")
    await close_db()
    logger.info("Database connections closed")


# =============================================================================
# FastAPI Application
# =============================================================================

app = FastAPI(
    title="Vacancies API",
    description="""
    Grants and vacancies catalog API.

    - **Categories**: create, rename, search and delete grant categories
    - **Grants**: publish grants, tag them with categories, filter by category,
      country and active status
    """,
    version=settings.app_version,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
    openapi_url="/openapi.json" if settings.debug else None,
    lifespan=lifespan,
)

# =============================================================================
# Middleware
# =============================================================================

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=[REQUEST_ID_HEADER, "Location"],
)


@app.middleware("http")
async def request_id_middleware(request: Request, call_next):
    """Assign every request a correlation id and echo it back."""
    request_id = request.headers.get(REQUEST_ID_HEADER) or new_request_id()
    request.state.request_id = request_id
    response = await call_next(request)
    response.headers[REQUEST_ID_HEADER] = request_id
    return response


# =============================================================================
# Exception Handlers
# =============================================================================


def _request_id(request: Request) -> Optional[str]:
    return getattr(request.state, "request_id", None)


def error_body(
    request: Request,
    status_code: int,
    code: str,
    message: Any,
    **extra: Any,
) -> dict[str, Any]:
    body = {
        "error": True,
        "code": code,
        "message": message,
        "status_code": status_code,
        "request_id": _request_id(request),
    }
    body.update(extra)
    return body


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Handle HTTP exceptions with consistent format."""
    if isinstance(exc, ApiError):
        if exc.status_code >= 500:
            return _server_fault(request, exc.__cause__ or exc, exc.code)
        code, extra = exc.code, exc.extra()
    else:
        code, extra = ("not_found" if exc.status_code == 404 else "error"), {}

    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(request, exc.status_code, code, exc.detail, **extra),
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed ids, bodies and query values are rejected as 400 with field-level detail."""
    errors = []
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ())]
        field = ".".join(loc[1:]) if len(loc) > 1 else ".".join(loc)
        errors.append({"field": field, "message": err.get("msg", "Invalid value")})

    logger.warning(
        f"[{_request_id(request)}] Invalid request to {request.method} {request.url.path}: "
        + "; ".join(f"{e['field']}: {e['message']}" for e in errors)
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body(
            request,
            status.HTTP_400_BAD_REQUEST,
            "invalid_argument",
            "Validation failed",
            errors=errors,
        ),
    )


def _server_fault(request: Request, exc: Exception, code: str) -> JSONResponse:
    request_id = _request_id(request)
    logger.exception(f"[{request_id}] Unexpected error during {request.method} {request.url.path}: {exc}")

    event_id = capture_exception(
        exc,
        request_id=request_id,
        extra={
            "request_url": str(request.url),
            "request_method": request.method,
            "path_params": dict(request.path_params),
        },
    )

    # Don't expose internal errors in production
    detail = str(exc) if settings.debug else GENERIC_SERVER_ERROR

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body(
            request,
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            code,
            detail,
            error_id=event_id,
        ),
    )


@app.exception_handler(SQLAlchemyError)
async def database_exception_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """Store unreachable or failed; safe for the caller to retry."""
    return _server_fault(request, exc, UnavailableError.code)


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions."""
    return _server_fault(request, exc, "internal_error")


# =============================================================================
# API Routers
# =============================================================================

app.include_router(health.router)
app.include_router(categories.router)
app.include_router(grants.router)


@app.get(
    "/",
    tags=["Root"],
    summary="API root",
    description="Welcome endpoint with API information.",
)
async def root() -> dict[str, Any]:
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "docs_url": "/docs" if settings.debug else None,
        "health_url": "/health",
        "readiness_url": "/health/ready",
    }


# For running with uvicorn directly
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "vacancies.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
        log_level="debug" if settings.debug else "info",
    )
