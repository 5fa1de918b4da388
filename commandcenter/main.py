"""FastAPI application entry point."""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import ORJSONResponse
from sqlalchemy.exc import SQLAlchemyError
from uvicorn.middleware.proxy_headers import ProxyHeadersMiddleware

from commandcenter.api import router as api_router
from commandcenter.config import get_settings
from commandcenter.db.session import close_db, init_db
from commandcenter.middleware.logging import LoggingMiddleware, configure_logging
from commandcenter.middleware.request_id import RequestIDMiddleware
from commandcenter.services.exceptions import (
    CommandCenterError,
    InvalidPayloadError,
    StorageFailureError,
    UnauthenticatedError,
)
from commandcenter.services.validation import error_from_details

logger = structlog.get_logger()
settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager for startup/shutdown events."""
    # Startup
    logger.info("Starting Command Center API", version=settings.app_version)
    await init_db()
    logger.info("Database connection initialized")

    yield

    # Shutdown
    logger.info("Shutting down Command Center API")
    await close_db()
    logger.info("Database connection closed")


def error_response(exc: CommandCenterError) -> ORJSONResponse:
    content: dict[str, str | None] = {"detail": exc.message, "code": exc.code}
    if isinstance(exc, InvalidPayloadError):
        content["field"] = exc.field

    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, UnauthenticatedError) else None
    return ORJSONResponse(status_code=exc.status_code, content=content, headers=headers)


async def command_center_error_handler(request: Request, exc: CommandCenterError) -> ORJSONResponse:
    """Map service exceptions onto their HTTP status."""
    if exc.status_code >= 500:
        logger.error("Service error", code=exc.code, error=exc.message)
    return error_response(exc)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> ORJSONResponse:
    """Malformed input is a 400 naming the first offending field."""
    errors = exc.errors()
    if errors:
        return error_response(error_from_details(errors[0]))
    return error_response(InvalidPayloadError(None, "Invalid payload"))


async def storage_error_handler(request: Request, exc: SQLAlchemyError) -> ORJSONResponse:
    """Unexpected datastore failures: logged in full, reported generically."""
    logger.exception("Storage failure", error_type=type(exc).__name__)
    return error_response(StorageFailureError())


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    configure_logging(settings)

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Workspace-scoped tasks, projects, meetings and weekly rollups for a startup team",
        openapi_url=f"{settings.api_prefix}/openapi.json",
        docs_url=f"{settings.api_prefix}/docs",
        redoc_url=f"{settings.api_prefix}/redoc",
        default_response_class=ORJSONResponse,
        lifespan=lifespan,
    )

    app.add_exception_handler(CommandCenterError, command_center_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(SQLAlchemyError, storage_error_handler)

    # Add middleware (order matters - last added is first executed)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(LoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)
    # Trust proxy headers (X-Forwarded-Proto, X-Forwarded-For) from the load balancer
    app.add_middleware(ProxyHeadersMiddleware, trusted_hosts=["*"])

    # Include API router
    app.include_router(api_router, prefix=settings.api_prefix)

    @app.get("/health")
    async def health_check() -> dict[str, str]:
        """Health check endpoint for load balancers."""
        return {"status": "healthy", "version": settings.app_version}

    return app


app = create_app()
