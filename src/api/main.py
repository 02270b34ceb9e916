"""Main FastAPI application entry point."""

from __future__ import annotations

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import async_sessionmaker

from fleet import presentation as fleet_presentation
from infrastructure.database.admin import create_database_admin
from infrastructure.database.engines import create_control_plane_engine, warm_pool
from infrastructure.database.models import ControlPlaneBase, TenantBase
from infrastructure.database.pool_manager import TenantPoolManager
from infrastructure.logging import configure_logging
from infrastructure.observability import DefaultStartupProbe, ObservationContext
from infrastructure.settings import Settings, get_settings
from infrastructure.version import __version__
from shared_kernel.auth import DefaultTokenValidatorProbe, TokenValidator
from shared_kernel.errors import ErrorCode, error_detail
from shared_kernel.middleware.request_context import RequestContextMiddleware
from tenancy import presentation as tenancy_presentation
from tenancy.infrastructure import models as _tenancy_models  # noqa: F401

logger = structlog.get_logger()


@asynccontextmanager
async def car_rental_lifespan(app: FastAPI):
    """Application lifespan context.

    Manages:
    - Control-plane engine (warmed to its minimum size) and sessionmaker
    - Tenant pool manager (pools created lazily, all closed on shutdown)
    - Tenant database admin and token validator
    """
    settings: Settings = app.state.settings
    configure_logging(settings.log_level)

    probe = DefaultStartupProbe().with_context(
        ObservationContext(extra={"app_name": settings.app_name})
    )
    probe.application_starting(__version__, settings.database.driver)

    engine = create_control_plane_engine(settings.database)
    app.state.control_plane_engine = engine
    app.state.control_plane_sessionmaker = async_sessionmaker(
        engine, expire_on_commit=False
    )
    app.state.pool_manager = TenantPoolManager.from_settings(settings.database)
    app.state.database_admin = create_database_admin(
        settings.database, TenantBase.metadata
    )
    app.state.token_validator = TokenValidator(
        secret=settings.auth.jwt_secret.get_secret_value(),
        probe=DefaultTokenValidatorProbe(),
        algorithm=settings.auth.jwt_algorithm,
    )

    try:
        if settings.tenancy.create_control_plane_schema:
            async with engine.begin() as conn:
                await conn.run_sync(ControlPlaneBase.metadata.create_all)
            probe.control_plane_schema_ensured(settings.database.database)

        await warm_pool(engine, settings.database.pool_min_connections)
        probe.control_plane_pool_warmed(settings.database.pool_min_connections)

        yield
    finally:
        await app.state.pool_manager.close_all()
        await app.state.database_admin.close()
        await engine.dispose()
        probe.application_stopped()


async def handle_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    fields = sorted(
        {".".join(str(part) for part in error["loc"]) for error in exc.errors()}
    )
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_CONTENT,
        content={
            "detail": error_detail(
                ErrorCode.VALIDATION_ERROR,
                f"Invalid request: {', '.join(fields)}",
            )
        },
    )


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled_exception", error_type=type(exc).__name__)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "detail": error_detail(ErrorCode.INTERNAL_ERROR, "Internal server error")
        },
    )


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the application.

    Args:
        settings: Explicit settings, e.g. from tests. Defaults to the
            environment-derived ``get_settings()``.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Multi-tenant car rental platform API",
        version=__version__,
        debug=settings.debug,
        lifespan=car_rental_lifespan,
    )
    app.state.settings = settings

    app.add_middleware(RequestContextMiddleware)

    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)

    app.include_router(tenancy_presentation.router)
    app.include_router(fleet_presentation.router)
    app.include_router(fleet_presentation.public_router)

    @app.get("/health")
    def health():
        """Basic health check endpoint."""
        return {"status": "ok"}

    return app


app = create_app()
