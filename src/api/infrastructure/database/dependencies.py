"""Database dependency injection for FastAPI.

Provides control-plane sessions and access to the tenant pool manager.
Engines and pools are created in the application lifespan and stored on
``app.state``; nothing here is a module-level singleton, so every app
instance (including each test app) owns its own resources.
"""

from __future__ import annotations

from typing import AsyncGenerator

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from infrastructure.database.admin import TenantDatabaseAdmin
from infrastructure.database.pool_manager import TenantPoolManager


def get_control_plane_sessionmaker(
    request: Request,
) -> async_sessionmaker[AsyncSession]:
    """Get the control-plane sessionmaker created at startup."""
    return request.app.state.control_plane_sessionmaker


def get_tenant_pool_manager(request: Request) -> TenantPoolManager:
    """Get the application-scoped tenant pool manager."""
    return request.app.state.pool_manager


def get_database_admin(request: Request) -> TenantDatabaseAdmin:
    """Get the application-scoped tenant database admin."""
    return request.app.state.database_admin


async def get_control_plane_session(
    request: Request,
) -> AsyncGenerator[AsyncSession, None]:
    """Provide a control-plane session (FastAPI dependency).

    The session is configured to NOT auto-commit. Callers must explicitly
    manage transactions using `async with session.begin()`.

    Usage:
        @router.get("/tenants/{id}")
        async def get_tenant(
            session: AsyncSession = Depends(get_control_plane_session)
        ):
            ...

    Yields:
        AsyncSession bound to the control-plane engine
    """
    sessionmaker = get_control_plane_sessionmaker(request)
    async with sessionmaker() as session:
        yield session
