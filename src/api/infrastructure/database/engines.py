"""Database engine creation for async SQLAlchemy.

This module provides factory functions for the control-plane engine and the
per-tenant engines. Every engine is an async connection pool: asyncpg for
PostgreSQL, aiosqlite (one file per database) for development and tests.
"""

from __future__ import annotations

from contextlib import AsyncExitStack
from pathlib import Path
from typing import TYPE_CHECKING

from sqlalchemy import text
from sqlalchemy.engine import URL
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

if TYPE_CHECKING:
    from infrastructure.settings import DatabaseSettings

__all__ = [
    "build_async_url",
    "create_control_plane_engine",
    "create_tenant_engine",
    "sqlite_database_path",
    "warm_pool",
]


def sqlite_database_path(settings: DatabaseSettings, database: str) -> Path:
    """Absolute path of the SQLite file backing ``database``."""
    return settings.sqlite_directory.resolve() / f"{database}.db"


def build_async_url(
    settings: DatabaseSettings,
    database: str | None = None,
    *,
    must_exist: bool = False,
) -> str:
    """Build an async database URL.

    Properly percent-encodes username and password to handle special characters
    per RFC 3986 using SQLAlchemy's URL builder.

    Args:
        settings: Database connection settings
        database: Database to connect to (defaults to the control-plane database)
        must_exist: For SQLite, open the file read-write without creating it,
            so a missing tenant database surfaces as a connection error

    Returns:
        Connection URL string with credentials properly percent-encoded
    """
    name = database or settings.database

    if settings.driver == "sqlite":
        path = sqlite_database_path(settings, name)
        if must_exist:
            url = URL.create(
                drivername="sqlite+aiosqlite",
                database=f"file:{path}",
                query={"mode": "rw", "uri": "true"},
            )
        else:
            url = URL.create(drivername="sqlite+aiosqlite", database=str(path))
        return url.render_as_string(hide_password=False)

    url = URL.create(
        drivername="postgresql+asyncpg",
        username=settings.username,
        password=settings.password.get_secret_value(),
        host=settings.host,
        port=settings.port,
        database=name,
    )
    return url.render_as_string(hide_password=False)


def create_control_plane_engine(settings: DatabaseSettings) -> AsyncEngine:
    """Create the async engine for the shared control-plane database.

    Args:
        settings: Database connection settings

    Returns:
        Configured async engine holding the tenant registry
    """
    if settings.driver == "sqlite":
        settings.sqlite_directory.mkdir(parents=True, exist_ok=True)

    return create_async_engine(
        build_async_url(settings),
        pool_size=settings.pool_max_connections,
        max_overflow=0,  # No overflow - strict pool limit
        pool_timeout=settings.pool_timeout_seconds,
        pool_recycle=settings.pool_recycle_seconds,
        pool_pre_ping=True,
        echo=False,
    )


def create_tenant_engine(settings: DatabaseSettings, database: str) -> AsyncEngine:
    """Create a bounded async engine for one tenant database.

    The engine never creates the database; it must already exist.

    Args:
        settings: Database connection settings
        database: Physical tenant database name

    Returns:
        Configured async engine for the tenant database
    """
    connect_args: dict[str, object] = {}
    if settings.driver == "postgresql":
        connect_args["timeout"] = settings.connect_timeout_seconds

    return create_async_engine(
        build_async_url(settings, database, must_exist=True),
        pool_size=settings.tenant_pool_max_connections,
        max_overflow=0,
        pool_timeout=settings.pool_timeout_seconds,
        pool_recycle=settings.pool_recycle_seconds,
        pool_pre_ping=True,
        connect_args=connect_args,
        echo=False,
    )


async def warm_pool(engine: AsyncEngine, connections: int) -> None:
    """Fill an engine's pool with ``connections`` idle, verified connections.

    SQLAlchemy pools open connections on demand and have no minimum size, so
    the minimum is reached by holding that many connections at once, each
    checked with ``SELECT 1``, and returning them all to the pool.

    Args:
        engine: Engine whose pool to fill; its pool size must be at least
            ``connections``
        connections: Number of connections to leave idle in the pool
    """
    async with AsyncExitStack() as stack:
        for _ in range(connections):
            conn = await stack.enter_async_context(engine.connect())
            await conn.execute(text("SELECT 1"))
