"""Pooled connection handle for a single tenant database."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from infrastructure.database.engines import create_tenant_engine, warm_pool
from infrastructure.database.exceptions import TenantPoolUnavailableError

if TYPE_CHECKING:
    from infrastructure.settings import DatabaseSettings


class TenantPool:
    """A bounded async engine for one tenant database plus its session factory.

    Instances are owned by TenantPoolManager. Request handlers only borrow
    sessions through ``session()``; they never dispose the pool.
    """

    def __init__(self, database: str, engine: AsyncEngine, max_connections: int):
        self.database = database
        self.engine = engine
        self.max_connections = max_connections
        self._sessionmaker = async_sessionmaker(
            engine,
            expire_on_commit=False,
            class_=AsyncSession,
        )

    def session(self) -> AsyncSession:
        """Create a session that borrows connections from this pool.

        Use as an async context manager so the connection is always returned:

            async with pool.session() as session:
                ...
        """
        return self._sessionmaker()

    async def dispose(self) -> None:
        """Close every pooled connection."""
        await self.engine.dispose()

    def __repr__(self) -> str:
        return f"TenantPool(database={self.database!r})"


async def open_tenant_pool(settings: DatabaseSettings, database: str) -> TenantPool:
    """Open a pool for ``database`` and verify it is reachable.

    The pool is filled with ``tenant_pool_min_connections`` verified
    connections, which stay idle so the first requests need not connect.

    Raises:
        TenantPoolUnavailableError: If the database cannot be reached within
            the configured connect timeout. The engine is disposed first.
    """
    engine = create_tenant_engine(settings, database)
    try:
        async with asyncio.timeout(settings.connect_timeout_seconds):
            await warm_pool(engine, settings.tenant_pool_min_connections)
    except (SQLAlchemyError, OSError, TimeoutError) as e:
        await engine.dispose()
        raise TenantPoolUnavailableError(
            database, f"Failed to connect to tenant database '{database}': {e}"
        ) from e
    except asyncio.CancelledError:
        await engine.dispose()
        raise

    return TenantPool(
        database=database,
        engine=engine,
        max_connections=settings.tenant_pool_max_connections,
    )
