"""Registry of per-tenant connection pools.

The manager is created once per application and stored on ``app.state``.
Pools are opened lazily on first use and reused until explicitly closed.
"""

from __future__ import annotations

import asyncio
from functools import partial
from typing import TYPE_CHECKING, Awaitable, Callable

from infrastructure.database.exceptions import (
    PoolManagerClosedError,
    TenantPoolUnavailableError,
)
from infrastructure.database.tenant_pool import TenantPool, open_tenant_pool
from infrastructure.observability.probes import (
    DefaultTenantPoolProbe,
    TenantPoolProbe,
)

if TYPE_CHECKING:
    from infrastructure.settings import DatabaseSettings

PoolFactory = Callable[[str], Awaitable[TenantPool]]


class TenantPoolManager:
    """Caches one TenantPool per tenant database name.

    Lookups of an existing pool are plain dictionary reads. A miss takes a
    per-database asyncio.Lock and re-checks before opening, so concurrent
    first requests for the same tenant open exactly one pool while other
    tenants proceed unblocked. A failed open is never cached.
    """

    def __init__(
        self,
        pool_factory: PoolFactory,
        probe: TenantPoolProbe | None = None,
    ):
        """Initialize the manager.

        Args:
            pool_factory: Coroutine function opening a pool for a database name.
                It must raise TenantPoolUnavailableError when unreachable.
            probe: Optional observability probe
        """
        self._pool_factory = pool_factory
        self._probe = probe or DefaultTenantPoolProbe()
        self._pools: dict[str, TenantPool] = {}
        self._locks: dict[str, asyncio.Lock] = {}
        self._closed = False

    @classmethod
    def from_settings(
        cls,
        settings: DatabaseSettings,
        probe: TenantPoolProbe | None = None,
    ) -> TenantPoolManager:
        """Create a manager that opens real pools with ``open_tenant_pool``."""
        return cls(pool_factory=partial(open_tenant_pool, settings), probe=probe)

    @property
    def cached_databases(self) -> frozenset[str]:
        """Names of databases with an open pool."""
        return frozenset(self._pools)

    @property
    def is_closed(self) -> bool:
        return self._closed

    def _lock_for(self, database: str) -> asyncio.Lock:
        return self._locks.setdefault(database, asyncio.Lock())

    async def get_pool(self, database: str) -> TenantPool:
        """Return the pool for ``database``, opening it on first use.

        Raises:
            TenantPoolUnavailableError: If the database cannot be reached.
            PoolManagerClosedError: If the manager has been shut down.
        """
        pool = self._pools.get(database)
        if pool is not None:
            self._probe.pool_cache_hit(database)
            return pool

        if self._closed:
            raise PoolManagerClosedError("Tenant pool manager is closed")

        async with self._lock_for(database):
            # Double-check after acquiring lock
            pool = self._pools.get(database)
            if pool is not None:
                self._probe.pool_cache_hit(database)
                return pool

            if self._closed:
                raise PoolManagerClosedError("Tenant pool manager is closed")

            try:
                pool = await self._pool_factory(database)
            except TenantPoolUnavailableError as e:
                self._probe.pool_creation_failed(database, e)
                raise

            # Shutdown may have started while the pool was opening
            if self._closed:
                await pool.dispose()
                raise PoolManagerClosedError("Tenant pool manager is closed")

            self._pools[database] = pool
            self._probe.pool_created(database, pool.max_connections)
            return pool

    async def close(self, database: str) -> bool:
        """Dispose the pool for ``database`` if one is cached.

        Waits for an in-flight open of the same database to finish first.

        Returns:
            True if a pool was closed, False if none was cached.
        """
        async with self._lock_for(database):
            pool = self._pools.pop(database, None)
        if pool is None:
            return False

        await pool.dispose()
        self._probe.pool_closed(database)
        return True

    async def close_all(self) -> None:
        """Dispose every cached pool and refuse to open new ones.

        A pool whose disposal fails is logged and skipped so the remaining
        pools are still released.
        """
        self._closed = True
        pools = list(self._pools.values())
        self._pools.clear()

        for pool in pools:
            try:
                await pool.dispose()
            except Exception as e:
                self._probe.pool_close_failed(pool.database, e)

        self._probe.all_pools_closed(len(pools))
