"""Physical tenant database administration.

Creates, migrates, drops and archives the isolated database that backs each
tenant. Two implementations exist: PostgreSQL (one database per tenant on
the shared server) and SQLite (one file per tenant in a directory).
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Protocol

from sqlalchemy import MetaData, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.pool import NullPool

from infrastructure.database.engines import build_async_url, sqlite_database_path
from infrastructure.database.exceptions import DatabaseProvisioningError
from infrastructure.database.models import utc_now
from infrastructure.observability.probes import (
    DatabaseAdminProbe,
    DefaultDatabaseAdminProbe,
)

if TYPE_CHECKING:
    from infrastructure.settings import DatabaseSettings

_DATABASE_NAME_PATTERN = re.compile(r"^[a-z_][a-z0-9_]{0,62}$")


def archived_database_name(database: str) -> str:
    """Name a database is renamed to when it is archived."""
    return f"archived_{database}_{utc_now().strftime('%Y%m%d%H%M%S')}"


def _ensure_valid_name(database: str) -> None:
    if not _DATABASE_NAME_PATTERN.match(database):
        raise DatabaseProvisioningError(
            database, f"Invalid database identifier: {database!r}"
        )


class TenantDatabaseAdmin(Protocol):
    """Administrative operations on physical tenant databases."""

    async def create_database(self, database: str) -> None:
        """Create an empty database. Fails if it already exists."""
        ...

    async def apply_schema(self, database: str) -> None:
        """Create every tenant table that does not exist yet."""
        ...

    async def drop_database(self, database: str) -> None:
        """Drop a database. Dropping a missing database is not an error."""
        ...

    async def archive_database(self, database: str) -> str:
        """Rename a database out of the way and return its new name."""
        ...

    async def database_exists(self, database: str) -> bool:
        """Whether a database of that name is present."""
        ...

    async def close(self) -> None:
        """Release any connections held by the admin itself."""
        ...


class _SchemaApplier:
    """Applies the tenant metadata through a short-lived, unpooled engine."""

    def __init__(
        self,
        settings: DatabaseSettings,
        metadata: MetaData,
        probe: DatabaseAdminProbe | None = None,
    ):
        self._settings = settings
        self._metadata = metadata
        self._probe = probe or DefaultDatabaseAdminProbe()

    async def apply_schema(self, database: str) -> None:
        _ensure_valid_name(database)
        engine = create_async_engine(
            build_async_url(self._settings, database, must_exist=True),
            poolclass=NullPool,
        )
        try:
            async with engine.begin() as conn:
                await conn.run_sync(self._metadata.create_all)
        except SQLAlchemyError as e:
            self._probe.operation_failed("apply_schema", database, e)
            raise DatabaseProvisioningError(
                database, f"Failed to apply schema to '{database}': {e}"
            ) from e
        finally:
            await engine.dispose()

        self._probe.schema_applied(database, len(self._metadata.tables))


class PostgresTenantDatabaseAdmin(_SchemaApplier):
    """Manages tenant databases on the PostgreSQL server of the control plane.

    DDL such as CREATE DATABASE cannot run inside a transaction block, so the
    admin uses its own AUTOCOMMIT engine connected to the control-plane
    database.
    """

    def __init__(
        self,
        settings: DatabaseSettings,
        metadata: MetaData,
        probe: DatabaseAdminProbe | None = None,
        engine: AsyncEngine | None = None,
    ):
        super().__init__(settings, metadata, probe)
        self._engine = engine or create_async_engine(
            build_async_url(settings),
            isolation_level="AUTOCOMMIT",
            poolclass=NullPool,
        )

    def _quote(self, database: str) -> str:
        return self._engine.dialect.identifier_preparer.quote(database)

    async def _execute(self, operation: str, database: str, statement: str) -> None:
        try:
            async with self._engine.connect() as conn:
                await conn.execute(text(statement))
        except SQLAlchemyError as e:
            self._probe.operation_failed(operation, database, e)
            raise DatabaseProvisioningError(
                database, f"Failed to {operation.replace('_', ' ')} '{database}': {e}"
            ) from e

    async def create_database(self, database: str) -> None:
        _ensure_valid_name(database)
        await self._execute(
            "create_database", database, f"CREATE DATABASE {self._quote(database)}"
        )
        self._probe.database_created(database)

    async def drop_database(self, database: str) -> None:
        _ensure_valid_name(database)
        await self._execute(
            "drop_database",
            database,
            f"DROP DATABASE IF EXISTS {self._quote(database)} WITH (FORCE)",
        )
        self._probe.database_dropped(database)

    async def archive_database(self, database: str) -> str:
        _ensure_valid_name(database)
        archived = archived_database_name(database)
        await self._execute(
            "archive_database",
            database,
            f"ALTER DATABASE {self._quote(database)} "
            f"RENAME TO {self._quote(archived)}",
        )
        self._probe.database_archived(database, archived)
        return archived

    async def database_exists(self, database: str) -> bool:
        _ensure_valid_name(database)
        try:
            async with self._engine.connect() as conn:
                result = await conn.execute(
                    text("SELECT 1 FROM pg_database WHERE datname = :name"),
                    {"name": database},
                )
                return result.scalar() is not None
        except SQLAlchemyError as e:
            self._probe.operation_failed("database_exists", database, e)
            raise DatabaseProvisioningError(
                database, f"Failed to look up database '{database}': {e}"
            ) from e

    async def close(self) -> None:
        await self._engine.dispose()


class SqliteTenantDatabaseAdmin(_SchemaApplier):
    """Manages tenant databases as SQLite files under ``sqlite_directory``."""

    async def create_database(self, database: str) -> None:
        _ensure_valid_name(database)
        path = sqlite_database_path(self._settings, database)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            # An empty file is a valid, empty SQLite database
            path.touch(exist_ok=False)
        except OSError as e:
            self._probe.operation_failed("create_database", database, e)
            raise DatabaseProvisioningError(
                database, f"Failed to create database '{database}': {e}"
            ) from e
        self._probe.database_created(database)

    async def drop_database(self, database: str) -> None:
        _ensure_valid_name(database)
        path = sqlite_database_path(self._settings, database)
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            self._probe.operation_failed("drop_database", database, e)
            raise DatabaseProvisioningError(
                database, f"Failed to drop database '{database}': {e}"
            ) from e
        self._probe.database_dropped(database)

    async def archive_database(self, database: str) -> str:
        _ensure_valid_name(database)
        archived = archived_database_name(database)
        source = sqlite_database_path(self._settings, database)
        try:
            source.rename(sqlite_database_path(self._settings, archived))
        except OSError as e:
            self._probe.operation_failed("archive_database", database, e)
            raise DatabaseProvisioningError(
                database, f"Failed to archive database '{database}': {e}"
            ) from e
        self._probe.database_archived(database, archived)
        return archived

    async def database_exists(self, database: str) -> bool:
        _ensure_valid_name(database)
        return sqlite_database_path(self._settings, database).exists()

    async def close(self) -> None:
        return None


def create_database_admin(
    settings: DatabaseSettings,
    metadata: MetaData,
    probe: DatabaseAdminProbe | None = None,
) -> TenantDatabaseAdmin:
    """Create the admin matching the configured database driver."""
    if settings.driver == "sqlite":
        return SqliteTenantDatabaseAdmin(settings, metadata, probe)
    return PostgresTenantDatabaseAdmin(settings, metadata, probe)
