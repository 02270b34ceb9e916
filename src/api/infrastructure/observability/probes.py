"""Domain probes for infrastructure observability.

Domain probes provide a high-level instrumentation API oriented around
domain semantics, keeping infrastructure code clean and testable.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from infrastructure.observability.context import ObservationContext


class TenantPoolProbe(Protocol):
    """Domain probe for per-tenant connection pool observability.

    This probe captures domain-significant events related to the lifecycle
    of tenant pools without exposing logging implementation details.
    """

    def pool_cache_hit(self, database: str) -> None:
        """Record that an existing pool was reused."""
        ...

    def pool_created(self, database: str, max_connections: int) -> None:
        """Record that a new pool was opened and cached."""
        ...

    def pool_creation_failed(self, database: str, error: Exception) -> None:
        """Record that a pool could not be opened."""
        ...

    def pool_closed(self, database: str) -> None:
        """Record that a single pool was disposed."""
        ...

    def all_pools_closed(self, count: int) -> None:
        """Record that every cached pool was disposed at shutdown."""
        ...

    def pool_close_failed(self, database: str, error: Exception) -> None:
        """Record that disposing a pool raised."""
        ...

    def with_context(self, context: ObservationContext) -> TenantPoolProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultTenantPoolProbe:
    """Default implementation of TenantPoolProbe using structlog.

    Supports observation context for including request-scoped metadata
    with all log events.
    """

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        """Get context metadata as kwargs for logging."""
        if self._context is None:
            return {}
        return self._context.as_dict()

    def with_context(self, context: ObservationContext) -> DefaultTenantPoolProbe:
        """Create a new probe with observation context bound."""
        return DefaultTenantPoolProbe(logger=self._logger, context=context)

    def pool_cache_hit(self, database: str) -> None:
        self._logger.debug(
            "tenant_pool_cache_hit",
            database=database,
            **self._get_context_kwargs(),
        )

    def pool_created(self, database: str, max_connections: int) -> None:
        self._logger.info(
            "tenant_pool_created",
            database=database,
            max_connections=max_connections,
            **self._get_context_kwargs(),
        )

    def pool_creation_failed(self, database: str, error: Exception) -> None:
        self._logger.error(
            "tenant_pool_creation_failed",
            database=database,
            error=str(error),
            **self._get_context_kwargs(),
        )

    def pool_closed(self, database: str) -> None:
        self._logger.info(
            "tenant_pool_closed",
            database=database,
            **self._get_context_kwargs(),
        )

    def all_pools_closed(self, count: int) -> None:
        self._logger.info(
            "tenant_pools_closed",
            count=count,
            **self._get_context_kwargs(),
        )

    def pool_close_failed(self, database: str, error: Exception) -> None:
        self._logger.warning(
            "tenant_pool_close_failed",
            database=database,
            error=str(error),
            **self._get_context_kwargs(),
        )


class DatabaseAdminProbe(Protocol):
    """Domain probe for physical tenant database administration."""

    def database_created(self, database: str) -> None:
        """Record that a tenant database was created."""
        ...

    def schema_applied(self, database: str, table_count: int) -> None:
        """Record that the tenant schema was applied to a database."""
        ...

    def database_dropped(self, database: str) -> None:
        """Record that a tenant database was dropped."""
        ...

    def database_archived(self, database: str, archived_as: str) -> None:
        """Record that a tenant database was renamed for archival."""
        ...

    def operation_failed(self, operation: str, database: str, error: Exception) -> None:
        """Record that an administrative operation failed."""
        ...

    def with_context(self, context: ObservationContext) -> DatabaseAdminProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultDatabaseAdminProbe:
    """Default implementation of DatabaseAdminProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        """Get context metadata as kwargs for logging."""
        if self._context is None:
            return {}
        return self._context.as_dict()

    def with_context(self, context: ObservationContext) -> DefaultDatabaseAdminProbe:
        """Create a new probe with observation context bound."""
        return DefaultDatabaseAdminProbe(logger=self._logger, context=context)

    def database_created(self, database: str) -> None:
        self._logger.info(
            "tenant_database_created",
            database=database,
            **self._get_context_kwargs(),
        )

    def schema_applied(self, database: str, table_count: int) -> None:
        self._logger.info(
            "tenant_schema_applied",
            database=database,
            table_count=table_count,
            **self._get_context_kwargs(),
        )

    def database_dropped(self, database: str) -> None:
        self._logger.warning(
            "tenant_database_dropped",
            database=database,
            **self._get_context_kwargs(),
        )

    def database_archived(self, database: str, archived_as: str) -> None:
        self._logger.info(
            "tenant_database_archived",
            database=database,
            archived_as=archived_as,
            **self._get_context_kwargs(),
        )

    def operation_failed(self, operation: str, database: str, error: Exception) -> None:
        self._logger.error(
            "tenant_database_operation_failed",
            operation=operation,
            database=database,
            error=str(error),
            **self._get_context_kwargs(),
        )
