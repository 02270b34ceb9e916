"""Protocol for tenant administration service observability.

Defines the interface for domain probes that capture application-level
domain events for tenant service operations.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from infrastructure.observability.context import ObservationContext


class TenantServiceProbe(Protocol):
    """Domain probe for tenant administration operations."""

    def tenant_retrieved(self, tenant_id: str) -> None:
        """Record that a tenant was retrieved."""
        ...

    def tenants_listed(self, count: int) -> None:
        """Record that tenants were listed."""
        ...

    def tenant_not_found(self, tenant_id: str) -> None:
        """Record that a tenant was not found."""
        ...

    def subscription_updated(self, tenant_id: str, tier: str) -> None:
        """Record that a tenant changed plan."""
        ...

    def tenant_database_released(
        self,
        tenant_id: str,
        database: str,
        policy: str,
        archived_as: str | None,
    ) -> None:
        """Record what happened to a deleted tenant's database."""
        ...

    def tenant_database_already_released(self, tenant_id: str, database: str) -> None:
        """Record that a retried deletion found the database already archived."""
        ...

    def tenant_deleted(self, tenant_id: str) -> None:
        """Record that a tenant was deleted."""
        ...

    def with_context(self, context: ObservationContext) -> TenantServiceProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultTenantServiceProbe:
    """Default implementation of TenantServiceProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultTenantServiceProbe:
        """Create a new probe with observation context bound."""
        return DefaultTenantServiceProbe(logger=self._logger, context=context)

    def tenant_retrieved(self, tenant_id: str) -> None:
        """Record that a tenant was retrieved."""
        self._logger.debug(
            "tenant_retrieved",
            tenant_id=tenant_id,
            **self._get_context_kwargs(),
        )

    def tenants_listed(self, count: int) -> None:
        """Record that tenants were listed."""
        self._logger.debug(
            "tenants_listed",
            count=count,
            **self._get_context_kwargs(),
        )

    def tenant_not_found(self, tenant_id: str) -> None:
        """Record that a tenant was not found."""
        self._logger.debug(
            "tenant_not_found",
            tenant_id=tenant_id,
            **self._get_context_kwargs(),
        )

    def subscription_updated(self, tenant_id: str, tier: str) -> None:
        """Record that a tenant changed plan."""
        self._logger.info(
            "tenant_subscription_updated",
            tenant_id=tenant_id,
            tier=tier,
            **self._get_context_kwargs(),
        )

    def tenant_database_released(
        self,
        tenant_id: str,
        database: str,
        policy: str,
        archived_as: str | None,
    ) -> None:
        """Record what happened to a deleted tenant's database."""
        self._logger.info(
            "tenant_database_released",
            tenant_id=tenant_id,
            database=database,
            policy=policy,
            archived_as=archived_as,
            **self._get_context_kwargs(),
        )

    def tenant_deleted(self, tenant_id: str) -> None:
        """Record that a tenant was deleted."""
        self._logger.info(
            "tenant_deleted",
            tenant_id=tenant_id,
            **self._get_context_kwargs(),
        )

    def tenant_database_already_released(self, tenant_id: str, database: str) -> None:
        """Record that a retried deletion found the database already archived."""
        self._logger.warning(
            "tenant_database_already_released",
            tenant_id=tenant_id,
            database=database,
            **self._get_context_kwargs(),
        )
