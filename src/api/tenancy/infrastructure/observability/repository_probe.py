"""Domain probe for tenant registry operations.

See: https://martinfowler.com/articles/domain-oriented-observability.html
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from infrastructure.observability.context import ObservationContext


class TenantRepositoryProbe(Protocol):
    """Domain probe for tenant repository operations.

    Records domain events during tenant registry operations.
    """

    def tenant_added(self, tenant_id: str, subdomain: str) -> None:
        """Record that a tenant was registered."""
        ...

    def tenant_retrieved(self, tenant_id: str) -> None:
        """Record that a tenant was retrieved."""
        ...

    def tenant_status_changed(self, tenant_id: str, status: str) -> None:
        """Record a lifecycle status change."""
        ...

    def tenant_tier_changed(self, tenant_id: str, tier: str) -> None:
        """Record a subscription tier change."""
        ...

    def tenant_deleted(self, tenant_id: str) -> None:
        """Record that a tenant was removed from the registry."""
        ...

    def tenants_listed(self, count: int) -> None:
        """Record that tenants were listed."""
        ...

    def duplicate_subdomain(self, subdomain: str) -> None:
        """Record that a duplicate subdomain was detected."""
        ...

    def with_context(self, context: ObservationContext) -> TenantRepositoryProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultTenantRepositoryProbe:
    """Default implementation of TenantRepositoryProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultTenantRepositoryProbe:
        """Create a new probe with observation context bound."""
        return DefaultTenantRepositoryProbe(logger=self._logger, context=context)

    def tenant_added(self, tenant_id: str, subdomain: str) -> None:
        self._logger.info(
            "tenant_added",
            tenant_id=tenant_id,
            subdomain=subdomain,
            **self._get_context_kwargs(),
        )

    def tenant_retrieved(self, tenant_id: str) -> None:
        self._logger.debug(
            "tenant_retrieved",
            tenant_id=tenant_id,
            **self._get_context_kwargs(),
        )

    def tenant_status_changed(self, tenant_id: str, status: str) -> None:
        self._logger.info(
            "tenant_status_changed",
            tenant_id=tenant_id,
            status=status,
            **self._get_context_kwargs(),
        )

    def tenant_tier_changed(self, tenant_id: str, tier: str) -> None:
        self._logger.info(
            "tenant_tier_changed",
            tenant_id=tenant_id,
            tier=tier,
            **self._get_context_kwargs(),
        )

    def tenant_deleted(self, tenant_id: str) -> None:
        self._logger.info(
            "tenant_deleted",
            tenant_id=tenant_id,
            **self._get_context_kwargs(),
        )

    def tenants_listed(self, count: int) -> None:
        self._logger.debug(
            "tenants_listed",
            count=count,
            **self._get_context_kwargs(),
        )

    def duplicate_subdomain(self, subdomain: str) -> None:
        self._logger.warning(
            "duplicate_subdomain",
            subdomain=subdomain,
            **self._get_context_kwargs(),
        )
