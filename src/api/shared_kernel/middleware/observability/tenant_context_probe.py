"""Domain probe for tenant context resolution.

Following Domain-Oriented Observability patterns, this probe captures
domain-significant events related to resolving the tenant of a request,
either from the Host subdomain or from a verified token claim.

See: https://martinfowler.com/articles/domain-oriented-observability.html
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from infrastructure.observability.context import ObservationContext


class TenantContextProbe(Protocol):
    """Domain probe for tenant context resolution operations."""

    def tenant_resolved_from_subdomain(self, tenant_id: str, subdomain: str) -> None:
        """Record that tenant context was resolved from the Host header."""
        ...

    def tenant_resolved_from_token(self, tenant_id: str, user_id: str) -> None:
        """Record that tenant context was resolved from a token claim."""
        ...

    def tenant_claim_missing(self, user_id: str) -> None:
        """Record that an authenticated token carried no tenant claim."""
        ...

    def tenant_not_found(self, lookup: str, value: str) -> None:
        """Record that no active tenant matched the lookup."""
        ...

    def tenant_database_unavailable(
        self, tenant_id: str, database: str, error: Exception
    ) -> None:
        """Record that the tenant's pool could not be obtained."""
        ...

    def resolution_timed_out(self, lookup: str, value: str, timeout: float) -> None:
        """Record that resolution exceeded its deadline."""
        ...

    def with_context(self, context: ObservationContext) -> TenantContextProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultTenantContextProbe:
    """Default implementation of TenantContextProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultTenantContextProbe:
        """Create a new probe with observation context bound."""
        return DefaultTenantContextProbe(logger=self._logger, context=context)

    def tenant_resolved_from_subdomain(self, tenant_id: str, subdomain: str) -> None:
        """Record that tenant context was resolved from the Host header."""
        self._logger.debug(
            "tenant_context_resolved_from_subdomain",
            tenant_id=tenant_id,
            subdomain=subdomain,
            **self._get_context_kwargs(),
        )

    def tenant_resolved_from_token(self, tenant_id: str, user_id: str) -> None:
        """Record that tenant context was resolved from a token claim."""
        self._logger.debug(
            "tenant_context_resolved_from_token",
            tenant_id=tenant_id,
            user_id=user_id,
            **self._get_context_kwargs(),
        )

    def tenant_claim_missing(self, user_id: str) -> None:
        """Record that an authenticated token carried no tenant claim."""
        self._logger.warning(
            "tenant_context_claim_missing",
            user_id=user_id,
            **self._get_context_kwargs(),
        )

    def tenant_not_found(self, lookup: str, value: str) -> None:
        """Record that no active tenant matched the lookup."""
        self._logger.info(
            "tenant_context_tenant_not_found",
            lookup=lookup,
            value=value,
            **self._get_context_kwargs(),
        )

    def tenant_database_unavailable(
        self, tenant_id: str, database: str, error: Exception
    ) -> None:
        """Record that the tenant's pool could not be obtained."""
        self._logger.error(
            "tenant_context_database_unavailable",
            tenant_id=tenant_id,
            database=database,
            error=str(error),
            **self._get_context_kwargs(),
        )

    def resolution_timed_out(self, lookup: str, value: str, timeout: float) -> None:
        """Record that resolution exceeded its deadline."""
        self._logger.error(
            "tenant_context_resolution_timed_out",
            lookup=lookup,
            value=value,
            timeout_seconds=timeout,
            **self._get_context_kwargs(),
        )
