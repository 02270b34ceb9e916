"""Protocol for tenant provisioning observability.

Provisioning is a multi-step operation spanning the control plane and a
freshly created tenant database. Each step and each rollback is recorded
so a failed provisioning can be traced after the fact.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from infrastructure.observability.context import ObservationContext


class ProvisioningProbe(Protocol):
    """Domain probe for tenant provisioning operations."""

    def provisioning_started(self, tenant_id: str, subdomain: str, database: str) -> None:
        """Record that provisioning of a new tenant began."""
        ...

    def step_completed(self, tenant_id: str, step: str) -> None:
        """Record that a provisioning step succeeded."""
        ...

    def provisioning_failed(self, tenant_id: str, step: str, error: Exception) -> None:
        """Record that a provisioning step failed."""
        ...

    def compensation_completed(self, tenant_id: str, step: str) -> None:
        """Record that every completed step was rolled back."""
        ...

    def compensation_failed(self, tenant_id: str, step: str, error: Exception) -> None:
        """Record that rolling back a failed provisioning also failed."""
        ...

    def tenant_provisioned(self, tenant_id: str, subdomain: str, database: str) -> None:
        """Record that a tenant is active and routable."""
        ...

    def duplicate_subdomain(self, subdomain: str) -> None:
        """Record that provisioning was refused for a taken subdomain."""
        ...

    def with_context(self, context: ObservationContext) -> ProvisioningProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultProvisioningProbe:
    """Default implementation of ProvisioningProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultProvisioningProbe:
        """Create a new probe with observation context bound."""
        return DefaultProvisioningProbe(logger=self._logger, context=context)

    def provisioning_started(self, tenant_id: str, subdomain: str, database: str) -> None:
        self._logger.info(
            "tenant_provisioning_started",
            tenant_id=tenant_id,
            subdomain=subdomain,
            database=database,
            **self._get_context_kwargs(),
        )

    def step_completed(self, tenant_id: str, step: str) -> None:
        self._logger.debug(
            "tenant_provisioning_step_completed",
            tenant_id=tenant_id,
            step=step,
            **self._get_context_kwargs(),
        )

    def provisioning_failed(self, tenant_id: str, step: str, error: Exception) -> None:
        self._logger.error(
            "tenant_provisioning_failed",
            tenant_id=tenant_id,
            step=step,
            error=str(error),
            **self._get_context_kwargs(),
        )

    def compensation_completed(self, tenant_id: str, step: str) -> None:
        self._logger.warning(
            "tenant_provisioning_rolled_back",
            tenant_id=tenant_id,
            step=step,
            **self._get_context_kwargs(),
        )

    def compensation_failed(self, tenant_id: str, step: str, error: Exception) -> None:
        self._logger.critical(
            "tenant_provisioning_rollback_failed",
            tenant_id=tenant_id,
            step=step,
            error=str(error),
            **self._get_context_kwargs(),
        )

    def tenant_provisioned(self, tenant_id: str, subdomain: str, database: str) -> None:
        self._logger.info(
            "tenant_provisioned",
            tenant_id=tenant_id,
            subdomain=subdomain,
            database=database,
            **self._get_context_kwargs(),
        )

    def duplicate_subdomain(self, subdomain: str) -> None:
        self._logger.warning(
            "tenant_provisioning_duplicate_subdomain",
            subdomain=subdomain,
            **self._get_context_kwargs(),
        )
