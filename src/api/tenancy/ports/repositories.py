"""Repository protocols (ports) for the Tenancy bounded context.

The registry lives in the shared control-plane database; implementations
perform a live query for every call and never cache.
"""

from __future__ import annotations

from typing import Iterable, Protocol, runtime_checkable

from tenancy.domain.tenant import Tenant
from tenancy.domain.value_objects import SubscriptionTier, TenantId, TenantStatus


@runtime_checkable
class ITenantRepository(Protocol):
    """Repository for the tenant registry."""

    async def add(self, tenant: Tenant) -> None:
        """Register a new tenant.

        Raises:
            DuplicateSubdomainError: If the subdomain or database name is taken
        """
        ...

    async def get_by_id(self, tenant_id: TenantId) -> Tenant | None:
        """Retrieve a tenant by identifier, whatever its status."""
        ...

    async def get_by_subdomain(self, subdomain: str) -> Tenant | None:
        """Retrieve a tenant by exact subdomain, whatever its status."""
        ...

    async def list_all(self, exclude_subdomains: Iterable[str] = ()) -> list[Tenant]:
        """List tenants, newest first."""
        ...

    async def update_tier(
        self, tenant_id: TenantId, tier: SubscriptionTier
    ) -> Tenant | None:
        """Change the subscription tier. Returns None if the tenant is missing."""
        ...

    async def update_status(self, tenant_id: TenantId, status: TenantStatus) -> bool:
        """Change the lifecycle status. Returns False if the tenant is missing."""
        ...

    async def delete(self, tenant_id: TenantId) -> bool:
        """Remove the registry row. Returns False if the tenant is missing."""
        ...
