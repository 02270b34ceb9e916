"""Tenant administration application service.

Handles platform-level tenant management: lookup, listing, plan changes
and deletion under the configured database retention policy.
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from infrastructure.database.admin import TenantDatabaseAdmin
from infrastructure.database.pool_manager import TenantPoolManager
from infrastructure.settings import DatabaseRetentionPolicy
from tenancy.application.observability import (
    DefaultTenantServiceProbe,
    TenantServiceProbe,
)
from tenancy.domain.tenant import Tenant
from tenancy.domain.value_objects import SubscriptionTier, TenantId, TenantStatus
from tenancy.ports.exceptions import TenantNotFoundError
from tenancy.ports.repositories import ITenantRepository


class TenantService:
    """Application service for tenant administration.

    Handles tenant operations with transaction management. Unlike request
    resolution, administration sees tenants in every lifecycle status.
    """

    def __init__(
        self,
        session: AsyncSession,
        tenant_repository: ITenantRepository,
        pool_manager: TenantPoolManager,
        database_admin: TenantDatabaseAdmin,
        retention_policy: DatabaseRetentionPolicy,
        platform_subdomain: str,
        probe: TenantServiceProbe | None = None,
    ):
        """Initialize TenantService with dependencies.

        Args:
            session: Control-plane session for transaction management
            tenant_repository: Registry repository sharing ``session``
            pool_manager: Pools to close before a database is released
            database_admin: Drops or archives tenant databases
            retention_policy: What happens to a deleted tenant's database
            platform_subdomain: Platform tenant hidden from listings
            probe: Optional domain probe for observability
        """
        self._session = session
        self._tenant_repository = tenant_repository
        self._pool_manager = pool_manager
        self._database_admin = database_admin
        self._retention_policy = retention_policy
        self._platform_subdomain = platform_subdomain
        self._probe = probe or DefaultTenantServiceProbe()

    async def get_tenant(self, tenant_id: TenantId) -> Tenant:
        """Retrieve a tenant by ID.

        Raises:
            TenantNotFoundError: If the tenant does not exist
        """
        async with self._session.begin():
            tenant = await self._tenant_repository.get_by_id(tenant_id)

        if tenant is None:
            self._probe.tenant_not_found(tenant_id.value)
            raise TenantNotFoundError(f"Tenant {tenant_id} not found")

        self._probe.tenant_retrieved(tenant_id.value)
        return tenant

    async def list_tenants(self) -> list[Tenant]:
        """List every tenant except the platform tenant, newest first."""
        async with self._session.begin():
            tenants = await self._tenant_repository.list_all(
                exclude_subdomains=[self._platform_subdomain]
            )

        self._probe.tenants_listed(len(tenants))
        return tenants

    async def update_subscription(
        self, tenant_id: TenantId, tier: SubscriptionTier
    ) -> Tenant:
        """Change a tenant's subscription tier.

        Raises:
            TenantNotFoundError: If the tenant does not exist
        """
        async with self._session.begin():
            tenant = await self._tenant_repository.update_tier(tenant_id, tier)

        if tenant is None:
            self._probe.tenant_not_found(tenant_id.value)
            raise TenantNotFoundError(f"Tenant {tenant_id} not found")

        self._probe.subscription_updated(tenant_id.value, tier.value)
        return tenant

    async def delete_tenant(self, tenant_id: TenantId) -> None:
        """Delete a tenant.

        The tenant is first marked DELETING so no new request resolves it,
        then its pool is closed, the retention policy is applied to its
        database, and finally the registry row is removed. The pool is
        closed once more at the end, since a request that resolved the
        tenant before it was marked DELETING may have reopened it.

        Raises:
            TenantNotFoundError: If the tenant does not exist
            DatabaseProvisioningError: If dropping or archiving failed; the
                tenant stays in DELETING status and the call can be retried
        """
        async with self._session.begin():
            tenant = await self._tenant_repository.get_by_id(tenant_id)
            if tenant is None:
                self._probe.tenant_not_found(tenant_id.value)
                raise TenantNotFoundError(f"Tenant {tenant_id} not found")

            resuming = tenant.status == TenantStatus.DELETING
            tenant.mark_deleting()
            await self._tenant_repository.update_status(
                tenant_id, TenantStatus.DELETING
            )

        await self._pool_manager.close(tenant.database_name)
        archived_as = await self._release_database(tenant, resuming)
        self._probe.tenant_database_released(
            tenant_id.value,
            tenant.database_name,
            self._retention_policy.value,
            archived_as,
        )

        async with self._session.begin():
            await self._tenant_repository.delete(tenant_id)

        await self._pool_manager.close(tenant.database_name)
        self._probe.tenant_deleted(tenant_id.value)

    async def _release_database(self, tenant: Tenant, resuming: bool) -> str | None:
        """Apply the retention policy. Returns the archive name, if any.

        When an earlier attempt already archived the database, only the
        registry row is left to remove.
        """
        database = tenant.database_name
        if self._retention_policy == DatabaseRetentionPolicy.DROP:
            await self._database_admin.drop_database(database)
            return None
        if self._retention_policy == DatabaseRetentionPolicy.ARCHIVE:
            if resuming and not await self._database_admin.database_exists(database):
                self._probe.tenant_database_already_released(
                    tenant.id.value, database
                )
                return None
            return await self._database_admin.archive_database(database)
        return None
