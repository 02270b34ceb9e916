"""Tenant provisioning application service.

Provisioning spans two stores that share no transaction: the control-plane
registry and a brand-new physical database. It therefore runs as a saga.
Every completed step is undone when a later step fails, and the registry
``status`` column records how far a tenant got.

Steps:
    1. register    - insert the registry row in PROVISIONING status
    2. create_database
    3. apply_schema
    4. seed        - mirrored tenant row, admin role and admin user
    5. activate    - flip the registry row to ACTIVE
"""

from __future__ import annotations

from typing import NoReturn

from sqlalchemy.ext.asyncio import AsyncSession

from infrastructure.database.admin import TenantDatabaseAdmin
from infrastructure.database.pool_manager import TenantPoolManager
from infrastructure.database.tenant_pool import TenantPool
from infrastructure.database.tenant_schema import (
    RoleModel,
    TenantProfileModel,
    UserModel,
)
from infrastructure.observability.context import ObservationContext
from tenancy.application.observability import (
    DefaultProvisioningProbe,
    ProvisioningProbe,
)
from tenancy.application.security import hash_password_async
from tenancy.domain.tenant import Tenant
from tenancy.domain.value_objects import Subdomain, SubscriptionTier, TenantStatus
from tenancy.ports.exceptions import (
    DuplicateSubdomainError,
    ProvisioningError,
    ProvisioningPartialFailureError,
)
from tenancy.ports.repositories import ITenantRepository

ADMIN_ROLE_NAME = "admin"


class TenantProvisioningService:
    """Creates tenants together with their isolated database."""

    def __init__(
        self,
        session: AsyncSession,
        tenant_repository: ITenantRepository,
        database_admin: TenantDatabaseAdmin,
        pool_manager: TenantPoolManager,
        database_prefix: str,
        probe: ProvisioningProbe | None = None,
    ):
        """Initialize the provisioning service.

        Args:
            session: Control-plane session for transaction management
            tenant_repository: Registry repository sharing ``session``
            database_admin: Creates and drops physical tenant databases
            pool_manager: Opens the pool used to seed the new database
            database_prefix: Prefix of derived database names
            probe: Optional domain probe for observability
        """
        self._session = session
        self._tenant_repository = tenant_repository
        self._database_admin = database_admin
        self._pool_manager = pool_manager
        self._database_prefix = database_prefix
        self._probe = probe or DefaultProvisioningProbe()

    async def provision(
        self,
        name: str,
        subdomain: str,
        admin_email: str,
        admin_password: str,
        subscription_tier: SubscriptionTier = SubscriptionTier.NORMAL,
        payment_method: str | None = None,
        logo_url: str | None = None,
        requested_by: str | None = None,
    ) -> Tenant:
        """Provision a new tenant.

        Args:
            name: Business name
            subdomain: Requested routing key
            admin_email: Email of the first staff account
            admin_password: Plaintext password of the first staff account
            subscription_tier: Initial plan
            payment_method: Optional billing reference
            logo_url: Optional logo location
            requested_by: Principal id attached to every provisioning event

        Returns:
            The ACTIVE tenant

        Raises:
            InvalidSubdomainError: If the subdomain is not a valid DNS label
            DuplicateSubdomainError: If the subdomain is taken; nothing was created
            ProvisioningError: If a step failed and everything was rolled back
            ProvisioningPartialFailureError: If the rollback failed as well
        """
        tenant = Tenant.create(
            name=name,
            subdomain=Subdomain(subdomain),
            database_prefix=self._database_prefix,
            subscription_tier=subscription_tier,
            payment_method=payment_method,
            logo_url=logo_url,
        )
        tenant_id = tenant.id.value
        database = tenant.database_name
        probe = self._probe.with_context(ObservationContext(user_id=requested_by))

        try:
            async with self._session.begin():
                await self._tenant_repository.add(tenant)
        except DuplicateSubdomainError:
            probe.duplicate_subdomain(tenant.subdomain)
            raise
        probe.provisioning_started(tenant_id, tenant.subdomain, database)

        step = "create_database"
        try:
            await self._database_admin.create_database(database)
        except Exception as e:
            probe.provisioning_failed(tenant_id, step, e)
            await self._roll_back(probe, tenant, step, e, database_created=False)
        probe.step_completed(tenant_id, step)

        try:
            step = "apply_schema"
            await self._database_admin.apply_schema(database)
            probe.step_completed(tenant_id, step)

            step = "seed"
            pool = await self._pool_manager.get_pool(database)
            await self._seed(pool, tenant, admin_email, admin_password)
            probe.step_completed(tenant_id, step)

            step = "activate"
            tenant.activate()
            async with self._session.begin():
                await self._tenant_repository.update_status(
                    tenant.id, TenantStatus.ACTIVE
                )
            probe.step_completed(tenant_id, step)
        except Exception as e:
            probe.provisioning_failed(tenant_id, step, e)
            await self._roll_back(probe, tenant, step, e, database_created=True)

        probe.tenant_provisioned(tenant_id, tenant.subdomain, database)
        return tenant

    async def _seed(
        self,
        pool: TenantPool,
        tenant: Tenant,
        admin_email: str,
        admin_password: str,
    ) -> None:
        """Insert the mirrored tenant row, the admin role and the admin user."""
        password_hash = await hash_password_async(admin_password)

        async with pool.session() as session:
            async with session.begin():
                session.add(
                    TenantProfileModel(
                        id=tenant.id.value,
                        name=tenant.name,
                        subdomain=tenant.subdomain,
                        db_name=tenant.database_name,
                        subscription_tier=tenant.subscription_tier.value,
                        logo_url=tenant.logo_url,
                    )
                )
                role = RoleModel(name=ADMIN_ROLE_NAME, description="Administrator")
                session.add(role)
                # Parent rows first; the user references both
                await session.flush()

                session.add(
                    UserModel(
                        tenant_id=tenant.id.value,
                        email=admin_email,
                        password_hash=password_hash,
                        first_name="Admin",
                        last_name="User",
                        role_id=role.id,
                    )
                )

    async def _roll_back(
        self,
        probe: ProvisioningProbe,
        tenant: Tenant,
        step: str,
        error: Exception,
        database_created: bool,
    ) -> NoReturn:
        """Undo completed steps, then raise the matching provisioning error."""
        tenant_id = tenant.id.value
        database = tenant.database_name

        try:
            if database_created:
                await self._pool_manager.close(database)
                await self._database_admin.drop_database(database)
            async with self._session.begin():
                await self._tenant_repository.delete(tenant.id)
        except Exception as compensation_error:
            probe.compensation_failed(tenant_id, step, compensation_error)
            await self._mark_failed(probe, tenant, step)
            raise ProvisioningPartialFailureError(
                f"Provisioning of '{tenant.subdomain}' failed at step '{step}' "
                "and could not be rolled back",
                step=step,
                tenant_id=tenant_id,
                database=database,
            ) from error

        probe.compensation_completed(tenant_id, step)
        raise ProvisioningError(
            f"Provisioning of '{tenant.subdomain}' failed at step '{step}'",
            step=step,
        ) from error

    async def _mark_failed(
        self, probe: ProvisioningProbe, tenant: Tenant, step: str
    ) -> None:
        """Leave the registry row in FAILED status so it is never resolved."""
        tenant.mark_failed()
        try:
            async with self._session.begin():
                await self._tenant_repository.update_status(
                    tenant.id, TenantStatus.FAILED
                )
        except Exception as e:
            # The row stays in PROVISIONING, which is not resolvable either
            probe.compensation_failed(tenant.id.value, step, e)
