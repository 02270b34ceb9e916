"""SQLAlchemy implementation of ITenantRepository.

This repository manages the tenant registry in the control-plane database.
Every call is a live query; nothing is cached. Transactions are owned by
the caller (``async with session.begin()``).
"""

from __future__ import annotations

from typing import Iterable

from sqlalchemy import delete, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from tenancy.domain.tenant import Tenant
from tenancy.domain.value_objects import SubscriptionTier, TenantId, TenantStatus
from tenancy.infrastructure.models import TenantModel
from tenancy.infrastructure.observability import (
    DefaultTenantRepositoryProbe,
    TenantRepositoryProbe,
)
from tenancy.ports.exceptions import DuplicateSubdomainError
from tenancy.ports.repositories import ITenantRepository


def _to_domain(model: TenantModel) -> Tenant:
    return Tenant(
        id=TenantId(value=model.id),
        name=model.name,
        subdomain=model.subdomain,
        database_name=model.db_name,
        subscription_tier=SubscriptionTier(model.subscription_tier),
        status=TenantStatus(model.status),
        payment_method=model.payment_method,
        logo_url=model.logo_url,
        created_at=model.created_at,
        updated_at=model.updated_at,
    )


class TenantRepository(ITenantRepository):
    """Repository managing the control-plane tenant registry."""

    def __init__(
        self,
        session: AsyncSession,
        probe: TenantRepositoryProbe | None = None,
    ) -> None:
        """Initialize repository with database session.

        Args:
            session: AsyncSession bound to the control-plane database
            probe: Optional domain probe for observability
        """
        self._session = session
        self._probe = probe or DefaultTenantRepositoryProbe()

    async def add(self, tenant: Tenant) -> None:
        """Insert a new registry row.

        Args:
            tenant: The Tenant to register

        Raises:
            DuplicateSubdomainError: If the subdomain or database name is taken
        """
        stmt = select(TenantModel.id).where(
            or_(
                TenantModel.subdomain == tenant.subdomain,
                TenantModel.db_name == tenant.database_name,
            )
        )
        result = await self._session.execute(stmt)
        if result.first() is not None:
            self._probe.duplicate_subdomain(tenant.subdomain)
            raise DuplicateSubdomainError(tenant.subdomain)

        model = TenantModel(
            id=tenant.id.value,
            name=tenant.name,
            subdomain=tenant.subdomain,
            db_name=tenant.database_name,
            subscription_tier=tenant.subscription_tier.value,
            status=tenant.status.value,
            payment_method=tenant.payment_method,
            logo_url=tenant.logo_url,
        )
        self._session.add(model)

        try:
            # Flush to surface a concurrent insert of the same subdomain
            await self._session.flush()
        except IntegrityError as e:
            self._probe.duplicate_subdomain(tenant.subdomain)
            raise DuplicateSubdomainError(tenant.subdomain) from e

        tenant.created_at = model.created_at
        tenant.updated_at = model.updated_at
        self._probe.tenant_added(tenant.id.value, tenant.subdomain)

    async def _get_model(self, tenant_id: TenantId) -> TenantModel | None:
        stmt = select(TenantModel).where(TenantModel.id == tenant_id.value)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_id(self, tenant_id: TenantId) -> Tenant | None:
        """Fetch a tenant by identifier.

        Args:
            tenant_id: The unique identifier of the tenant

        Returns:
            The Tenant, or None if not found
        """
        model = await self._get_model(tenant_id)
        if model is None:
            return None

        self._probe.tenant_retrieved(model.id)
        return _to_domain(model)

    async def get_by_subdomain(self, subdomain: str) -> Tenant | None:
        """Fetch a tenant by exact subdomain.

        Args:
            subdomain: Already normalized subdomain

        Returns:
            The Tenant, or None if not found
        """
        stmt = select(TenantModel).where(TenantModel.subdomain == subdomain)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        if model is None:
            return None

        self._probe.tenant_retrieved(model.id)
        return _to_domain(model)

    async def list_all(self, exclude_subdomains: Iterable[str] = ()) -> list[Tenant]:
        """Fetch tenants, newest first.

        Args:
            exclude_subdomains: Subdomains left out of the result

        Returns:
            List of tenants
        """
        stmt = select(TenantModel).order_by(
            TenantModel.created_at.desc(), TenantModel.id.desc()
        )
        excluded = list(exclude_subdomains)
        if excluded:
            stmt = stmt.where(TenantModel.subdomain.not_in(excluded))

        result = await self._session.execute(stmt)
        tenants = [_to_domain(model) for model in result.scalars().all()]

        self._probe.tenants_listed(len(tenants))
        return tenants

    async def update_tier(
        self, tenant_id: TenantId, tier: SubscriptionTier
    ) -> Tenant | None:
        model = await self._get_model(tenant_id)
        if model is None:
            return None

        model.subscription_tier = tier.value
        await self._session.flush()

        self._probe.tenant_tier_changed(model.id, tier.value)
        return _to_domain(model)

    async def update_status(self, tenant_id: TenantId, status: TenantStatus) -> bool:
        model = await self._get_model(tenant_id)
        if model is None:
            return False

        model.status = status.value
        await self._session.flush()

        self._probe.tenant_status_changed(model.id, status.value)
        return True

    async def delete(self, tenant_id: TenantId) -> bool:
        stmt = delete(TenantModel).where(TenantModel.id == tenant_id.value)
        result = await self._session.execute(stmt)
        if result.rowcount == 0:
            return False

        self._probe.tenant_deleted(tenant_id.value)
        return True
