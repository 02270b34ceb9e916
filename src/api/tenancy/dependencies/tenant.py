from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from infrastructure.database.admin import TenantDatabaseAdmin
from infrastructure.database.dependencies import (
    get_control_plane_session,
    get_database_admin,
    get_tenant_pool_manager,
)
from infrastructure.database.pool_manager import TenantPoolManager
from infrastructure.dependencies import get_app_settings
from infrastructure.settings import Settings
from tenancy.application.observability import (
    DefaultProvisioningProbe,
    DefaultTenantServiceProbe,
    ProvisioningProbe,
    TenantServiceProbe,
)
from tenancy.application.services import TenantProvisioningService, TenantService
from tenancy.infrastructure.tenant_repository import TenantRepository


def get_tenant_service_probe() -> TenantServiceProbe:
    """Get TenantServiceProbe instance.

    Returns:
        DefaultTenantServiceProbe instance for observability
    """
    return DefaultTenantServiceProbe()


def get_provisioning_probe() -> ProvisioningProbe:
    """Get ProvisioningProbe instance."""
    return DefaultProvisioningProbe()


def get_tenant_repository(
    session: Annotated[AsyncSession, Depends(get_control_plane_session)],
) -> TenantRepository:
    """Get TenantRepository instance.

    Args:
        session: Control-plane session

    Returns:
        TenantRepository instance
    """
    return TenantRepository(session=session)


def get_tenant_service(
    tenant_repo: Annotated[TenantRepository, Depends(get_tenant_repository)],
    session: Annotated[AsyncSession, Depends(get_control_plane_session)],
    pool_manager: Annotated[TenantPoolManager, Depends(get_tenant_pool_manager)],
    database_admin: Annotated[TenantDatabaseAdmin, Depends(get_database_admin)],
    settings: Annotated[Settings, Depends(get_app_settings)],
    tenant_service_probe: Annotated[
        TenantServiceProbe, Depends(get_tenant_service_probe)
    ],
) -> TenantService:
    """Get TenantService instance.

    Args:
        tenant_repo: Tenant repository (shares session via FastAPI dependency caching)
        session: Database session for transaction management
        pool_manager: Tenant pool manager
        database_admin: Tenant database admin
        settings: Application settings (retention policy, platform subdomain)
        tenant_service_probe: Tenant service probe for observability

    Returns:
        TenantService instance
    """
    return TenantService(
        session=session,
        tenant_repository=tenant_repo,
        pool_manager=pool_manager,
        database_admin=database_admin,
        retention_policy=settings.tenancy.retention_policy,
        platform_subdomain=settings.tenancy.platform_subdomain,
        probe=tenant_service_probe,
    )


def get_provisioning_service(
    tenant_repo: Annotated[TenantRepository, Depends(get_tenant_repository)],
    session: Annotated[AsyncSession, Depends(get_control_plane_session)],
    pool_manager: Annotated[TenantPoolManager, Depends(get_tenant_pool_manager)],
    database_admin: Annotated[TenantDatabaseAdmin, Depends(get_database_admin)],
    settings: Annotated[Settings, Depends(get_app_settings)],
    probe: Annotated[ProvisioningProbe, Depends(get_provisioning_probe)],
) -> TenantProvisioningService:
    """Get TenantProvisioningService instance."""
    return TenantProvisioningService(
        session=session,
        tenant_repository=tenant_repo,
        database_admin=database_admin,
        pool_manager=pool_manager,
        database_prefix=settings.tenancy.database_prefix,
        probe=probe,
    )
