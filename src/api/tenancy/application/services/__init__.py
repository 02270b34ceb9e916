"""Application services for the Tenancy bounded context."""

from tenancy.application.services.provisioning_service import (
    TenantProvisioningService,
)
from tenancy.application.services.tenant_service import TenantService

__all__ = [
    "TenantProvisioningService",
    "TenantService",
]
