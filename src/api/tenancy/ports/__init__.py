"""Ports for the Tenancy bounded context."""

from tenancy.ports.exceptions import (
    DuplicateSubdomainError,
    ProvisioningError,
    ProvisioningPartialFailureError,
    TenantNotFoundError,
)
from tenancy.ports.repositories import ITenantRepository

__all__ = [
    "DuplicateSubdomainError",
    "ITenantRepository",
    "ProvisioningError",
    "ProvisioningPartialFailureError",
    "TenantNotFoundError",
]
