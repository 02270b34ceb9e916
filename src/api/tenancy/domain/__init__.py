"""Tenancy domain: the tenant aggregate, its value objects and host routing.

Pure domain code with no framework or database dependencies.
"""

from tenancy.domain.exceptions import InvalidSubdomainError, InvalidTenantStateError
from tenancy.domain.routing import subdomain_from_host
from tenancy.domain.tenant import Tenant
from tenancy.domain.value_objects import (
    Subdomain,
    SubscriptionTier,
    TenantId,
    TenantStatus,
)

__all__ = [
    "InvalidSubdomainError",
    "InvalidTenantStateError",
    "Subdomain",
    "SubscriptionTier",
    "Tenant",
    "TenantId",
    "TenantStatus",
    "subdomain_from_host",
]
