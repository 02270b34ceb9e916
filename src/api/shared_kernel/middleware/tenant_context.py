"""Tenant context value object for resolved tenant identification.

This module contains the value object that represents a resolved tenant
for the current request. It contains no resolution logic, making it safe
for the shared kernel.

The actual resolution logic (Host parsing, token claims, registry lookup,
pool acquisition) lives in the Tenancy bounded context's dependency layer.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from infrastructure.database.tenant_pool import TenantPool
    from tenancy.domain.tenant import Tenant

TenantSource = Literal["subdomain", "token"]


@dataclass(frozen=True)
class RequestTenantContext:
    """Resolved tenant context for the current request.

    Created once per request by the resolver dependency and handed to
    business handlers; never persisted.

    Attributes:
        tenant: The resolved, active tenant.
        pool: Connection pool of the tenant's isolated database.
        principal_id: Authenticated principal, None on public routes.
        role: Role claim of the principal, None on public routes.
        source: 'subdomain' if resolved from the Host header,
            'token' if resolved from the verified token claim.
    """

    tenant: Tenant
    pool: TenantPool
    source: TenantSource
    principal_id: str | None = None
    role: str | None = None

    @property
    def tenant_id(self) -> str:
        return self.tenant.id.value

    @property
    def is_authenticated(self) -> bool:
        return self.principal_id is not None
