"""FastAPI dependencies of the Tenancy bounded context.

Other contexts resolve tenants and authenticate callers only through these
dependencies.
"""

from tenancy.dependencies.authentication import (
    get_token_claims,
    require_super_admin,
)
from tenancy.dependencies.tenant_context import (
    get_public_tenant_session,
    get_subdomain_tenant_context,
    get_tenant_session,
    get_token_tenant_context,
)

__all__ = [
    "get_public_tenant_session",
    "get_subdomain_tenant_context",
    "get_tenant_session",
    "get_token_claims",
    "get_token_tenant_context",
    "require_super_admin",
]
