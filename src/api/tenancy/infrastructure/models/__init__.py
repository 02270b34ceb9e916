"""SQLAlchemy ORM models for the Tenancy bounded context.

These models map to control-plane tables and are used by repository
implementations.
"""

from tenancy.infrastructure.models.tenant import TenantModel

__all__ = [
    "TenantModel",
]
