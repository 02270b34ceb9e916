"""Domain-Oriented Observability for Tenancy infrastructure."""

from tenancy.infrastructure.observability.repository_probe import (
    DefaultTenantRepositoryProbe,
    TenantRepositoryProbe,
)

__all__ = [
    "DefaultTenantRepositoryProbe",
    "TenantRepositoryProbe",
]
