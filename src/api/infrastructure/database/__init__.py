"""Database infrastructure - control-plane engine and per-tenant pools."""

from infrastructure.database.exceptions import (
    DatabaseConnectionError,
    DatabaseError,
    DatabaseProvisioningError,
    PoolManagerClosedError,
    TenantPoolUnavailableError,
)

__all__ = [
    "DatabaseConnectionError",
    "DatabaseError",
    "DatabaseProvisioningError",
    "PoolManagerClosedError",
    "TenantPoolUnavailableError",
]
