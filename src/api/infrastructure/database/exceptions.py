"""Database-specific exceptions shared by the control plane and tenant pools."""


class DatabaseError(Exception):
    """Base exception for database operations."""

    pass


class DatabaseConnectionError(DatabaseError):
    """Raised when a database connection cannot be established."""

    pass


class TenantPoolUnavailableError(DatabaseConnectionError):
    """Raised when a pool for a tenant database cannot be opened.

    Attributes:
        database: Name of the tenant database that was unreachable.
    """

    def __init__(self, database: str, message: str | None = None):
        super().__init__(message or f"Tenant database '{database}' is unavailable")
        self.database = database


class PoolManagerClosedError(DatabaseError):
    """Raised when a pool is requested after the manager was shut down."""

    pass


class DatabaseProvisioningError(DatabaseError):
    """Raised when a physical tenant database cannot be created, dropped or renamed.

    Attributes:
        database: Name of the tenant database involved.
    """

    def __init__(self, database: str, message: str):
        super().__init__(message)
        self.database = database
