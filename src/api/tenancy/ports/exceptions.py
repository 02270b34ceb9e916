"""Port-level exceptions for the Tenancy bounded context.

These exceptions represent errors raised by repositories and application
services. The presentation layer maps each of them to a stable error code.
"""


class TenantNotFoundError(Exception):
    """Raised when a tenant does not exist or is not active.

    Inactive tenants are reported exactly like missing ones so that
    provisioning or deletion state never leaks to callers.
    """

    pass


class DuplicateSubdomainError(Exception):
    """Raised when a subdomain (or its derived database name) is already registered."""

    def __init__(self, subdomain: str):
        super().__init__(f"Subdomain '{subdomain}' is already taken")
        self.subdomain = subdomain


class ProvisioningError(Exception):
    """Raised when provisioning failed and every completed step was rolled back.

    Attributes:
        step: Name of the step that failed.
    """

    def __init__(self, message: str, step: str):
        super().__init__(message)
        self.step = step


class ProvisioningPartialFailureError(ProvisioningError):
    """Raised when provisioning failed and rolling it back failed too.

    The registry row is left in FAILED status for manual cleanup.

    Attributes:
        tenant_id: Identifier of the tenant left behind.
        database: Physical database that may still exist.
    """

    def __init__(self, message: str, step: str, tenant_id: str, database: str):
        super().__init__(message, step)
        self.tenant_id = tenant_id
        self.database = database
