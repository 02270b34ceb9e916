"""Domain exceptions for the Tenancy bounded context."""


class InvalidSubdomainError(ValueError):
    """Raised when a subdomain is not a valid DNS label.

    Attributes:
        subdomain: The rejected value.
    """

    def __init__(self, subdomain: object, reason: str | None = None):
        super().__init__(
            f"Invalid subdomain {subdomain!r}: "
            + (
                reason
                or "use 1-63 lowercase letters, digits or hyphens, "
                "not starting or ending with a hyphen"
            )
        )
        self.subdomain = subdomain


class InvalidTenantStateError(Exception):
    """Raised when a lifecycle transition is not allowed from the current status."""

    pass
