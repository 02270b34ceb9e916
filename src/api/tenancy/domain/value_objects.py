"""Value objects for the Tenancy domain.

Value objects are immutable descriptors that provide type safety and
domain semantics for identifiers and domain concepts.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import StrEnum

from ulid import ULID

from tenancy.domain.exceptions import InvalidSubdomainError

SUBDOMAIN_PATTERN = re.compile(r"^[a-z0-9]([a-z0-9-]{0,61}[a-z0-9])?$")

# PostgreSQL identifier limit, also enforced for SQLite file names
MAX_DATABASE_NAME_LENGTH = 63


@dataclass(frozen=True)
class TenantId:
    """Identifier for a Tenant.

    Uses ULID for sortability and distribution-friendly generation.
    """

    value: str

    def __str__(self) -> str:
        """Return string representation."""
        return self.value

    @classmethod
    def generate(cls) -> TenantId:
        """Generate a new TenantId using ULID."""
        return cls(value=str(ULID()))

    @classmethod
    def from_string(cls, value: str) -> TenantId:
        """Create TenantId from string value.

        Accepts case-insensitive input (per Crockford's Base32 alphabet) and
        returns the canonical uppercase form.

        Args:
            value: ULID string

        Returns:
            TenantId instance

        Raises:
            ValueError: If value is not a valid ULID
        """
        try:
            parsed = ULID.from_str(value.upper())
        except (ValueError, TypeError, AttributeError) as e:
            raise ValueError(f"Invalid TenantId: {value}") from e

        return cls(value=str(parsed))


@dataclass(frozen=True)
class Subdomain:
    """Routing key of a tenant, the leftmost label of its hostname.

    Must be a valid DNS label: lowercase letters, digits and inner hyphens,
    1 to 63 characters.
    """

    value: str

    def __post_init__(self) -> None:
        if not isinstance(self.value, str) or not SUBDOMAIN_PATTERN.match(self.value):
            raise InvalidSubdomainError(self.value)

    def __str__(self) -> str:
        return self.value

    def database_name(self, prefix: str) -> str:
        """Derive the physical database name for this subdomain.

        Hyphens are not valid in unquoted SQL identifiers, so they become
        underscores.

        Raises:
            InvalidSubdomainError: If the prefixed name exceeds the
                identifier length limit
        """
        name = f"{prefix}{self.value.replace('-', '_')}"
        if len(name) > MAX_DATABASE_NAME_LENGTH:
            raise InvalidSubdomainError(
                self.value,
                f"at most {MAX_DATABASE_NAME_LENGTH - len(prefix)} characters "
                f"are allowed with database prefix {prefix!r}",
            )
        return name


class SubscriptionTier(StrEnum):
    """Commercial plan of a tenant."""

    NORMAL = "normal"
    PRO = "pro"
    PREMIUM = "premium"


class TenantStatus(StrEnum):
    """Lifecycle state of a tenant.

    Only ACTIVE tenants are resolvable by requests.
    """

    PROVISIONING = "provisioning"
    ACTIVE = "active"
    FAILED = "failed"
    DELETING = "deleting"
