"""Tenant aggregate for the Tenancy context."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from tenancy.domain.exceptions import InvalidTenantStateError
from tenancy.domain.value_objects import (
    Subdomain,
    SubscriptionTier,
    TenantId,
    TenantStatus,
)


@dataclass
class Tenant:
    """Tenant aggregate representing one rental business on the platform.

    Business rules:
    - Subdomains are globally unique and never change after creation
    - The database name is derived from the subdomain at creation and never
      changes; each tenant owns exactly one physical database
    - A tenant starts in PROVISIONING and is only resolvable once ACTIVE
    """

    id: TenantId
    name: str
    subdomain: str
    database_name: str
    subscription_tier: SubscriptionTier
    status: TenantStatus
    payment_method: str | None = None
    logo_url: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def create(
        cls,
        name: str,
        subdomain: Subdomain,
        database_prefix: str,
        subscription_tier: SubscriptionTier = SubscriptionTier.NORMAL,
        payment_method: str | None = None,
        logo_url: str | None = None,
    ) -> Tenant:
        """Factory method for a tenant about to be provisioned.

        Args:
            name: Display name of the business
            subdomain: Validated routing key
            database_prefix: Prefix used to derive the database name
            subscription_tier: Initial plan
            payment_method: Optional billing reference
            logo_url: Optional logo location

        Returns:
            A new Tenant in PROVISIONING status

        Raises:
            InvalidSubdomainError: If the derived database name is too long
        """
        return cls(
            id=TenantId.generate(),
            name=name,
            subdomain=subdomain.value,
            database_name=subdomain.database_name(database_prefix),
            subscription_tier=subscription_tier,
            status=TenantStatus.PROVISIONING,
            payment_method=payment_method,
            logo_url=logo_url,
        )

    @property
    def is_active(self) -> bool:
        return self.status == TenantStatus.ACTIVE

    def activate(self) -> None:
        """Mark provisioning as complete."""
        if self.status != TenantStatus.PROVISIONING:
            raise InvalidTenantStateError(
                f"Cannot activate tenant {self.id} in status '{self.status}'"
            )
        self.status = TenantStatus.ACTIVE

    def mark_failed(self) -> None:
        """Mark a tenant whose provisioning could not be rolled back."""
        self.status = TenantStatus.FAILED

    def mark_deleting(self) -> None:
        """Take the tenant out of routing before its database is released.

        Idempotent so an interrupted deletion can be retried.
        """
        self.status = TenantStatus.DELETING

    def change_tier(self, tier: SubscriptionTier) -> None:
        self.subscription_tier = tier
