"""Pydantic models for tenant administration requests and responses."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from tenancy.domain.tenant import Tenant
from tenancy.domain.value_objects import SubscriptionTier, TenantStatus


class CreateTenantRequest(BaseModel):
    """Request model for provisioning a tenant.

    The subdomain is validated by the domain (DNS label rules) so that a bad
    value is reported with the ``invalid_subdomain`` code rather than a
    generic validation error.
    """

    name: str = Field(..., description="Business name", min_length=1, max_length=255)
    subdomain: str = Field(
        ..., description="Routing key, e.g. 'acme' for acme.example.com"
    )
    admin_email: str = Field(
        ...,
        description="Email of the first staff account",
        pattern=r"^[^@\s]+@[^@\s]+$",
        max_length=320,
    )
    admin_password: str = Field(
        ...,
        description="Password of the first staff account",
        min_length=8,
        max_length=72,
    )
    subscription_tier: SubscriptionTier = Field(
        default=SubscriptionTier.NORMAL, description="Initial plan"
    )
    payment_method: str | None = Field(
        default=None, description="Billing reference", max_length=64
    )
    logo_url: str | None = Field(default=None, description="Logo URL", max_length=2048)


class UpdateSubscriptionRequest(BaseModel):
    """Request model for changing a tenant's plan."""

    subscription_tier: SubscriptionTier = Field(..., description="New plan")


class TenantResponse(BaseModel):
    """Response model for tenant."""

    id: str = Field(..., description="Tenant ID (ULID format)")
    name: str = Field(..., description="Business name")
    subdomain: str = Field(..., description="Routing key")
    database_name: str = Field(..., description="Isolated database name")
    subscription_tier: SubscriptionTier
    status: TenantStatus
    payment_method: str | None = None
    logo_url: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_domain(cls, tenant: Tenant) -> TenantResponse:
        """Convert domain Tenant aggregate to API response.

        Args:
            tenant: Tenant domain aggregate

        Returns:
            TenantResponse
        """
        return cls(
            id=tenant.id.value,
            name=tenant.name,
            subdomain=tenant.subdomain,
            database_name=tenant.database_name,
            subscription_tier=tenant.subscription_tier,
            status=tenant.status,
            payment_method=tenant.payment_method,
            logo_url=tenant.logo_url,
            created_at=tenant.created_at,
            updated_at=tenant.updated_at,
        )
