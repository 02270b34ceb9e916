"""Pydantic response models for fleet and profile routes."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from shared_kernel.middleware.tenant_context import RequestTenantContext


class TenantSummary(BaseModel):
    """The tenant a request was resolved to."""

    id: str = Field(..., description="Tenant ID (ULID format)")
    name: str
    subdomain: str
    subscription_tier: str
    logo_url: str | None = None

    @classmethod
    def from_context(cls, context: RequestTenantContext) -> TenantSummary:
        tenant = context.tenant
        return cls(
            id=tenant.id.value,
            name=tenant.name,
            subdomain=tenant.subdomain,
            subscription_tier=tenant.subscription_tier.value,
            logo_url=tenant.logo_url,
        )


class MeResponse(BaseModel):
    """The authenticated staff member together with their tenant."""

    id: str
    email: str
    first_name: str
    last_name: str
    role: str | None = Field(default=None, description="Role name")
    is_active: bool
    tenant: TenantSummary


class CarResponse(BaseModel):
    """A car of the tenant's fleet."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    brand: str
    model: str
    year: int
    license_plate: str
    status: str
    category: str | None = None
    price_per_day: Decimal
    currency: str
    image_url: str | None = None
    images: list[str] = Field(default_factory=list)
    transmission: str | None = None
    fuel_type: str | None = None
    seats: int
    description: str | None = None
    created_at: datetime | None = None


class BrandingResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    primary_color: str | None = None
    secondary_color: str | None = None
    accent_color: str | None = None
    logo_url: str | None = None


class LandingPageResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    hero_title: str | None = None
    hero_subtitle: str | None = None
    hero_cta_text: str | None = None
    about_text: str | None = None
    contact_phone: str | None = None
    contact_email: str | None = None
    contact_address: str | None = None
    selected_cars: list[str] = Field(default_factory=list)


class PublicTenantResponse(BaseModel):
    """Public profile served to the tenant's landing page.

    ``landing_page`` is only present once the tenant has published it.
    """

    tenant: TenantSummary
    branding: BrandingResponse | None = None
    landing_page: LandingPageResponse | None = None
