"""Schema created inside every isolated tenant database.

Each tenant database carries a mirrored copy of its registry row plus the
business tables of one rental company. Rows also store ``tenant_id`` so
queries stay explicitly tenant-scoped even though the database already is.
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import (
    JSON,
    Boolean,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column
from ulid import ULID

from infrastructure.database.models import TenantBase, TimestampMixin, utc_now


def new_row_id() -> str:
    """Generate a primary key for tenant-local rows."""
    return str(ULID())


class TenantProfileModel(TenantBase, TimestampMixin):
    """Mirror of the control-plane registry row for this tenant."""

    __tablename__ = "tenants"

    id: Mapped[str] = mapped_column(String(26), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    subdomain: Mapped[str] = mapped_column(String(63), nullable=False, unique=True)
    db_name: Mapped[str] = mapped_column(String(128), nullable=False)
    subscription_tier: Mapped[str] = mapped_column(String(32), nullable=False)
    logo_url: Mapped[str | None] = mapped_column(String(2048), nullable=True)


class RoleModel(TenantBase):
    __tablename__ = "roles"

    id: Mapped[str] = mapped_column(
        String(26), primary_key=True, insert_default=new_row_id
    )
    name: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)
    description: Mapped[str | None] = mapped_column(String(255), nullable=True)


class UserModel(TenantBase, TimestampMixin):
    """Staff account of the rental company."""

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(
        String(26), primary_key=True, insert_default=new_row_id
    )
    tenant_id: Mapped[str] = mapped_column(
        String(26), ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False
    )
    email: Mapped[str] = mapped_column(String(320), nullable=False, unique=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    first_name: Mapped[str] = mapped_column(String(255), nullable=False)
    last_name: Mapped[str] = mapped_column(String(255), nullable=False)
    role_id: Mapped[str | None] = mapped_column(
        String(26), ForeignKey("roles.id", ondelete="SET NULL"), nullable=True
    )
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)


class CarModel(TenantBase, TimestampMixin):
    __tablename__ = "cars"

    id: Mapped[str] = mapped_column(
        String(26), primary_key=True, insert_default=new_row_id
    )
    tenant_id: Mapped[str] = mapped_column(
        String(26), ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False
    )
    brand: Mapped[str] = mapped_column(String(255), nullable=False)
    model: Mapped[str] = mapped_column(String(255), nullable=False)
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    license_plate: Mapped[str] = mapped_column(String(32), nullable=False, unique=True)
    status: Mapped[str] = mapped_column(String(32), nullable=False, default="available")
    category: Mapped[str | None] = mapped_column(String(64), nullable=True)
    price_per_day: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="USD")
    image_url: Mapped[str | None] = mapped_column(String(2048), nullable=True)
    images: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    transmission: Mapped[str | None] = mapped_column(String(32), nullable=True)
    fuel_type: Mapped[str | None] = mapped_column(String(32), nullable=True)
    seats: Mapped[int] = mapped_column(Integer, nullable=False, default=5)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)


class CustomerModel(TenantBase, TimestampMixin):
    __tablename__ = "customers"

    id: Mapped[str] = mapped_column(
        String(26), primary_key=True, insert_default=new_row_id
    )
    tenant_id: Mapped[str] = mapped_column(
        String(26), ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False
    )
    first_name: Mapped[str] = mapped_column(String(255), nullable=False)
    last_name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str | None] = mapped_column(String(320), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(64), nullable=True)
    address: Mapped[str | None] = mapped_column(Text, nullable=True)


class BookingModel(TenantBase, TimestampMixin):
    __tablename__ = "bookings"

    id: Mapped[str] = mapped_column(
        String(26), primary_key=True, insert_default=new_row_id
    )
    tenant_id: Mapped[str] = mapped_column(
        String(26), ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False
    )
    car_id: Mapped[str] = mapped_column(
        String(26), ForeignKey("cars.id"), nullable=False, index=True
    )
    customer_id: Mapped[str] = mapped_column(
        String(26), ForeignKey("customers.id"), nullable=False, index=True
    )
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    price_per_day: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    total_amount: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)
    status: Mapped[str] = mapped_column(String(32), nullable=False, default="pending")


class ExpenseModel(TenantBase, TimestampMixin):
    __tablename__ = "expenses"

    id: Mapped[str] = mapped_column(
        String(26), primary_key=True, insert_default=new_row_id
    )
    tenant_id: Mapped[str] = mapped_column(
        String(26), ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False
    )
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    category: Mapped[str] = mapped_column(String(64), nullable=False)
    expense_date: Mapped[date] = mapped_column("date", Date, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)


class InvoiceModel(TenantBase, TimestampMixin):
    __tablename__ = "invoices"

    id: Mapped[str] = mapped_column(
        String(26), primary_key=True, insert_default=new_row_id
    )
    tenant_id: Mapped[str] = mapped_column(
        String(26), ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False
    )
    booking_id: Mapped[str | None] = mapped_column(
        String(26), ForeignKey("bookings.id", ondelete="SET NULL"), nullable=True
    )
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    due_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    status: Mapped[str] = mapped_column(String(32), nullable=False, default="unpaid")


class NotificationModel(TenantBase):
    __tablename__ = "notifications"

    id: Mapped[str] = mapped_column(
        String(26), primary_key=True, insert_default=new_row_id
    )
    tenant_id: Mapped[str] = mapped_column(
        String(26), ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False
    )
    user_id: Mapped[str | None] = mapped_column(
        String(26), ForeignKey("users.id", ondelete="CASCADE"), nullable=True
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    type: Mapped[str] = mapped_column(String(32), nullable=False, default="info")
    is_read: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), insert_default=utc_now, nullable=False
    )


class BrandingModel(TenantBase):
    __tablename__ = "branding"

    tenant_id: Mapped[str] = mapped_column(
        String(26), ForeignKey("tenants.id", ondelete="CASCADE"), primary_key=True
    )
    primary_color: Mapped[str | None] = mapped_column(String(16), nullable=True)
    secondary_color: Mapped[str | None] = mapped_column(String(16), nullable=True)
    accent_color: Mapped[str | None] = mapped_column(String(16), nullable=True)
    logo_url: Mapped[str | None] = mapped_column(String(2048), nullable=True)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), insert_default=utc_now, onupdate=utc_now
    )


class LandingPageModel(TenantBase):
    __tablename__ = "landing_pages"

    tenant_id: Mapped[str] = mapped_column(
        String(26), ForeignKey("tenants.id", ondelete="CASCADE"), primary_key=True
    )
    hero_title: Mapped[str | None] = mapped_column(String(255), nullable=True)
    hero_subtitle: Mapped[str | None] = mapped_column(String(255), nullable=True)
    hero_cta_text: Mapped[str | None] = mapped_column(String(64), nullable=True)
    about_text: Mapped[str | None] = mapped_column(Text, nullable=True)
    contact_phone: Mapped[str | None] = mapped_column(String(64), nullable=True)
    contact_email: Mapped[str | None] = mapped_column(String(320), nullable=True)
    contact_address: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_live: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    selected_cars: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), insert_default=utc_now, onupdate=utc_now
    )


class BookingRequestModel(TenantBase):
    """Booking enquiry submitted from the public landing page."""

    __tablename__ = "booking_requests"

    id: Mapped[str] = mapped_column(
        String(26), primary_key=True, insert_default=new_row_id
    )
    tenant_id: Mapped[str] = mapped_column(
        String(26), ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False
    )
    car_id: Mapped[str | None] = mapped_column(
        String(26), ForeignKey("cars.id", ondelete="SET NULL"), nullable=True
    )
    customer_name: Mapped[str] = mapped_column(String(255), nullable=False)
    customer_phone: Mapped[str] = mapped_column(String(64), nullable=False)
    start_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    end_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    status: Mapped[str] = mapped_column(String(32), nullable=False, default="pending")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), insert_default=utc_now, nullable=False
    )
