"""SQLAlchemy ORM model for the control-plane tenants table.

This is the tenant registry: one row per rental business, pointing at the
physical database that holds its data.
"""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.database.models import ControlPlaneBase, TimestampMixin


class TenantModel(ControlPlaneBase, TimestampMixin):
    """ORM model for the tenants registry table.

    Note: Subdomains and database names are globally unique.
    """

    __tablename__ = "tenants"

    id: Mapped[str] = mapped_column(String(26), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    subdomain: Mapped[str] = mapped_column(String(63), nullable=False, unique=True)
    db_name: Mapped[str] = mapped_column(String(128), nullable=False, unique=True)
    subscription_tier: Mapped[str] = mapped_column(String(32), nullable=False)
    status: Mapped[str] = mapped_column(String(32), nullable=False, index=True)
    payment_method: Mapped[str | None] = mapped_column(String(64), nullable=True)
    logo_url: Mapped[str | None] = mapped_column(String(2048), nullable=True)

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<TenantModel(id={self.id}, subdomain={self.subdomain})>"
