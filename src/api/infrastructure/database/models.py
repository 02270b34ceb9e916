"""SQLAlchemy declarative bases and shared model utilities.

Two independent metadata collections exist: the control-plane registry
lives in the shared database, while every tenant database receives its
own copy of the tenant schema. Keeping them on separate bases means
``create_all`` on one never touches the other.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import DateTime
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utc_now() -> datetime:
    """Generate UTC timestamp for database defaults.

    Uses a named function instead of lambda for SQLAlchemy 2.0 compatibility.
    Ensures proper INSERT-time evaluation.
    """
    return datetime.now(timezone.utc)


class ControlPlaneBase(DeclarativeBase):
    """Base class for tables stored in the shared control-plane database."""

    type_annotation_map: dict[type, Any] = {}


class TenantBase(DeclarativeBase):
    """Base class for tables created inside each isolated tenant database."""

    type_annotation_map: dict[type, Any] = {}


class TimestampMixin:
    """Mixin providing created_at and updated_at timestamp columns.

    Uses timezone-aware UTC timestamps with Python-side default generation.
    """

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        insert_default=utc_now,
        nullable=False,
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        insert_default=utc_now,
        onupdate=utc_now,
        nullable=False,
    )
