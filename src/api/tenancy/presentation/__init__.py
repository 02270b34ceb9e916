"""Tenancy presentation layer.

Platform administration routes, organized by aggregate.
"""

from __future__ import annotations

from fastapi import APIRouter

from tenancy.presentation import tenants

router = APIRouter(
    prefix="/api/v1/admin",
    tags=["admin"],
)

router.include_router(tenants.router)

__all__ = ["router"]
