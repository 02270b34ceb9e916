"""HTTP routes reading tenant-scoped fleet and profile data.

Authenticated routes resolve the tenant from the bearer token; public routes
resolve it from the Host header. Either way the handler only ever sees a
session bound to that tenant's database, and every query is additionally
filtered by tenant id.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from fleet.presentation.models import (
    BrandingResponse,
    CarResponse,
    LandingPageResponse,
    MeResponse,
    PublicTenantResponse,
    TenantSummary,
)
from infrastructure.database.tenant_schema import (
    BrandingModel,
    CarModel,
    LandingPageModel,
    RoleModel,
    UserModel,
)
from shared_kernel.errors import ErrorCode, api_error
from shared_kernel.middleware.tenant_context import RequestTenantContext
from tenancy.dependencies import (
    get_public_tenant_session,
    get_subdomain_tenant_context,
    get_tenant_session,
    get_token_tenant_context,
)

AVAILABLE = "available"

router = APIRouter(prefix="/api/v1", tags=["fleet"])
public_router = APIRouter(prefix="/api/v1/public", tags=["public"])


@router.get("/me")
async def get_me(
    context: Annotated[RequestTenantContext, Depends(get_token_tenant_context)],
    session: Annotated[AsyncSession, Depends(get_tenant_session)],
) -> MeResponse:
    """Get the authenticated staff member and their tenant.

    Raises:
        HTTPException: 404 if the principal has no account in this tenant
    """
    stmt = (
        select(UserModel, RoleModel.name)
        .outerjoin(RoleModel, UserModel.role_id == RoleModel.id)
        .where(
            UserModel.id == context.principal_id,
            UserModel.tenant_id == context.tenant_id,
        )
    )
    row = (await session.execute(stmt)).one_or_none()
    if row is None:
        raise api_error(
            status.HTTP_404_NOT_FOUND, ErrorCode.USER_NOT_FOUND, "User not found"
        )

    user, role_name = row
    return MeResponse(
        id=user.id,
        email=user.email,
        first_name=user.first_name,
        last_name=user.last_name,
        role=role_name,
        is_active=user.is_active,
        tenant=TenantSummary.from_context(context),
    )


@router.get("/cars")
async def list_cars(
    context: Annotated[RequestTenantContext, Depends(get_token_tenant_context)],
    session: Annotated[AsyncSession, Depends(get_tenant_session)],
) -> list[CarResponse]:
    """List every car of the caller's fleet, newest first."""
    stmt = (
        select(CarModel)
        .where(CarModel.tenant_id == context.tenant_id)
        .order_by(CarModel.created_at.desc(), CarModel.id.desc())
    )
    cars = (await session.scalars(stmt)).all()
    return [CarResponse.model_validate(car) for car in cars]


@public_router.get("/tenant")
async def get_public_tenant(
    context: Annotated[RequestTenantContext, Depends(get_subdomain_tenant_context)],
    session: Annotated[AsyncSession, Depends(get_public_tenant_session)],
) -> PublicTenantResponse:
    """Get the public profile of the tenant named by the Host header."""
    branding = await session.get(BrandingModel, context.tenant_id)
    landing_page = await session.get(LandingPageModel, context.tenant_id)

    return PublicTenantResponse(
        tenant=TenantSummary.from_context(context),
        branding=(
            BrandingResponse.model_validate(branding) if branding is not None else None
        ),
        landing_page=(
            LandingPageResponse.model_validate(landing_page)
            if landing_page is not None and landing_page.is_live
            else None
        ),
    )


@public_router.get("/cars")
async def list_public_cars(
    context: Annotated[RequestTenantContext, Depends(get_subdomain_tenant_context)],
    session: Annotated[AsyncSession, Depends(get_public_tenant_session)],
) -> list[CarResponse]:
    """List the cars currently available for rent."""
    stmt = (
        select(CarModel)
        .where(CarModel.tenant_id == context.tenant_id, CarModel.status == AVAILABLE)
        .order_by(CarModel.brand, CarModel.model)
    )
    cars = (await session.scalars(stmt)).all()
    return [CarResponse.model_validate(car) for car in cars]
