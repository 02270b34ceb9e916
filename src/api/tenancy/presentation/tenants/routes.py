"""HTTP routes for platform tenant administration.

Every route requires the super admin role. Tenants are listed and returned
in any lifecycle status so operators can see failed or half-deleted ones.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, status

from infrastructure.database.exceptions import DatabaseProvisioningError
from shared_kernel.auth import TokenClaims
from shared_kernel.errors import ErrorCode, api_error
from tenancy.application.services import TenantProvisioningService, TenantService
from tenancy.dependencies.authentication import require_super_admin
from tenancy.dependencies.tenant import get_provisioning_service, get_tenant_service
from tenancy.domain.exceptions import InvalidSubdomainError
from tenancy.domain.value_objects import TenantId
from tenancy.ports.exceptions import (
    DuplicateSubdomainError,
    ProvisioningError,
    ProvisioningPartialFailureError,
    TenantNotFoundError,
)
from tenancy.presentation.tenants.models import (
    CreateTenantRequest,
    TenantResponse,
    UpdateSubscriptionRequest,
)

router = APIRouter(
    prefix="/tenants",
    tags=["tenants"],
)


def _parse_tenant_id(tenant_id: str) -> TenantId:
    try:
        return TenantId.from_string(tenant_id)
    except ValueError as e:
        raise api_error(
            status.HTTP_422_UNPROCESSABLE_CONTENT,
            ErrorCode.INVALID_TENANT_ID,
            "Invalid tenant ID format",
        ) from e


def _not_found(tenant_id: str):
    return api_error(
        status.HTTP_404_NOT_FOUND,
        ErrorCode.TENANT_NOT_FOUND,
        f"Tenant {tenant_id} not found",
    )


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    responses={
        201: {"description": "Tenant provisioned and active"},
        409: {"description": "Subdomain already taken"},
        422: {"description": "Invalid subdomain or request body"},
        500: {"description": "Provisioning failed"},
    },
)
async def create_tenant(
    request: CreateTenantRequest,
    claims: Annotated[TokenClaims, Depends(require_super_admin)],
    service: Annotated[TenantProvisioningService, Depends(get_provisioning_service)],
) -> TenantResponse:
    """Provision a new tenant with its own database and admin account.

    Args:
        request: Tenant creation request
        claims: Verified claims of the requesting super admin
        service: Provisioning service running the saga

    Returns:
        TenantResponse of the ACTIVE tenant

    Raises:
        HTTPException: 409 if the subdomain is taken
        HTTPException: 422 if the subdomain is not a valid DNS label
        HTTPException: 500 if provisioning failed (``provisioning_failed``
            when rolled back, ``provisioning_incomplete`` when not)
    """
    try:
        tenant = await service.provision(
            name=request.name,
            subdomain=request.subdomain,
            admin_email=request.admin_email,
            admin_password=request.admin_password,
            subscription_tier=request.subscription_tier,
            payment_method=request.payment_method,
            logo_url=request.logo_url,
            requested_by=claims.sub,
        )
    except InvalidSubdomainError as e:
        raise api_error(
            status.HTTP_422_UNPROCESSABLE_CONTENT, ErrorCode.INVALID_SUBDOMAIN, str(e)
        ) from e
    except DuplicateSubdomainError as e:
        raise api_error(
            status.HTTP_409_CONFLICT, ErrorCode.SUBDOMAIN_TAKEN, str(e)
        ) from e
    except ProvisioningPartialFailureError as e:
        raise api_error(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            ErrorCode.PROVISIONING_INCOMPLETE,
            "Tenant provisioning failed and requires manual cleanup",
        ) from e
    except ProvisioningError as e:
        raise api_error(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            ErrorCode.PROVISIONING_FAILED,
            "Tenant provisioning failed",
        ) from e

    return TenantResponse.from_domain(tenant)


@router.get("")
async def list_tenants(
    _: Annotated[TokenClaims, Depends(require_super_admin)],
    service: Annotated[TenantService, Depends(get_tenant_service)],
) -> list[TenantResponse]:
    """List all tenants except the platform tenant, newest first."""
    tenants = await service.list_tenants()
    return [TenantResponse.from_domain(t) for t in tenants]


@router.get("/{tenant_id}")
async def get_tenant(
    tenant_id: str,
    _: Annotated[TokenClaims, Depends(require_super_admin)],
    service: Annotated[TenantService, Depends(get_tenant_service)],
) -> TenantResponse:
    """Get tenant by ID.

    Raises:
        HTTPException: 422 if tenant ID is invalid
        HTTPException: 404 if tenant not found
    """
    tenant_id_obj = _parse_tenant_id(tenant_id)
    try:
        tenant = await service.get_tenant(tenant_id_obj)
    except TenantNotFoundError as e:
        raise _not_found(tenant_id) from e
    return TenantResponse.from_domain(tenant)


@router.patch("/{tenant_id}/subscription")
async def update_subscription(
    tenant_id: str,
    request: UpdateSubscriptionRequest,
    _: Annotated[TokenClaims, Depends(require_super_admin)],
    service: Annotated[TenantService, Depends(get_tenant_service)],
) -> TenantResponse:
    """Change a tenant's subscription tier.

    Raises:
        HTTPException: 422 if tenant ID is invalid
        HTTPException: 404 if tenant not found
    """
    tenant_id_obj = _parse_tenant_id(tenant_id)
    try:
        tenant = await service.update_subscription(
            tenant_id_obj, request.subscription_tier
        )
    except TenantNotFoundError as e:
        raise _not_found(tenant_id) from e
    return TenantResponse.from_domain(tenant)


@router.delete(
    "/{tenant_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_model=None,
    responses={
        204: {"description": "Tenant deleted successfully"},
        404: {"description": "Tenant not found"},
        422: {"description": "Invalid tenant ID format"},
        500: {"description": "Tenant database could not be released"},
    },
)
async def delete_tenant(
    tenant_id: str,
    _: Annotated[TokenClaims, Depends(require_super_admin)],
    service: Annotated[TenantService, Depends(get_tenant_service)],
) -> None:
    """Delete a tenant, applying the configured database retention policy.

    If the database cannot be dropped or archived the tenant stays in
    DELETING status and the request can be repeated.

    Raises:
        HTTPException: 422 if tenant ID is invalid
        HTTPException: 404 if tenant not found
        HTTPException: 500 if the database operation failed
    """
    tenant_id_obj = _parse_tenant_id(tenant_id)
    try:
        await service.delete_tenant(tenant_id_obj)
    except TenantNotFoundError as e:
        raise _not_found(tenant_id) from e
    except DatabaseProvisioningError as e:
        raise api_error(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            ErrorCode.DATABASE_OPERATION_FAILED,
            "Tenant database could not be released",
        ) from e
