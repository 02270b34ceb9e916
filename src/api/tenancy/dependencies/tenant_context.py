"""Tenant context FastAPI dependencies.

Resolves the tenant of a request and the connection pool of its isolated
database, using one of two strategies:

- subdomain: public routes identify the tenant by the Host header
- token: authenticated routes trust only the verified ``tenant_id`` claim;
  the Host header is never consulted

Usage in FastAPI routes:
    @router.get("/cars")
    async def list_cars(
        session: Annotated[AsyncSession, Depends(get_tenant_session)],
    ):
        # session is bound to the caller's tenant database
        ...
"""

from __future__ import annotations

import asyncio
from typing import Annotated, AsyncGenerator

import structlog
from fastapi import Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from infrastructure.database.dependencies import (
    get_control_plane_sessionmaker,
    get_tenant_pool_manager,
)
from infrastructure.database.exceptions import (
    PoolManagerClosedError,
    TenantPoolUnavailableError,
)
from infrastructure.database.pool_manager import TenantPoolManager
from infrastructure.database.tenant_pool import TenantPool
from infrastructure.dependencies import get_app_settings
from infrastructure.settings import Settings
from shared_kernel.auth import TokenClaims
from shared_kernel.errors import ErrorCode, api_error, unauthorized
from shared_kernel.middleware.observability import (
    DefaultTenantContextProbe,
    TenantContextProbe,
)
from shared_kernel.middleware.tenant_context import RequestTenantContext
from tenancy.dependencies.authentication import get_token_claims
from tenancy.domain.routing import subdomain_from_host
from tenancy.domain.tenant import Tenant
from tenancy.domain.value_objects import TenantId
from tenancy.infrastructure.tenant_repository import TenantRepository
from tenancy.ports.repositories import ITenantRepository


def _tenant_not_found():
    return api_error(
        status.HTTP_404_NOT_FOUND, ErrorCode.TENANT_NOT_FOUND, "Tenant not found"
    )


async def _acquire_pool(
    tenant: Tenant,
    pool_manager: TenantPoolManager,
    probe: TenantContextProbe,
) -> TenantPool:
    try:
        return await pool_manager.get_pool(tenant.database_name)
    except (TenantPoolUnavailableError, PoolManagerClosedError) as e:
        probe.tenant_database_unavailable(tenant.id.value, tenant.database_name, e)
        raise api_error(
            status.HTTP_503_SERVICE_UNAVAILABLE,
            ErrorCode.TENANT_DATABASE_UNAVAILABLE,
            "Tenant database is unavailable",
        ) from e


def _bind_log_context(tenant: Tenant, principal_id: str | None) -> None:
    structlog.contextvars.bind_contextvars(
        tenant_id=tenant.id.value,
        subdomain=tenant.subdomain,
    )
    if principal_id is not None:
        structlog.contextvars.bind_contextvars(principal_id=principal_id)


def _timed_out(
    probe: TenantContextProbe, lookup: str, value: str, timeout: float
) -> Exception:
    probe.resolution_timed_out(lookup, value, timeout)
    return api_error(
        status.HTTP_504_GATEWAY_TIMEOUT,
        ErrorCode.TENANT_RESOLUTION_TIMEOUT,
        "Tenant resolution timed out",
    )


async def resolve_tenant_by_subdomain(
    host: str | None,
    tenant_repository: ITenantRepository,
    pool_manager: TenantPoolManager,
    probe: TenantContextProbe,
    default_subdomain: str,
    timeout: float,
) -> RequestTenantContext:
    """Resolve the tenant of a public request from its Host header.

    This is the core logic for the subdomain strategy.

    Args:
        host: The Host header value, or None if missing.
        tenant_repository: Registry used for the lookup.
        pool_manager: Source of tenant pools.
        probe: Domain probe for observability.
        default_subdomain: Subdomain used when the host carries none.
        timeout: Deadline in seconds for the whole resolution.

    Returns:
        RequestTenantContext with source 'subdomain'.

    Raises:
        HTTPException 404: If no active tenant owns the subdomain.
        HTTPException 503: If the tenant database cannot be reached.
        HTTPException 504: If resolution exceeded ``timeout``.
    """
    subdomain = subdomain_from_host(host, default_subdomain)

    try:
        async with asyncio.timeout(timeout):
            tenant = await tenant_repository.get_by_subdomain(subdomain)
            if tenant is None or not tenant.is_active:
                probe.tenant_not_found("subdomain", subdomain)
                raise _tenant_not_found()

            pool = await _acquire_pool(tenant, pool_manager, probe)
    except TimeoutError as e:
        raise _timed_out(probe, "subdomain", subdomain, timeout) from e

    probe.tenant_resolved_from_subdomain(tenant.id.value, subdomain)
    _bind_log_context(tenant, principal_id=None)

    return RequestTenantContext(tenant=tenant, pool=pool, source="subdomain")


async def resolve_tenant_from_claims(
    claims: TokenClaims,
    tenant_repository: ITenantRepository,
    pool_manager: TenantPoolManager,
    probe: TenantContextProbe,
    timeout: float,
) -> RequestTenantContext:
    """Resolve the tenant of an authenticated request from its token claims.

    This is the core logic for the token strategy.

    Args:
        claims: Verified token claims.
        tenant_repository: Registry used for the lookup.
        pool_manager: Source of tenant pools.
        probe: Domain probe for observability.
        timeout: Deadline in seconds for the whole resolution.

    Returns:
        RequestTenantContext with source 'token'.

    Raises:
        HTTPException 401: If the token carries no tenant claim.
        HTTPException 404: If the claim does not name an active tenant.
        HTTPException 503: If the tenant database cannot be reached.
        HTTPException 504: If resolution exceeded ``timeout``.
    """
    if claims.tenant_id is None:
        probe.tenant_claim_missing(claims.sub)
        raise unauthorized(
            ErrorCode.TENANT_CLAIM_MISSING, "Tenant ID not found in token"
        )

    try:
        tenant_id = TenantId.from_string(claims.tenant_id)
    except ValueError as e:
        probe.tenant_not_found("token", claims.tenant_id)
        raise _tenant_not_found() from e

    try:
        async with asyncio.timeout(timeout):
            tenant = await tenant_repository.get_by_id(tenant_id)
            if tenant is None or not tenant.is_active:
                probe.tenant_not_found("token", tenant_id.value)
                raise _tenant_not_found()

            pool = await _acquire_pool(tenant, pool_manager, probe)
    except TimeoutError as e:
        raise _timed_out(probe, "token", tenant_id.value, timeout) from e

    probe.tenant_resolved_from_token(tenant.id.value, claims.sub)
    _bind_log_context(tenant, principal_id=claims.sub)

    return RequestTenantContext(
        tenant=tenant,
        pool=pool,
        source="token",
        principal_id=claims.sub,
        role=claims.role,
    )


# ---------------------------------------------------------------------------
# FastAPI wiring
# ---------------------------------------------------------------------------


def get_tenant_context_probe() -> TenantContextProbe:
    """Get TenantContextProbe instance."""
    return DefaultTenantContextProbe()


async def get_subdomain_tenant_context(
    request: Request,
    sessionmaker: Annotated[
        async_sessionmaker[AsyncSession], Depends(get_control_plane_sessionmaker)
    ],
    pool_manager: Annotated[TenantPoolManager, Depends(get_tenant_pool_manager)],
    settings: Annotated[Settings, Depends(get_app_settings)],
    probe: Annotated[TenantContextProbe, Depends(get_tenant_context_probe)],
) -> RequestTenantContext:
    """Resolve the tenant of a public request (subdomain strategy).

    The registry lookup uses its own short-lived control-plane session so
    no control-plane connection is held while the handler runs.
    """
    async with sessionmaker() as session:
        return await resolve_tenant_by_subdomain(
            host=request.headers.get("host"),
            tenant_repository=TenantRepository(session=session),
            pool_manager=pool_manager,
            probe=probe,
            default_subdomain=settings.tenancy.default_subdomain,
            timeout=settings.tenancy.resolution_timeout_seconds,
        )


async def get_token_tenant_context(
    claims: Annotated[TokenClaims, Depends(get_token_claims)],
    sessionmaker: Annotated[
        async_sessionmaker[AsyncSession], Depends(get_control_plane_sessionmaker)
    ],
    pool_manager: Annotated[TenantPoolManager, Depends(get_tenant_pool_manager)],
    settings: Annotated[Settings, Depends(get_app_settings)],
    probe: Annotated[TenantContextProbe, Depends(get_tenant_context_probe)],
) -> RequestTenantContext:
    """Resolve the tenant of an authenticated request (token strategy)."""
    async with sessionmaker() as session:
        return await resolve_tenant_from_claims(
            claims=claims,
            tenant_repository=TenantRepository(session=session),
            pool_manager=pool_manager,
            probe=probe,
            timeout=settings.tenancy.resolution_timeout_seconds,
        )


async def get_tenant_session(
    context: Annotated[RequestTenantContext, Depends(get_token_tenant_context)],
) -> AsyncGenerator[AsyncSession, None]:
    """Provide a session on the authenticated caller's tenant database.

    The session borrows a connection from the tenant pool and returns it
    when the request finishes, including on errors and cancellation.
    """
    async with context.pool.session() as session:
        yield session


async def get_public_tenant_session(
    context: Annotated[RequestTenantContext, Depends(get_subdomain_tenant_context)],
) -> AsyncGenerator[AsyncSession, None]:
    """Provide a session on the tenant database named by the Host header."""
    async with context.pool.session() as session:
        yield session
