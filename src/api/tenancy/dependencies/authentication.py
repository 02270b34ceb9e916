"""Authentication dependencies.

Verifies the bearer token of a request and exposes its claims. The token
is the only trusted source of the principal, its role and its tenant.
"""

from typing import Annotated

import structlog
from fastapi import Depends, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from infrastructure.dependencies import get_app_settings
from infrastructure.settings import Settings
from shared_kernel.auth import InvalidTokenError, TokenClaims, TokenValidator
from shared_kernel.errors import ErrorCode, api_error, unauthorized

# Security scheme for Swagger UI integration
bearer_scheme = HTTPBearer(auto_error=False)


def get_token_validator(request: Request) -> TokenValidator:
    """Get the application-scoped token validator created at startup."""
    return request.app.state.token_validator


async def get_token_claims(
    validator: Annotated[TokenValidator, Depends(get_token_validator)],
    credentials: Annotated[
        HTTPAuthorizationCredentials | None, Depends(bearer_scheme)
    ] = None,
) -> TokenClaims:
    """Authenticate the request via its bearer token.

    FastAPI caches the result per request, so downstream dependencies that
    depend on ``get_token_claims`` share it without re-validating.

    Raises:
        HTTPException 401: ``not_authenticated`` if no bearer token was sent,
            ``invalid_token`` if it does not verify or has expired.
    """
    if credentials is None:
        raise unauthorized(ErrorCode.NOT_AUTHENTICATED, "Not authenticated")

    try:
        claims = await validator.validate_token(credentials.credentials)
    except InvalidTokenError as e:
        raise unauthorized(ErrorCode.INVALID_TOKEN, str(e)) from e

    structlog.contextvars.bind_contextvars(principal_id=claims.sub)
    return claims


async def require_super_admin(
    claims: Annotated[TokenClaims, Depends(get_token_claims)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> TokenClaims:
    """Allow only platform super administrators.

    Raises:
        HTTPException 403: If the principal's role is not the super admin role.
    """
    if claims.role != settings.auth.super_admin_role:
        raise api_error(
            status.HTTP_403_FORBIDDEN,
            ErrorCode.FORBIDDEN,
            "Super admin role required",
        )
    return claims
