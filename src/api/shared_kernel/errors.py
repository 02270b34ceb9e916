"""Stable error codes shared by every HTTP surface.

Every failure is returned as::

    {"detail": {"code": "<stable code>", "message": "<human message>"}}

Clients branch on ``code``; ``message`` is for humans and may change.
"""

from __future__ import annotations

from enum import StrEnum

from fastapi import HTTPException, status


class ErrorCode(StrEnum):
    TENANT_NOT_FOUND = "tenant_not_found"
    USER_NOT_FOUND = "user_not_found"
    NOT_AUTHENTICATED = "not_authenticated"
    INVALID_TOKEN = "invalid_token"
    TENANT_CLAIM_MISSING = "tenant_claim_missing"
    FORBIDDEN = "forbidden"
    SUBDOMAIN_TAKEN = "subdomain_taken"
    INVALID_SUBDOMAIN = "invalid_subdomain"
    INVALID_TENANT_ID = "invalid_tenant_id"
    TENANT_DATABASE_UNAVAILABLE = "tenant_database_unavailable"
    TENANT_RESOLUTION_TIMEOUT = "tenant_resolution_timeout"
    PROVISIONING_FAILED = "provisioning_failed"
    PROVISIONING_INCOMPLETE = "provisioning_incomplete"
    DATABASE_OPERATION_FAILED = "database_operation_failed"
    VALIDATION_ERROR = "validation_error"
    INTERNAL_ERROR = "internal_error"


def error_detail(code: ErrorCode, message: str) -> dict[str, str]:
    """Build the ``detail`` payload of an error response."""
    return {"code": code.value, "message": message}


def api_error(
    status_code: int,
    code: ErrorCode,
    message: str,
    headers: dict[str, str] | None = None,
) -> HTTPException:
    """Create an HTTPException carrying a coded error detail.

    Usage:
        raise api_error(404, ErrorCode.TENANT_NOT_FOUND, "Tenant not found")
    """
    return HTTPException(
        status_code=status_code,
        detail=error_detail(code, message),
        headers=headers,
    )


def unauthorized(code: ErrorCode, message: str) -> HTTPException:
    """401 with the Bearer challenge header."""
    return api_error(
        status.HTTP_401_UNAUTHORIZED,
        code,
        message,
        headers={"WWW-Authenticate": "Bearer"},
    )
