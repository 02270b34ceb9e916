"""Unit tests for the authentication dependencies."""

from __future__ import annotations

from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest
import structlog
from fastapi import HTTPException
from fastapi.security import HTTPAuthorizationCredentials

from shared_kernel.auth import InvalidTokenError, TokenClaims, TokenValidator
from tenancy.dependencies.authentication import get_token_claims, require_super_admin


def _claims(role: str | None) -> TokenClaims:
    return TokenClaims(
        sub="user-123",
        tenant_id=None,
        role=role,
        expires_at=datetime(2030, 1, 1, tzinfo=timezone.utc),
    )


@pytest.fixture
def mock_validator() -> AsyncMock:
    return AsyncMock(spec=TokenValidator)


@pytest.fixture
def settings() -> MagicMock:
    settings = MagicMock()
    settings.auth.super_admin_role = "super_admin"
    return settings


class TestGetTokenClaims:
    @pytest.mark.asyncio
    async def test_missing_credentials_is_401(self, mock_validator) -> None:
        with pytest.raises(HTTPException) as exc_info:
            await get_token_claims(validator=mock_validator, credentials=None)

        assert exc_info.value.status_code == 401
        assert exc_info.value.detail["code"] == "not_authenticated"
        assert exc_info.value.headers == {"WWW-Authenticate": "Bearer"}
        mock_validator.validate_token.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_invalid_token_is_401(self, mock_validator) -> None:
        mock_validator.validate_token.side_effect = InvalidTokenError(
            "Token has expired"
        )
        credentials = HTTPAuthorizationCredentials(scheme="Bearer", credentials="x")

        with pytest.raises(HTTPException) as exc_info:
            await get_token_claims(validator=mock_validator, credentials=credentials)

        assert exc_info.value.status_code == 401
        assert exc_info.value.detail == {
            "code": "invalid_token",
            "message": "Token has expired",
        }

    @pytest.mark.asyncio
    async def test_valid_token_returns_claims(self, mock_validator) -> None:
        structlog.contextvars.clear_contextvars()
        claims = _claims("admin")
        mock_validator.validate_token.return_value = claims
        credentials = HTTPAuthorizationCredentials(
            scheme="Bearer", credentials="good-token"
        )

        result = await get_token_claims(
            validator=mock_validator, credentials=credentials
        )

        assert result is claims
        mock_validator.validate_token.assert_awaited_once_with("good-token")
        assert structlog.contextvars.get_contextvars()["principal_id"] == "user-123"
        structlog.contextvars.clear_contextvars()


class TestRequireSuperAdmin:
    @pytest.mark.asyncio
    async def test_super_admin_allowed(self, settings) -> None:
        claims = _claims("super_admin")

        assert await require_super_admin(claims=claims, settings=settings) is claims

    @pytest.mark.asyncio
    @pytest.mark.parametrize("role", ["admin", "staff", None])
    async def test_other_roles_forbidden(self, settings, role) -> None:
        with pytest.raises(HTTPException) as exc_info:
            await require_super_admin(claims=_claims(role), settings=settings)

        assert exc_info.value.status_code == 403
        assert exc_info.value.detail["code"] == "forbidden"
