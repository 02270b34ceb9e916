"""Integration test fixtures.

Runs the full application, lifespan included, against SQLite database
files in a per-test temporary directory. Bearer tokens are minted with the
same shared secret the application verifies.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator, AsyncIterator, Callable
from contextlib import asynccontextmanager
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any

import pytest
import pytest_asyncio
from asgi_lifespan import LifespanManager
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from jose import jwt
from pydantic import SecretStr
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from infrastructure.database.tenant_schema import UserModel
from infrastructure.settings import (
    AuthSettings,
    DatabaseRetentionPolicy,
    DatabaseSettings,
    Settings,
    TenancySettings,
)
from main import create_app

TEST_SECRET = "integration-test-secret"
SUPER_ADMIN_ROLE = "super_admin"


@pytest.fixture
def retention_policy() -> DatabaseRetentionPolicy:
    """Retention policy of the app under test; parametrize to override."""
    return DatabaseRetentionPolicy.DROP


@pytest.fixture
def database_directory(tmp_path: Path) -> Path:
    return tmp_path / "databases"


@pytest.fixture
def settings(
    database_directory: Path, retention_policy: DatabaseRetentionPolicy
) -> Settings:
    return Settings(
        database=DatabaseSettings(
            driver="sqlite",
            database="control_plane",
            sqlite_directory=database_directory,
            connect_timeout_seconds=2,
        ),
        auth=AuthSettings(
            jwt_secret=SecretStr(TEST_SECRET),
            super_admin_role=SUPER_ADMIN_ROLE,
        ),
        tenancy=TenancySettings(
            retention_policy=retention_policy,
            resolution_timeout_seconds=5,
        ),
    )


@pytest.fixture
def app(settings: Settings) -> FastAPI:
    return create_app(settings)


@pytest_asyncio.fixture
async def async_client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Create async HTTP client for testing with lifespan support."""
    async with LifespanManager(app):
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            yield client


@pytest.fixture
def make_token() -> Callable[..., str]:
    """Factory minting signed bearer tokens."""

    def _make_token(
        sub: str,
        role: str | None = None,
        tenant_id: str | None = None,
        expires_in: timedelta = timedelta(hours=1),
    ) -> str:
        claims: dict[str, Any] = {
            "sub": sub,
            "exp": int((datetime.now(timezone.utc) + expires_in).timestamp()),
        }
        if role is not None:
            claims["role"] = role
        if tenant_id is not None:
            claims["tenant_id"] = tenant_id
        return jwt.encode(claims, TEST_SECRET, algorithm="HS256")

    return _make_token


@pytest.fixture
def super_admin_headers(make_token) -> dict[str, str]:
    token = make_token("platform-operator", role=SUPER_ADMIN_ROLE)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def provision_tenant(async_client: AsyncClient, super_admin_headers):
    """Factory provisioning a tenant through the admin API."""

    async def _provision(subdomain: str, name: str | None = None, **extra) -> dict:
        payload = {
            "name": name or f"{subdomain.title()} Rentals",
            "subdomain": subdomain,
            "admin_email": f"owner@{subdomain}.test",
            "admin_password": "correct horse battery",
            **extra,
        }
        response = await async_client.post(
            "/api/v1/admin/tenants", json=payload, headers=super_admin_headers
        )
        assert response.status_code == 201, response.text
        return response.json()

    return _provision


@pytest.fixture
def tenant_db(app: FastAPI):
    """Open a transaction on a tenant database through the app's pool manager."""

    @asynccontextmanager
    async def _open(database: str) -> AsyncIterator[AsyncSession]:
        pool = await app.state.pool_manager.get_pool(database)
        async with pool.session() as session:
            async with session.begin():
                yield session

    return _open


@pytest.fixture
def staff_headers(tenant_db, make_token):
    """Factory returning headers authenticating as a tenant's admin user."""

    async def _headers(tenant: dict) -> dict[str, str]:
        async with tenant_db(tenant["database_name"]) as session:
            user_id = await session.scalar(
                select(UserModel.id).where(UserModel.tenant_id == tenant["id"])
            )
        token = make_token(user_id, role="admin", tenant_id=tenant["id"])
        return {"Authorization": f"Bearer {token}"}

    return _headers
