"""Unit test fixtures with mocked dependencies."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest
from pydantic import SecretStr

from infrastructure.database.tenant_pool import TenantPool
from infrastructure.settings import DatabaseSettings
from tenancy.domain.tenant import Tenant
from tenancy.domain.value_objects import Subdomain


@pytest.fixture
def mock_db_settings() -> DatabaseSettings:
    """Provide test PostgreSQL settings."""
    return DatabaseSettings(
        driver="postgresql",
        host="testhost",
        port=5432,
        database="testdb",
        username="testuser",
        password=SecretStr("testpass"),
    )


@pytest.fixture
def sqlite_settings(tmp_path) -> DatabaseSettings:
    """Provide SQLite settings rooted in a temporary directory."""
    return DatabaseSettings(
        driver="sqlite",
        database="control_plane",
        sqlite_directory=tmp_path,
        connect_timeout_seconds=2,
    )


@pytest.fixture
def make_pool():
    """Factory for TenantPool doubles whose dispose() can be awaited."""

    def _make_pool(database: str) -> MagicMock:
        pool = MagicMock(spec=TenantPool)
        pool.database = database
        pool.max_connections = 5
        pool.dispose = AsyncMock()
        return pool

    return _make_pool


@pytest.fixture
def active_tenant() -> Tenant:
    """Provide an ACTIVE tenant named acme."""
    tenant = Tenant.create(
        name="Acme Rentals",
        subdomain=Subdomain("acme"),
        database_prefix="tenant_",
    )
    tenant.activate()
    return tenant
