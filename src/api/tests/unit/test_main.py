"""Unit tests for the FastAPI application factory and lifespan."""

from __future__ import annotations

import httpx
import pytest
from asgi_lifespan import LifespanManager
from pydantic import SecretStr

from infrastructure.database.pool_manager import TenantPoolManager
from infrastructure.settings import AuthSettings, Settings
from main import create_app
from shared_kernel.auth import TokenValidator


@pytest.fixture
def app_settings(sqlite_settings) -> Settings:
    return Settings(
        database=sqlite_settings,
        auth=AuthSettings(jwt_secret=SecretStr("unit-test-secret")),
    )


class TestCreateApp:
    def test_stores_settings_on_app(self, app_settings) -> None:
        app = create_app(app_settings)

        assert app.state.settings is app_settings
        assert app.title == "Car Rental API"

    def test_registers_routes(self, app_settings) -> None:
        paths = {route.path for route in create_app(app_settings).routes}

        assert "/health" in paths
        assert "/api/v1/admin/tenants" in paths
        assert "/api/v1/admin/tenants/{tenant_id}" in paths
        assert "/api/v1/admin/tenants/{tenant_id}/subscription" in paths
        assert "/api/v1/me" in paths
        assert "/api/v1/cars" in paths
        assert "/api/v1/public/tenant" in paths
        assert "/api/v1/public/cars" in paths

    @pytest.mark.asyncio
    async def test_health(self, app_settings) -> None:
        transport = httpx.ASGITransport(app=create_app(app_settings))
        async with httpx.AsyncClient(transport=transport, base_url="http://t") as c:
            response = await c.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "ok"}
        assert "X-Request-ID" in response.headers


class TestLifespan:
    @pytest.mark.asyncio
    async def test_startup_creates_shared_resources(
        self, app_settings, sqlite_settings
    ) -> None:
        app = create_app(app_settings)

        async with LifespanManager(app):
            assert isinstance(app.state.pool_manager, TenantPoolManager)
            assert isinstance(app.state.token_validator, TokenValidator)
            assert app.state.control_plane_sessionmaker is not None
            assert (sqlite_settings.sqlite_directory / "control_plane.db").exists()

        assert app.state.pool_manager.is_closed

    @pytest.mark.asyncio
    async def test_startup_warms_control_plane_pool(
        self, app_settings, sqlite_settings
    ) -> None:
        app = create_app(app_settings)

        async with LifespanManager(app):
            pool = app.state.control_plane_engine.pool
            assert pool.checkedin() == sqlite_settings.pool_min_connections


class TestErrorHandlers:
    @pytest.mark.asyncio
    async def test_validation_error_format(self, app_settings) -> None:
        app = create_app(app_settings)

        @app.get("/items/{item_id}")
        async def get_item(item_id: int) -> dict:
            return {"id": item_id}

        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://t") as c:
            response = await c.get("/items/not-a-number")

        assert response.status_code == 422
        assert response.json() == {
            "detail": {
                "code": "validation_error",
                "message": "Invalid request: path.item_id",
            }
        }

    @pytest.mark.asyncio
    async def test_unexpected_error_is_500(self, app_settings) -> None:
        app = create_app(app_settings)

        @app.get("/boom")
        async def boom() -> dict:
            raise RuntimeError("kaput")

        transport = httpx.ASGITransport(app=app, raise_app_exceptions=False)
        async with httpx.AsyncClient(transport=transport, base_url="http://t") as c:
            response = await c.get("/boom")

        assert response.status_code == 500
        assert response.json()["detail"]["code"] == "internal_error"
        assert "kaput" not in response.text
