"""Integration tests for tenant resolution and tenant-scoped routes.

Covers both strategies end to end: the Host header on public routes and
the verified token claim on authenticated routes. Tenants are provisioned
through the admin API, then their databases are filled directly.
"""

from __future__ import annotations

from decimal import Decimal

import pytest

from infrastructure.database.tenant_schema import (
    BrandingModel,
    CarModel,
    LandingPageModel,
)
from tenancy.domain.value_objects import TenantId

pytestmark = pytest.mark.integration


def _car(tenant: dict, brand: str, plate: str, status: str = "available") -> CarModel:
    return CarModel(
        tenant_id=tenant["id"],
        brand=brand,
        model="Model S",
        year=2024,
        license_plate=plate,
        status=status,
        price_per_day=Decimal("89.00"),
        currency="USD",
        seats=5,
    )


class TestPublicRoutes:
    @pytest.mark.asyncio
    async def test_public_tenant_by_host(self, async_client, provision_tenant, tenant_db):
        tenant = await provision_tenant("acme", name="Acme Rentals")
        async with tenant_db(tenant["database_name"]) as session:
            session.add(BrandingModel(tenant_id=tenant["id"], primary_color="#ff0000"))
            session.add(
                LandingPageModel(
                    tenant_id=tenant["id"], hero_title="Drive away", is_live=True
                )
            )

        response = await async_client.get(
            "/api/v1/public/tenant", headers={"Host": "acme.localhost:5173"}
        )

        assert response.status_code == 200
        body = response.json()
        assert body["tenant"]["id"] == tenant["id"]
        assert body["tenant"]["name"] == "Acme Rentals"
        assert body["branding"]["primary_color"] == "#ff0000"
        assert body["landing_page"]["hero_title"] == "Drive away"

    @pytest.mark.asyncio
    async def test_unpublished_landing_page_is_hidden(
        self, async_client, provision_tenant, tenant_db
    ):
        tenant = await provision_tenant("acme")
        async with tenant_db(tenant["database_name"]) as session:
            session.add(LandingPageModel(tenant_id=tenant["id"], is_live=False))

        response = await async_client.get(
            "/api/v1/public/tenant", headers={"Host": "acme.localhost"}
        )

        assert response.status_code == 200
        assert response.json()["branding"] is None
        assert response.json()["landing_page"] is None

    @pytest.mark.asyncio
    async def test_unknown_host_is_404(self, async_client, provision_tenant):
        await provision_tenant("acme")

        response = await async_client.get(
            "/api/v1/public/tenant", headers={"Host": "ghost.localhost"}
        )

        assert response.status_code == 404
        assert response.json()["detail"]["code"] == "tenant_not_found"

    @pytest.mark.asyncio
    async def test_public_cars_lists_only_available(
        self, async_client, provision_tenant, tenant_db
    ):
        tenant = await provision_tenant("acme")
        async with tenant_db(tenant["database_name"]) as session:
            session.add(_car(tenant, "Volvo", "V-1"))
            session.add(_car(tenant, "Audi", "A-1"))
            session.add(_car(tenant, "BMW", "B-1", status="maintenance"))

        response = await async_client.get(
            "/api/v1/public/cars", headers={"Host": "acme.example.com"}
        )

        assert response.status_code == 200
        assert [c["brand"] for c in response.json()] == ["Audi", "Volvo"]
        assert response.json()[0]["price_per_day"] == "89.00"


class TestAuthenticatedRoutes:
    @pytest.mark.asyncio
    async def test_me_returns_admin_user(
        self, async_client, provision_tenant, staff_headers
    ):
        tenant = await provision_tenant("acme")

        response = await async_client.get(
            "/api/v1/me", headers=await staff_headers(tenant)
        )

        assert response.status_code == 200
        body = response.json()
        assert body["email"] == "owner@acme.test"
        assert body["role"] == "admin"
        assert body["is_active"] is True
        assert body["tenant"]["subdomain"] == "acme"

    @pytest.mark.asyncio
    async def test_me_for_unknown_principal_is_404(
        self, async_client, provision_tenant, make_token
    ):
        tenant = await provision_tenant("acme")
        token = make_token("nobody", role="admin", tenant_id=tenant["id"])

        response = await async_client.get(
            "/api/v1/me", headers={"Authorization": f"Bearer {token}"}
        )

        assert response.status_code == 404
        assert response.json()["detail"]["code"] == "user_not_found"

    @pytest.mark.asyncio
    async def test_token_without_tenant_claim_is_401(self, async_client, make_token):
        token = make_token("user-1", role="admin")

        response = await async_client.get(
            "/api/v1/cars", headers={"Authorization": f"Bearer {token}"}
        )

        assert response.status_code == 401
        assert response.json()["detail"]["code"] == "tenant_claim_missing"

    @pytest.mark.asyncio
    async def test_token_for_unknown_tenant_is_404(self, async_client, make_token):
        token = make_token("user-1", tenant_id=TenantId.generate().value)

        response = await async_client.get(
            "/api/v1/cars", headers={"Authorization": f"Bearer {token}"}
        )

        assert response.status_code == 404
        assert response.json()["detail"]["code"] == "tenant_not_found"

    @pytest.mark.asyncio
    async def test_cars_require_authentication(self, async_client):
        response = await async_client.get("/api/v1/cars")

        assert response.status_code == 401


class TestTenantIsolation:
    @pytest.mark.asyncio
    async def test_each_tenant_sees_only_its_own_fleet(
        self, async_client, provision_tenant, tenant_db, staff_headers
    ):
        acme = await provision_tenant("acme")
        globex = await provision_tenant("globex")
        # Same plate in both databases; uniqueness is per tenant database
        async with tenant_db(acme["database_name"]) as session:
            session.add(_car(acme, "Acme Motors", "SAME-123"))
        async with tenant_db(globex["database_name"]) as session:
            session.add(_car(globex, "Globex Auto", "SAME-123"))

        acme_cars = await async_client.get(
            "/api/v1/cars", headers=await staff_headers(acme)
        )
        globex_cars = await async_client.get(
            "/api/v1/cars", headers=await staff_headers(globex)
        )

        assert [c["brand"] for c in acme_cars.json()] == ["Acme Motors"]
        assert [c["brand"] for c in globex_cars.json()] == ["Globex Auto"]

    @pytest.mark.asyncio
    async def test_host_header_is_ignored_on_authenticated_routes(
        self, async_client, provision_tenant, tenant_db, staff_headers
    ):
        acme = await provision_tenant("acme")
        await provision_tenant("globex")
        async with tenant_db(acme["database_name"]) as session:
            session.add(_car(acme, "Acme Motors", "A-1"))

        headers = {**await staff_headers(acme), "Host": "globex.localhost"}
        response = await async_client.get("/api/v1/cars", headers=headers)

        assert response.status_code == 200
        assert [c["brand"] for c in response.json()] == ["Acme Motors"]

    @pytest.mark.asyncio
    async def test_public_routes_follow_the_host(
        self, async_client, provision_tenant, tenant_db
    ):
        acme = await provision_tenant("acme")
        globex = await provision_tenant("globex")
        async with tenant_db(acme["database_name"]) as session:
            session.add(_car(acme, "Acme Motors", "SAME-123"))
        async with tenant_db(globex["database_name"]) as session:
            session.add(_car(globex, "Globex Auto", "SAME-123"))

        response = await async_client.get(
            "/api/v1/public/cars", headers={"Host": "globex.localhost"}
        )

        assert [c["brand"] for c in response.json()] == ["Globex Auto"]


class TestUnavailableDatabase:
    @pytest.mark.asyncio
    async def test_missing_database_file_is_503(
        self, app, async_client, provision_tenant, database_directory
    ):
        tenant = await provision_tenant("acme")
        await app.state.pool_manager.close(tenant["database_name"])
        (database_directory / "tenant_acme.db").unlink()

        response = await async_client.get(
            "/api/v1/public/tenant", headers={"Host": "acme.localhost"}
        )

        assert response.status_code == 503
        assert response.json()["detail"]["code"] == "tenant_database_unavailable"
        assert not (database_directory / "tenant_acme.db").exists()
