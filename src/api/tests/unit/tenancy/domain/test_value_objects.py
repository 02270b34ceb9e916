"""Unit tests for Tenancy value objects."""

import pytest

from tenancy.domain.exceptions import InvalidSubdomainError
from tenancy.domain.value_objects import Subdomain, TenantId


class TestTenantId:
    """Tests for TenantId value object."""

    def test_generates_valid_ulid(self):
        tenant_id = TenantId.generate()
        assert len(tenant_id.value) == 26

    def test_generated_ids_are_unique(self):
        assert TenantId.generate() != TenantId.generate()

    def test_from_string_accepts_valid_ulid(self):
        tenant_id = TenantId.from_string("01ARZ3NDEKTSV4RRFFQ69G5FAV")
        assert tenant_id.value == "01ARZ3NDEKTSV4RRFFQ69G5FAV"

    def test_from_string_normalizes_case(self):
        tenant_id = TenantId.from_string("01arz3ndektsv4rrffq69g5fav")
        assert tenant_id.value == "01ARZ3NDEKTSV4RRFFQ69G5FAV"

    @pytest.mark.parametrize("value", ["", "not-a-ulid", "01ARZ3NDEKTSV4RRFFQ69G5FA"])
    def test_from_string_rejects_invalid_values(self, value):
        with pytest.raises(ValueError):
            TenantId.from_string(value)

    def test_str_returns_value(self):
        assert str(TenantId("01ARZ3NDEKTSV4RRFFQ69G5FAV")) == (
            "01ARZ3NDEKTSV4RRFFQ69G5FAV"
        )


class TestSubdomain:
    """Tests for Subdomain value object."""

    @pytest.mark.parametrize("value", ["acme", "a", "acme-rentals", "r2d2", "a" * 63])
    def test_accepts_dns_labels(self, value):
        assert Subdomain(value).value == value

    @pytest.mark.parametrize(
        "value",
        ["", "Acme", "-acme", "acme-", "acme.rentals", "acme_rentals", "a" * 64, " acme"],
    )
    def test_rejects_invalid_labels(self, value):
        with pytest.raises(InvalidSubdomainError) as exc_info:
            Subdomain(value)
        assert exc_info.value.subdomain == value

    def test_invalid_subdomain_is_a_value_error(self):
        with pytest.raises(ValueError):
            Subdomain("NOT VALID")

    def test_database_name_uses_prefix(self):
        assert Subdomain("acme").database_name("tenant_") == "tenant_acme"

    def test_database_name_replaces_hyphens(self):
        assert Subdomain("acme-rentals").database_name("tenant_") == (
            "tenant_acme_rentals"
        )

    def test_database_name_at_length_limit(self):
        subdomain = Subdomain("a" * 56)

        assert len(subdomain.database_name("tenant_")) == 63

    @pytest.mark.parametrize("value", ["a" * 57, "a" * 63])
    def test_database_name_over_length_limit_is_rejected(self, value):
        subdomain = Subdomain(value)

        with pytest.raises(InvalidSubdomainError) as exc_info:
            subdomain.database_name("tenant_")

        assert exc_info.value.subdomain == value
        assert "at most 56 characters" in str(exc_info.value)

    def test_is_immutable(self):
        subdomain = Subdomain("acme")
        with pytest.raises(AttributeError):
            subdomain.value = "other"  # type: ignore[misc]
