"""Unit tests for Host header to subdomain mapping."""

import pytest

from tenancy.domain.routing import DEFAULT_SUBDOMAIN, subdomain_from_host


class TestSubdomainFromHost:
    @pytest.mark.parametrize(
        ("host", "expected"),
        [
            ("acme.localhost:5173", "acme"),
            ("acme.localhost", "acme"),
            ("acme.example.com", "acme"),
            ("ACME.Example.COM", "acme"),
            ("acme.example.com:8443", "acme"),
            ("acme.eu.example.com", "acme"),
            ("www.example.com", DEFAULT_SUBDOMAIN),
            ("example.com", DEFAULT_SUBDOMAIN),
            ("localhost:8000", DEFAULT_SUBDOMAIN),
            ("localhost", DEFAULT_SUBDOMAIN),
            ("www.localhost", DEFAULT_SUBDOMAIN),
        ],
    )
    def test_mapping(self, host, expected):
        assert subdomain_from_host(host) == expected

    @pytest.mark.parametrize("host", [None, ""])
    def test_missing_host_maps_to_default(self, host):
        assert subdomain_from_host(host) == DEFAULT_SUBDOMAIN

    def test_custom_default(self):
        assert subdomain_from_host("example.com", default_subdomain="main") == "main"
