"""Hostname to subdomain mapping for public, unauthenticated routes."""

from __future__ import annotations

DEFAULT_SUBDOMAIN = "default"


def subdomain_from_host(
    host: str | None, default_subdomain: str = DEFAULT_SUBDOMAIN
) -> str:
    """Extract the tenant subdomain from an HTTP Host header value.

    Rules, applied to the lower-cased host with any port removed:
    - ``<label>.localhost`` maps to ``<label>`` (local development)
    - three or more labels map to the first label
    - anything else, and the ``www`` label, maps to ``default_subdomain``

    Examples:
        >>> subdomain_from_host("acme.localhost:5173")
        'acme'
        >>> subdomain_from_host("acme.example.com")
        'acme'
        >>> subdomain_from_host("www.example.com")
        'default'
        >>> subdomain_from_host("example.com")
        'default'
    """
    if not host:
        return default_subdomain

    hostname = host.strip().lower().split(":", 1)[0]
    labels = hostname.split(".")

    if len(labels) >= 2 and labels[-1] == "localhost":
        subdomain = labels[0]
    elif len(labels) >= 3:
        subdomain = labels[0]
    else:
        return default_subdomain

    if not subdomain or subdomain == "www":
        return default_subdomain
    return subdomain
