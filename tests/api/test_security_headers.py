"""
tests.api.test_security_headers

Purpose:
    Static security headers on every response; HSTS only in production.
"""

from __future__ import annotations

from portal.api.settings import Settings

EXPECTED = {
    "x-content-type-options": "nosniff",
    "x-frame-options": "DENY",
    "x-xss-protection": "1; mode=block",
    "cache-control": "no-store, no-cache, must-revalidate, proxy-revalidate",
    "pragma": "no-cache",
    "expires": "0",
    "x-permitted-cross-domain-policies": "none",
    "content-security-policy": "default-src 'none'; frame-ancestors 'none'",
}


def test_security_headers_present(client) -> None:
    r = client.get("/v1/health")
    for name, value in EXPECTED.items():
        assert r.headers.get(name) == value
    assert "strict-transport-security" not in r.headers


def test_security_headers_on_not_found(client) -> None:
    r = client.get("/v1/does-not-exist")
    assert r.status_code == 404
    assert r.headers.get("x-frame-options") == "DENY"


def test_hsts_only_in_production(client_factory) -> None:
    client = client_factory(Settings(environment="production"))
    r = client.get("/health")
    assert r.headers["strict-transport-security"] == "max-age=31536000; includeSubDomains; preload"
