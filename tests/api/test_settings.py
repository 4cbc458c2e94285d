"""
tests.api.test_settings

Purpose:
    Environment-driven configuration.
"""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from portal.api.settings import Settings, get_settings


def test_defaults(monkeypatch) -> None:
    for name in ("PORTAL_ENV", "PORTAL_TRUSTED_ROLE_HEADER", "PORTAL_SANITIZE_MAX_DEPTH"):
        monkeypatch.delenv(name, raising=False)

    s = get_settings()

    assert s.environment == "development"
    assert not s.is_production
    assert s.trusted_role_header is None
    policy = s.sanitize_policy()
    assert (policy.max_depth, policy.max_object_keys, policy.max_array_length) == (50, 10_000, 50_000)


def test_env_overrides(monkeypatch) -> None:
    monkeypatch.setenv("PORTAL_ENV", "Production")
    monkeypatch.setenv("PORTAL_TRUSTED_ROLE_HEADER", "X-Auth-Role")
    monkeypatch.setenv("PORTAL_SANITIZE_MAX_DEPTH", "8")
    monkeypatch.setenv("PORTAL_SANITIZE_MAX_ARRAY_LENGTH", "  ")

    s = get_settings()

    assert s.is_production
    assert s.trusted_role_header == "X-Auth-Role"
    assert s.sanitize_policy().max_depth == 8
    assert s.sanitize_policy().max_array_length == 50_000


def test_invalid_limits_are_rejected(monkeypatch) -> None:
    monkeypatch.setenv("PORTAL_SANITIZE_MAX_DEPTH", "deep")
    with pytest.raises(ValidationError):
        get_settings()

    with pytest.raises(ValidationError):
        Settings(sanitize_max_object_keys=0)
