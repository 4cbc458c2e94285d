# portal/api/settings.py
"""
portal.api.settings

Purpose:
    Centralized configuration for the FastAPI service.
    Values come from PORTAL_* environment variables with safe defaults.

Created:
    2026-02-15
"""

from __future__ import annotations

import os

from pydantic import BaseModel, Field

from portal.api.contracts.api_paths import ApiPaths
from portal.shared.security.sanitize_policy import SanitizePolicy

_DEFAULT_POLICY = SanitizePolicy()


class Settings(BaseModel):
    service_name: str = Field(default="internship-portal-api")
    service_version: str = Field(default="0.1.0")

    api_v1_prefix: str = Field(default=ApiPaths().v1_prefix)

    environment: str = Field(default="development")
    log_level: str = Field(default="INFO")

    # Set only when an authenticating gateway strips/overwrites this header.
    trusted_role_header: str | None = Field(default=None)

    sanitize_max_depth: int = Field(default=_DEFAULT_POLICY.max_depth, ge=1)
    sanitize_max_object_keys: int = Field(default=_DEFAULT_POLICY.max_object_keys, ge=1)
    sanitize_max_array_length: int = Field(default=_DEFAULT_POLICY.max_array_length, ge=1)

    @property
    def is_production(self) -> bool:
        return self.environment.strip().lower() == "production"

    def sanitize_policy(self) -> SanitizePolicy:
        return SanitizePolicy(
            max_depth=self.sanitize_max_depth,
            max_object_keys=self.sanitize_max_object_keys,
            max_array_length=self.sanitize_max_array_length,
        )


_ENV_FIELDS = {
    "PORTAL_ENV": "environment",
    "PORTAL_LOG_LEVEL": "log_level",
    "PORTAL_TRUSTED_ROLE_HEADER": "trusted_role_header",
    "PORTAL_SANITIZE_MAX_DEPTH": "sanitize_max_depth",
    "PORTAL_SANITIZE_MAX_OBJECT_KEYS": "sanitize_max_object_keys",
    "PORTAL_SANITIZE_MAX_ARRAY_LENGTH": "sanitize_max_array_length",
}


def get_settings() -> Settings:
    """
    Build Settings from the environment. Blank variables are treated as unset;
    invalid values raise pydantic.ValidationError at startup.
    """
    overrides: dict[str, str] = {}
    for env_name, field_name in _ENV_FIELDS.items():
        raw = os.getenv(env_name)
        if raw is not None and raw.strip():
            overrides[field_name] = raw.strip()
    return Settings(**overrides)
