"""
portal.api.routes.v1.info

Purpose:
    Versioned info endpoint that exposes API metadata and the active
    response-sanitization limits for client discovery.

Created:
    2026-02-15
"""

from __future__ import annotations

from fastapi import APIRouter

from portal.api.contracts.api_tags import ApiTags
from portal.api.contracts.api_paths import ApiPaths
from portal.api.sanitization.response_sanitizer import SanitizingRoute, get_response_sanitizer

router = APIRouter(tags=[ApiTags().info], route_class=SanitizingRoute)


@router.get(ApiPaths().info)
def info() -> dict:
    policy = get_response_sanitizer().policy
    return {
        "api_version": "v1",
        "service": "internship-portal",
        "endpoints": {
            "health": "/v1/health",
            "info": "/v1/info",
        },
        "sanitization": {
            "max_depth": policy.max_depth,
            "max_object_keys": policy.max_object_keys,
            "max_array_length": policy.max_array_length,
        },
    }
