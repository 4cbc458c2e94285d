"""
portal.api.routes.v1.health

Purpose:
    Versioned health endpoint for API clients.

Created:
    2026-02-15
"""

from __future__ import annotations

from fastapi import APIRouter

from portal.api.contracts.api_paths import ApiPaths
from portal.api.contracts.api_tags import ApiTags
from portal.api.sanitization.response_sanitizer import SanitizingRoute

router = APIRouter(tags=[ApiTags().health], route_class=SanitizingRoute)


@router.get(ApiPaths().health)
def health() -> dict:
    return {"status": "ok"}
