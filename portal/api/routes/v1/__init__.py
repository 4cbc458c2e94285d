from fastapi import APIRouter

from portal.api.contracts.api_paths import ApiPaths
from portal.api.routes.v1.health import router as health_router
from portal.api.routes.v1.info import router as info_router
from portal.api.sanitization.response_sanitizer import SanitizingRoute

v1_router = APIRouter(prefix=ApiPaths().v1_prefix, route_class=SanitizingRoute)

v1_router.include_router(health_router)
v1_router.include_router(info_router)
