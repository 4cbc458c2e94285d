"""
portal.api.main

Purpose:
    FastAPI application entrypoint for the internship portal API.

Notes:
    Middleware order (outermost first): request id -> security headers ->
    caller role. Deployment auth middleware added after create_app() wraps
    all of them and runs before the caller role is resolved.

Created:
    2026-02-15
"""

from __future__ import annotations

from fastapi import FastAPI

from portal.api.contracts.request_id_policy import RequestIdPolicy
from portal.api.contracts.security_headers_policy import SecurityHeadersPolicy
from portal.api.error_handlers import register_error_handlers
from portal.api.logging.logging_config import configure_logging
from portal.api.middleware.caller_role import CallerRoleMiddleware
from portal.api.middleware.request_id import RequestIdMiddleware
from portal.api.middleware.security_headers import SecurityHeadersMiddleware
from portal.api.routes.health import router as health_router
from portal.api.routes.v1 import v1_router
from portal.api.sanitization.response_sanitizer import configure_response_sanitizer
from portal.api.settings import Settings, get_settings


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()

    configure_logging(settings.log_level)
    configure_response_sanitizer(settings.sanitize_policy())

    app = FastAPI(title=settings.service_name, version=settings.service_version)

    @app.get("/")
    def root():
        return {"status": "ok", "service": settings.service_name}

    app.add_middleware(CallerRoleMiddleware, trusted_header=settings.trusted_role_header)
    app.add_middleware(
        SecurityHeadersMiddleware,
        policy=SecurityHeadersPolicy(),
        production=settings.is_production,
    )
    app.add_middleware(RequestIdMiddleware, policy=RequestIdPolicy())

    register_error_handlers(app)

    app.include_router(health_router)
    app.include_router(v1_router)

    return app
