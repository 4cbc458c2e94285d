"""
portal.api.middleware.security_headers

Purpose:
    Middleware that stamps static security headers on every response,
    including error responses produced by the global exception handlers.

Created:
    2026-02-15
"""

from __future__ import annotations

from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from portal.api.contracts.security_headers_policy import SecurityHeadersPolicy


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    def __init__(
        self,
        app,
        policy: SecurityHeadersPolicy | None = None,
        *,
        production: bool = False,
    ) -> None:
        super().__init__(app)
        self._headers = (policy or SecurityHeadersPolicy()).headers(production=production)

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        response: Response = await call_next(request)
        for name, value in self._headers.items():
            response.headers[name] = value
        return response
