"""
portal.api.middleware.caller_role

Purpose:
    Middleware that resolves the authenticated caller's role once per request
    and exposes it to the response sanitizer.

Notes:
    - Authentication happens upstream. This layer only reads what the auth
      layer left behind: request.state.user, scope["user"], or (gateway
      deployments only) a trusted role header.
    - The resolved role is stored on request.state.caller_role and in
      caller_role_ctx_var; None means unauthenticated.

Created:
    2026-02-15
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Callable, Mapping

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from portal.api.logging.request_context import caller_role_ctx_var

logger = logging.getLogger(__name__)

RoleResolver = Callable[[Request], str | None]


def _role_from_user(user: Any) -> str | None:
    if user is None:
        return None

    if isinstance(user, Mapping):
        role = user.get("role")
    else:
        role = getattr(user, "role", None)

    if role is None:
        return None
    if isinstance(role, Enum):
        role = role.value
    role = str(role).strip()
    return role or None


def resolve_caller_role(request: Request, trusted_header: str | None = None) -> str | None:
    """
    Resolve the caller role from the request context.

    Precedence: request.state.user -> scope["user"] -> trusted header.
    """
    role = _role_from_user(getattr(request.state, "user", None))
    if role:
        return role

    role = _role_from_user(request.scope.get("user"))
    if role:
        return role

    if trusted_header:
        raw = request.headers.get(trusted_header)
        if raw and raw.strip():
            return raw.strip()

    return None


class CallerRoleMiddleware(BaseHTTPMiddleware):
    def __init__(
        self,
        app,
        *,
        trusted_header: str | None = None,
        resolver: RoleResolver | None = None,
    ) -> None:
        super().__init__(app)
        self._trusted_header = trusted_header
        self._resolver = resolver

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if self._resolver is not None:
            role = self._resolver(request)
        else:
            role = resolve_caller_role(request, self._trusted_header)

        request.state.caller_role = role
        caller_role_ctx_var.set(role)
        logger.debug("caller role resolved: %s", role or "<anonymous>")

        return await call_next(request)
