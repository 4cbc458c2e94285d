"""
portal.api.logging.request_context

Purpose:
    Request-scoped context storage using contextvars.
    Carries the request id (for logs) and the resolved caller role (for
    response masking) from middleware down to route handlers.

Created:
    2026-02-15
"""

from __future__ import annotations

import contextvars

request_id_ctx_var: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "request_id",
    default=None,
)

caller_role_ctx_var: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "caller_role",
    default=None,
)


def current_request_id() -> str:
    return request_id_ctx_var.get() or "unknown"
