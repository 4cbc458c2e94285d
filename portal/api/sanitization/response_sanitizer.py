"""
portal.api.sanitization.response_sanitizer

Purpose:
    Pipeline adapter between route handlers and the sanitization core.
    Every successful handler result is rebuilt with sensitive fields removed
    and PII masked for the caller's role before FastAPI serializes it.

Notes:
    - Handler exceptions are never caught here; they reach the global error
      handlers untouched. Only successful results are sanitized.
    - Admin roles bypass masking (role=None) but sensitive fields are still removed.
    - Callers without a role are sanitized as ANONYMOUS_ROLE (AlwaysMask applies).
    - If sanitization itself fails, the error is logged with the request id and
      an empty payload of the same kind ([] or {}) is returned. The unsanitized
      value never leaves the process.
    - Starlette Response objects returned directly by handlers are not touched.
    - A response model declared on the route filters the result before it is
      sanitized; FastAPI does not validate the sanitized payload again.

Created:
    2026-02-15
"""

from __future__ import annotations

import dataclasses
import functools
import inspect
import logging
from typing import Any, Callable, get_args

from fastapi.datastructures import Default, DefaultPlaceholder
from fastapi.exceptions import ResponseValidationError
from fastapi.routing import APIRoute
from pydantic import BaseModel, TypeAdapter, ValidationError
from starlette.responses import Response

from portal.api.logging.request_context import caller_role_ctx_var, current_request_id
from portal.shared.security.policy_registry import ANONYMOUS_ROLE, RoleLike, is_admin_bypass
from portal.shared.security.sanitize_policy import SanitizePolicy
from portal.shared.security.traversal import Sanitizer, TraversalContext, is_composite

logger = logging.getLogger(__name__)

_SEQUENCE_RESULTS = (list, tuple, set, frozenset)


class ResponseSanitizer:
    def __init__(self, policy: SanitizePolicy | None = None) -> None:
        self._sanitizer = Sanitizer(policy)

    @property
    def policy(self) -> SanitizePolicy:
        return self._sanitizer.policy

    def process(self, result: Any, role: RoleLike, request_id: str | None = None) -> Any:
        if result is None or isinstance(result, Response) or not is_composite(result):
            return result

        effective_role = None if is_admin_bypass(role) else (role or ANONYMOUS_ROLE)
        context = TraversalContext()

        try:
            processed = self._sanitizer.sanitize(result, effective_role, context=context)
        except Exception as exc:
            logger.exception(
                "[%s] Error processing response: %s",
                request_id or current_request_id(),
                exc,
            )
            return [] if isinstance(result, _SEQUENCE_RESULTS) else {}

        if context.truncations or context.depth_limit_hits or context.cycles:
            logger.debug(
                "response bounded: truncations=%s depth_limit_hits=%s cycles=%s keys=%s elements=%s",
                context.truncations,
                context.depth_limit_hits,
                context.cycles,
                context.keys_processed,
                context.elements_processed,
            )
        return processed


_response_sanitizer = ResponseSanitizer()


def configure_response_sanitizer(policy: SanitizePolicy | None = None) -> ResponseSanitizer:
    """
    Install the process-wide ResponseSanitizer. Called once from create_app().
    """
    global _response_sanitizer
    _response_sanitizer = ResponseSanitizer(policy)
    return _response_sanitizer


def get_response_sanitizer() -> ResponseSanitizer:
    return _response_sanitizer


def sanitize_result(result: Any) -> Any:
    """
    Sanitize a handler result for the role resolved for the current request.
    """
    return _response_sanitizer.process(result, caller_role_ctx_var.get(), current_request_id())


def _resolved_signature(func: Callable[..., Any]) -> inspect.Signature:
    # FastAPI resolves string annotations against the wrapper's globals, so
    # hand it already-evaluated ones.
    try:
        return inspect.signature(func, eval_str=True)
    except NameError:
        return inspect.signature(func)


def _declares_model(annotation: Any) -> bool:
    args = get_args(annotation)
    if args:
        return any(_declares_model(arg) for arg in args)
    return isinstance(annotation, type) and (
        issubclass(annotation, BaseModel) or dataclasses.is_dataclass(annotation)
    )


def response_shaper(
    response_model: Any,
    *,
    include: Any = None,
    exclude: Any = None,
    by_alias: bool = True,
    exclude_unset: bool = False,
    exclude_defaults: bool = False,
    exclude_none: bool = False,
) -> Callable[[Any], Any] | None:
    """
    Build the step that serializes a handler result through its response model.

    Returns None when the model declares no fields (dict, list, Any, scalars);
    such results are sanitized as returned.
    """
    if response_model is None or not _declares_model(response_model):
        return None

    adapter: TypeAdapter[Any] = TypeAdapter(response_model)

    def shape(result: Any) -> Any:
        try:
            value = adapter.validate_python(result, from_attributes=True)
        except ValidationError as exc:
            raise ResponseValidationError(errors=exc.errors(include_input=False)) from exc
        return adapter.dump_python(
            value,
            mode="json",
            include=include,
            exclude=exclude,
            by_alias=by_alias,
            exclude_unset=exclude_unset,
            exclude_defaults=exclude_defaults,
            exclude_none=exclude_none,
        )

    return shape


def sanitized_endpoint(
    func: Callable[..., Any],
    shaper: Callable[[Any], Any] | None = None,
) -> Callable[..., Any]:
    """
    Wrap a route handler (sync or async) so its result goes through sanitize_result().

    With a shaper, the result is first serialized through the route's response
    model, so fields the model does not declare never reach the sanitizer.
    """
    if getattr(func, "__sanitized__", False):
        return func

    def finish(result: Any) -> Any:
        if shaper is not None and not isinstance(result, Response):
            result = shaper(result)
        return sanitize_result(result)

    if inspect.iscoroutinefunction(func):

        @functools.wraps(func)
        async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
            return finish(await func(*args, **kwargs))

        wrapper: Callable[..., Any] = async_wrapper
    else:

        @functools.wraps(func)
        def sync_wrapper(*args: Any, **kwargs: Any) -> Any:
            return finish(func(*args, **kwargs))

        wrapper = sync_wrapper

    wrapper.__signature__ = _resolved_signature(func)  # type: ignore[attr-defined]
    wrapper.__sanitized__ = True  # type: ignore[attr-defined]
    return wrapper


class SanitizingRoute(APIRoute):
    """
    APIRoute that sanitizes every handler result.

    Use as APIRouter(route_class=SanitizingRoute).

    A response model (explicit or inferred from the return annotation) is
    applied inside the wrapper, before sanitization, and FastAPI's own response
    validation is turned off for the route. Validating afterwards would reject
    payloads whose secret fields were removed.
    """

    def __init__(
        self,
        path: str,
        endpoint: Callable[..., Any],
        *,
        response_model: Any = Default(None),
        **kwargs: Any,
    ) -> None:
        if not getattr(endpoint, "__sanitized__", False):
            model = response_model
            if isinstance(model, DefaultPlaceholder):
                model = _resolved_signature(endpoint).return_annotation
            shaper = response_shaper(
                None if model is inspect.Signature.empty else model,
                include=kwargs.get("response_model_include"),
                exclude=kwargs.get("response_model_exclude"),
                by_alias=kwargs.get("response_model_by_alias", True),
                exclude_unset=kwargs.get("response_model_exclude_unset", False),
                exclude_defaults=kwargs.get("response_model_exclude_defaults", False),
                exclude_none=kwargs.get("response_model_exclude_none", False),
            )
            if shaper is not None:
                response_model = None
            endpoint = sanitized_endpoint(endpoint, shaper)
        super().__init__(path, endpoint, response_model=response_model, **kwargs)
