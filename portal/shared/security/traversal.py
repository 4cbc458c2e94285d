"""
portal.shared.security.traversal

Purpose:
    Single-pass walker that rebuilds an arbitrary response value with
    security-sensitive fields removed and PII masked for the caller's role.

Notes:
    - Never mutates its input; every container in the output is new.
    - Depth, key-count and list-length bounds are the only protection against
      adversarial shapes; exceeding them substitutes a sentinel or truncates.
    - role=None means admin bypass: nothing is masked, sensitive fields are
      still removed. Callers without a role should pass ANONYMOUS_ROLE.
    - TraversalContext is per call and never shared, so concurrent calls need
      no locking.

Created:
    2026-02-15
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from decimal import Decimal
from itertools import islice
from typing import Any

from pydantic import BaseModel

from portal.shared.security.masking_rules import apply_masking
from portal.shared.security.policy_registry import (
    RoleLike,
    is_always_masked,
    is_reserved_key,
    is_sensitive_field,
    role_key,
    role_masked_fields,
)
from portal.shared.security.sanitize_policy import SanitizePolicy

logger = logging.getLogger(__name__)


_SCALAR_TYPES = (str, bool, int, float, complex, Decimal)

_SEQUENCE_TYPES = (list, tuple, set, frozenset)


@dataclass
class TraversalContext:
    """
    Per-call traversal state. Create a fresh one for every sanitize call.
    """

    visited: set[int] = field(default_factory=set)
    keys_processed: int = 0
    elements_processed: int = 0
    truncations: int = 0
    depth_limit_hits: int = 0
    cycles: int = 0


def is_scalar(value: Any) -> bool:
    return value is None or isinstance(value, _SCALAR_TYPES)


def is_dataclass_instance(value: Any) -> bool:
    return dataclasses.is_dataclass(value) and not isinstance(value, type)


def is_composite(value: Any) -> bool:
    """
    True for values walked as Sequence or Keyed. Everything else is opaque:
    dates, binary buffers, patterns, exceptions, handles, futures, iterators,
    callables and any other host object are returned as-is.
    """
    return isinstance(value, (Mapping, BaseModel) + _SEQUENCE_TYPES) or is_dataclass_instance(value)


class Sanitizer:
    """
    Applies the field policy tables to a response value under a fixed SanitizePolicy.
    """

    def __init__(self, policy: SanitizePolicy | None = None) -> None:
        self._policy = policy or SanitizePolicy()

    @property
    def policy(self) -> SanitizePolicy:
        return self._policy

    def sanitize(
        self,
        value: Any,
        role: RoleLike = None,
        *,
        context: TraversalContext | None = None,
    ) -> Any:
        ctx = context if context is not None else TraversalContext()
        return self._walk(value, role_key(role), ctx, 0)

    def _walk(self, data: Any, role: str | None, ctx: TraversalContext, depth: int) -> Any:
        policy = self._policy

        if depth > policy.max_depth:
            ctx.depth_limit_hits += 1
            logger.debug("Max recursion depth (%s) exceeded", policy.max_depth)
            return policy.depth_limit_token

        if is_scalar(data) or not is_composite(data):
            return data

        marker = id(data)
        if marker in ctx.visited:
            ctx.cycles += 1
            logger.debug("Circular reference replaced at depth %s", depth)
            return policy.circular_reference_token

        ctx.visited.add(marker)
        try:
            if isinstance(data, BaseModel):
                return self._walk_mapping(data.model_dump(), role, ctx, depth)
            if is_dataclass_instance(data):
                fields = {f.name: getattr(data, f.name) for f in dataclasses.fields(data)}
                return self._walk_mapping(fields, role, ctx, depth)
            if isinstance(data, Mapping):
                return self._walk_mapping(data, role, ctx, depth)
            return self._walk_sequence(data, role, ctx, depth)
        finally:
            ctx.visited.discard(marker)

    def _walk_sequence(self, data: Any, role: str | None, ctx: TraversalContext, depth: int) -> Any:
        limit = min(len(data), self._policy.max_array_length)
        items = [self._walk(item, role, ctx, depth + 1) for item in islice(data, limit)]
        ctx.elements_processed += limit

        if len(data) > limit:
            ctx.truncations += 1
            logger.debug("Array truncated from %s to %s items", len(data), limit)

        if isinstance(data, list):
            return items
        if isinstance(data, tuple):
            # namedtuples keep their type
            return type(data)._make(items) if hasattr(data, "_fields") else tuple(items)
        if isinstance(data, frozenset):
            return frozenset(items)
        return set(items)

    def _walk_mapping(
        self, data: Mapping[Any, Any], role: str | None, ctx: TraversalContext, depth: int
    ) -> dict[Any, Any]:
        limit = min(len(data), self._policy.max_object_keys)
        masked_for_role = role_masked_fields(role)
        processed: dict[Any, Any] = {}

        for key, value in islice(data.items(), limit):
            ctx.keys_processed += 1

            if isinstance(key, str) and (is_reserved_key(key) or is_sensitive_field(key)):
                continue

            if value is None:
                processed[key] = value
                continue

            should_mask = (
                role is not None
                and isinstance(key, str)
                and (is_always_masked(key) or key in masked_for_role)
            )

            if should_mask and isinstance(value, str):
                processed[key] = apply_masking(key, value)
            elif not is_scalar(value):
                processed[key] = self._walk(value, role, ctx, depth + 1)
            else:
                processed[key] = value

        if len(data) > limit:
            ctx.truncations += 1
            logger.debug("Object keys truncated from %s to %s", len(data), limit)

        return processed


_default_sanitizer = Sanitizer()


def sanitize(
    value: Any,
    role: RoleLike = None,
    *,
    policy: SanitizePolicy | None = None,
    context: TraversalContext | None = None,
) -> Any:
    """
    Return a sanitized copy of `value` for `role` (None = admin bypass).
    """
    sanitizer = _default_sanitizer if policy is None else Sanitizer(policy)
    return sanitizer.sanitize(value, role, context=context)
