"""
portal.shared.security.sanitize_policy

Purpose:
    Resource bounds and sentinel strings for response sanitization.
    Centralizes the limits that protect the process from adversarial payload
    shapes (deep nesting, huge maps, huge lists).

Created:
    2026-02-15
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class SanitizePolicy:
    max_depth: int = 50
    max_object_keys: int = 10_000
    max_array_length: int = 50_000
    depth_limit_token: str = "[DEPTH_LIMIT_EXCEEDED]"
    circular_reference_token: str = "[CIRCULAR_REFERENCE]"
