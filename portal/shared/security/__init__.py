"""
Response sanitization and PII masking core.
"""

from .masking_rules import apply_masking, default_mask, mask_field, mask_record
from .policy_registry import (
    ANONYMOUS_ROLE,
    classify,
    is_admin_bypass,
    is_sensitive_field,
    should_mask_for_role,
)
from .sanitize_policy import SanitizePolicy
from .traversal import Sanitizer, TraversalContext, sanitize

__all__ = [
    "ANONYMOUS_ROLE",
    "SanitizePolicy",
    "Sanitizer",
    "TraversalContext",
    "apply_masking",
    "classify",
    "default_mask",
    "is_admin_bypass",
    "is_sensitive_field",
    "mask_field",
    "mask_record",
    "sanitize",
    "should_mask_for_role",
]
