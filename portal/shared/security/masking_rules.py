"""
portal.shared.security.masking_rules

Purpose:
    Per-field masking functions that turn a raw PII string into a redacted one.

Notes:
    - Every rule is pure and total over strings: undersized or malformed input
      degrades to "****" instead of raising.
    - Output formats are stable; exported reports and UI fixtures depend on them.
    - Masking only ever applies to strings. Non-string values are never passed
      to a rule by the traversal engine.

Created:
    2026-02-15
"""

from __future__ import annotations

import re
from types import MappingProxyType
from typing import Any, Callable, Iterable, Mapping

MaskRule = Callable[[str], str]

MASK_PLACEHOLDER = "****"
MAX_MASK_STARS = 10

_NON_DIGITS = re.compile(r"\D")
_YEAR = re.compile(r"\d{4}")


def _digits(value: str) -> str:
    return _NON_DIGITS.sub("", value)


def mask_national_id(value: str) -> str:
    # XXXX-XXXX-1234
    if not value or len(value) < 4:
        return MASK_PLACEHOLDER
    return f"XXXX-XXXX-{_digits(value)[-4:]}"


def mask_tax_id(value: str) -> str:
    # XXXXXX234F
    if not value or len(value) < 4:
        return MASK_PLACEHOLDER
    return f"XXXXXX{value[-4:]}"


def mask_phone(value: str) -> str:
    # ******6789
    if not value or len(value) < 4:
        return MASK_PLACEHOLDER
    return f"******{_digits(value)[-4:]}"


def mask_bank_account(value: str) -> str:
    if not value or len(value) < 4:
        return MASK_PLACEHOLDER
    return f"XXXXXXXX{value[-4:]}"


def mask_routing_code(value: str) -> str:
    # Keeps the bank prefix of an IFSC code.
    if not value or len(value) < 4:
        return MASK_PLACEHOLDER
    return f"{value[:4]}XXXXXXX"


def mask_email(value: str) -> str:
    """
    j******e@example.com

    The first "@" separates the local part; the segment after it is kept as the domain.
    """
    if not value or "@" not in value:
        return MASK_PLACEHOLDER
    parts = value.split("@")
    local, domain = parts[0], parts[1]
    if len(local) <= 2:
        return f"**@{domain}"
    stars = "*" * min(len(local) - 2, MAX_MASK_STARS)
    return f"{local[0]}{stars}{local[-1]}@{domain}"


def mask_date_of_birth(value: str) -> str:
    if not value:
        return MASK_PLACEHOLDER
    return "**/**/XXXX" if _YEAR.search(value) else MASK_PLACEHOLDER


def default_mask(value: str) -> str:
    """
    Generic length-aware mask for sensitive fields without a dedicated rule.
    """
    if not value:
        return MASK_PLACEHOLDER
    n = len(value)
    if n <= 4:
        return MASK_PLACEHOLDER
    if n <= 8:
        return f"{value[0]}{'*' * (n - 2)}{value[-1]}"
    return f"{value[:2]}{'*' * min(n - 4, MAX_MASK_STARS)}{value[-2:]}"


MASKING_RULES: Mapping[str, MaskRule] = MappingProxyType(
    {
        "aadhaarNumber": mask_national_id,
        "panNumber": mask_tax_id,
        "phoneNo": mask_phone,
        "phone": mask_phone,
        "mobile": mask_phone,
        "mobileNumber": mask_phone,
        "contactNumber": mask_phone,
        "bankAccountNumber": mask_bank_account,
        "accountNumber": mask_bank_account,
        "ifscCode": mask_routing_code,
        "email": mask_email,
        "dob": mask_date_of_birth,
    }
)


def resolve_rule(field_name: str) -> MaskRule | None:
    """
    Exact rule first, then case-insensitive family match. None when neither applies.
    """
    rule = MASKING_RULES.get(field_name)
    if rule is not None:
        return rule

    lower = field_name.lower()
    if "phone" in lower or "mobile" in lower:
        return mask_phone
    if "email" in lower:
        return mask_email
    if "aadhaar" in lower or "aadhar" in lower:
        return mask_national_id
    if lower == "pan" or "pannumber" in lower:
        return mask_tax_id
    return None


def apply_masking(field_name: str, value: str) -> str:
    """
    Mask a value already classified as sensitive; unregistered names get default_mask().
    """
    rule = resolve_rule(field_name)
    if rule is None:
        return default_mask(value)
    return rule(value)


def mask_field(field_name: str, value: Any) -> Any:
    """
    Mask a single value outside the response pipeline (CSV/PDF exporters, jobs).

    Empty and non-string values are returned unchanged, as are field names with
    no registered rule or family match.
    """
    if not value or not isinstance(value, str):
        return value
    rule = resolve_rule(field_name)
    return rule(value) if rule is not None else value


def mask_record(record: Mapping[str, Any], fields: Iterable[str]) -> dict[str, Any]:
    """
    Return a copy of a flat row with the named columns passed through mask_field().
    """
    wanted = set(fields)
    return {k: (mask_field(k, v) if k in wanted else v) for k, v in record.items()}
