"""
portal.shared.security.policy_registry

Purpose:
    Static classification tables for response field names.
    Decides which fields are always removed, always masked, or masked
    depending on the caller's role.

Notes:
    - Tables are built once at import time and never mutated; they are safe to
      share across concurrent requests without locking.
    - AlwaysRemove matching is exact and case-sensitive against the literal key.
    - AlwaysMask also matches common national-ID / tax-ID key variants
      case-insensitively.

Created:
    2026-02-15
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

from portal.shared.models.enums import FieldPolicy, Role

RoleLike = Role | str | None


# Secrets and credentials: never exposed to any client.
SENSITIVE_FIELDS: frozenset[str] = frozenset(
    {
        "password",
        "passwordHash",
        "hashedPassword",
        "refreshToken",
        "resetToken",
        "resetPasswordToken",
        "verificationToken",
        "emailVerificationToken",
        "secret",
        "secretKey",
        "privateKey",
        "apiKey",
        "apiSecret",
        "accessToken",
        "authToken",
        "sessionToken",
        "csrfToken",
        "mfaSecret",
        "totpSecret",
        "encryptionKey",
        "salt",
        "passwordSalt",
        "iv",
        "creditCardNumber",
        "cvv",
        "cardCvv",
        "pin",
    }
)

# High-risk national / financial identifiers.
ALWAYS_MASK_FIELDS: frozenset[str] = frozenset(
    {
        "aadhaarNumber",
        "panNumber",
        "bankAccountNumber",
        "accountNumber",
        "ifscCode",
    }
)

_PHONE_FIELDS = frozenset({"phoneNo", "phone", "mobile", "mobileNumber"})

# Lower roles see masked contact details; roles not listed get none.
ROLE_BASED_MASK_FIELDS: Mapping[str, frozenset[str]] = MappingProxyType(
    {
        Role.STUDENT.value: _PHONE_FIELDS | {"email", "dob", "contactNumber"},
        Role.TEACHER.value: _PHONE_FIELDS,
        Role.FACULTY.value: _PHONE_FIELDS,
    }
)

# Bypass PII masking entirely (sensitive-field removal still applies).
ADMIN_ROLES: frozenset[str] = frozenset(
    {
        Role.SYSTEM_ADMIN.value,
        Role.STATE_DIRECTORATE.value,
        Role.SUPER_ADMIN.value,
    }
)

# Role used for callers without an authenticated role: AlwaysMask applies,
# no role-conditional masking.
ANONYMOUS_ROLE = "ANONYMOUS"

# Keys that alias object-model behaviour in JavaScript clients.
RESERVED_KEYS: frozenset[str] = frozenset({"__proto__", "constructor", "prototype"})


def role_key(role: RoleLike) -> str | None:
    """
    Normalize a Role enum or raw role string into the table key.
    """
    if role is None:
        return None
    if isinstance(role, Role):
        return role.value
    return str(role)


def is_sensitive_field(field_name: str) -> bool:
    return field_name in SENSITIVE_FIELDS


def is_reserved_key(field_name: str) -> bool:
    return field_name in RESERVED_KEYS


def is_admin_bypass(role: RoleLike) -> bool:
    key = role_key(role)
    return key is not None and key in ADMIN_ROLES


def role_masked_fields(role: RoleLike) -> frozenset[str]:
    key = role_key(role)
    if key is None:
        return frozenset()
    return ROLE_BASED_MASK_FIELDS.get(key, frozenset())


def matches_identifier_pattern(field_name: str) -> bool:
    """
    Case-insensitive fallback for national-ID / tax-ID key variants
    (e.g. "studentAadharNo", "PAN").
    """
    lower = field_name.lower()
    return "aadhaar" in lower or "aadhar" in lower or lower == "pan"


def is_always_masked(field_name: str) -> bool:
    return field_name in ALWAYS_MASK_FIELDS or matches_identifier_pattern(field_name)


def should_mask_for_role(field_name: str, role: RoleLike) -> bool:
    """
    Exact-match check used by exporters: AlwaysMask or the role's table.
    """
    if field_name in ALWAYS_MASK_FIELDS:
        return True
    return field_name in role_masked_fields(role)


def classify(field_name: str, role: RoleLike = None) -> FieldPolicy:
    """
    Classify a field name for the given caller role.

    Removal always wins over masking. ROLE_CONDITIONAL_MASK is only reported
    when `role` lists the field; otherwise the field is UNCLASSIFIED.
    """
    if is_sensitive_field(field_name):
        return FieldPolicy.ALWAYS_REMOVE
    if is_always_masked(field_name):
        return FieldPolicy.ALWAYS_MASK
    if field_name in role_masked_fields(role):
        return FieldPolicy.ROLE_CONDITIONAL_MASK
    return FieldPolicy.UNCLASSIFIED
