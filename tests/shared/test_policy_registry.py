"""
tests.shared.test_policy_registry

Purpose:
    Tests for field classification and role lookups.
"""

from __future__ import annotations

import pytest

from portal.shared.models.enums import FieldPolicy, Role
from portal.shared.security.policy_registry import (
    ADMIN_ROLES,
    ROLE_BASED_MASK_FIELDS,
    classify,
    is_admin_bypass,
    is_reserved_key,
    is_sensitive_field,
    matches_identifier_pattern,
    role_key,
    role_masked_fields,
    should_mask_for_role,
)


@pytest.mark.parametrize("name", ["password", "refreshToken", "apiKey", "salt", "iv", "cvv", "pin"])
def test_sensitive_fields_are_always_removed(name: str) -> None:
    assert is_sensitive_field(name)
    assert classify(name, Role.STUDENT) is FieldPolicy.ALWAYS_REMOVE
    assert classify(name, None) is FieldPolicy.ALWAYS_REMOVE


def test_sensitive_match_is_case_sensitive() -> None:
    assert not is_sensitive_field("Password")
    assert classify("Password") is FieldPolicy.UNCLASSIFIED


def test_always_mask_exact_and_pattern() -> None:
    assert classify("aadhaarNumber") is FieldPolicy.ALWAYS_MASK
    assert classify("ifscCode") is FieldPolicy.ALWAYS_MASK
    assert classify("studentAadharNo") is FieldPolicy.ALWAYS_MASK
    assert classify("PAN") is FieldPolicy.ALWAYS_MASK
    assert matches_identifier_pattern("AADHAAR")
    assert not matches_identifier_pattern("panel")


def test_role_conditional_fields() -> None:
    assert classify("email", Role.STUDENT) is FieldPolicy.ROLE_CONDITIONAL_MASK
    assert classify("dob", "STUDENT") is FieldPolicy.ROLE_CONDITIONAL_MASK
    assert classify("phoneNo", Role.TEACHER) is FieldPolicy.ROLE_CONDITIONAL_MASK
    assert classify("email", Role.TEACHER) is FieldPolicy.UNCLASSIFIED
    assert classify("phoneNo", Role.PRINCIPAL) is FieldPolicy.UNCLASSIFIED
    assert classify("phoneNo", None) is FieldPolicy.UNCLASSIFIED


def test_unknown_role_has_no_role_conditional_fields() -> None:
    assert role_masked_fields("NOT_A_ROLE") == frozenset()
    assert role_masked_fields(None) == frozenset()


def test_admin_bypass_set() -> None:
    assert is_admin_bypass(Role.SYSTEM_ADMIN)
    assert is_admin_bypass("STATE_DIRECTORATE")
    assert is_admin_bypass("SUPER_ADMIN")
    assert not is_admin_bypass("TEACHER")
    assert not is_admin_bypass(None)
    assert "STUDENT" not in ADMIN_ROLES


def test_should_mask_for_role_uses_exact_names() -> None:
    assert should_mask_for_role("email", "STUDENT")
    assert not should_mask_for_role("email", "TEACHER")
    assert should_mask_for_role("aadhaarNumber", "ANY")
    assert not should_mask_for_role("studentAadharNo", "ANY")


def test_reserved_keys() -> None:
    assert is_reserved_key("__proto__")
    assert is_reserved_key("constructor")
    assert not is_reserved_key("name")


def test_role_key_normalizes_enums() -> None:
    assert role_key(Role.STUDENT) == "STUDENT"
    assert role_key("TEACHER") == "TEACHER"
    assert role_key(None) is None


def test_tables_are_read_only() -> None:
    with pytest.raises(TypeError):
        ROLE_BASED_MASK_FIELDS["INDUSTRY"] = frozenset({"email"})  # type: ignore[index]
