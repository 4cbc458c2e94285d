"""
portal.shared.models.enums

Purpose:
    Enumerations shared across the API layer, the sanitization core and the CLI.
    These values are part of the stable contract with the auth layer, which
    stamps the caller's role onto every authenticated request.

Design Notes:
    - Keep enum string values stable; they are compared against raw role
      strings coming from tokens and gateway headers.
    - Roles not listed here are still legal at runtime (plain strings); they
      simply receive no role-conditional masking.

Created:
    2026-02-15
"""

from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """
    Platform roles known to the masking policy.
    """

    SYSTEM_ADMIN = "SYSTEM_ADMIN"
    STATE_DIRECTORATE = "STATE_DIRECTORATE"
    SUPER_ADMIN = "SUPER_ADMIN"

    PRINCIPAL = "PRINCIPAL"
    TEACHER = "TEACHER"
    FACULTY = "FACULTY"
    FACULTY_SUPERVISOR = "FACULTY_SUPERVISOR"
    PLACEMENT_OFFICER = "PLACEMENT_OFFICER"

    STUDENT = "STUDENT"

    INDUSTRY = "INDUSTRY"
    INDUSTRY_SUPERVISOR = "INDUSTRY_SUPERVISOR"


class FieldPolicy(str, Enum):
    """
    Classification of a response field name.

    Notes:
        - UNCLASSIFIED: passes through untouched (default-allow).
        - ALWAYS_REMOVE: dropped from every response, admins included.
        - ALWAYS_MASK: masked for every non-admin caller.
        - ROLE_CONDITIONAL_MASK: masked only for roles that list the field.
    """

    UNCLASSIFIED = "UNCLASSIFIED"
    ALWAYS_REMOVE = "ALWAYS_REMOVE"
    ALWAYS_MASK = "ALWAYS_MASK"
    ROLE_CONDITIONAL_MASK = "ROLE_CONDITIONAL_MASK"
