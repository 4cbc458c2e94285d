"""
tests.api.test_response_sanitization

Purpose:
    End-to-end tests for the response sanitization adapter.

Covers:
    - Role resolution (trusted header, request.state.user)
    - Admin bypass vs. sensitive-field removal
    - Handler errors passing through untouched
    - Safe empty fallback when sanitization itself fails
    - Dependency injection still working through the wrapped endpoints
    - Typed handlers (response models) and dataclass results
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from types import SimpleNamespace

from fastapi import APIRouter, Request
from fastapi.testclient import TestClient
from pydantic import BaseModel
from starlette.middleware.base import BaseHTTPMiddleware

from portal.api.contracts.error_contract import ApiErrorCode
from portal.api.errors import ApiError
from portal.api.sanitization.response_sanitizer import (
    ResponseSanitizer,
    SanitizingRoute,
    sanitized_endpoint,
)
from portal.api.settings import Settings
from portal.shared.models.enums import Role
from portal.shared.security.traversal import Sanitizer

ROLE_HEADER = "X-Portal-Role"

STUDENT_RECORD = {
    "id": 41,
    "name": "Asha Verma",
    "email": "john.doe@example.com",
    "phoneNo": "9876543210",
    "dob": "2003-07-21",
    "aadhaarNumber": "123456789012",
    "password": "hunter2",
    "refreshToken": "r-token",
    "college": {"name": "GPC Amritsar", "ifscCode": "SBIN0001234"},
}

router = APIRouter(prefix="/test", route_class=SanitizingRoute)


@router.get("/student")
def student() -> dict:
    return dict(STUDENT_RECORD)


@router.get("/students")
async def students() -> list:
    return [dict(STUDENT_RECORD), dict(STUDENT_RECORD)]


@router.get("/students/{student_id}")
def student_by_id(student_id: int, request: Request) -> dict:
    return {"studentId": student_id, "role": request.state.caller_role, "mobile": "9876543210"}


@router.get("/missing")
def missing() -> dict:
    raise ApiError(
        status_code=404,
        error_code=ApiErrorCode.NOT_FOUND,
        message="Student not found",
        details={"email": "john.doe@example.com"},
    )


@router.get("/cyclic")
def cyclic() -> dict:
    node: dict = {"name": "loop"}
    node["self"] = node
    return node


@router.get("/count")
def count() -> int:
    return 3


class StudentOut(BaseModel):
    name: str
    email: str
    password: str


@dataclass
class StudentRow:
    name: str
    password: str
    aadhaarNumber: str


@router.get("/typed")
def typed() -> StudentOut:
    return StudentOut(name="Asha", email="john.doe@example.com", password="hunter2")


@router.get("/typed-list", response_model=list[StudentOut])
def typed_list() -> list:
    return [
        {"name": "Asha", "email": "john.doe@example.com", "password": "hunter2", "internalNote": "flagged"},
    ]


@router.get("/typed-broken")
def typed_broken() -> StudentOut:
    return {"name": "Asha"}  # type: ignore[return-value]


@router.get("/row")
def row():
    return StudentRow(name="Asha", password="hunter2", aadhaarNumber="123456789012")


@router.get("/typed-row")
async def typed_row() -> StudentRow:
    return StudentRow(name="Asha", password="hunter2", aadhaarNumber="123456789012")


class TeacherAuthMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request, call_next):
        request.state.user = SimpleNamespace(id=7, role=Role.TEACHER)
        return await call_next(request)


def test_student_sees_masked_pii_and_no_secrets(client_factory) -> None:
    client = client_factory(None, router)

    r = client.get("/test/student", headers={ROLE_HEADER: "STUDENT"})

    assert r.status_code == 200
    assert r.json() == {
        "id": 41,
        "name": "Asha Verma",
        "email": "j******e@example.com",
        "phoneNo": "******3210",
        "dob": "**/**/XXXX",
        "aadhaarNumber": "XXXX-XXXX-9012",
        "college": {"name": "GPC Amritsar", "ifscCode": "SBINXXXXXXX"},
    }


def test_teacher_sees_masked_phone_only(client_factory) -> None:
    client = client_factory(None, router)

    data = client.get("/test/students", headers={ROLE_HEADER: "TEACHER"}).json()

    assert len(data) == 2
    for item in data:
        assert item["phoneNo"] == "******3210"
        assert item["email"] == "john.doe@example.com"
        assert item["aadhaarNumber"] == "XXXX-XXXX-9012"
        assert "password" not in item and "refreshToken" not in item


def test_admin_bypasses_masking_but_not_removal(client_factory) -> None:
    client = client_factory(None, router)

    data = client.get("/test/student", headers={ROLE_HEADER: "SYSTEM_ADMIN"}).json()

    assert data["phoneNo"] == "9876543210"
    assert data["aadhaarNumber"] == "123456789012"
    assert data["college"]["ifscCode"] == "SBIN0001234"
    assert "password" not in data
    assert "refreshToken" not in data


def test_anonymous_caller_gets_always_mask_fields_masked(client_factory) -> None:
    client = client_factory(None, router)

    data = client.get("/test/student").json()

    assert data["aadhaarNumber"] == "XXXX-XXXX-9012"
    assert data["email"] == "john.doe@example.com"
    assert "password" not in data


def test_role_header_ignored_unless_trusted(client_factory) -> None:
    client = client_factory(Settings(), router)

    data = client.get("/test/student", headers={ROLE_HEADER: "SYSTEM_ADMIN"}).json()

    assert data["aadhaarNumber"] == "XXXX-XXXX-9012"


def test_role_from_authenticated_user_state(app_factory) -> None:
    app = app_factory(None, router)
    app.add_middleware(TeacherAuthMiddleware)
    client = TestClient(app)

    data = client.get("/test/student", headers={ROLE_HEADER: "SYSTEM_ADMIN"}).json()

    # request.state.user wins over the gateway header
    assert data["phoneNo"] == "******3210"
    assert data["email"] == "john.doe@example.com"


def test_path_params_and_request_injection_survive_wrapping(client_factory) -> None:
    client = client_factory(None, router)

    r = client.get("/test/students/12", headers={ROLE_HEADER: "STUDENT"})

    assert r.status_code == 200
    assert r.json() == {"studentId": 12, "role": "STUDENT", "mobile": "******3210"}

    r = client.get("/test/students/not-a-number", headers={ROLE_HEADER: "STUDENT"})
    assert r.status_code == 422
    assert r.json()["error_code"] == "BAD_REQUEST"


def test_handler_errors_pass_through_untouched(client_factory) -> None:
    client = client_factory(None, router)

    r = client.get("/test/missing", headers={ROLE_HEADER: "STUDENT", "X-Request-Id": "req-404"})

    assert r.status_code == 404
    assert r.json() == {
        "request_id": "req-404",
        "error_code": "NOT_FOUND",
        "message": "Student not found",
        "details": {"email": "john.doe@example.com"},
    }


def test_cyclic_payload_is_serializable(client_factory) -> None:
    client = client_factory(None, router)

    r = client.get("/test/cyclic", headers={ROLE_HEADER: "STUDENT"})

    assert r.status_code == 200
    assert r.json() == {"name": "loop", "self": "[CIRCULAR_REFERENCE]"}


def test_primitive_results_are_not_processed(client_factory) -> None:
    client = client_factory(None, router)
    assert client.get("/test/count").json() == 3


def test_internal_failure_returns_empty_payload(client_factory, monkeypatch, caplog) -> None:
    def boom(self, value, role=None, *, context=None):
        raise RuntimeError("unexpected shape")

    monkeypatch.setattr(Sanitizer, "sanitize", boom)
    client = client_factory(None, router)

    with caplog.at_level(logging.ERROR, logger="portal.api.sanitization.response_sanitizer"):
        r_obj = client.get("/test/student", headers={ROLE_HEADER: "STUDENT", "X-Request-Id": "req-500"})
        r_list = client.get("/test/students", headers={ROLE_HEADER: "STUDENT"})

    assert r_obj.status_code == 200
    assert r_obj.json() == {}
    assert r_list.status_code == 200
    assert r_list.json() == []
    assert any(
        "req-500" in rec.getMessage() and "Error processing response" in rec.getMessage()
        for rec in caplog.records
    )


def test_response_sanitizer_skips_none_and_scalars() -> None:
    rs = ResponseSanitizer()
    assert rs.process(None, "STUDENT") is None
    assert rs.process("text", "STUDENT") == "text"
    assert rs.process(5, "STUDENT") == 5


def test_sanitized_endpoint_is_idempotent() -> None:
    def handler() -> dict:
        return {}

    once = sanitized_endpoint(handler)
    assert sanitized_endpoint(once) is once
    assert once.__wrapped__ is handler


def test_typed_handler_with_required_secret_field(client_factory) -> None:
    client = client_factory(None, router)

    r = client.get("/test/typed", headers={ROLE_HEADER: "STUDENT"})

    assert r.status_code == 200
    assert r.json() == {"name": "Asha", "email": "j******e@example.com"}


def test_explicit_response_model_filters_undeclared_fields(client_factory) -> None:
    client = client_factory(None, router)

    r = client.get("/test/typed-list", headers={ROLE_HEADER: "STUDENT"})

    assert r.status_code == 200
    assert r.json() == [{"name": "Asha", "email": "j******e@example.com"}]


def test_result_not_matching_its_model_is_an_internal_error(app_factory) -> None:
    client = TestClient(app_factory(None, router), raise_server_exceptions=False)

    r = client.get("/test/typed-broken", headers={ROLE_HEADER: "STUDENT", "X-Request-Id": "req-bad"})

    assert r.status_code == 500
    assert r.json()["error_code"] == "INTERNAL_ERROR"
    assert r.json()["request_id"] == "req-bad"


def test_dataclass_results_are_sanitized(client_factory) -> None:
    client = client_factory(None, router)

    for path in ("/test/row", "/test/typed-row"):
        r = client.get(path, headers={ROLE_HEADER: "STUDENT"})

        assert r.status_code == 200
        assert r.json() == {"name": "Asha", "aadhaarNumber": "XXXX-XXXX-9012"}


def test_typed_routes_survive_router_inclusion(app_factory) -> None:
    outer = APIRouter(prefix="/outer")
    outer.include_router(router)
    client = TestClient(app_factory(None, outer))

    r = client.get("/outer/test/typed", headers={ROLE_HEADER: "STUDENT"})

    assert r.status_code == 200
    assert r.json() == {"name": "Asha", "email": "j******e@example.com"}
