"""
tests.api.conftest

Shared pytest fixtures for API tests.
"""

from __future__ import annotations

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from portal.api.main import create_app
from portal.api.settings import Settings

ROLE_HEADER = "X-Portal-Role"


@pytest.fixture()
def app_factory():
    """
    Factory fixture that creates a fresh app.

    Tests that need extra routes or middleware build the app first, then wrap
    it in a TestClient themselves.
    """

    def _make(settings: Settings | None = None, *routers) -> FastAPI:
        app = create_app(settings or Settings(trusted_role_header=ROLE_HEADER))
        for router in routers:
            app.include_router(router)
        return app

    return _make


@pytest.fixture()
def client_factory(app_factory):
    def _make(settings: Settings | None = None, *routers) -> TestClient:
        return TestClient(app_factory(settings, *routers), raise_server_exceptions=True)

    return _make


@pytest.fixture()
def client(client_factory) -> TestClient:
    return client_factory()
