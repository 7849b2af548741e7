"""
Shared pytest fixtures available to every test file automatically.
No imports needed in test files; pytest discovers this by convention.
"""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from travelnest.deps import (
    get_current_user,
    get_payments_client,
    require_admin,
    require_host,
)
from travelnest.errors import register_exception_handlers
from travelnest.main import ROUTERS

from .factories import make_admin, make_guest, make_host


@pytest.fixture()
def anyio_backend():
    return "asyncio"


# ---------------------------------------------------------------------------
# Default no-op client mocks: prevent real HTTP calls in tests
# ---------------------------------------------------------------------------


def _noop_payments_client():
    mock = MagicMock()
    mock.create_payment_intent = AsyncMock(return_value="pi_123_secret_456")
    return mock


# ---------------------------------------------------------------------------
# App builders
# ---------------------------------------------------------------------------


def bare_app() -> FastAPI:
    app = FastAPI()
    register_exception_handlers(app)
    for router in ROUTERS:
        app.include_router(router)
    return app


def build_app(current_user, payments_client=None) -> FastAPI:
    """
    Fresh app with session and role guards overridden to return
    `current_user` unconditionally.

    Pass `payments_client` to inject a custom mock.
    """
    app = bare_app()

    async def _user():
        return current_user

    for dep in (get_current_user, require_admin, require_host):
        app.dependency_overrides[dep] = _user

    pc = payments_client if payments_client is not None else _noop_payments_client()
    app.dependency_overrides[get_payments_client] = lambda: pc
    return app


# ---------------------------------------------------------------------------
# Reusable client fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def guest_client():
    return TestClient(build_app(make_guest()), raise_server_exceptions=True)


@pytest.fixture()
def host_client():
    return TestClient(build_app(make_host()), raise_server_exceptions=True)


@pytest.fixture()
def admin_client():
    return TestClient(build_app(make_admin()), raise_server_exceptions=True)


@pytest.fixture()
def anon_app():
    """
    App with NO dependency overrides.
    Use this when the real session/role guards should run so 401s can be asserted.
    """
    return bare_app()


@pytest.fixture()
def client_factory():
    def _make(current_user, payments_client=None) -> TestClient:
        return TestClient(
            build_app(current_user, payments_client=payments_client),
            raise_server_exceptions=True,
        )

    return _make
