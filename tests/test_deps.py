"""
Tests for travelnest/deps.py: session guard, role guard, PaymentsClient.
These tests use the real dep functions (no overrides) to get coverage.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock, patch

import httpx
import pytest
from fastapi import HTTPException
from fastapi.testclient import TestClient

from travelnest.deps import PaymentsClient, get_payments_client
from travelnest.roles import UserRole
from travelnest.tokens import issue_token

from .factories import (
    ADMIN_EMAIL,
    GUEST_EMAIL,
    HOST_EMAIL,
    session_cookies,
    user_doc,
)

USERS_CRUD_PATH = "travelnest.deps.user_crud"
ROOMS_CRUD_PATH = "travelnest.routers.rooms.room_crud"
BOOKINGS_CRUD_PATH = "travelnest.routers.bookings.booking_crud"


class TestSessionGuard:
    @pytest.mark.parametrize(
        ("method", "path"),
        [
            ("get", f"/user/{GUEST_EMAIL}"),
            ("get", "/room/65a1f0c2e4b0a1b2c3d4e5f6"),
            ("get", f"/rooms/{HOST_EMAIL}"),
            ("get", "/bookings"),
            ("get", "/bookings/host"),
            ("get", "/users"),
            ("get", "/admin-stat"),
            ("post", "/add-room"),
            ("post", "/bookings"),
            ("post", "/create-payment-intent"),
            ("patch", "/rooms/status/65a1f0c2e4b0a1b2c3d4e5f6"),
            ("put", f"/users/update/{GUEST_EMAIL}"),
            ("put", f"/users/{GUEST_EMAIL}"),
        ],
    )
    def test_missing_cookie_returns_401(self, anon_app, method, path):
        with TestClient(anon_app) as c:
            resp = c.request(method, path, json={})
        assert resp.status_code == 401
        assert resp.json() == {"message": "unauthorized access"}

    def test_invalid_token_returns_401(self, anon_app):
        with TestClient(anon_app, cookies={"token": "garbage"}) as c:
            resp = c.get(f"/rooms/{HOST_EMAIL}")
        assert resp.status_code == 401

    def test_expired_token_returns_401(self, anon_app):
        token = issue_token(GUEST_EMAIL, now=datetime.now(UTC) - timedelta(days=366))
        with TestClient(anon_app, cookies={"token": token}) as c:
            resp = c.get(f"/rooms/{HOST_EMAIL}")
        assert resp.status_code == 401

    def test_valid_token_reaches_handler(self, anon_app):
        with patch(ROOMS_CRUD_PATH) as mock_crud:
            mock_crud.list_by_host = AsyncMock(return_value=[])
            with TestClient(anon_app, cookies=session_cookies()) as c:
                resp = c.get(f"/rooms/{HOST_EMAIL}")
        assert resp.status_code == 200
        assert resp.json() == []

    def test_guard_does_not_touch_database(self, anon_app):
        with patch(USERS_CRUD_PATH) as users, patch(ROOMS_CRUD_PATH) as rooms:
            rooms.list_by_host = AsyncMock(return_value=[])
            users.get_by_email = AsyncMock()
            with TestClient(anon_app, cookies=session_cookies()) as c:
                c.get(f"/rooms/{HOST_EMAIL}")
        users.get_by_email.assert_not_awaited()


class TestRoleGuard:
    def test_admin_route_rejects_guest_with_valid_token(self, anon_app):
        with patch(USERS_CRUD_PATH) as mock_crud:
            mock_crud.get_by_email = AsyncMock(return_value=user_doc())
            with TestClient(anon_app, cookies=session_cookies()) as c:
                resp = c.get("/users")
        assert resp.status_code == 401
        assert resp.json() == {"message": "Unauthorized Access"}

    def test_admin_route_rejects_unknown_user(self, anon_app):
        with patch(USERS_CRUD_PATH) as mock_crud:
            mock_crud.get_by_email = AsyncMock(return_value=None)
            with TestClient(anon_app, cookies=session_cookies(ADMIN_EMAIL)) as c:
                resp = c.get("/admin-stat")
        assert resp.status_code == 401

    def test_host_route_rejects_admin(self, anon_app):
        """Roles are matched exactly; admin does not imply host."""
        admin = user_doc(email=ADMIN_EMAIL, role=UserRole.ADMIN.value)
        with patch(USERS_CRUD_PATH) as mock_crud:
            mock_crud.get_by_email = AsyncMock(return_value=admin)
            with TestClient(anon_app, cookies=session_cookies(ADMIN_EMAIL)) as c:
                resp = c.get("/bookings/host", params={"email": HOST_EMAIL})
        assert resp.status_code == 401

    def test_host_route_passes_for_host(self, anon_app):
        host = user_doc(email=HOST_EMAIL, role=UserRole.HOST.value)
        with (
            patch(USERS_CRUD_PATH) as users,
            patch(BOOKINGS_CRUD_PATH) as bookings,
        ):
            users.get_by_email = AsyncMock(return_value=host)
            bookings.list_for_host = AsyncMock(return_value=[])
            with TestClient(anon_app, cookies=session_cookies(HOST_EMAIL)) as c:
                resp = c.get("/bookings/host", params={"email": HOST_EMAIL})
        assert resp.status_code == 200
        users.get_by_email.assert_awaited_once_with(HOST_EMAIL)

    def test_admin_route_passes_for_admin(self, anon_app):
        admin = user_doc(email=ADMIN_EMAIL, role=UserRole.ADMIN.value)
        with patch(USERS_CRUD_PATH) as guard_crud:
            guard_crud.get_by_email = AsyncMock(return_value=admin)
            with patch("travelnest.routers.users.user_crud") as route_crud:
                route_crud.list_users = AsyncMock(return_value=[admin])
                with TestClient(anon_app, cookies=session_cookies(ADMIN_EMAIL)) as c:
                    resp = c.get("/users")
        assert resp.status_code == 200
        assert resp.json()[0]["email"] == ADMIN_EMAIL

    def test_role_is_reread_on_every_request(self, anon_app):
        admin = user_doc(email=ADMIN_EMAIL, role=UserRole.ADMIN.value)
        demoted = user_doc(email=ADMIN_EMAIL, role=UserRole.GUEST.value)
        with patch(USERS_CRUD_PATH) as guard_crud:
            guard_crud.get_by_email = AsyncMock(side_effect=[admin, demoted])
            with patch("travelnest.routers.users.user_crud") as route_crud:
                route_crud.list_users = AsyncMock(return_value=[])
                with TestClient(anon_app, cookies=session_cookies(ADMIN_EMAIL)) as c:
                    first = c.get("/users")
                    second = c.get("/users")
        assert first.status_code == 200
        assert second.status_code == 401


# ---------------------------------------------------------------------------
# PaymentsClient
# ---------------------------------------------------------------------------


def _stripe_client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        base_url="https://api.stripe.test", transport=httpx.MockTransport(handler)
    )


class TestPaymentsClient:
    def test_same_instance_returned_each_time(self):
        assert get_payments_client() is get_payments_client()

    def test_client_property_returns_async_client(self):
        assert isinstance(PaymentsClient()._client, httpx.AsyncClient)

    @pytest.mark.anyio
    async def test_returns_only_client_secret(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["path"] = request.url.path
            seen["body"] = request.content.decode()
            return httpx.Response(
                200,
                json={"id": "pi_1", "amount": 1999, "client_secret": "pi_1_secret"},
            )

        with patch(
            "travelnest.deps._get_stripe_http_client",
            return_value=_stripe_client(handler),
        ):
            secret = await PaymentsClient().create_payment_intent(1999)

        assert secret == "pi_1_secret"
        assert seen["path"] == "/v1/payment_intents"
        assert "amount=1999" in seen["body"]
        assert "currency=usd" in seen["body"]
        assert "card" in seen["body"]

    @pytest.mark.anyio
    async def test_provider_error_raises_502(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(402, json={"error": {"message": "card_declined"}})

        with patch(
            "travelnest.deps._get_stripe_http_client",
            return_value=_stripe_client(handler),
        ):
            with pytest.raises(HTTPException) as exc_info:
                await PaymentsClient().create_payment_intent(500)
        assert exc_info.value.status_code == 502

    @pytest.mark.anyio
    async def test_transport_error_raises_502(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("boom", request=request)

        with patch(
            "travelnest.deps._get_stripe_http_client",
            return_value=_stripe_client(handler),
        ):
            with pytest.raises(HTTPException) as exc_info:
                await PaymentsClient().create_payment_intent(500)
        assert exc_info.value.status_code == 502

    @pytest.mark.anyio
    async def test_missing_client_secret_raises_502(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"id": "pi_1", "amount": 500})

        with patch(
            "travelnest.deps._get_stripe_http_client",
            return_value=_stripe_client(handler),
        ):
            with pytest.raises(HTTPException) as exc_info:
                await PaymentsClient().create_payment_intent(500)
        assert exc_info.value.status_code == 502
        assert exc_info.value.detail == "Payment provider returned no client secret"
