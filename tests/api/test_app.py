# tests/api/test_app.py
"""
Тесты HTTP API поверх хранилища в памяти.
"""

from __future__ import annotations

from typing import Any, Iterator

import pytest
from fastapi.testclient import TestClient

from transport_connect.api.app import create_app, status_for
from transport_connect.api.dependencies import Services
from transport_connect.common.constants import UserRole
from transport_connect.common.exceptions import AccountInactive, DuplicateIdentity, InvalidTransition, NotFound
from transport_connect.core.identity.models import RegistrationDTO

API = "/api/v1"


@pytest.fixture
def client(services: Services) -> Iterator[TestClient]:
    with TestClient(create_app(services)) as test_client:
        yield test_client


def _registration(role: str, email: str) -> dict[str, Any]:
    return {
        "first_name": "Ivan",
        "last_name": "Petrenko",
        "email": email,
        "password": "secret123",
        "role": role,
        "phone": "+380501234567",
    }


def _register(client: TestClient, role: str, email: str) -> dict[str, Any]:
    response = client.post(f"{API}/auth/register", json=_registration(role, email))
    assert response.status_code == 201, response.text
    return response.json()


def _auth(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def _admin_token(client: TestClient, services: Services) -> str:
    """Администратор создаётся напрямую через хранилище, затем входит через API."""
    client.portal.call(services.store.create, RegistrationDTO(
        first_name="Admin",
        last_name="Root",
        email="admin@example.com",
        password="secret123",
        role=UserRole.ADMIN,
        phone="+380501111111",
    ))
    response = client.post(f"{API}/auth/login", json={"email": "admin@example.com", "password": "secret123"})
    return response.json()["token"]


def _create_offer(client: TestClient, token: str, offer_payload: dict[str, Any]) -> dict[str, Any]:
    response = client.post(f"{API}/offers", json=offer_payload, headers=_auth(token))
    assert response.status_code == 201, response.text
    return response.json()["offer"]


class TestStatusMapping:

    def test_status_for(self) -> None:
        assert status_for(DuplicateIdentity()) == 409
        assert status_for(AccountInactive()) == 403
        assert status_for(NotFound()) == 404
        assert status_for(InvalidTransition()) == 409


class TestHealth:

    def test_health(self, client: TestClient) -> None:
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


class TestAuthRoutes:

    def test_register_returns_token_and_public_user(self, client: TestClient) -> None:
        body = _register(client, "driver", "Driver@Example.com")

        assert body["success"] is True
        assert body["token"]
        assert body["user"]["email"] == "driver@example.com"
        assert body["user"]["role"] == "driver"
        assert "password" not in body["user"]
        assert "password_hash" not in body["user"]

    def test_register_duplicate(self, client: TestClient) -> None:
        _register(client, "sender", "sender@example.com")

        response = client.post(f"{API}/auth/register", json=_registration("sender", "SENDER@example.com"))

        assert response.status_code == 409
        assert response.json()["error"] == "duplicate_identity"

    def test_register_invalid_email(self, client: TestClient) -> None:
        response = client.post(f"{API}/auth/register", json=_registration("sender", "not-an-email"))

        body = response.json()
        assert response.status_code == 400
        assert body["success"] is False
        assert body["error"] == "validation_error"
        assert "email" in body["fields"]

    def test_register_admin_refused(self, client: TestClient) -> None:
        response = client.post(f"{API}/auth/register", json=_registration("admin", "boss@example.com"))

        assert response.status_code == 400
        assert "role" in response.json()["fields"]

    def test_login_and_me(self, client: TestClient) -> None:
        _register(client, "sender", "sender@example.com")

        login = client.post(f"{API}/auth/login", json={"email": "sender@example.com", "password": "secret123"})
        me = client.get(f"{API}/auth/me", headers=_auth(login.json()["token"]))

        assert login.status_code == 200
        assert me.status_code == 200
        assert me.json()["user"]["email"] == "sender@example.com"

    def test_login_wrong_password(self, client: TestClient) -> None:
        _register(client, "sender", "sender@example.com")

        wrong = client.post(f"{API}/auth/login", json={"email": "sender@example.com", "password": "wrong-pass"})
        unknown = client.post(f"{API}/auth/login", json={"email": "nobody@example.com", "password": "wrong-pass"})

        assert wrong.status_code == unknown.status_code == 401
        assert wrong.json() == unknown.json()

    def test_me_without_token(self, client: TestClient) -> None:
        response = client.get(f"{API}/auth/me")

        assert response.status_code == 401
        assert response.json() == {
            "success": False,
            "error": "invalid_token",
            "message": "Not authorized, no token",
        }

    def test_me_with_garbage_token(self, client: TestClient) -> None:
        response = client.get(f"{API}/auth/me", headers=_auth("garbage"))

        assert response.status_code == 401
        assert response.json()["error"] == "invalid_token"

    def test_logout_revokes_token(self, client: TestClient) -> None:
        token = _register(client, "driver", "driver@example.com")["token"]

        logout = client.post(f"{API}/auth/logout", headers=_auth(token))
        me = client.get(f"{API}/auth/me", headers=_auth(token))

        assert logout.status_code == 200
        assert me.status_code == 401


class TestRequestFlow:

    def test_full_delivery_flow(self, client: TestClient, offer_payload: dict[str, Any],
                                request_payload: dict[str, Any]) -> None:
        driver = _register(client, "driver", "driver@example.com")
        sender = _register(client, "sender", "sender@example.com")
        offer = _create_offer(client, driver["token"], offer_payload)

        created = client.post(
            f"{API}/requests",
            json={**request_payload, "offer_id": offer["id"]},
            headers=_auth(sender["token"]),
        )
        assert created.status_code == 201, created.text
        request = created.json()["request"]
        assert request["status"] == "pending"
        assert request["driver_id"] == driver["user"]["id"]

        for status in ("accepted", "in_transit", "delivered"):
            response = client.put(
                f"{API}/requests/{request['id']}/status",
                json={"status": status},
                headers=_auth(driver["token"]),
            )
            assert response.status_code == 200, response.text
            assert response.json()["request"]["status"] == status

        final = client.get(f"{API}/requests/{request['id']}", headers=_auth(sender["token"]))
        me = client.get(f"{API}/auth/me", headers=_auth(driver["token"]))

        assert final.json()["request"]["is_rateable"] is True
        assert me.json()["user"]["completed_transports"] == 1

    def test_sender_cannot_accept(self, client: TestClient, offer_payload: dict[str, Any],
                                  request_payload: dict[str, Any]) -> None:
        driver = _register(client, "driver", "driver@example.com")
        sender = _register(client, "sender", "sender@example.com")
        offer = _create_offer(client, driver["token"], offer_payload)
        request = client.post(
            f"{API}/requests",
            json={**request_payload, "offer_id": offer["id"]},
            headers=_auth(sender["token"]),
        ).json()["request"]

        response = client.put(
            f"{API}/requests/{request['id']}/status",
            json={"status": "accepted"},
            headers=_auth(sender["token"]),
        )

        assert response.status_code == 403
        assert response.json()["error"] == "forbidden"

    def test_invalid_transition_conflict(self, client: TestClient, offer_payload: dict[str, Any],
                                         request_payload: dict[str, Any]) -> None:
        driver = _register(client, "driver", "driver@example.com")
        sender = _register(client, "sender", "sender@example.com")
        offer = _create_offer(client, driver["token"], offer_payload)
        request = client.post(
            f"{API}/requests",
            json={**request_payload, "offer_id": offer["id"]},
            headers=_auth(sender["token"]),
        ).json()["request"]

        response = client.put(
            f"{API}/requests/{request['id']}/status",
            json={"status": "delivered"},
            headers=_auth(driver["token"]),
        )

        assert response.status_code == 409
        assert response.json()["error"] == "invalid_transition"

    def test_unknown_request(self, client: TestClient) -> None:
        sender = _register(client, "sender", "sender@example.com")

        response = client.get(f"{API}/requests/not-a-uuid", headers=_auth(sender["token"]))

        assert response.status_code == 404

    def test_driver_cannot_create_request(self, client: TestClient, offer_payload: dict[str, Any],
                                          request_payload: dict[str, Any]) -> None:
        driver = _register(client, "driver", "driver@example.com")
        offer = _create_offer(client, driver["token"], offer_payload)

        response = client.post(
            f"{API}/requests",
            json={**request_payload, "offer_id": offer["id"]},
            headers=_auth(driver["token"]),
        )

        assert response.status_code == 403

    def test_sender_cannot_create_offer(self, client: TestClient, offer_payload: dict[str, Any]) -> None:
        sender = _register(client, "sender", "sender@example.com")

        response = client.post(f"{API}/offers", json=offer_payload, headers=_auth(sender["token"]))

        assert response.status_code == 403


class TestAdminRoutes:

    def test_non_admin_forbidden(self, client: TestClient) -> None:
        driver = _register(client, "driver", "driver@example.com")

        response = client.get(f"{API}/admin/dashboard", headers=_auth(driver["token"]))

        assert response.status_code == 403

    def test_suspend_blocks_login_and_existing_token(self, client: TestClient, services: Services) -> None:
        admin_token = _admin_token(client, services)
        sender = _register(client, "sender", "sender@example.com")

        response = client.put(
            f"{API}/admin/users/{sender['user']['id']}/status",
            json={"is_active": False},
            headers=_auth(admin_token),
        )
        login = client.post(f"{API}/auth/login", json={"email": "sender@example.com", "password": "secret123"})
        me = client.get(f"{API}/auth/me", headers=_auth(sender["token"]))

        assert response.status_code == 200
        assert response.json()["user"]["is_active"] is False
        assert login.status_code == 403
        assert login.json()["error"] == "account_inactive"
        assert me.status_code == 403

    def test_verify_user(self, client: TestClient, services: Services) -> None:
        admin_token = _admin_token(client, services)
        driver = _register(client, "driver", "driver@example.com")

        response = client.put(f"{API}/admin/users/{driver['user']['id']}/verify", headers=_auth(admin_token))

        assert response.status_code == 200
        assert response.json()["user"]["is_verified"] is True

    def test_offers_and_dashboard(self, client: TestClient, services: Services,
                                  offer_payload: dict[str, Any]) -> None:
        admin_token = _admin_token(client, services)
        driver = _register(client, "driver", "driver@example.com")
        offer = _create_offer(client, driver["token"], offer_payload)

        listing = client.get(f"{API}/admin/offers", headers=_auth(admin_token))
        assert listing.json()["count"] == 1

        deleted = client.delete(f"{API}/admin/offers/{offer['id']}", headers=_auth(admin_token))
        again = client.delete(f"{API}/admin/offers/{offer['id']}", headers=_auth(admin_token))
        dashboard = client.get(f"{API}/admin/dashboard", headers=_auth(admin_token))

        assert deleted.status_code == 200
        assert again.status_code == 404
        stats = dashboard.json()["stats"]
        assert stats["users"]["total"] == 2
        assert stats["users"]["drivers"] == 1
        assert stats["offers"]["total"] == 0
