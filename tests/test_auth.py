"""Tests for session tokens, route guards, login and team management."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient
from jose import jwt

from visakha_backend.api import auth
from visakha_backend.api.utils import create_access_token, issue_session_token, verify_token
from visakha_backend.database.config.config import settings
from visakha_backend.database.entities import AdminUser


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


class TestSessionTokens:
    def test_round_trip(self) -> None:
        token = issue_session_token("ops@visakha.test", "moderator")

        assert verify_token(token) == {"email": "ops@visakha.test", "role": "moderator"}

    def test_subject_is_email(self) -> None:
        claims = jwt.decode(
            issue_session_token("ops@visakha.test", "moderator"), settings.SECRET_KEY, algorithms=[settings.ALGORITHM]
        )

        assert claims["sub"] == "ops@visakha.test"
        assert claims["exp"] > datetime.now(timezone.utc).timestamp()

    def test_expired_token(self) -> None:
        expired = jwt.encode(
            {"email": "a@b.c", "role": "super_admin", "exp": int((datetime.now(timezone.utc) - timedelta(minutes=1)).timestamp())},
            settings.SECRET_KEY,
            algorithm=settings.ALGORITHM,
        )

        assert verify_token(expired) is None

    def test_wrong_signature(self) -> None:
        forged = jwt.encode({"email": "a@b.c", "role": "super_admin"}, "other-key", algorithm="HS256")

        assert verify_token(forged) is None

    def test_missing_role(self) -> None:
        assert verify_token(create_access_token({"email": "a@b.c"})) is None


class TestGuards:
    def test_missing_token(self, client: TestClient) -> None:
        assert client.get("/admin/stats").status_code == 401

    def test_invalid_token(self, client: TestClient) -> None:
        assert client.get("/admin/stats", headers=bearer("garbage")).status_code == 403

    def test_moderator_is_not_super_admin(self, client: TestClient, moderator_headers) -> None:
        response = client.get("/admin/stats", headers=moderator_headers)

        assert response.status_code == 403
        assert response.json() == {"error": "Requires Super Admin privileges"}

    def test_super_admin(self, client: TestClient, admin_headers) -> None:
        assert client.get("/admin/stats", headers=admin_headers).status_code == 200

    def test_public_routes_need_no_token(self, client: TestClient) -> None:
        assert client.get("/feedback-conversations").status_code == 200
        assert client.get("/health").text == "OK"


class TestGoogleLogin:
    """POST /auth/google"""

    def test_authorized_identity(self, client: TestClient, admin_email, monkeypatch) -> None:
        monkeypatch.setattr(auth, "verify_external_identity", lambda token: admin_email)

        response = client.post("/auth/google", json={"token": "google-id-token"})

        assert response.status_code == 200
        body = response.json()
        assert body["user"] == {"email": admin_email, "role": "super_admin"}
        assert verify_token(body["token"]) == {"email": admin_email, "role": "super_admin"}

    def test_identity_email_case_is_ignored(self, client: TestClient, admin_email, monkeypatch) -> None:
        monkeypatch.setattr(auth, "verify_external_identity", lambda token: admin_email.upper())

        response = client.post("/auth/google", json={"token": "google-id-token"})

        assert response.status_code == 200
        assert response.json()["user"] == {"email": admin_email, "role": "super_admin"}

    def test_unknown_identity(self, client: TestClient, monkeypatch) -> None:
        monkeypatch.setattr(auth, "verify_external_identity", lambda token: "stranger@example.com")

        response = client.post("/auth/google", json={"token": "google-id-token"})

        assert response.status_code == 403
        assert response.json() == {"error": "Access denied. Not an authorized user."}

    def test_unverifiable_token(self, client: TestClient, monkeypatch) -> None:
        def reject(token, request, audience):
            raise ValueError("Token expired")

        monkeypatch.setattr(auth.id_token, "verify_oauth2_token", reject)

        response = client.post("/auth/google", json={"token": "google-id-token"})

        assert response.status_code == 401
        assert response.json() == {"error": "Authentication failed"}

    def test_token_without_email(self, client: TestClient, monkeypatch) -> None:
        monkeypatch.setattr(auth.id_token, "verify_oauth2_token", lambda token, request, audience: {"sub": "123"})

        assert client.post("/auth/google", json={"token": "t"}).status_code == 400

    def test_token_required(self, client: TestClient) -> None:
        response = client.post("/auth/google", json={})

        assert response.status_code == 400
        assert response.json() == {"error": "Token required"}


class TestDevLogin:
    """POST /auth/dev-login"""

    def test_issues_session_for_bootstrap_admin(self, client: TestClient, admin_email) -> None:
        body = client.post("/auth/dev-login").json()

        assert body["user"] == {"email": admin_email, "role": "super_admin"}
        assert client.get("/admin/moderators", headers=bearer(body["token"])).status_code == 200

    def test_provisions_missing_admin(self, client: TestClient, admin_email, store) -> None:
        with store.session() as session:
            session.query(AdminUser).delete()
            session.commit()

        assert client.post("/auth/dev-login").status_code == 200
        with store.session() as session:
            assert session.query(AdminUser).filter_by(email=admin_email).one().role == "super_admin"

    def test_disabled_in_production(self, client: TestClient, monkeypatch) -> None:
        monkeypatch.setattr(settings, "ENVIRONMENT", "production")

        response = client.post("/auth/dev-login")

        assert response.status_code == 403
        assert response.json() == {"error": "Dev login not available in production"}


class TestBootstrapAdmin:
    def test_seeded_on_startup(self, client: TestClient, admin_email, store) -> None:
        with store.session() as session:
            admins = session.query(AdminUser).all()

        assert [(admin.email, admin.role, admin.added_by) for admin in admins] == [(admin_email, "super_admin", "system")]

    def test_not_seeded_when_admins_exist(self, app, store) -> None:
        with store.session() as session:
            session.add(AdminUser(email="owner@visakha.test", role="super_admin"))
            session.commit()

        with TestClient(app):
            with store.session() as session:
                assert [admin.email for admin in session.query(AdminUser).all()] == ["owner@visakha.test"]


class TestTeamManagement:
    """/admin/moderators"""

    def test_list(self, client: TestClient, admin_headers, admin_email) -> None:
        body = client.get("/admin/moderators", headers=admin_headers).json()

        assert [member["email"] for member in body] == [admin_email]
        assert body[0]["addedBy"] == "system"

    def test_add_defaults_to_moderator(self, client: TestClient, admin_headers, admin_email, store) -> None:
        response = client.post("/admin/moderators", json={"email": "new@visakha.test", "role": "owner"}, headers=admin_headers)

        assert response.json() == {"success": True, "email": "new@visakha.test", "role": "moderator"}
        with store.session() as session:
            assert session.query(AdminUser).filter_by(email="new@visakha.test").one().added_by == admin_email

    def test_add_super_admin(self, client: TestClient, admin_headers) -> None:
        response = client.post(
            "/admin/moderators", json={"email": "boss@visakha.test", "role": "super_admin"}, headers=admin_headers
        )

        assert response.json()["role"] == "super_admin"

    def test_add_requires_email(self, client: TestClient, admin_headers) -> None:
        response = client.post("/admin/moderators", json={"role": "moderator"}, headers=admin_headers)

        assert response.status_code == 400
        assert response.json() == {"error": "Email required"}

    def test_add_duplicate(self, client: TestClient, admin_headers, admin_email) -> None:
        response = client.post("/admin/moderators", json={"email": admin_email}, headers=admin_headers)

        assert response.status_code == 400
        assert response.json() == {"error": "User already exists"}

    def test_remove(self, client: TestClient, admin_headers) -> None:
        client.post("/admin/moderators", json={"email": "gone@visakha.test"}, headers=admin_headers)

        response = client.request("DELETE", "/admin/moderators", json={"email": "gone@visakha.test"}, headers=admin_headers)

        assert response.json() == {"success": True}
        emails = [member["email"] for member in client.get("/admin/moderators", headers=admin_headers).json()]
        assert "gone@visakha.test" not in emails

    def test_self_removal_is_refused(self, client: TestClient, admin_headers, admin_email) -> None:
        before = client.get("/admin/moderators", headers=admin_headers).json()

        response = client.request("DELETE", "/admin/moderators", json={"email": admin_email}, headers=admin_headers)

        assert response.status_code == 400
        assert response.json() == {"error": "You cannot remove your own account"}
        assert client.get("/admin/moderators", headers=admin_headers).json() == before

    def test_remove_unknown(self, client: TestClient, admin_headers) -> None:
        response = client.request("DELETE", "/admin/moderators", json={"email": "ghost@visakha.test"}, headers=admin_headers)

        assert response.status_code == 404
        assert response.json() == {"error": "User not found"}

    @pytest.mark.parametrize("method", ["GET", "POST", "DELETE"])
    def test_moderators_cannot_manage_the_team(self, client: TestClient, moderator_headers, method) -> None:
        response = client.request(method, "/admin/moderators", json={"email": "x@visakha.test"}, headers=moderator_headers)

        assert response.status_code == 403

    def test_emails_are_case_insensitive(self, client: TestClient, admin_headers) -> None:
        added = client.post("/admin/moderators", json={"email": "  Mixed@Visakha.TEST "}, headers=admin_headers)
        duplicate = client.post("/admin/moderators", json={"email": "mixed@visakha.test"}, headers=admin_headers)
        removed = client.request("DELETE", "/admin/moderators", json={"email": "MIXED@visakha.test"}, headers=admin_headers)

        assert added.json()["email"] == "mixed@visakha.test"
        assert duplicate.json() == {"error": "User already exists"}
        assert removed.json() == {"success": True}

    def test_self_removal_ignores_case(self, client: TestClient, admin_headers, admin_email) -> None:
        response = client.request("DELETE", "/admin/moderators", json={"email": admin_email.upper()}, headers=admin_headers)

        assert response.status_code == 400
        assert response.json() == {"error": "You cannot remove your own account"}
