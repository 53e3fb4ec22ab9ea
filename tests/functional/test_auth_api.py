"""
test_auth_api.py - Functional tests for registration, login and tokens

Tests:
- Registration response shape and default portfolio
- Duplicate email conflict
- Field validation
- Generic login failure for every bad-credential case
- Registration atomicity when the default portfolio cannot be created
- Protected routes without a valid token
"""

import pytest
from fastapi.testclient import TestClient

from conftest import login, register
from tracker.auth import service
from tracker.auth.models import User
from tracker.main import app
from tracker.portfolios.models import Portfolio


class TestRegister:
    """POST /register"""

    def test_register_returns_user_without_password(self, client):
        response = register(client, "a@x.com", name="Alice", password="p1")
        assert response.status_code == 201
        body = response.json()
        assert body["email"] == "a@x.com"
        assert body["name"] == "Alice"
        assert "id" in body
        assert not any("password" in key.lower() for key in body)

    def test_register_creates_first_portfolio(self, client, db):
        user_id = register(client, "a@x.com").json()["id"]
        portfolios = db.query(Portfolio).filter(Portfolio.user_id == user_id).all()
        assert [p.name for p in portfolios] == ["My First Portfolio"]

    def test_password_is_hashed(self, client, db):
        register(client, "a@x.com", password="p1")
        user = db.query(User).filter(User.email == "a@x.com").one()
        assert user.hashed_password != "p1"
        assert user.hashed_password.startswith("$2")

    def test_duplicate_email_conflict(self, client):
        assert register(client, "a@x.com", password="p1").status_code == 201
        response = register(client, "a@x.com", password="other")
        assert response.status_code == 409
        assert response.json() == {"error": "User with this email already exists"}

    def test_duplicate_email_is_case_insensitive(self, client):
        register(client, "a@x.com")
        assert register(client, "A@X.com").status_code == 409

    @pytest.mark.parametrize("name", ["", "   ", "x" * 256])
    def test_invalid_name(self, client, name):
        response = register(client, "a@x.com", name=name)
        assert response.status_code == 400
        assert "name" in response.json()["error"]

    def test_name_at_length_limit(self, client):
        assert register(client, "a@x.com", name="x" * 255).status_code == 201

    @pytest.mark.parametrize("missing", ["email", "password"])
    def test_missing_field(self, client, missing):
        body = {"name": "Alice", "email": "a@x.com", "password": "p1"}
        del body[missing]
        response = client.post("/register", json=body)
        assert response.status_code == 400
        assert missing in response.json()["error"]

    def test_malformed_email(self, client):
        assert register(client, "not-an-email").status_code == 400


class TestRegistrationAtomicity:
    """User and default portfolio are written together or not at all."""

    def test_portfolio_failure_leaves_no_user(self, db, monkeypatch):
        def broken_portfolio(*args, **kwargs):
            raise RuntimeError("portfolio insert failed")

        monkeypatch.setattr(service, "create_portfolio", broken_portfolio)

        with pytest.raises(RuntimeError):
            service.register(db, name="Alice", email="a@x.com", password="p1")
        db.rollback()

        assert db.query(User).count() == 0
        assert db.query(Portfolio).count() == 0

    def test_portfolio_failure_is_a_generic_500(self, client, db, monkeypatch):
        monkeypatch.setattr(service, "create_portfolio", lambda *a, **k: 1 / 0)

        response = TestClient(app, raise_server_exceptions=False).post(
            "/register", json={"name": "Alice", "email": "a@x.com", "password": "p1"}
        )

        assert response.status_code == 500
        assert response.json() == {"error": "Internal server error"}
        assert db.query(User).count() == 0


class TestLogin:
    """POST /auth"""

    GENERIC = {"error": "Invalid email or password"}

    def test_login_issues_token(self, client):
        register(client, "a@x.com", password="p1")
        response = client.post("/auth", json={"email": "a@x.com", "password": "p1"})
        assert response.status_code == 200
        body = response.json()
        assert body["token_type"] == "bearer"
        assert body["access_token"]

    def test_wrong_password_is_generic(self, client):
        register(client, "a@x.com", password="p1")
        response = client.post("/auth", json={"email": "a@x.com", "password": "wrong"})
        assert response.status_code == 401
        assert response.json() == self.GENERIC

    def test_unknown_email_matches_wrong_password(self, client):
        register(client, "a@x.com", password="p1")
        wrong_password = client.post("/auth", json={"email": "a@x.com", "password": "wrong"})
        unknown_user = client.post("/auth", json={"email": "nobody@x.com", "password": "p1"})
        assert unknown_user.status_code == wrong_password.status_code == 401
        assert unknown_user.json() == wrong_password.json()

    @pytest.mark.parametrize("body", [{}, {"email": "a@x.com"}, {"password": "p1"}, {"email": None, "password": None}])
    def test_missing_credentials_are_an_auth_failure(self, client, body):
        register(client, "a@x.com", password="p1")
        response = client.post("/auth", json=body)
        assert response.status_code == 401
        assert response.json() == self.GENERIC

    @pytest.mark.parametrize(
        "content",
        [b"", b"{not json", b"[\"a@x.com\", \"p1\"]", b"\"a@x.com\"", b"{\"email\": 5, \"password\": \"p1\"}"],
    )
    def test_unreadable_body_is_an_auth_failure(self, client, content):
        register(client, "a@x.com", password="p1")
        response = client.post("/auth", content=content, headers={"Content-Type": "application/json"})
        assert response.status_code == 401
        assert response.json() == self.GENERIC

    def test_no_body_at_all(self, client):
        response = client.post("/auth")
        assert response.status_code == 401
        assert response.json() == self.GENERIC

    def test_unknown_email_still_hashes(self, client, monkeypatch):
        """A miss runs a dummy bcrypt check so timing does not reveal the account."""
        calls = []
        monkeypatch.setattr(User, "dummy_verify", staticmethod(lambda: calls.append(1)))
        client.post("/auth", json={"email": "nobody@x.com", "password": "p1"})
        assert calls == [1]

    def test_me_returns_identity(self, client):
        user_id = register(client, "a@x.com", name="Alice").json()["id"]
        response = client.get("/auth/me", headers=login(client, "a@x.com"))
        assert response.status_code == 200
        assert response.json() == {"id": user_id, "email": "a@x.com", "name": "Alice"}


class TestProtectedRoutes:
    """Requests without a usable session are 401."""

    @pytest.mark.parametrize(
        "method,path",
        [
            ("get", "/investments"),
            ("post", "/investments"),
            ("put", "/investments/abc"),
            ("delete", "/investments/abc"),
            ("get", "/investments/abc/quantity"),
            ("get", "/transactions"),
            ("post", "/transactions"),
            ("get", "/auth/me"),
        ],
    )
    def test_no_token(self, client, method, path):
        response = getattr(client, method)(path)
        assert response.status_code == 401
        assert response.json() == {"error": "Unauthorized"}

    def test_garbled_token(self, client):
        response = client.get("/investments", headers={"Authorization": "Bearer garbage"})
        assert response.status_code == 401
        assert response.json() == {"error": "Invalid token"}
