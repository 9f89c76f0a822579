from datetime import datetime, timedelta, timezone

import pytest

from conftest import PASSWORDS, login
from gearguard.core.security import SessionTokens
from gearguard.domain.errors import AccountDeactivated, InvalidCredentials
from gearguard.schemas.user import SessionUser
from gearguard.services import auth_service


# ---- signup ----
def test_signup_creates_active_user(client, world):
    r = client.post("/api/auth/signup", json={
        "name": "New Person", "email": "New.Person@Example.com", "password": "secret1",
        "departmentId": world.production,
    })
    assert r.status_code == 201
    body = r.json()
    assert body["ok"] is True
    user = body["data"]["user"]
    assert user["email"] == "new.person@example.com"
    assert user["role"] == "USER"
    assert user["departmentId"] == world.production
    assert "password" not in str(user).lower()

    # the new account can log in straight away
    r = client.post("/api/auth/login", json={"email": "new.person@example.com", "password": "secret1"})
    assert r.status_code == 200


def test_signup_short_password_is_rejected_with_minimum_length(client, world):
    r = client.post("/api/auth/signup", json={"name": "Shorty", "email": "s@example.com", "password": "abc"})
    assert r.status_code == 400
    body = r.json()
    assert body["ok"] is False
    assert body["error"] == "Validation failed"
    errors = {e["field"]: e["message"] for e in body["meta"]["errors"]}
    assert "password" in errors
    assert "6" in errors["password"]


def test_signup_five_character_password_is_rejected(client, world):
    r = client.post("/api/auth/signup", json={"name": "Shorty", "email": "s@example.com", "password": "abcde"})
    assert r.status_code == 400


@pytest.mark.parametrize("payload", [
    {"name": "A", "email": "a@example.com", "password": "secret1"},
    {"name": "Valid Name", "email": "not-an-email", "password": "secret1"},
    {"email": "a@example.com", "password": "secret1"},
])
def test_signup_validation_errors(client, world, payload):
    r = client.post("/api/auth/signup", json=payload)
    assert r.status_code == 400
    assert r.json()["meta"]["errors"]


def test_signup_duplicate_email(client, world):
    r = client.post("/api/auth/signup", json={"name": "Admin Again", "email": "ADMIN@gearguard.com", "password": "secret1"})
    assert r.status_code == 400
    assert r.json()["error"] == "User with this email already exists"


def test_signup_unknown_department(client, world):
    r = client.post("/api/auth/signup", json={
        "name": "Lost Person", "email": "lost@example.com", "password": "secret1", "departmentId": 9999,
    })
    assert r.status_code == 400
    assert r.json()["error"] == "Department not found"


# ---- login ----
def test_login_returns_token_claims_and_cookie(client, world):
    r = client.post("/api/auth/login", json={"email": "tech@gearguard.com", "password": "tech123"})
    assert r.status_code == 200
    data = r.json()["data"]
    assert data["token_type"] == "bearer"
    user = data["user"]
    assert user["role"] == "TECHNICIAN"
    assert user["isTechnician"] is True
    assert user["technicianId"] == world.tech
    assert user["maintenanceTeamId"] == world.mechanics
    assert user["departmentName"] == "Maintenance"

    cookie = r.headers["set-cookie"]
    assert "gearguard_session=" in cookie
    assert "httponly" in cookie.lower()


def test_wrong_password_and_unknown_email_are_indistinguishable(client, world):
    wrong = client.post("/api/auth/login", json={"email": "admin@gearguard.com", "password": "nope-nope"})
    unknown = client.post("/api/auth/login", json={"email": "ghost@gearguard.com", "password": "nope-nope"})

    assert wrong.status_code == unknown.status_code == 401
    assert wrong.json() == unknown.json() == {"ok": False, "error": "Invalid email or password"}
    assert "set-cookie" not in wrong.headers
    assert "set-cookie" not in unknown.headers


@pytest.mark.parametrize("password", ["gone123", "wrong-password"])
def test_deactivated_account_cannot_log_in(client, world, password):
    r = client.post("/api/auth/login", json={"email": "gone@gearguard.com", "password": password})
    assert r.status_code == 401
    assert r.json()["error"] == "Invalid email or password"


@pytest.mark.parametrize("email", ["ghost@gearguard.com", "admin@gearguard.com", "gone@gearguard.com"])
def test_every_login_failure_does_one_hash_check(app, world, monkeypatch, email):
    hasher = app.state.hasher
    calls = []
    real_verify, real_dummy = hasher.verify, hasher.dummy_verify
    monkeypatch.setattr(hasher, "verify", lambda *a: calls.append("verify") or real_verify(*a))
    monkeypatch.setattr(hasher, "dummy_verify", lambda: calls.append("dummy") or real_dummy())

    with app.state.db.session() as s:
        with pytest.raises((InvalidCredentials, AccountDeactivated)):
            auth_service.authenticate(s, hasher, email=email, password="wrong-password")
    assert len(calls) == 1


def test_authenticate_raises_domain_errors(app, world):
    hasher = app.state.hasher
    with app.state.db.session() as s:
        with pytest.raises(InvalidCredentials):
            auth_service.authenticate(s, hasher, email="ghost@gearguard.com", password="x")
        with pytest.raises(InvalidCredentials):
            auth_service.authenticate(s, hasher, email="admin@gearguard.com", password="wrong")
        with pytest.raises(AccountDeactivated):
            auth_service.authenticate(s, hasher, email="gone@gearguard.com", password=PASSWORDS["gone@gearguard.com"])

        user = auth_service.authenticate(s, hasher, email="  Admin@GearGuard.com ", password="admin123")
        assert user.id == world.admin
        assert user.role == "ADMIN"
        assert user.isTechnician is False


def test_oauth2_token_endpoint(client, world):
    r = client.post("/api/auth/token", data={"username": "manager@gearguard.com", "password": "manager123"})
    assert r.status_code == 200
    token = r.json()["access_token"]

    r = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert r.json()["data"]["email"] == "manager@gearguard.com"


# ---- session resolution ----
def test_session_is_null_without_token(client, world):
    r = client.get("/api/auth/session")
    assert r.status_code == 200
    assert r.json() == {"ok": True, "data": None}


def test_me_requires_session(client, world):
    r = client.get("/api/auth/me")
    assert r.status_code == 401
    assert r.json()["error"] == "Unauthorized"


def test_cookie_session_is_accepted(client, world):
    client.post("/api/auth/login", json={"email": "user@gearguard.com", "password": "user123"})
    r = client.get("/api/auth/me")
    assert r.status_code == 200
    assert r.json()["data"]["email"] == "user@gearguard.com"

    client.post("/api/auth/logout")
    assert client.get("/api/auth/me").status_code == 401


def test_bearer_header_wins_over_cookie(client, world):
    admin_headers = login(client, "admin@gearguard.com")
    client.post("/api/auth/login", json={"email": "user@gearguard.com", "password": "user123"})

    r = client.get("/api/auth/me", headers=admin_headers)
    assert r.json()["data"]["role"] == "ADMIN"


def test_lenient_bearer_parsing(client, world):
    token = login(client, "admin@gearguard.com")["Authorization"].split(" ", 1)[1]
    r = client.get("/api/auth/me", headers={"Authorization": f"Bearer Bearer   {token}"})
    assert r.status_code == 200


def test_tampered_token_is_rejected(client, world):
    headers = login(client, "user@gearguard.com")
    token = headers["Authorization"].split(" ", 1)[1]
    header, payload, signature = token.split(".")
    forged = ".".join([header, payload, signature[::-1]])

    r = client.get("/api/auth/me", headers={"Authorization": f"Bearer {forged}"})
    assert r.status_code == 401


def test_token_signed_with_other_secret_is_rejected(client, world):
    user = SessionUser(id=world.admin, name="Admin User", email="admin@gearguard.com", role="ADMIN")
    foreign = SessionTokens(secret="someone-else").issue(user)
    r = client.get("/api/auth/me", headers={"Authorization": f"Bearer {foreign}"})
    assert r.status_code == 401


def test_expired_token_decodes_to_none():
    tokens = SessionTokens(secret="s", max_age_seconds=60)
    user = SessionUser(id=1, name="Someone", email="someone@example.com", role="USER")
    token = tokens.issue(user, now=datetime.now(timezone.utc) - timedelta(hours=1))
    assert tokens.decode(token) is None


def test_token_round_trips_claims():
    tokens = SessionTokens(secret="s")
    user = SessionUser(
        id=7, name="Mike", email="mike@example.com", role="TECHNICIAN", departmentId=3,
        departmentName="Maintenance", isTechnician=True, technicianId=2, maintenanceTeamId=1,
    )
    assert tokens.decode(tokens.issue(user)) == user
    assert tokens.decode("not-a-jwt") is None
    assert tokens.decode(None) is None
