from datetime import datetime, timedelta

from internhub.models.entities import AuthSession, UserAccount
from internhub.services import auth as auth_service

from conftest import ADMIN_TOKEN, TEST_PASSWORD, auth_headers, make_user


def _register(client, email, *, role="student", headers=None, password=TEST_PASSWORD):
    return client.post(
        "/api/auth/register",
        json={"name": "Riya Sharma", "email": email, "password": password, "role": role},
        headers=headers or {},
    )


def test_register_login_refresh_flow(client, db_session):
    registered = _register(client, "  Riya@Example.com ")
    assert registered.status_code == 201
    assert registered.json()["role"] == "student"

    stored = db_session.query(UserAccount).filter(UserAccount.email == "riya@example.com").one()
    assert stored.password_hash != TEST_PASSWORD

    login = client.post("/api/auth/login", json={"email": "riya@example.com", "password": TEST_PASSWORD})
    assert login.status_code == 200
    tokens = login.json()

    me = client.get("/api/users/me", headers={"Authorization": f"Bearer {tokens['auth_token']}"})
    assert me.status_code == 200
    assert me.json()["email"] == "riya@example.com"

    refreshed = client.post("/api/auth/refresh", json={"refresh_token": tokens["refresh_token"]})
    assert refreshed.status_code == 200
    assert refreshed.json()["refresh_token"] != tokens["refresh_token"]

    reused = client.post("/api/auth/refresh", json={"refresh_token": tokens["refresh_token"]})
    assert reused.status_code == 401


def test_duplicate_email_conflicts(client):
    assert _register(client, "dup@example.com").status_code == 201
    assert _register(client, "DUP@example.com").status_code == 409


def test_register_rejects_weak_password_and_bad_email(client):
    assert _register(client, "weak@example.com", password="short").status_code == 400
    assert _register(client, "not-an-email").status_code == 400


def test_staff_registration_needs_admin_token(client):
    denied = _register(client, "prof@example.com", role="faculty")
    allowed = _register(client, "prof@example.com", role="faculty", headers={"X-Admin-Token": ADMIN_TOKEN})

    assert denied.status_code == 403
    assert allowed.status_code == 201
    assert allowed.json()["role"] == "faculty"


def test_login_with_wrong_password_is_unauthorized(client, db_session):
    user = make_user(db_session, email="wrongpass@example.com")

    response = client.post("/api/auth/login", json={"email": user.email, "password": "Nope-nope1!"})

    assert response.status_code == 401


def test_inactive_account_cannot_login(client, db_session):
    user = make_user(db_session, email="inactive@example.com")
    user.is_active = False
    db_session.commit()

    response = client.post("/api/auth/login", json={"email": "inactive@example.com", "password": TEST_PASSWORD})

    assert response.status_code == 401


def test_expired_refresh_session_is_rejected(client, db_session):
    user = make_user(db_session)
    raw = auth_service.create_refresh_token()
    db_session.add(
        AuthSession(
            user_id=user.id,
            refresh_token_hash=auth_service.hash_token(raw),
            created_at=datetime.utcnow() - timedelta(days=30),
            expires_at=datetime.utcnow() - timedelta(seconds=1),
        )
    )
    db_session.commit()

    response = client.post("/api/auth/refresh", json={"refresh_token": raw})

    assert response.status_code == 401


def test_logout_revokes_refresh_token(client, db_session):
    tokens = _register(client, "logout@example.com").json()

    first = client.post("/api/auth/logout", json={"refresh_token": tokens["refresh_token"]})
    second = client.post("/api/auth/logout", json={"refresh_token": tokens["refresh_token"]})

    assert first.json() == {"ok": True, "message": "Logged out."}
    assert second.json()["ok"] is True
    assert client.post("/api/auth/refresh", json={"refresh_token": tokens["refresh_token"]}).status_code == 401


def test_access_token_round_trip_and_tampering():
    token = auth_service.create_access_token("42")
    payload, signature = token.split(".", 1)

    assert auth_service.verify_auth_token(token) == "42"
    assert auth_service.verify_auth_token(f"{payload}.{signature[:-2]}xx") is None
    assert auth_service.verify_auth_token("garbage") is None


def test_expired_access_token_is_rejected(monkeypatch):
    monkeypatch.setattr(auth_service.settings, "auth_token_ttl_seconds", -10)

    assert auth_service.verify_auth_token(auth_service.create_access_token("7")) is None


def test_password_hashing_and_policy():
    salt, digest = auth_service.hash_password("Secret-123")

    assert auth_service.verify_password("Secret-123", salt, digest)
    assert not auth_service.verify_password("secret-123", salt, digest)
    assert auth_service.password_policy_issues("Secret-123") == []
    assert "at least one uppercase letter" in auth_service.password_policy_issues("lowercase-only")


def test_protected_routes_require_token(client, db_session):
    assert client.get("/api/users/me").status_code == 401
    assert client.get("/api/users/me", headers={"Authorization": "Bearer nope"}).status_code == 401

    user = make_user(db_session)
    token_header = {"X-Auth-Token": auth_headers(user)["Authorization"].split(" ", 1)[1]}
    assert client.get("/api/users/me", headers=token_header).status_code == 200


def test_user_visibility_and_role_changes(client, db_session):
    admin = make_user(db_session, role="admin")
    student = make_user(db_session)
    other = make_user(db_session)

    assert client.get(f"/api/users/{other.id}", headers=auth_headers(student)).status_code == 403
    assert client.get(f"/api/users/{other.id}", headers=auth_headers(admin)).status_code == 200
    assert client.get("/api/users", headers=auth_headers(student)).status_code == 403

    promoted = client.put(
        f"/api/users/{student.id}/role",
        json={"role": "mentor"},
        headers={**auth_headers(admin), "X-Admin-Token": ADMIN_TOKEN},
    )
    assert promoted.status_code == 200
    assert promoted.json()["role"] == "mentor"
