from __future__ import annotations

from unittest.mock import patch

from fastapi.testclient import TestClient

from dinner_spinner.auth.dependencies import SESSION_TTL_SECONDS, session_expired


def _login_admin(c):
    return c.post("/api/login", json={"username": "admin", "password": "admin123"})


# ── Login / Logout ───────────────────────────────────────────────────────


def test_login_success(client):
    resp = _login_admin(client)
    assert resp.status_code == 200
    assert resp.json() == {"success": True, "message": "Login successful"}


def test_status_after_login(client):
    _login_admin(client)
    resp = client.get("/api/auth/status")
    assert resp.status_code == 200
    assert resp.json() == {"authenticated": True, "username": "admin"}


def test_status_anonymous(client):
    resp = client.get("/api/auth/status")
    assert resp.json() == {"authenticated": False, "username": None}


def test_wrong_password_and_unknown_user_look_identical(client):
    wrong = client.post("/api/login", json={"username": "admin", "password": "nope"})
    unknown = client.post("/api/login", json={"username": "nobody", "password": "nope"})
    assert wrong.status_code == unknown.status_code == 401
    assert wrong.json() == unknown.json() == {"error": "Invalid credentials"}


def test_unknown_user_still_checks_a_hash(client):
    with patch("dinner_spinner.auth.users.verify_password", return_value=False) as mock_verify:
        client.post("/api/login", json={"username": "nobody", "password": "x"})
    assert mock_verify.call_count == 1


def test_login_missing_fields_is_400(client):
    resp = client.post("/api/login", json={"username": "admin"})
    assert resp.status_code == 400
    assert resp.json()["field"] == "password"


def test_logout_clears_session(admin_client):
    resp = admin_client.post("/api/logout")
    assert resp.status_code == 200
    assert resp.json() == {"success": True}
    assert admin_client.get("/api/auth/status").json()["authenticated"] is False
    resp = admin_client.post("/api/meals", json={"name": "Soup", "ingredients": "Water"})
    assert resp.status_code == 401


# ── Expiry ───────────────────────────────────────────────────────────────


def test_session_expired_is_fixed_from_login():
    issued = 1_000_000.0
    session = {"user": {"username": "admin"}, "issued_at": issued}
    assert not session_expired(session, now=issued + SESSION_TTL_SECONDS - 1)
    assert session_expired(session, now=issued + SESSION_TTL_SECONDS)


def test_session_without_issue_time_is_expired():
    assert session_expired({"user": {"username": "admin"}})


def test_expired_session_is_rejected(admin_client):
    with patch("dinner_spinner.auth.dependencies.SESSION_TTL_SECONDS", 0):
        resp = admin_client.post("/api/meals", json={"name": "Soup", "ingredients": "Water"})
        assert resp.status_code == 401
    assert admin_client.get("/api/auth/status").json()["authenticated"] is False


def test_relogin_after_expiry(admin_client):
    with patch("dinner_spinner.auth.dependencies.SESSION_TTL_SECONDS", 0):
        admin_client.get("/api/auth/status")
    assert _login_admin(admin_client).status_code == 200
    resp = admin_client.post("/api/meals", json={"name": "Soup", "ingredients": "Water"})
    assert resp.status_code == 200


# ── Route protection ─────────────────────────────────────────────────────


def test_mutations_require_login(app):
    c = TestClient(app)
    assert c.post("/api/meals", json={"name": "A", "ingredients": "B"}).status_code == 401
    assert c.put("/api/meals/1", json={"name": "A", "ingredients": "B"}).status_code == 401
    assert c.delete("/api/meals/1").status_code == 401
    body = {"name": "A", "category": "formal", "details": "B"}
    assert c.post("/api/restaurants", json=body).status_code == 401
    assert c.put("/api/restaurants/1", json=body).status_code == 401
    assert c.delete("/api/restaurants/1").status_code == 401
    assert c.get("/api/cache/stats").status_code == 401


def test_unauthenticated_error_body(client):
    resp = client.delete("/api/meals/1")
    assert resp.json() == {"error": "Authentication required"}


def test_reads_are_public(client):
    assert client.get("/health").status_code == 200
    assert client.get("/api/meals").status_code == 200
    assert client.get("/api/restaurants").status_code == 200
    assert client.post("/api/spin", json={"count": 1}).status_code == 200
