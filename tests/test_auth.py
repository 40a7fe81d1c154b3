from __future__ import annotations

from helpers import auth_header, bootstrap_admin, create_employee


def test_bootstrap_login_and_me(app_client):
    _app, client = app_client
    token = bootstrap_admin(client)

    res = client.get("/api/v1/auth/me", headers=auth_header(token))
    assert res.status_code == 200
    me = res.get_json()["data"]
    assert me["email"] == "admin@example.com"
    assert me["role"] == "ADMIN"


def test_bootstrap_only_once(app_client):
    _app, client = app_client
    bootstrap_admin(client)
    res = client.post(
        "/api/v1/auth/bootstrap",
        headers={"X-Bootstrap-Token": "test-bootstrap"},
        json={"email": "other@example.com", "password": "password123"},
    )
    assert res.status_code == 409


def test_login_sets_cookie_usable_as_identity(app_client):
    _app, client = app_client
    admin = bootstrap_admin(client)
    create_employee(client, admin, email="cookie@example.com")

    res = client.post("/api/v1/auth/login", json={"email": "cookie@example.com", "password": "password123"})
    assert res.status_code == 200
    assert "token=" in res.headers.get("Set-Cookie", "")

    res = client.get("/api/v1/auth/me")
    assert res.status_code == 200
    assert res.get_json()["data"]["role"] == "EMPLOYEE"

    client.post("/api/v1/auth/logout")
    res = client.get("/api/v1/auth/me")
    assert res.status_code == 401


def test_bad_credentials_and_tokens(app_client):
    _app, client = app_client
    bootstrap_admin(client)

    res = client.post("/api/v1/auth/login", json={"email": "admin@example.com", "password": "wrong-password"})
    assert res.status_code == 401
    assert res.get_json()["error"]["code"] == "AUTH_INVALID"

    res = client.get("/api/v1/auth/me", headers=auth_header("not-a-jwt"))
    assert res.status_code == 401


def test_duplicate_user_and_invalid_role(app_client):
    _app, client = app_client
    admin = bootstrap_admin(client)
    create_employee(client, admin, email="dup@example.com")

    res = client.post(
        "/api/v1/auth/users",
        headers=auth_header(admin),
        json={"email": "dup@example.com", "password": "password123"},
    )
    assert res.status_code == 409

    res = client.post(
        "/api/v1/auth/users",
        headers=auth_header(admin),
        json={"email": "new@example.com", "password": "password123", "role": "DEAN"},
    )
    assert res.status_code == 400
