# tests/test_auth.py
from sqlalchemy import func, select

import crud
from deps.auth import create_reset_token
from models import UserSession

from conftest import PASSWORD, make_user


def _register(c, username, role=None, password=PASSWORD):
    body = {"username": username, "email": f"{username}@example.com", "password": password}
    if role:
        body["role"] = role
    return c.post("/api/register", json=body)


def test_register_logs_in(client):
    r = _register(client, "carol")
    assert r.status_code == 201
    assert r.json()["role"] == "customer"
    assert "password_hash" not in r.json()

    me = client.get("/api/user")
    assert me.status_code == 200
    assert me.json()["username"] == "carol"


def test_register_duplicate_username_or_email(client):
    assert _register(client, "carol").status_code == 201
    with_same_name = {"username": "carol", "email": "other@example.com", "password": PASSWORD}
    assert client.post("/api/register", json=with_same_name).status_code == 400
    with_same_email = {"username": "carol2", "email": "CAROL@example.com", "password": PASSWORD}
    assert client.post("/api/register", json=with_same_email).status_code == 400


def test_register_short_password_is_400(client):
    assert _register(client, "carol", password="123").status_code == 400


def test_first_user_may_be_admin(client):
    r = _register(client, "root", role="admin")
    assert r.json()["role"] == "admin"


def test_admin_role_ignored_for_anonymous_when_users_exist(client, db):
    make_user(db, "someone")
    r = _register(client, "mallory", role="admin")
    assert r.status_code == 201
    assert r.json()["role"] == "customer"


def test_admin_can_register_admin_without_switching_session(admin_client):
    r = _register(admin_client, "ops", role="admin")
    assert r.json()["role"] == "admin"
    assert admin_client.get("/api/user").json()["username"] == "admin"


def test_login_by_username_or_email(client, db):
    make_user(db, "dave")
    assert client.post("/api/login", json={"username": "dave", "password": PASSWORD}).status_code == 200
    r = client.post("/api/login", json={"username": "dave@example.com", "password": PASSWORD})
    assert r.status_code == 200
    assert r.json()["username"] == "dave"


def test_login_wrong_password_is_401(client, db):
    make_user(db, "dave")
    r = client.post("/api/login", json={"username": "dave", "password": "nope-nope"})
    assert r.status_code == 401


def test_logout_ends_session(customer_client, db):
    assert customer_client.get("/api/user").status_code == 200
    r = customer_client.post("/api/logout")
    assert r.status_code == 200
    assert customer_client.get("/api/user").status_code == 401
    assert db.scalar(select(func.count()).select_from(UserSession)) == 0


def test_user_requires_session(client):
    assert client.get("/api/user").status_code == 401


def test_forgot_password_unknown_email_is_404(client):
    r = client.post("/api/forgot-password", json={"email": "nobody@example.com"})
    assert r.status_code == 404


def test_forgot_password_does_not_leak_token(client, db):
    make_user(db, "erin")
    r = client.post("/api/forgot-password", json={"email": "erin@example.com"})
    assert r.status_code == 200
    assert set(r.json()) == {"message"}


def test_reset_password_with_token(client, db):
    user = make_user(db, "erin")
    token = create_reset_token(user)

    r = client.post("/api/reset-password", json={"token": token, "new_password": "brand-new-pw"})
    assert r.status_code == 200
    assert client.post("/api/login", json={"username": "erin", "password": "brand-new-pw"}).status_code == 200
    assert client.post("/api/login", json={"username": "erin", "password": PASSWORD}).status_code == 401

    # token ใช้ซ้ำไม่ได้หลังเปลี่ยนรหัส
    r = client.post("/api/reset-password", json={"token": token, "new_password": "another-pw"})
    assert r.status_code == 400


def test_reset_password_bad_token(client):
    r = client.post("/api/reset-password", json={"token": "not-a-jwt", "new_password": "brand-new-pw"})
    assert r.status_code == 400


def test_reset_password_with_current_password(customer_client, db):
    r = customer_client.post(
        "/api/reset-password", json={"current_password": "wrong-one", "new_password": "brand-new-pw"}
    )
    assert r.status_code == 400

    r = customer_client.post(
        "/api/reset-password", json={"current_password": PASSWORD, "new_password": "brand-new-pw"}
    )
    assert r.status_code == 200
    # session ปัจจุบันยังใช้ได้
    assert customer_client.get("/api/user").status_code == 200

    db.expire_all()
    alice = crud.get_user_by_username(db, "alice")
    assert crud.get_user_by_login(db, "alice@example.com").id == alice.id


def test_reset_password_without_token_or_session_is_401(client):
    r = client.post("/api/reset-password", json={"current_password": PASSWORD, "new_password": "brand-new-pw"})
    assert r.status_code == 401


def test_reset_password_accepts_camel_case_fields(customer_client, client):
    r = customer_client.post(
        "/api/reset-password", json={"currentPassword": PASSWORD, "newPassword": "camel-case-pw"}
    )
    assert r.status_code == 200
    assert client.post("/api/login", json={"username": "alice", "password": "camel-case-pw"}).status_code == 200
