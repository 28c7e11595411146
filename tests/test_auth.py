from datetime import timedelta

import pytest
from jose import jwt

from postcraft.core.config import COOKIE_NAME, JWT_ALGORITHM, JWT_SECRET
from postcraft.core.errors import Unauthenticated
from postcraft.utils.auth import (
    create_access_token,
    hash_password,
    verify_password,
    verify_session,
    verify_token,
)


# ----- session tokens -----

def test_session_token_round_trip():
    token = create_access_token("user-123")
    assert verify_session(token) == "user-123"


def test_session_token_expires_after_seven_days_by_default():
    payload = verify_token(create_access_token("user-123"))
    assert payload["exp"] - payload["iat"] == 7 * 24 * 60 * 60


def test_expired_token_is_rejected():
    token = create_access_token("user-123", expires_delta=timedelta(seconds=-1))
    assert verify_token(token) is None
    with pytest.raises(Unauthenticated):
        verify_session(token)


def test_token_signed_with_another_secret_is_rejected():
    token = jwt.encode({"sub": "user-123"}, "some-other-secret", algorithm=JWT_ALGORITHM)
    with pytest.raises(Unauthenticated):
        verify_session(token)


@pytest.mark.parametrize("payload", [{}, {"sub": ""}, {"sub": 42}])
def test_token_without_usable_subject_is_rejected(payload):
    token = jwt.encode(payload, JWT_SECRET, algorithm=JWT_ALGORITHM)
    with pytest.raises(Unauthenticated):
        verify_session(token)


@pytest.mark.parametrize("token", [None, "", "garbage"])
def test_missing_or_garbage_token_is_rejected(token):
    with pytest.raises(Unauthenticated):
        verify_session(token)


# ----- passwords -----

def test_password_hash_verifies():
    hashed = hash_password("correct horse")
    assert hashed != "correct horse"
    assert verify_password("correct horse", hashed)
    assert not verify_password("wrong horse", hashed)


@pytest.mark.parametrize("plain, hashed", [("", "x"), ("pw", ""), ("pw", "not-a-bcrypt-hash")])
def test_password_verify_handles_bad_input(plain, hashed):
    assert verify_password(plain, hashed) is False


# ----- routes -----

def test_register_sets_session_cookie(client):
    response = client.post(
        "/api/auth/register",
        json={"name": "  Grace  ", "email": "Grace@Example.com", "password": "long enough"},
    )

    assert response.status_code == 201
    user = response.json()["user"]
    assert user["email"] == "grace@example.com"
    assert user["name"] == "Grace"
    assert user["plan"] == "free"
    assert user["generations_count"] == 0
    assert user["generations_limit"] == 10
    assert "hashed_password" not in user

    set_cookie = response.headers["set-cookie"]
    assert set_cookie.startswith(f"{COOKIE_NAME}=")
    assert "HttpOnly" in set_cookie
    assert "samesite=strict" in set_cookie.lower()
    assert "Max-Age=604800" in set_cookie


def test_register_duplicate_email_conflicts(registered_client):
    response = registered_client.post(
        "/api/auth/register",
        json={"name": "Ada Again", "email": "ADA@example.com", "password": "another one"},
    )
    assert response.status_code == 409
    assert response.json()["error"] == "email_already_registered"


@pytest.mark.parametrize(
    "body",
    [
        {"name": "A", "email": "a@example.com", "password": "long enough"},
        {"name": "Ada", "email": "not-an-email", "password": "long enough"},
        {"name": "Ada", "email": "a@example.com", "password": "short"},
    ],
)
def test_register_validates_body(client, body):
    assert client.post("/api/auth/register", json=body).status_code == 422


def test_me_returns_current_user(registered_client):
    response = registered_client.get("/api/auth/me")
    assert response.status_code == 200
    assert response.json()["user"]["id"] == registered_client.user["id"]


def test_me_requires_session(client):
    response = client.get("/api/auth/me")
    assert response.status_code == 401
    assert response.json() == {"detail": "Unauthorized.", "error": "unauthenticated"}


def test_me_for_deleted_account_is_not_found(client):
    client.cookies.set(COOKIE_NAME, create_access_token("00000000-0000-0000-0000-000000000000"))
    response = client.get("/api/auth/me")
    assert response.status_code == 404
    assert response.json()["error"] == "account_not_found"


def test_login_and_logout(registered_client):
    registered_client.post("/api/auth/logout")
    registered_client.cookies.clear()
    assert registered_client.get("/api/auth/me").status_code == 401

    response = registered_client.post(
        "/api/auth/login",
        json={"email": "Ada@Example.com", "password": "correct horse"},
    )
    assert response.status_code == 200
    assert response.json()["user"]["id"] == registered_client.user["id"]
    assert registered_client.get("/api/auth/me").status_code == 200


def test_logout_expires_cookie(registered_client):
    response = registered_client.post("/api/auth/logout")
    assert response.status_code == 200
    assert response.json() == {"success": True}
    assert 'Max-Age=0' in response.headers["set-cookie"]


@pytest.mark.parametrize(
    "email, password",
    [("ada@example.com", "wrong password"), ("nobody@example.com", "correct horse")],
)
def test_login_rejects_bad_credentials(registered_client, email, password):
    response = registered_client.post("/api/auth/login", json={"email": email, "password": password})
    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid email or password."
