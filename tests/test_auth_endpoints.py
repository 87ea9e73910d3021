"""
API tests for signup, login and the bearer-token dependency.
"""

from datetime import timedelta

import pytest
from fastapi import status

from poll_app.core.security import create_access_token, decode_access_token, hash_password, verify_password

from conftest import TEST_PASSWORD, TEST_SECRET

SIGNUP_URL = "/api/auth/signup"
LOGIN_URL = "/api/auth/login"
ME_URL = "/api/auth/me"


class TestSignup:
    """POST /api/auth/signup"""

    def test_signup_success(self, client):
        response = client.post(SIGNUP_URL, json={
            "username": "dave",
            "email": "dave@example.com",
            "password": "s3cret-pass"
        })

        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()
        assert data["user"]["username"] == "dave"
        assert data["user"]["email"] == "dave@example.com"
        assert "hashed_password" not in data["user"]
        assert decode_access_token(data["token"], TEST_SECRET) == data["user"]["id"]

    def test_signup_token_works(self, client):
        token = client.post(SIGNUP_URL, json={
            "username": "dave", "email": "dave@example.com", "password": "s3cret-pass"
        }).json()["token"]

        response = client.get(ME_URL, headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["username"] == "dave"

    def test_signup_duplicate_username(self, client, creator):
        response = client.post(SIGNUP_URL, json={
            "username": "alice", "email": "someone@example.com", "password": "pw"
        })

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.json() == {"error": "Username or email already exists"}

    def test_signup_duplicate_email(self, client, creator):
        response = client.post(SIGNUP_URL, json={
            "username": "alice2", "email": "alice@example.com", "password": "pw"
        })

        assert response.status_code == status.HTTP_409_CONFLICT

    @pytest.mark.parametrize("payload", [
        {"email": "x@example.com", "password": "pw"},
        {"username": "x", "password": "pw"},
        {"username": "x", "email": "x@example.com"},
        {"username": "  ", "email": "x@example.com", "password": "pw"},
        {"username": "x", "email": "x@example.com", "password": ""},
        {"username": "x", "email": "not-an-email", "password": "pw"},
    ])
    def test_signup_validation(self, client, payload):
        response = client.post(SIGNUP_URL, json=payload)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "error" in response.json()


class TestLogin:
    """POST /api/auth/login"""

    def test_login_success(self, client, creator):
        response = client.post(LOGIN_URL, json={"email": "alice@example.com", "password": TEST_PASSWORD})

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["user"] == {"id": creator.id, "username": "alice", "email": "alice@example.com"}
        assert decode_access_token(data["token"], TEST_SECRET) == creator.id

    def test_login_wrong_password(self, client, creator):
        response = client.post(LOGIN_URL, json={"email": "alice@example.com", "password": "wrong"})

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json() == {"error": "Invalid credentials"}

    def test_login_unknown_email(self, client):
        response = client.post(LOGIN_URL, json={"email": "ghost@example.com", "password": "pw"})

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json() == {"error": "Invalid credentials"}


class TestCurrentUser:
    """GET /api/auth/me and the bearer-token checks every endpoint shares"""

    def test_me(self, client, creator, creator_headers):
        response = client.get(ME_URL, headers=creator_headers)

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["id"] == creator.id

    def test_missing_header(self, client):
        response = client.get(ME_URL)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json() == {"error": "Authorization header required"}
        assert response.headers["WWW-Authenticate"] == "Bearer"

    def test_expired_token(self, client, creator):
        token = create_access_token(creator.id, TEST_SECRET, expires_delta=timedelta(seconds=-5))

        response = client.get(ME_URL, headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json() == {"error": "Invalid token"}

    def test_token_signed_with_other_secret(self, client, creator):
        token = create_access_token(creator.id, "another-secret")

        response = client.get(ME_URL, headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_token_for_unknown_user(self, client):
        token = create_access_token(9999, TEST_SECRET)

        response = client.get(ME_URL, headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json() == {"error": "User not found"}


def test_password_hashing():
    hashed = hash_password("hunter2")

    assert hashed != "hunter2"
    assert verify_password("hunter2", hashed)
    assert not verify_password("hunter3", hashed)


def test_long_passwords_compare_on_first_72_bytes():
    hashed = hash_password("a" * 72 + "tail")

    assert verify_password("a" * 72 + "other", hashed)
