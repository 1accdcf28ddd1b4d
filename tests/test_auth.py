"""
Tests for accounts, tokens and optional identity on item routes.
"""

import time

import jwt
import pytest
from fastapi.testclient import TestClient

from conftest import make_settings, register_user
from work_suite.api import create_app
from work_suite.auth import decode_token, hash_password, issue_token, verify_password
from work_suite.errors import UnauthorizedError


class TestRegister:
    def test_register_returns_token_and_user(self, client):
        response = client.post(
            "/auth/register",
            json={"email": "Ada@Example.com", "password": "correct-horse"},
        )
        assert response.status_code == 201
        data = response.json()
        assert data["token"]
        assert data["user"]["email"] == "ada@example.com"
        assert data["user"]["display_name"] == "ada"
        assert "password_hash" not in data["user"]

    def test_duplicate_email(self, client):
        register_user(client)
        response = client.post(
            "/auth/register", json={"email": "ada@example.com", "password": "another-one"}
        )
        assert response.status_code == 409
        assert response.json()["error"]["code"] == "CONFLICT"

    def test_invalid_email(self, client):
        response = client.post("/auth/register", json={"email": "nope", "password": "secret1"})
        assert response.status_code == 422

    def test_short_password(self, client):
        response = client.post("/auth/register", json={"email": "a@b.c", "password": "123"})
        assert response.status_code == 422


class TestLogin:
    def test_login(self, client):
        register_user(client, display_name="Ada L")
        response = client.post(
            "/auth/login", json={"email": "ada@example.com", "password": "correct-horse"}
        )
        assert response.status_code == 200
        assert response.json()["user"]["display_name"] == "Ada L"
        assert "worksuite_token" in response.cookies

    def test_wrong_password(self, client):
        register_user(client)
        response = client.post(
            "/auth/login", json={"email": "ada@example.com", "password": "wrong-horse"}
        )
        assert response.status_code == 401
        assert response.json()["error"]["code"] == "UNAUTHORIZED"

    def test_unknown_email(self, client):
        response = client.post("/auth/login", json={"email": "who@example.com", "password": "x"})
        assert response.status_code == 401

    def test_cookie_identifies_caller(self, client):
        register_user(client)
        client.post("/auth/login", json={"email": "ada@example.com", "password": "correct-horse"})

        me = client.get("/auth/me")
        assert me.status_code == 200
        item = client.post("/items", json={"name": "Mine"}).json()
        assert item["owner_id"] == me.json()["id"]


class TestMe:
    def test_me(self, client, auth_headers):
        response = client.get("/auth/me", headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["email"] == "ada@example.com"

    def test_me_requires_token(self, client):
        response = client.get("/auth/me")
        assert response.status_code == 401
        error = response.json()["error"]
        assert error["code"] == "UNAUTHORIZED"
        assert error["message"] == "No token provided"

    def test_tampered_token(self, client, auth_headers):
        token = auth_headers["Authorization"].split(" ", 1)[1]
        header, body, signature = token.split(".")
        forged = f"{header}.{body}.{'A' * len(signature)}"
        response = client.get("/auth/me", headers={"Authorization": f"Bearer {forged}"})
        assert response.status_code == 401

    def test_expired_token(self, tmp_path):
        app = create_app(make_settings(tmp_path, token_expire_minutes=-1))
        with TestClient(app) as client:
            headers = register_user(client)
            response = client.get("/auth/me", headers=headers)
            assert response.status_code == 401
            assert response.json()["error"]["message"] == "Token expired"


class TestTokens:
    def test_round_trip(self, settings):
        identity = decode_token(issue_token("u1", "a@b.c", settings), settings)
        assert (identity.id, identity.email) == ("u1", "a@b.c")

    def test_wrong_secret(self, settings, tmp_path):
        token = issue_token("u1", "a@b.c", settings)
        other = make_settings(tmp_path, secret_key="another-secret-for-signing-tokens-02")
        with pytest.raises(UnauthorizedError):
            decode_token(token, other)

    def test_token_is_standard_jwt(self, settings):
        token = issue_token("u1", "a@b.c", settings)
        claims = jwt.decode(token, settings.secret_key, algorithms=["HS256"])
        assert claims["sub"] == "u1"
        assert claims["email"] == "a@b.c"
        assert claims["exp"] > claims["iat"]

    def test_missing_email_claim(self, settings):
        token = jwt.encode(
            {"sub": "u1", "exp": int(time.time()) + 60}, settings.secret_key, algorithm="HS256"
        )
        with pytest.raises(UnauthorizedError):
            decode_token(token, settings)

    def test_missing_expiry_claim(self, settings):
        token = jwt.encode({"sub": "u1", "email": "a@b.c"}, settings.secret_key, algorithm="HS256")
        with pytest.raises(UnauthorizedError):
            decode_token(token, settings)

    def test_other_algorithm_rejected(self, settings):
        token = jwt.encode(
            {"sub": "u1", "email": "a@b.c", "exp": int(time.time()) + 60},
            settings.secret_key,
            algorithm="HS512",
        )
        with pytest.raises(UnauthorizedError):
            decode_token(token, settings)

    @pytest.mark.parametrize("token", ["", "no-dot", "a.b.c", "é.x", "x.é"])
    def test_malformed(self, settings, token):
        with pytest.raises(UnauthorizedError):
            decode_token(token, settings)


class TestPasswords:
    def test_hash_and_verify(self):
        stored = hash_password("s3cret!", 1000)
        assert stored.startswith("pbkdf2_sha256$1000$")
        assert verify_password("s3cret!", stored)
        assert not verify_password("s3cret?", stored)

    def test_salted(self):
        assert hash_password("same", 1000) != hash_password("same", 1000)

    def test_unknown_scheme(self):
        assert verify_password("x", "md5$1$abc$def") is False
        assert verify_password("x", "garbage") is False
