from datetime import timedelta
import pytest
from app.core.security import create_access_token, verify_token
from fastapi import HTTPException

TEST_PASSWORD = "password123"


@pytest.mark.asyncio
class TestAuthEndpoints:

    async def test_register_returns_token(self, client):
        response = await client.post(
            "/api/auth/register",
            json={"name": "Dana", "email": "Dana@Example.com", "password": "s3cret!"},
        )

        assert response.status_code == 201
        body = response.json()
        assert body["user"]["email"] == "dana@example.com"
        assert body["token_type"] == "bearer"

        me = await client.get("/api/auth/me", headers={"Authorization": f"Bearer {body['access_token']}"})
        assert me.json()["id"] == body["user"]["id"]

    async def test_duplicate_email(self, client, create_user):
        await create_user(email="taken@example.com")

        response = await client.post(
            "/api/auth/register",
            json={"name": "Again", "email": "taken@example.com", "password": "s3cret!"},
        )

        assert response.status_code == 400
        assert response.json()["error_code"] == "EMAIL_ALREADY_REGISTERED"

    async def test_short_password_rejected(self, client):
        response = await client.post(
            "/api/auth/register", json={"name": "Short", "email": "s@example.com", "password": "123"}
        )

        assert response.status_code == 422

    async def test_login(self, client, create_user):
        user = await create_user(email="login@example.com")

        ok = await client.post("/api/auth/login", json={"email": "login@example.com", "password": TEST_PASSWORD})
        bad = await client.post("/api/auth/login", json={"email": "login@example.com", "password": "wrong-pass"})

        assert ok.status_code == 200
        assert ok.json()["user"]["id"] == user.id
        assert bad.status_code == 401
        assert bad.json()["error_code"] == "INVALID_CREDENTIALS"

    async def test_token_form(self, client, create_user):
        await create_user(email="form@example.com")

        response = await client.post(
            "/api/auth/token", data={"username": "form@example.com", "password": TEST_PASSWORD}
        )

        assert response.status_code == 200
        assert response.json()["access_token"]

    async def test_inactive_user_cannot_login(self, client, create_user):
        await create_user(email="off@example.com", is_active=False)

        response = await client.post("/api/auth/login", json={"email": "off@example.com", "password": TEST_PASSWORD})

        assert response.status_code == 403

    async def test_logout(self, client, create_user, headers_for):
        user = await create_user()

        response = await client.post("/api/auth/logout", headers=headers_for(user))

        assert response.json() == {"message": "Successfully logged out"}

    async def test_invalid_token(self, client):
        response = await client.get("/api/auth/me", headers={"Authorization": "Bearer garbage"})

        assert response.status_code == 401


class TestTokens:

    def test_round_trip(self):
        token = create_access_token("user-1")
        payload = verify_token(token, expected_type="access")
        assert payload["sub"] == "user-1"
        assert payload["type"] == "access"

    def test_expired_token(self):
        token = create_access_token("user-1", expires_delta=timedelta(minutes=-5))
        with pytest.raises(HTTPException) as exc_info:
            verify_token(token)
        assert exc_info.value.status_code == 401

    def test_wrong_type(self):
        token = create_access_token("user-1", additional_claims={"type": "refresh"})
        with pytest.raises(HTTPException):
            verify_token(token, expected_type="access")
