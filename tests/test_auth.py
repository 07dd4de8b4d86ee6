"""
Tests for signup, email verification and login.
"""

from datetime import datetime, timedelta

from sqlalchemy import select

from travelplan.core.database import SessionLocal
from travelplan.models import User, VerificationToken
from tests.conftest import TEST_PASSWORD


async def _token_for(email: str) -> VerificationToken:
    async with SessionLocal() as session:
        result = await session.execute(select(VerificationToken).where(VerificationToken.identifier == email))
        return result.scalar_one_or_none()


async def _user_by_email(email: str) -> User:
    async with SessionLocal() as session:
        result = await session.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()


class TestSignup:
    async def test_signup_creates_unverified_user_and_token(self, client):
        response = await client.post(
            "/api/auth/signup",
            json={"name": "Ana", "email": "ana@example.com", "password": "longenough"},
        )

        assert response.status_code == 201
        assert "verify" in response.json()["message"]

        user = await _user_by_email("ana@example.com")
        assert user is not None
        assert user.email_verified is None
        assert user.hashed_password != "longenough"

        token = await _token_for("ana@example.com")
        assert token is not None
        assert token.expires > datetime.utcnow() + timedelta(hours=23)

    async def test_short_password_is_rejected(self, client):
        response = await client.post(
            "/api/auth/signup",
            json={"name": "Ana", "email": "ana@example.com", "password": "12345"},
        )

        assert response.status_code == 400
        assert "at least 6" in response.json()["detail"]
        assert await _user_by_email("ana@example.com") is None

    async def test_missing_fields_are_rejected(self, client):
        response = await client.post("/api/auth/signup", json={"email": "ana@example.com"})

        assert response.status_code == 400
        assert response.json()["detail"] == "Validation error"

    async def test_duplicate_email_is_rejected(self, client, make_user):
        await make_user(email="taken@example.com")

        response = await client.post(
            "/api/auth/signup",
            json={"name": "Other", "email": "taken@example.com", "password": "longenough"},
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "User with this email already exists"


class TestVerify:
    async def test_signup_then_verify_marks_email_verified(self, client):
        await client.post(
            "/api/auth/signup",
            json={"name": "Ana", "email": "ana@example.com", "password": "longenough"},
        )
        token = (await _token_for("ana@example.com")).token

        response = await client.get("/api/auth/verify", params={"token": token})

        assert response.status_code == 200
        assert response.json() == {"message": "Email verified successfully"}
        user = await _user_by_email("ana@example.com")
        assert user.email_verified is not None
        assert await _token_for("ana@example.com") is None

        # The token is consumed
        again = await client.get("/api/auth/verify", params={"token": token})
        assert again.status_code == 400
        assert again.json()["detail"] == "Invalid verification token"

    async def test_missing_token(self, client):
        response = await client.get("/api/auth/verify")

        assert response.status_code == 400
        assert response.json()["detail"] == "Missing verification token"

    async def test_unknown_token(self, client):
        response = await client.get("/api/auth/verify", params={"token": "nope"})

        assert response.status_code == 400

    async def test_expired_token_is_deleted(self, client, make_user):
        user = await make_user(email="late@example.com", verified=False)
        async with SessionLocal() as session:
            session.add(
                VerificationToken(
                    identifier=user.email,
                    token="expired-token",
                    expires=datetime.utcnow() - timedelta(milliseconds=1),
                )
            )
            await session.commit()

        response = await client.get("/api/auth/verify", params={"token": "expired-token"})

        assert response.status_code == 400
        assert "expired" in response.json()["detail"]
        async with SessionLocal() as session:
            assert await session.get(VerificationToken, "expired-token") is None
        assert (await _user_by_email("late@example.com")).email_verified is None

    async def test_token_without_user(self, client):
        async with SessionLocal() as session:
            session.add(
                VerificationToken(
                    identifier="ghost@example.com",
                    token="ghost-token",
                    expires=datetime.utcnow() + timedelta(hours=1),
                )
            )
            await session.commit()

        response = await client.get("/api/auth/verify", params={"token": "ghost-token"})

        assert response.status_code == 404


class TestLogin:
    async def test_login_returns_usable_token(self, client, make_user):
        await make_user(name="Ana", email="ana@example.com")

        response = await client.post(
            "/api/auth/login", json={"email": "ana@example.com", "password": TEST_PASSWORD}
        )

        assert response.status_code == 200
        token = response.json()["access_token"]
        me = await client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert me.status_code == 200
        assert me.json()["email"] == "ana@example.com"

    async def test_wrong_password(self, client, make_user):
        await make_user(email="ana@example.com")

        response = await client.post(
            "/api/auth/login", json={"email": "ana@example.com", "password": "wrong-password"}
        )

        assert response.status_code == 401

    async def test_unverified_user_cannot_login(self, client, make_user):
        await make_user(email="new@example.com", verified=False)

        response = await client.post(
            "/api/auth/login", json={"email": "new@example.com", "password": TEST_PASSWORD}
        )

        assert response.status_code == 403


class TestSession:
    async def test_missing_token_is_unauthorized(self, client):
        response = await client.get("/api/auth/me")

        assert response.status_code == 401

    async def test_garbage_token_is_unauthorized(self, client):
        response = await client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-jwt"})

        assert response.status_code == 401

    async def test_token_for_deleted_user_is_unauthorized(self, client, headers):
        ghost = User(id=999, name="Ghost", email="ghost@example.com")

        response = await client.get("/api/auth/me", headers=headers(ghost))

        assert response.status_code == 401
