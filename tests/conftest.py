"""
Pytest configuration and fixtures for the Travel Plan API tests.

Every test runs against a fresh SQLite database (aiosqlite) and drives the
real FastAPI app through httpx.
"""

import os
import tempfile

_db_dir = tempfile.mkdtemp(prefix="travelplan-tests-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_db_dir}/test.db"
os.environ["JWT_SECRET_KEY"] = "test-secret-key-for-travelplan"
os.environ["SMTP_HOST"] = ""

from datetime import date, datetime
from typing import Optional

import httpx
import pytest

from travelplan.core.database import Base, SessionLocal, engine
from travelplan.core.security import create_access_token, hash_password
from travelplan.main import app
from travelplan.models import TripInvite, TripMember, User
from travelplan.stores.invites import InviteStore
from travelplan.stores.trips import TripStore

TEST_PASSWORD = "secret123"
_PASSWORD_HASH = hash_password(TEST_PASSWORD)


@pytest.fixture(autouse=True)
async def database():
    """Create the schema before each test and drop it afterwards."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    # Pooled connections belong to this test's event loop
    await engine.dispose()


@pytest.fixture
async def client():
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def make_user():
    """Factory for verified users."""
    counter = {"n": 0}

    async def _make_user(name: Optional[str] = None, email: Optional[str] = None, verified: bool = True) -> User:
        counter["n"] += 1
        name = name or f"User {counter['n']}"
        email = email or f"user{counter['n']}@example.com"
        async with SessionLocal() as session:
            user = User(
                name=name,
                email=email,
                hashed_password=_PASSWORD_HASH,
                email_verified=datetime(2024, 1, 1) if verified else None,
            )
            session.add(user)
            await session.commit()
            await session.refresh(user)
            return user

    return _make_user


@pytest.fixture
def make_trip():
    async def _make_trip(creator: User, name: str = "Lisbon weekend"):
        async with SessionLocal() as session:
            trip = await TripStore.create(
                session,
                creator_id=creator.id,
                name=name,
                description="Pastel de nata tour",
                start_date=date(2025, 6, 1),
                end_date=date(2025, 6, 4),
            )
            await session.commit()
            await session.refresh(trip)
            return trip

    return _make_trip


@pytest.fixture
def add_member():
    async def _add_member(trip, user: User) -> TripMember:
        async with SessionLocal() as session:
            member = await TripStore.add_member(session, trip.id, user.id)
            await session.commit()
            return member

    return _add_member


@pytest.fixture
def make_invite():
    async def _make_invite(trip, sender: User, receiver: Optional[User] = None, email: Optional[str] = None) -> TripInvite:
        async with SessionLocal() as session:
            invite = await InviteStore.create(
                session,
                trip_id=trip.id,
                sender_id=sender.id,
                receiver_id=receiver.id if receiver else None,
                receiver_email=None if receiver else email,
            )
            await session.commit()
            return invite

    return _make_invite


def auth_headers(user: User) -> dict:
    token = create_access_token({"sub": str(user.id)})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def headers():
    return auth_headers
