"""
Tests for searching users to invite.
"""

import asyncio
from unittest.mock import AsyncMock

from sqlalchemy.exc import OperationalError

from travelplan.services.users.user_search import exclude_trip_participants
from travelplan.models import User
from travelplan.stores.invites import InviteStore
from travelplan.stores.trips import TripStore
from travelplan.stores.users import UserStore


class TestUserSearch:
    async def test_requires_session(self, client):
        response = await client.get("/api/users/search", params={"q": "bob"})

        assert response.status_code == 401

    async def test_short_query_skips_the_store(self, client, make_user, headers, monkeypatch):
        alice = await make_user()
        search = AsyncMock()
        monkeypatch.setattr(UserStore, "search", search)

        for q in ["", "b", "  b  "]:
            response = await client.get("/api/users/search", params={"q": q}, headers=headers(alice))
            assert response.status_code == 200
            assert response.json() == {"users": []}

        missing = await client.get("/api/users/search", headers=headers(alice))
        assert missing.json() == {"users": []}
        search.assert_not_awaited()

    async def test_matches_name_or_email_case_insensitively(self, client, make_user, headers):
        alice = await make_user(name="Alice")
        by_name = await make_user(name="Roberto Silva", email="rs@example.com")
        by_email = await make_user(name="Someone", email="ROBERT@example.com")
        await make_user(name="Carol", email="carol@example.com")

        response = await client.get("/api/users/search", params={"q": "  RoBeRt "}, headers=headers(alice))

        assert response.status_code == 200
        assert {user["id"] for user in response.json()["users"]} == {by_name.id, by_email.id}

    async def test_excludes_requester(self, client, make_user, headers):
        alice = await make_user(name="Alice Smith")
        other = await make_user(name="Alice Jones")

        response = await client.get("/api/users/search", params={"q": "alice"}, headers=headers(alice))

        assert [user["id"] for user in response.json()["users"]] == [other.id]

    async def test_like_wildcards_are_literal(self, client, make_user, headers):
        alice = await make_user()
        await make_user(name="Bob")

        response = await client.get("/api/users/search", params={"q": "%%"}, headers=headers(alice))

        assert response.json() == {"users": []}

    async def test_results_are_capped(self, client, make_user, headers):
        alice = await make_user(name="Alice")
        for i in range(12):
            await make_user(name=f"Hiker {i}")

        response = await client.get("/api/users/search", params={"q": "hiker"}, headers=headers(alice))

        assert len(response.json()["users"]) == 10

    async def test_trip_filter_excludes_members_and_pending_invitees(
        self, client, make_user, make_trip, add_member, make_invite, headers
    ):
        alice = await make_user(name="Alice")
        member = await make_user(name="Diver Member")
        invited_by_id = await make_user(name="Diver Invited")
        invited_by_email = await make_user(name="Diver Emailed", email="emailed@example.com")
        declined = await make_user(name="Diver Declined")
        free = await make_user(name="Diver Free")
        trip = await make_trip(alice)
        await add_member(trip, member)
        await make_invite(trip, alice, receiver=invited_by_id)
        await make_invite(trip, alice, email="emailed@example.com")
        old = await make_invite(trip, alice, receiver=declined)
        await client.put(f"/api/invites/{old.id}", json={"action": "decline"}, headers=headers(declined))

        response = await client.get(
            "/api/users/search", params={"q": "diver", "tripId": trip.id}, headers=headers(alice)
        )

        assert response.status_code == 200
        assert {user["id"] for user in response.json()["users"]} == {declined.id, free.id}
        assert invited_by_email.id not in {user["id"] for user in response.json()["users"]}

    async def test_cap_applies_before_trip_filter(self, client, make_user, make_trip, add_member, headers):
        alice = await make_user(name="Alice")
        trip = await make_trip(alice)
        for i in range(10):
            await add_member(trip, await make_user(name=f"Climber {i}"))
        await make_user(name="Climber outsider")

        response = await client.get(
            "/api/users/search", params={"q": "climber", "tripId": trip.id}, headers=headers(alice)
        )

        # The ten fetched candidates are all members, the outsider is never reached
        assert response.json() == {"users": []}

    async def test_without_trip_members_are_returned(self, client, make_user, make_trip, add_member, headers):
        alice = await make_user(name="Alice")
        bob = await make_user(name="Bobby")
        trip = await make_trip(alice)
        await add_member(trip, bob)

        response = await client.get("/api/users/search", params={"q": "bobby"}, headers=headers(alice))

        assert [user["id"] for user in response.json()["users"]] == [bob.id]


class TestExcludeTripParticipants:
    def test_filters_by_member_id_invited_id_and_invited_email(self):
        users = [
            User(id=1, name="a", email="a@example.com"),
            User(id=2, name="b", email="b@example.com"),
            User(id=3, name="c", email="c@example.com"),
            User(id=4, name="d", email="d@example.com"),
        ]

        kept = exclude_trip_participants(
            users,
            member_ids=[1],
            pending_recipients=[(2, None), (None, "c@example.com")],
        )

        assert [user.id for user in kept] == [4]

    def test_nothing_to_exclude(self):
        users = [User(id=1, name="a", email="a@example.com")]

        assert exclude_trip_participants(users, [], []) == users


class TestTripFilterFailures:
    async def test_failed_fetch_cancels_the_other_before_responding(
        self, client, make_user, make_trip, headers, monkeypatch
    ):
        alice = await make_user(name="Alice")
        await make_user(name="Diver")
        trip = await make_trip(alice)
        outcome = []

        async def slow_members(db, trip_id):
            try:
                await asyncio.sleep(5)
            except asyncio.CancelledError:
                outcome.append("cancelled")
                raise
            outcome.append("finished")
            return []

        monkeypatch.setattr(TripStore, "member_user_ids", slow_members)
        monkeypatch.setattr(
            InviteStore,
            "pending_recipients",
            AsyncMock(side_effect=OperationalError("SELECT receiver_id", {}, Exception("database is locked"))),
        )

        response = await client.get(
            "/api/users/search", params={"q": "diver", "tripId": trip.id}, headers=headers(alice)
        )

        assert response.status_code == 500
        assert response.json() == {"detail": "Failed to search users"}
        assert "locked" not in response.text
        assert outcome == ["cancelled"]

    async def test_non_integer_trip_id_is_rejected(self, client, make_user, headers):
        alice = await make_user()

        response = await client.get(
            "/api/users/search", params={"q": "diver", "tripId": "abc"}, headers=headers(alice)
        )

        assert response.status_code == 400
