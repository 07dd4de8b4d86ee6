"""
Tests for trip creation, visibility and deletion.
"""

from sqlalchemy import func, select

from travelplan.core.database import SessionLocal
from travelplan.models import ItineraryItem, PollVote, TripCost, TripInvite, TripMember, TripPoll, TripTask


async def _count(model, trip_id: int) -> int:
    async with SessionLocal() as session:
        return await session.scalar(select(func.count()).select_from(model).where(model.trip_id == trip_id))


class TestHealth:
    async def test_health(self, client):
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}


class TestCreateTrip:
    async def test_creator_becomes_owner_member(self, client, make_user, headers):
        alice = await make_user(name="Alice")

        response = await client.post(
            "/api/trips",
            json={"name": "Azores", "description": "Hiking", "start_date": "2025-07-01", "end_date": "2025-07-08"},
            headers=headers(alice),
        )

        assert response.status_code == 201
        body = response.json()
        assert body["name"] == "Azores"
        assert body["creator_id"] == alice.id

        detail = await client.get(f"/api/trips/{body['id']}", headers=headers(alice))
        members = detail.json()["trip"]["members"]
        assert [(m["user_id"], m["role"]) for m in members] == [(alice.id, "OWNER")]

    async def test_end_before_start_is_rejected(self, client, make_user, headers):
        alice = await make_user()

        response = await client.post(
            "/api/trips",
            json={"name": "Backwards", "start_date": "2025-07-08", "end_date": "2025-07-01"},
            headers=headers(alice),
        )

        assert response.status_code == 400

    async def test_requires_session(self, client):
        response = await client.post("/api/trips", json={"name": "Nope"})

        assert response.status_code == 401


class TestTripVisibility:
    async def test_list_shows_created_and_joined_trips(self, client, make_user, make_trip, add_member, headers):
        alice = await make_user()
        bob = await make_user()
        own = await make_trip(bob, name="Bob's")
        joined = await make_trip(alice, name="Alice's")
        await make_trip(alice, name="Private")
        await add_member(joined, bob)

        response = await client.get("/api/trips", headers=headers(bob))

        assert response.status_code == 200
        assert {trip["id"] for trip in response.json()} == {own.id, joined.id}

    async def test_member_sees_trip_detail(self, client, make_user, make_trip, add_member, headers):
        alice = await make_user(name="Alice")
        bob = await make_user()
        trip = await make_trip(alice)
        await add_member(trip, bob)

        response = await client.get(f"/api/trips/{trip.id}", headers=headers(bob))

        assert response.status_code == 200
        assert response.json()["trip"]["creator"]["name"] == "Alice"
        assert {m["user_id"] for m in response.json()["trip"]["members"]} == {alice.id, bob.id}

    async def test_non_member_gets_not_found(self, client, make_user, make_trip, headers):
        alice = await make_user()
        mallory = await make_user()
        trip = await make_trip(alice)

        response = await client.get(f"/api/trips/{trip.id}", headers=headers(mallory))

        assert response.status_code == 404


class TestDeleteTrip:
    async def test_creator_deletes_trip_with_members_and_invites(
        self, client, make_user, make_trip, add_member, make_invite, headers
    ):
        alice = await make_user()
        bob = await make_user()
        trip = await make_trip(alice)
        await add_member(trip, bob)
        await make_invite(trip, alice, email="friend@example.com")

        response = await client.delete(f"/api/trips/{trip.id}", headers=headers(alice))

        assert response.status_code == 200
        assert await _count(TripMember, trip.id) == 0
        assert await _count(TripInvite, trip.id) == 0
        again = await client.get(f"/api/trips/{trip.id}", headers=headers(alice))
        assert again.status_code == 404

    async def test_planning_records_go_with_the_trip(self, client, make_user, make_trip, headers):
        alice = await make_user()
        trip = await make_trip(alice)
        base = f"/api/trips/{trip.id}"
        await client.post(f"{base}/costs", json={"amount": "8.00", "description": "Ginjinha"}, headers=headers(alice))
        await client.post(f"{base}/items", json={"type": "FOOD", "title": "Time Out Market"}, headers=headers(alice))
        await client.post(f"{base}/tasks", json={"title": "Reserve table"}, headers=headers(alice))
        poll = await client.post(
            f"{base}/polls",
            json={"question": "Fado night?", "options": ["Yes", "No"], "expires_at": "2099-01-01T00:00:00"},
            headers=headers(alice),
        )
        await client.post(
            f"{base}/polls/{poll.json()['poll']['id']}/vote", json={"option": "Yes"}, headers=headers(alice)
        )

        response = await client.delete(base, headers=headers(alice))

        assert response.status_code == 200
        for model in (TripCost, ItineraryItem, TripTask, TripPoll):
            assert await _count(model, trip.id) == 0
        async with SessionLocal() as session:
            assert await session.scalar(select(func.count()).select_from(PollVote)) == 0

    async def test_member_cannot_delete(self, client, make_user, make_trip, add_member, headers):
        alice = await make_user()
        bob = await make_user()
        trip = await make_trip(alice)
        await add_member(trip, bob)

        response = await client.delete(f"/api/trips/{trip.id}", headers=headers(bob))

        assert response.status_code == 404
        assert await _count(TripMember, trip.id) == 2
