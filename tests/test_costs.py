"""
Tests for trip costs.
"""

from decimal import Decimal


async def _add_cost(client, trip, user, headers, **overrides):
    body = {"amount": "42.50", "description": "Dinner at Ramiro", "category": "FOOD"}
    body.update(overrides)
    return await client.post(f"/api/trips/{trip.id}/costs", json=body, headers=headers(user))


class TestCreateCost:
    async def test_requires_session(self, client):
        response = await client.post("/api/trips/1/costs", json={"amount": "1.00", "description": "x"})

        assert response.status_code == 401

    async def test_caller_pays_by_default(self, client, make_user, make_trip, headers):
        alice = await make_user(name="Alice")
        trip = await make_trip(alice)

        response = await _add_cost(client, trip, alice, headers, currency="eur")

        assert response.status_code == 201
        cost = response.json()["cost"]
        assert Decimal(cost["amount"]) == Decimal("42.50")
        assert cost["currency"] == "EUR"
        assert cost["category"] == "FOOD"
        assert cost["paid_by_id"] == alice.id
        assert cost["paid_by"]["name"] == "Alice"
        assert cost["date"] is not None

    async def test_member_can_be_named_payer(self, client, make_user, make_trip, add_member, headers):
        alice = await make_user()
        bob = await make_user()
        trip = await make_trip(alice)
        await add_member(trip, bob)

        response = await _add_cost(client, trip, alice, headers, paid_by_id=bob.id)

        assert response.status_code == 201
        assert response.json()["cost"]["paid_by_id"] == bob.id

    async def test_payer_outside_the_trip_is_rejected(self, client, make_user, make_trip, headers):
        alice = await make_user()
        outsider = await make_user()
        trip = await make_trip(alice)

        response = await _add_cost(client, trip, alice, headers, paid_by_id=outsider.id)

        assert response.status_code == 400
        assert response.json()["detail"] == "Payer is not a member of this trip"

    async def test_invalid_amounts_are_rejected(self, client, make_user, make_trip, headers):
        alice = await make_user()
        trip = await make_trip(alice)

        for amount in ["0", "-5.00", "1.234"]:
            response = await _add_cost(client, trip, alice, headers, amount=amount)
            assert response.status_code == 400

    async def test_blank_description_is_rejected(self, client, make_user, make_trip, headers):
        alice = await make_user()
        trip = await make_trip(alice)

        response = await _add_cost(client, trip, alice, headers, description="   ")

        assert response.status_code == 400

    async def test_non_member_gets_not_found(self, client, make_user, make_trip, headers):
        alice = await make_user()
        mallory = await make_user()
        trip = await make_trip(alice)

        response = await _add_cost(client, trip, mallory, headers)

        assert response.status_code == 404
        assert response.json()["detail"] == "Trip not found"


class TestReadCosts:
    async def test_members_list_costs_most_recent_first(self, client, make_user, make_trip, add_member, headers):
        alice = await make_user()
        bob = await make_user()
        trip = await make_trip(alice)
        await add_member(trip, bob)
        older = await _add_cost(client, trip, alice, headers, date="2025-06-01T12:00:00")
        newer = await _add_cost(client, trip, alice, headers, date="2025-06-03T12:00:00")

        response = await client.get(f"/api/trips/{trip.id}/costs", headers=headers(bob))

        assert response.status_code == 200
        assert [cost["id"] for cost in response.json()["costs"]] == [
            newer.json()["cost"]["id"],
            older.json()["cost"]["id"],
        ]

    async def test_cost_of_another_trip_is_not_found(self, client, make_user, make_trip, headers):
        alice = await make_user()
        lisbon = await make_trip(alice)
        porto = await make_trip(alice, name="Porto")
        created = await _add_cost(client, lisbon, alice, headers)

        response = await client.get(
            f"/api/trips/{porto.id}/costs/{created.json()['cost']['id']}", headers=headers(alice)
        )

        assert response.status_code == 404
        assert response.json()["detail"] == "Cost not found"


class TestChangeCost:
    async def test_update_changes_only_sent_fields(self, client, make_user, make_trip, headers):
        alice = await make_user()
        trip = await make_trip(alice)
        created = (await _add_cost(client, trip, alice, headers)).json()["cost"]

        response = await client.put(
            f"/api/trips/{trip.id}/costs/{created['id']}", json={"amount": "50.00"}, headers=headers(alice)
        )

        assert response.status_code == 200
        cost = response.json()["cost"]
        assert Decimal(cost["amount"]) == Decimal("50.00")
        assert cost["description"] == "Dinner at Ramiro"
        assert cost["category"] == "FOOD"

    async def test_required_fields_cannot_be_nulled(self, client, make_user, make_trip, headers):
        alice = await make_user()
        trip = await make_trip(alice)
        created = (await _add_cost(client, trip, alice, headers)).json()["cost"]

        response = await client.put(
            f"/api/trips/{trip.id}/costs/{created['id']}", json={"description": None}, headers=headers(alice)
        )

        assert response.status_code == 400

    async def test_update_to_outside_payer_is_rejected(self, client, make_user, make_trip, headers):
        alice = await make_user()
        outsider = await make_user()
        trip = await make_trip(alice)
        created = (await _add_cost(client, trip, alice, headers)).json()["cost"]

        response = await client.put(
            f"/api/trips/{trip.id}/costs/{created['id']}", json={"paid_by_id": outsider.id}, headers=headers(alice)
        )

        assert response.status_code == 400

    async def test_delete(self, client, make_user, make_trip, headers):
        alice = await make_user()
        trip = await make_trip(alice)
        created = (await _add_cost(client, trip, alice, headers)).json()["cost"]

        response = await client.delete(f"/api/trips/{trip.id}/costs/{created['id']}", headers=headers(alice))
        again = await client.delete(f"/api/trips/{trip.id}/costs/{created['id']}", headers=headers(alice))

        assert response.status_code == 200
        assert response.json() == {"message": "Cost deleted successfully"}
        assert again.status_code == 404
