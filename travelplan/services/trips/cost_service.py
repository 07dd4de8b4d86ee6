from datetime import datetime
from sqlalchemy.ext.asyncio import AsyncSession
from fastapi import HTTPException
from travelplan.core.exceptions import store_failure
from travelplan.core.logger import logger
from travelplan.models.trips.trip_cost import TripCost
from travelplan.models.user.user import User
from travelplan.schemas.trip.cost import CostCreate, CostListResponse, CostOut, CostResponse, CostUpdate
from travelplan.services.trips.trip_access import get_accessible_trip, require_trip_member
from travelplan.stores.trip_records import CostStore

PAYER_NOT_MEMBER = "Payer is not a member of this trip"


async def _get_cost(db: AsyncSession, trip_id: int, cost_id: int) -> TripCost:
    cost = await CostStore.find_in_trip(db, trip_id, cost_id)
    if not cost:
        raise HTTPException(status_code=404, detail="Cost not found")
    return cost


async def list_costs(db: AsyncSession, trip_id: int, current_user: User) -> CostListResponse:
    """A trip's costs, most recent first."""
    async with store_failure("Failed to fetch costs", db):
        await get_accessible_trip(db, trip_id, current_user)
        costs = await CostStore.list_for_trip(db, trip_id)
    return CostListResponse(costs=[CostOut.model_validate(cost) for cost in costs])


async def get_cost(db: AsyncSession, trip_id: int, cost_id: int, current_user: User) -> CostResponse:
    async with store_failure("Failed to fetch cost", db):
        await get_accessible_trip(db, trip_id, current_user)
        cost = await _get_cost(db, trip_id, cost_id)
    return CostResponse(cost=CostOut.model_validate(cost))


async def create_cost(db: AsyncSession, trip_id: int, cost_data: CostCreate, current_user: User) -> CostResponse:
    """Record a cost. The caller pays unless another member is named as payer."""
    async with store_failure("Failed to create cost", db):
        await get_accessible_trip(db, trip_id, current_user)

        paid_by_id = cost_data.paid_by_id or current_user.id
        if paid_by_id != current_user.id:
            await require_trip_member(db, trip_id, paid_by_id, PAYER_NOT_MEMBER)

        cost = await CostStore.create(
            db,
            trip_id=trip_id,
            amount=cost_data.amount,
            currency=cost_data.currency,
            description=cost_data.description,
            category=cost_data.category,
            date=cost_data.date or datetime.utcnow(),
            paid_by_id=paid_by_id,
            created_at=datetime.utcnow(),
        )
        await db.commit()
        cost = await CostStore.find_in_trip(db, trip_id, cost.id)

    logger.info(f"Cost {cost.id} added to trip {trip_id} by user {current_user.id}")
    return CostResponse(cost=CostOut.model_validate(cost))


async def update_cost(
    db: AsyncSession, trip_id: int, cost_id: int, cost_data: CostUpdate, current_user: User
) -> CostResponse:
    async with store_failure("Failed to update cost", db):
        await get_accessible_trip(db, trip_id, current_user)
        cost = await _get_cost(db, trip_id, cost_id)

        changes = cost_data.changes()
        if "paid_by_id" in changes:
            await require_trip_member(db, trip_id, changes["paid_by_id"], PAYER_NOT_MEMBER)

        await CostStore.update(db, cost, changes)
        await db.commit()
        cost = await CostStore.find_in_trip(db, trip_id, cost_id)

    logger.info(f"Cost {cost_id} on trip {trip_id} updated by user {current_user.id}")
    return CostResponse(cost=CostOut.model_validate(cost))


async def delete_cost(db: AsyncSession, trip_id: int, cost_id: int, current_user: User) -> dict:
    async with store_failure("Failed to delete cost", db):
        await get_accessible_trip(db, trip_id, current_user)
        cost = await _get_cost(db, trip_id, cost_id)

        await CostStore.delete(db, cost.id)
        await db.commit()

    logger.info(f"Cost {cost_id} on trip {trip_id} deleted by user {current_user.id}")
    return {"message": "Cost deleted successfully"}
