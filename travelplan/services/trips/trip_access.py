from sqlalchemy.ext.asyncio import AsyncSession
from fastapi import HTTPException
from travelplan.core.logger import logger
from travelplan.models.trips.trip_model import Trip
from travelplan.models.user.user import User
from travelplan.stores.trips import TripStore


async def get_accessible_trip(db: AsyncSession, trip_id: int, current_user: User) -> Trip:
    """The trip, if the user created it or is a member; otherwise a 404 that reveals nothing."""
    trip = await TripStore.find_accessible(db, trip_id, current_user.id)
    if not trip:
        logger.warning(f"Trip {trip_id} not found or not visible to user {current_user.id}")
        raise HTTPException(status_code=404, detail="Trip not found")
    return trip


async def require_trip_member(db: AsyncSession, trip_id: int, user_id: int, detail: str) -> None:
    """400 with `detail` unless `user_id` belongs to the trip."""
    if not await TripStore.is_member(db, trip_id, user_id):
        raise HTTPException(status_code=400, detail=detail)
