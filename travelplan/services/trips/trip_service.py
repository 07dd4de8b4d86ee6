from sqlalchemy.ext.asyncio import AsyncSession
from fastapi import HTTPException
from typing import List
from travelplan.core.exceptions import store_failure
from travelplan.core.logger import logger
from travelplan.models.user.user import User
from travelplan.schemas.trip.trip_schema import (
    TripCreate,
    TripDetail,
    TripDetailResponse,
    TripListItem,
    TripMemberOut,
    TripResponse,
)
from travelplan.stores.trips import TripStore
from travelplan.stores.users import UserStore
from travelplan.utils.mapper import RecordMapper


class TripService:
    @staticmethod
    async def create_trip(db: AsyncSession, trip_data: TripCreate, current_user: User) -> TripResponse:
        async with store_failure("Failed to create trip", db):
            trip = await TripStore.create(
                db,
                creator_id=current_user.id,
                name=trip_data.name.strip(),
                description=trip_data.description,
                start_date=trip_data.start_date,
                end_date=trip_data.end_date,
            )
            await db.commit()
            await db.refresh(trip)

        logger.info(f"Trip {trip.id} created by user {current_user.id}")
        return TripResponse.model_validate(trip)

    @staticmethod
    async def list_trips(db: AsyncSession, current_user: User) -> List[TripListItem]:
        async with store_failure("Failed to fetch trips", db):
            rows = await TripStore.list_for_user(db, current_user.id)

        return [
            TripListItem(
                **TripResponse.model_validate(trip).model_dump(),
                creator=RecordMapper.user_summary(creator),
            )
            for trip, creator in rows
        ]

    @staticmethod
    async def get_trip(db: AsyncSession, trip_id: int, current_user: User) -> TripDetailResponse:
        async with store_failure("Internal server error", db):
            trip = await TripStore.find_accessible(db, trip_id, current_user.id)
            if not trip:
                logger.warning(f"Trip {trip_id} not found or not visible to user {current_user.id}")
                raise HTTPException(status_code=404, detail="Trip not found")

            creator = await UserStore.get(db, trip.creator_id)
            members = await TripStore.list_members(db, trip.id)

        return TripDetailResponse(
            trip=TripDetail(
                **TripResponse.model_validate(trip).model_dump(),
                creator=RecordMapper.user_summary(creator),
                members=[
                    TripMemberOut(
                        id=member.id,
                        trip_id=member.trip_id,
                        user_id=member.user_id,
                        role=member.role.name,
                        joined_at=member.joined_at,
                        user=RecordMapper.user_summary(user),
                    )
                    for member, user in members
                ],
            )
        )

    @staticmethod
    async def delete_trip(db: AsyncSession, trip_id: int, current_user: User) -> dict:
        async with store_failure("Internal server error", db):
            trip = await TripStore.find_owned(db, trip_id, current_user.id)
            if not trip:
                logger.warning(f"Delete of trip {trip_id} refused for user {current_user.id}")
                raise HTTPException(
                    status_code=404,
                    detail="Trip not found or you don't have permission to delete it",
                )

            await TripStore.delete(db, trip)
            await db.commit()

        logger.info(f"Trip {trip_id} deleted by user {current_user.id}")
        return {"message": "Trip deleted successfully"}
