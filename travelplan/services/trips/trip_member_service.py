from sqlalchemy.ext.asyncio import AsyncSession
from fastapi import HTTPException, status
from travelplan.core.exceptions import store_failure
from travelplan.core.logger import logger
from travelplan.models.user.user import User
from travelplan.schemas.trip.trip_schema import RemoveMemberResponse
from travelplan.stores.criteria import Eq
from travelplan.stores.trips import TripStore
from travelplan.stores.users import UserStore
from travelplan.utils.mapper import RecordMapper


async def remove_member(db: AsyncSession, trip_id: int, member_id: int, current_user: User) -> RemoveMemberResponse:
    """
    Remove a member from a trip. Only the trip's creator manages membership,
    and the creator cannot remove themselves.
    """
    async with store_failure("Failed to remove member", db):
        trip = await TripStore.find_owned(db, trip_id, current_user.id)
        if not trip:
            logger.warning(f"Member removal on trip {trip_id} refused for user {current_user.id}")
            raise HTTPException(
                status_code=404,
                detail="Trip not found or you don't have permission to manage members",
            )

        member = await TripStore.find_member(db, Eq("id", member_id), Eq("trip_id", trip_id))
        if not member:
            raise HTTPException(status_code=404, detail="Member not found")

        if member.user_id == current_user.id:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="You cannot remove yourself as the trip creator",
            )

        removed_user = await UserStore.get(db, member.user_id)
        removed_user_id = member.user_id

        await TripStore.delete_member(db, member.id)
        await db.commit()

    logger.info(f"User {removed_user_id} removed from trip {trip_id} by user {current_user.id}")
    return RemoveMemberResponse(
        message="Member removed successfully",
        removedMember=RecordMapper.user_summary(removed_user),
    )
