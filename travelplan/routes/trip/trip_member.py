from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from travelplan.dependencies.auth import get_current_user
from travelplan.core.database import get_db
from travelplan.schemas.trip.trip_schema import RemoveMemberResponse
from travelplan.services.trips.trip_member_service import remove_member
from travelplan.models.user.user import User

router = APIRouter(prefix="/trips", tags=["Trip Member"])

@router.delete("/{trip_id}/members/{member_id}", response_model=RemoveMemberResponse)
async def delete_trip_member(
    trip_id: int,
    member_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return await remove_member(db, trip_id, member_id, current_user)
