from fastapi import APIRouter, BackgroundTasks, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List
from travelplan.schemas.trip.invite import CreatedInvite, TripInviteCreate, TripInviteOut
from travelplan.schemas.user.user import MessageResponse
from travelplan.services.trips.invite_service import create_trip_invite, delete_trip_invite, get_trip_invites
from travelplan.dependencies.auth import get_current_user
from travelplan.models.user.user import User
from travelplan.core.database import get_db

router = APIRouter(prefix="/trips", tags=["Trip Invites"])

@router.post("/{trip_id}/invite", response_model=CreatedInvite, status_code=201)
async def send_trip_invite(
    trip_id: int,
    invite_data: TripInviteCreate,
    background_tasks: BackgroundTasks,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return await create_trip_invite(db, trip_id, invite_data, current_user, background_tasks)

@router.get("/{trip_id}/invite", response_model=List[TripInviteOut])
async def list_trip_invites(
    trip_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return await get_trip_invites(db, trip_id, current_user)

@router.delete("/{trip_id}/invite/{invite_id}", response_model=MessageResponse)
async def delete_invite(
    trip_id: int,
    invite_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    message = await delete_trip_invite(db, trip_id, invite_id, current_user)
    return MessageResponse(message=message)
