from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List
from travelplan.schemas.trip.invite import ReceivedInvite, TripInviteRespond
from travelplan.schemas.user.user import MessageResponse
from travelplan.services.trips.invite_service import get_pending_invites, respond_to_invite, withdraw_invite
from travelplan.dependencies.auth import get_current_user
from travelplan.models.user.user import User
from travelplan.core.database import get_db

router = APIRouter(prefix="/invites", tags=["Invitations"])

@router.get("", response_model=List[ReceivedInvite])
async def view_my_invites(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return await get_pending_invites(db, current_user)

@router.put("/{invite_id}", response_model=MessageResponse)
async def respond_invite(
    invite_id: int,
    payload: TripInviteRespond,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    message = await respond_to_invite(db, invite_id, payload.action, current_user)
    return MessageResponse(message=message)

@router.delete("/{invite_id}", response_model=MessageResponse)
async def delete_my_invite(
    invite_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    message = await withdraw_invite(db, invite_id, current_user)
    return MessageResponse(message=message)
