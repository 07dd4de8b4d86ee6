from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession
from travelplan.schemas.trip.poll import (
    PollCreate,
    PollListResponse,
    PollResponse,
    PollUpdate,
    VoteCreate,
    VoteResponse,
)
from travelplan.schemas.user.user import MessageResponse
from travelplan.services.trips import poll_service
from travelplan.dependencies.auth import get_current_user
from travelplan.models.user.user import User
from travelplan.core.database import get_db

router = APIRouter(prefix="/trips", tags=["Trip Polls"])

@router.get("/{trip_id}/polls", response_model=PollListResponse)
async def list_trip_polls(
    trip_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return await poll_service.list_polls(db, trip_id, current_user)

@router.post("/{trip_id}/polls", response_model=PollResponse, status_code=201)
async def open_trip_poll(
    trip_id: int,
    poll_data: PollCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return await poll_service.create_poll(db, trip_id, poll_data, current_user)

@router.get("/{trip_id}/polls/{poll_id}", response_model=PollResponse)
async def get_trip_poll(
    trip_id: int,
    poll_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return await poll_service.get_poll(db, trip_id, poll_id, current_user)

@router.put("/{trip_id}/polls/{poll_id}", response_model=PollResponse)
async def update_trip_poll(
    trip_id: int,
    poll_id: int,
    poll_data: PollUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return await poll_service.update_poll(db, trip_id, poll_id, poll_data, current_user)

@router.delete("/{trip_id}/polls/{poll_id}", response_model=MessageResponse)
async def delete_trip_poll(
    trip_id: int,
    poll_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return await poll_service.delete_poll(db, trip_id, poll_id, current_user)

@router.post("/{trip_id}/polls/{poll_id}/vote", response_model=VoteResponse, status_code=201)
async def vote_on_poll(
    trip_id: int,
    poll_id: int,
    vote_data: VoteCreate,
    response: Response,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    result, created = await poll_service.cast_vote(db, trip_id, poll_id, vote_data, current_user)
    if not created:
        # Changing an existing vote is not a creation
        response.status_code = 200
    return result

@router.delete("/{trip_id}/polls/{poll_id}/vote", response_model=MessageResponse)
async def withdraw_poll_vote(
    trip_id: int,
    poll_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return await poll_service.remove_vote(db, trip_id, poll_id, current_user)
