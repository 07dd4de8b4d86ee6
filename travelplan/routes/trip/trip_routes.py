from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List
from travelplan.schemas.trip.trip_schema import TripCreate, TripDetailResponse, TripListItem, TripResponse
from travelplan.schemas.user.user import MessageResponse
from travelplan.models.user.user import User
from travelplan.core.database import get_db
from travelplan.dependencies.auth import get_current_user
from travelplan.services.trips.trip_service import TripService

router = APIRouter(prefix="/trips", tags=["Trips"])

@router.post("", response_model=TripResponse, status_code=201)
async def create_trip_route(
    trip: TripCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return await TripService.create_trip(db, trip, current_user)

@router.get("", response_model=List[TripListItem])
async def get_my_trips(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return await TripService.list_trips(db, current_user)

@router.get("/{trip_id}", response_model=TripDetailResponse)
async def get_trip(
    trip_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return await TripService.get_trip(db, trip_id, current_user)

@router.delete("/{trip_id}", response_model=MessageResponse)
async def delete_trip_route(
    trip_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return await TripService.delete_trip(db, trip_id, current_user)
