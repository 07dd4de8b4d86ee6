from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from travelplan.schemas.trip.itinerary import (
    CreatedItemResponse,
    ItemCreate,
    ItemListResponse,
    ItemResponse,
    ItemUpdate,
)
from travelplan.schemas.user.user import MessageResponse
from travelplan.services.trips import itinerary_service
from travelplan.dependencies.auth import get_current_user
from travelplan.models.user.user import User
from travelplan.core.database import get_db

router = APIRouter(prefix="/trips", tags=["Trip Itinerary"])

@router.get("/{trip_id}/items", response_model=ItemListResponse)
async def list_itinerary(
    trip_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return await itinerary_service.list_items(db, trip_id, current_user)

@router.post("/{trip_id}/items", response_model=CreatedItemResponse, status_code=201)
async def add_itinerary_item(
    trip_id: int,
    item_data: ItemCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return await itinerary_service.create_item(db, trip_id, item_data, current_user)

@router.get("/{trip_id}/items/{item_id}", response_model=ItemResponse)
async def get_itinerary_item(
    trip_id: int,
    item_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return await itinerary_service.get_item(db, trip_id, item_id, current_user)

@router.put("/{trip_id}/items/{item_id}", response_model=ItemResponse)
async def update_itinerary_item(
    trip_id: int,
    item_id: int,
    item_data: ItemUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return await itinerary_service.update_item(db, trip_id, item_id, item_data, current_user)

@router.delete("/{trip_id}/items/{item_id}", response_model=MessageResponse)
async def delete_itinerary_item(
    trip_id: int,
    item_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return await itinerary_service.delete_item(db, trip_id, item_id, current_user)
