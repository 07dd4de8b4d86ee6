from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from travelplan.schemas.trip.cost import CostCreate, CostListResponse, CostResponse, CostUpdate
from travelplan.schemas.user.user import MessageResponse
from travelplan.services.trips import cost_service
from travelplan.dependencies.auth import get_current_user
from travelplan.models.user.user import User
from travelplan.core.database import get_db

router = APIRouter(prefix="/trips", tags=["Trip Costs"])

@router.get("/{trip_id}/costs", response_model=CostListResponse)
async def list_trip_costs(
    trip_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return await cost_service.list_costs(db, trip_id, current_user)

@router.post("/{trip_id}/costs", response_model=CostResponse, status_code=201)
async def add_trip_cost(
    trip_id: int,
    cost_data: CostCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return await cost_service.create_cost(db, trip_id, cost_data, current_user)

@router.get("/{trip_id}/costs/{cost_id}", response_model=CostResponse)
async def get_trip_cost(
    trip_id: int,
    cost_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return await cost_service.get_cost(db, trip_id, cost_id, current_user)

@router.put("/{trip_id}/costs/{cost_id}", response_model=CostResponse)
async def update_trip_cost(
    trip_id: int,
    cost_id: int,
    cost_data: CostUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return await cost_service.update_cost(db, trip_id, cost_id, cost_data, current_user)

@router.delete("/{trip_id}/costs/{cost_id}", response_model=MessageResponse)
async def delete_trip_cost(
    trip_id: int,
    cost_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return await cost_service.delete_cost(db, trip_id, cost_id, current_user)
