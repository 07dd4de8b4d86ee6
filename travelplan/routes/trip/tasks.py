from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from travelplan.schemas.trip.task import TaskCreate, TaskListResponse, TaskResponse, TaskUpdate
from travelplan.schemas.user.user import MessageResponse
from travelplan.services.trips import task_service
from travelplan.dependencies.auth import get_current_user
from travelplan.models.user.user import User
from travelplan.core.database import get_db

router = APIRouter(prefix="/trips", tags=["Trip Tasks"])

@router.get("/{trip_id}/tasks", response_model=TaskListResponse)
async def list_trip_tasks(
    trip_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return await task_service.list_tasks(db, trip_id, current_user)

@router.post("/{trip_id}/tasks", response_model=TaskResponse, status_code=201)
async def add_trip_task(
    trip_id: int,
    task_data: TaskCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return await task_service.create_task(db, trip_id, task_data, current_user)

@router.get("/{trip_id}/tasks/{task_id}", response_model=TaskResponse)
async def get_trip_task(
    trip_id: int,
    task_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return await task_service.get_task(db, trip_id, task_id, current_user)

@router.put("/{trip_id}/tasks/{task_id}", response_model=TaskResponse)
async def update_trip_task(
    trip_id: int,
    task_id: int,
    task_data: TaskUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return await task_service.update_task(db, trip_id, task_id, task_data, current_user)

@router.delete("/{trip_id}/tasks/{task_id}", response_model=MessageResponse)
async def delete_trip_task(
    trip_id: int,
    task_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return await task_service.delete_task(db, trip_id, task_id, current_user)
