from datetime import datetime
from sqlalchemy.ext.asyncio import AsyncSession
from fastapi import HTTPException
from travelplan.core.exceptions import store_failure
from travelplan.core.logger import logger
from travelplan.models.trips.trip_task import TripTask
from travelplan.models.user.user import User
from travelplan.schemas.trip.task import TaskCreate, TaskListResponse, TaskOut, TaskResponse, TaskUpdate
from travelplan.services.trips.trip_access import get_accessible_trip, require_trip_member
from travelplan.stores.trip_records import TaskStore

ASSIGNEE_NOT_MEMBER = "Assigned user is not a member of this trip"


async def _get_task(db: AsyncSession, trip_id: int, task_id: int) -> TripTask:
    task = await TaskStore.find_in_trip(db, trip_id, task_id)
    if not task:
        raise HTTPException(status_code=404, detail="Task not found")
    return task


async def list_tasks(db: AsyncSession, trip_id: int, current_user: User) -> TaskListResponse:
    async with store_failure("Failed to fetch tasks", db):
        await get_accessible_trip(db, trip_id, current_user)
        tasks = await TaskStore.list_for_trip(db, trip_id)
    return TaskListResponse(tasks=[TaskOut.model_validate(task) for task in tasks])


async def get_task(db: AsyncSession, trip_id: int, task_id: int, current_user: User) -> TaskResponse:
    async with store_failure("Failed to fetch task", db):
        await get_accessible_trip(db, trip_id, current_user)
        task = await _get_task(db, trip_id, task_id)
    return TaskResponse(task=TaskOut.model_validate(task))


async def create_task(db: AsyncSession, trip_id: int, task_data: TaskCreate, current_user: User) -> TaskResponse:
    """Add a task to a trip, optionally assigned to one of its members."""
    async with store_failure("Failed to create task", db):
        await get_accessible_trip(db, trip_id, current_user)
        if task_data.assigned_to_id is not None:
            await require_trip_member(db, trip_id, task_data.assigned_to_id, ASSIGNEE_NOT_MEMBER)

        now = datetime.utcnow()
        task = await TaskStore.create(
            db,
            trip_id=trip_id,
            created_by_id=current_user.id,
            created_at=now,
            updated_at=now,
            **task_data.model_dump(),
        )
        await db.commit()
        task = await TaskStore.find_in_trip(db, trip_id, task.id)

    logger.info(f"Task {task.id} added to trip {trip_id} by user {current_user.id}")
    return TaskResponse(task=TaskOut.model_validate(task))


async def update_task(
    db: AsyncSession, trip_id: int, task_id: int, task_data: TaskUpdate, current_user: User
) -> TaskResponse:
    """Change only the fields sent; an explicit null `assigned_to_id` unassigns the task."""
    async with store_failure("Failed to update task", db):
        await get_accessible_trip(db, trip_id, current_user)
        task = await _get_task(db, trip_id, task_id)

        changes = task_data.changes()
        if changes.get("assigned_to_id") is not None:
            await require_trip_member(db, trip_id, changes["assigned_to_id"], ASSIGNEE_NOT_MEMBER)

        changes["updated_at"] = datetime.utcnow()
        await TaskStore.update(db, task, changes)
        await db.commit()
        task = await TaskStore.find_in_trip(db, trip_id, task_id)

    logger.info(f"Task {task_id} on trip {trip_id} updated by user {current_user.id}")
    return TaskResponse(task=TaskOut.model_validate(task))


async def delete_task(db: AsyncSession, trip_id: int, task_id: int, current_user: User) -> dict:
    async with store_failure("Failed to delete task", db):
        await get_accessible_trip(db, trip_id, current_user)
        task = await _get_task(db, trip_id, task_id)

        await TaskStore.delete(db, task.id)
        await db.commit()

    logger.info(f"Task {task_id} on trip {trip_id} deleted by user {current_user.id}")
    return {"message": "Task deleted successfully"}
