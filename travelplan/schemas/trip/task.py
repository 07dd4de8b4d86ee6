from pydantic import BaseModel, Field, field_validator
from typing import ClassVar, List, Optional, Tuple
from datetime import datetime
from travelplan.models.trips.trip_task import TaskCategory, TaskPriority, TaskStatus
from travelplan.schemas.trip.partial import PartialUpdate
from travelplan.schemas.user.user import UserSummary
from travelplan.utils.dates import as_naive_utc


class TaskFields(BaseModel):
    @field_validator("title", check_fields=False)
    @classmethod
    def title_not_blank(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("Title is required")
        return v

    @field_validator("description", check_fields=False)
    @classmethod
    def blank_description_is_none(cls, v: Optional[str]) -> Optional[str]:
        return v.strip() or None if v else None

    @field_validator("due_date", check_fields=False)
    @classmethod
    def naive_due_date(cls, v: Optional[datetime]) -> Optional[datetime]:
        return as_naive_utc(v)


class TaskCreate(TaskFields):
    title: str = Field(..., max_length=200)
    description: Optional[str] = None
    category: TaskCategory = TaskCategory.GENERAL
    priority: TaskPriority = TaskPriority.MEDIUM
    due_date: Optional[datetime] = None
    assigned_to_id: Optional[int] = None


class TaskUpdate(TaskFields, PartialUpdate):
    not_null: ClassVar[Tuple[str, ...]] = ("title", "category", "priority", "status")

    title: Optional[str] = Field(None, max_length=200)
    description: Optional[str] = None
    category: Optional[TaskCategory] = None
    priority: Optional[TaskPriority] = None
    status: Optional[TaskStatus] = None
    due_date: Optional[datetime] = None
    assigned_to_id: Optional[int] = None  # null unassigns


class TaskOut(BaseModel):
    id: int
    trip_id: int
    title: str
    description: Optional[str] = None
    category: TaskCategory
    priority: TaskPriority
    status: TaskStatus
    due_date: Optional[datetime] = None
    created_by_id: int
    assigned_to_id: Optional[int] = None
    created_by: Optional[UserSummary] = None
    assigned_to: Optional[UserSummary] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class TaskResponse(BaseModel):
    task: TaskOut


class TaskListResponse(BaseModel):
    tasks: List[TaskOut]
