from pydantic import BaseModel
from typing import List, Optional
from datetime import date, datetime


class AccountProfile(BaseModel):
    id: int
    name: str
    email: str
    email_verified: Optional[datetime] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class AccountDataSummary(BaseModel):
    trips: int
    costs: int
    items: int
    tasks: int
    assigned_tasks: int
    polls: int
    votes: int
    sent_invites: int
    received_invites: int


class OwnedTripData(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    created_at: Optional[datetime] = None
    member_count: int
    cost_count: int
    task_count: int
    poll_count: int


# What we hold about a user, for transparency before they delete it
class AccountDataExport(BaseModel):
    user: AccountProfile
    data_summary: AccountDataSummary
    trips: List[OwnedTripData]


class DeletedData(BaseModel):
    trips: int
    costs: int
    items: int
    tasks: int
    polls: int
    invitations: int


class AccountDeletionResponse(BaseModel):
    message: str
    deleted_data: DeletedData
