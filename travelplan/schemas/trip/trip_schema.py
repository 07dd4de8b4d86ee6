from pydantic import BaseModel, model_validator
from typing import List, Optional
from datetime import date, datetime
from travelplan.schemas.user.user import UserSummary


class TripBase(BaseModel):
    name: str
    description: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None


class TripCreate(TripBase):
    @model_validator(mode="after")
    def check_dates(self):
        if not self.name.strip():
            raise ValueError("Trip name is required")
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("end_date cannot be before start_date")
        return self


class TripResponse(TripBase):
    id: int
    creator_id: int
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class TripSummary(BaseModel):
    """Trip as embedded in an invitation."""
    id: int
    name: str
    description: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    creator: UserSummary


class TripListItem(TripResponse):
    creator: UserSummary


class TripMemberOut(BaseModel):
    id: int
    trip_id: int
    user_id: int
    role: str
    joined_at: Optional[datetime] = None
    user: UserSummary


class TripDetail(TripResponse):
    creator: UserSummary
    members: List[TripMemberOut]


class TripDetailResponse(BaseModel):
    trip: TripDetail


class RemoveMemberResponse(BaseModel):
    message: str
    removedMember: UserSummary
