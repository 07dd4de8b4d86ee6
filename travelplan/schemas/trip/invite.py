from pydantic import BaseModel, EmailStr
from typing import Literal, Optional
from datetime import datetime
from travelplan.schemas.user.user import UserSummary
from travelplan.schemas.trip.trip_schema import TripSummary


# When a member invites someone to a trip
class TripInviteCreate(BaseModel):
    email: EmailStr


# Receiver's answer to an invitation
class TripInviteRespond(BaseModel):
    action: Literal["accept", "decline"]


class TripInviteBase(BaseModel):
    id: int
    trip_id: int
    sender_id: int
    receiver_id: Optional[int] = None
    receiver_email: Optional[str] = None
    status: str
    created_at: Optional[datetime] = None


# What the receiver sees in their inbox
class ReceivedInvite(TripInviteBase):
    trip: TripSummary
    sender: UserSummary


# What the trip's members see on the trip
class TripInviteOut(TripInviteBase):
    receiver: Optional[UserSummary] = None
    sender: UserSummary


# Response to creating an invite
class CreatedInvite(TripInviteOut):
    trip: TripSummary
