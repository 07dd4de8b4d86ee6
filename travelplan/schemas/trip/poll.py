from pydantic import BaseModel, Field, field_validator
from typing import ClassVar, Dict, List, Optional, Tuple
from datetime import datetime
from travelplan.models.trips.trip_poll import PollStatus
from travelplan.schemas.trip.partial import PartialUpdate
from travelplan.schemas.user.user import UserSummary
from travelplan.utils.dates import as_naive_utc


class PollFields(BaseModel):
    @field_validator("question", check_fields=False)
    @classmethod
    def question_not_blank(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("Question is required")
        return v

    @field_validator("description", check_fields=False)
    @classmethod
    def blank_description_is_none(cls, v: Optional[str]) -> Optional[str]:
        return v.strip() or None if v else None

    @field_validator("options", check_fields=False)
    @classmethod
    def clean_options(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        if v is None:
            return v
        # Trimmed, blanks dropped, first occurrence wins
        cleaned = []
        for option in v:
            option = option.strip()
            if option and option not in cleaned:
                cleaned.append(option)
        if len(cleaned) < 2:
            raise ValueError("At least 2 options are required")
        return cleaned

    @field_validator("expires_at", check_fields=False)
    @classmethod
    def expires_in_future(cls, v: Optional[datetime]) -> Optional[datetime]:
        v = as_naive_utc(v)
        if v is not None and v <= datetime.utcnow():
            raise ValueError("Expiration date must be in the future")
        return v


class PollCreate(PollFields):
    question: str = Field(..., max_length=300)
    description: Optional[str] = None
    options: List[str]
    expires_at: datetime


class PollUpdate(PollFields, PartialUpdate):
    not_null: ClassVar[Tuple[str, ...]] = ("question", "options", "expires_at", "status")

    question: Optional[str] = Field(None, max_length=300)
    description: Optional[str] = None
    options: Optional[List[str]] = None
    expires_at: Optional[datetime] = None
    status: Optional[PollStatus] = None


class VoteCreate(BaseModel):
    option: str

    @field_validator("option")
    @classmethod
    def option_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Vote option is required")
        return v


class VoteOut(BaseModel):
    id: int
    poll_id: int
    user_id: int
    option: str
    created_at: Optional[datetime] = None
    user: Optional[UserSummary] = None

    model_config = {"from_attributes": True}


class PollOut(BaseModel):
    id: int
    trip_id: int
    question: str
    description: Optional[str] = None
    options: List[str]
    status: PollStatus
    expires_at: datetime
    created_by_id: int
    created_by: Optional[UserSummary] = None
    created_at: Optional[datetime] = None
    votes: List[VoteOut]
    vote_count: int
    results: Dict[str, int]

    model_config = {"from_attributes": True}


class PollResponse(BaseModel):
    poll: PollOut


class PollListResponse(BaseModel):
    polls: List[PollOut]


class VoteResponse(BaseModel):
    vote: VoteOut
    message: Optional[str] = None
