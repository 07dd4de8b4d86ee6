from pydantic import BaseModel, EmailStr, field_validator
from typing import List, Optional
from datetime import datetime


class UserSummary(BaseModel):
    """Public identity of a user as shown to other users."""
    id: int
    name: str
    email: str

    model_config = {"from_attributes": True}


class UserOut(UserSummary):
    email_verified: Optional[datetime] = None


class UserSearchResponse(BaseModel):
    users: List[UserSummary]


class SignupRequest(BaseModel):
    name: str
    email: EmailStr
    password: str

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Name is required")
        return v


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"


class MessageResponse(BaseModel):
    message: str

