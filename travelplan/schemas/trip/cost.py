from pydantic import BaseModel, Field, field_validator
from typing import ClassVar, List, Optional, Tuple
from datetime import datetime
from decimal import Decimal
from travelplan.models.trips.trip_cost import CostCategory
from travelplan.schemas.trip.partial import PartialUpdate
from travelplan.schemas.user.user import UserSummary
from travelplan.utils.dates import as_naive_utc


class CostFields(BaseModel):
    @field_validator("description", check_fields=False)
    @classmethod
    def description_not_blank(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("Description is required")
        return v

    @field_validator("currency", check_fields=False)
    @classmethod
    def upper_currency(cls, v: Optional[str]) -> Optional[str]:
        return v.upper() if v else v

    @field_validator("date", check_fields=False)
    @classmethod
    def naive_date(cls, v: Optional[datetime]) -> Optional[datetime]:
        return as_naive_utc(v)


class CostCreate(CostFields):
    amount: Decimal = Field(..., gt=0, decimal_places=2)
    currency: str = Field(default="USD", min_length=3, max_length=3)
    description: str = Field(..., max_length=200)
    category: CostCategory = CostCategory.OTHER
    date: Optional[datetime] = None  # defaults to now
    paid_by_id: Optional[int] = None  # defaults to the caller


class CostUpdate(CostFields, PartialUpdate):
    not_null: ClassVar[Tuple[str, ...]] = ("amount", "currency", "description", "category", "date", "paid_by_id")

    amount: Optional[Decimal] = Field(None, gt=0, decimal_places=2)
    currency: Optional[str] = Field(None, min_length=3, max_length=3)
    description: Optional[str] = Field(None, max_length=200)
    category: Optional[CostCategory] = None
    date: Optional[datetime] = None
    paid_by_id: Optional[int] = None


class CostOut(BaseModel):
    id: int
    trip_id: int
    amount: Decimal
    currency: str
    description: str
    category: CostCategory
    date: datetime
    paid_by_id: Optional[int] = None
    paid_by: Optional[UserSummary] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class CostResponse(BaseModel):
    cost: CostOut


class CostListResponse(BaseModel):
    costs: List[CostOut]
