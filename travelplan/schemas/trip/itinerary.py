from pydantic import BaseModel, Field, field_validator, model_validator
from typing import ClassVar, List, Optional, Tuple
from datetime import datetime
from decimal import Decimal
from travelplan.models.trips.itinerary_item import ItemType
from travelplan.models.trips.trip_cost import CostCategory
from travelplan.schemas.trip.cost import CostOut
from travelplan.schemas.trip.partial import PartialUpdate
from travelplan.schemas.user.user import UserSummary
from travelplan.utils.dates import as_naive_utc


class ItemFields(BaseModel):
    @field_validator("title", check_fields=False)
    @classmethod
    def title_not_blank(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("Title is required")
        return v

    @field_validator("start_date", "end_date", "cost_date", check_fields=False)
    @classmethod
    def naive_dates(cls, v: Optional[datetime]) -> Optional[datetime]:
        return as_naive_utc(v)


class ItemCreate(ItemFields):
    type: ItemType
    title: str = Field(..., max_length=200)
    description: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    location: Optional[str] = None
    start_location: Optional[str] = None
    end_location: Optional[str] = None
    confirmation_code: Optional[str] = None
    notes: Optional[str] = None

    # Optionally book what the item costs at the same time
    has_cost: bool = False
    cost_amount: Optional[Decimal] = Field(None, ge=0, decimal_places=2)
    cost_currency: str = Field(default="USD", min_length=3, max_length=3)
    cost_category: CostCategory = CostCategory.OTHER
    cost_date: Optional[datetime] = None

    @model_validator(mode="after")
    def check_dates(self):
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("end_date cannot be before start_date")
        return self


class ItemUpdate(ItemFields, PartialUpdate):
    not_null: ClassVar[Tuple[str, ...]] = ("type", "title")

    type: Optional[ItemType] = None
    title: Optional[str] = Field(None, max_length=200)
    description: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    location: Optional[str] = None
    start_location: Optional[str] = None
    end_location: Optional[str] = None
    confirmation_code: Optional[str] = None
    notes: Optional[str] = None


class ItemOut(BaseModel):
    id: int
    trip_id: int
    type: ItemType
    title: str
    description: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    location: Optional[str] = None
    start_location: Optional[str] = None
    end_location: Optional[str] = None
    confirmation_code: Optional[str] = None
    notes: Optional[str] = None
    created_by_id: int
    created_by: Optional[UserSummary] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class ItemResponse(BaseModel):
    item: ItemOut


class CreatedItemResponse(ItemResponse):
    cost: Optional[CostOut] = None


class ItemListResponse(BaseModel):
    items: List[ItemOut]
