from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, Text, Enum
from sqlalchemy.orm import relationship
from travelplan.core.database import Base
from datetime import datetime
import enum

class ItemType(str, enum.Enum):
    ACTIVITY = "ACTIVITY"
    FLIGHT = "FLIGHT"
    TRANSPORT = "TRANSPORT"
    ACCOMMODATION = "ACCOMMODATION"
    FOOD = "FOOD"
    SHOPPING = "SHOPPING"
    OTHER = "OTHER"


# Items that go from one place to another carry start/end locations instead of a single location
ROUTE_TYPES = (ItemType.FLIGHT, ItemType.TRANSPORT)


class ItineraryItem(Base):
    __tablename__ = "itinerary_items"

    id = Column(Integer, primary_key=True, index=True)
    trip_id = Column(Integer, ForeignKey("trips.id", ondelete="CASCADE"), nullable=False, index=True)
    type = Column(Enum(ItemType), nullable=False)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    start_date = Column(DateTime, nullable=True)
    end_date = Column(DateTime, nullable=True)
    location = Column(String, nullable=True)
    start_location = Column(String, nullable=True)
    end_location = Column(String, nullable=True)
    confirmation_code = Column(String, nullable=True)
    notes = Column(Text, nullable=True)
    created_by_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    trip = relationship("Trip", back_populates="items")
    created_by = relationship("User", foreign_keys=[created_by_id])
