from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, Numeric, Enum
from sqlalchemy.orm import relationship
from travelplan.core.database import Base
from datetime import datetime
import enum

class CostCategory(str, enum.Enum):
    FLIGHT = "FLIGHT"
    HOTEL = "HOTEL"
    FOOD = "FOOD"
    TRANSPORT = "TRANSPORT"
    ACTIVITY = "ACTIVITY"
    OTHER = "OTHER"


class TripCost(Base):
    __tablename__ = "trip_costs"

    id = Column(Integer, primary_key=True, index=True)
    trip_id = Column(Integer, ForeignKey("trips.id", ondelete="CASCADE"), nullable=False, index=True)
    amount = Column(Numeric(10, 2), nullable=False)
    currency = Column(String(3), nullable=False, default="USD")
    description = Column(String, nullable=False)
    category = Column(Enum(CostCategory), nullable=False, default=CostCategory.OTHER)
    date = Column(DateTime, nullable=False, default=datetime.utcnow)
    # Cleared when the payer deletes their account
    paid_by_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    trip = relationship("Trip", back_populates="costs")
    paid_by = relationship("User", foreign_keys=[paid_by_id])
