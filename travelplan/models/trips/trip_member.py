from sqlalchemy import Column, Integer, ForeignKey, DateTime, UniqueConstraint
from sqlalchemy.orm import relationship
from travelplan.core.database import Base
from datetime import datetime
import enum
import sqlalchemy as sa

class TripRole(enum.Enum):
    OWNER = "owner"
    MEMBER = "member"


class TripMember(Base):
    __tablename__ = "trip_members"

    id = Column(Integer, primary_key=True, index=True)

    trip_id = Column(Integer, ForeignKey("trips.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)

    triprole_enum = sa.Enum(
        TripRole,
        name="triprole",
        values_callable=lambda obj: [e.value for e in obj]
    )
    role = Column(triprole_enum, nullable=False, default=TripRole.MEMBER)

    joined_at = Column(DateTime, default=datetime.utcnow)

    # To ensure no duplicate members in a trip
    __table_args__ = (
        UniqueConstraint('trip_id', 'user_id', name='uq_trip_user'),
    )

    trip = relationship("Trip", back_populates="members")
    user = relationship("User", back_populates="trips")
