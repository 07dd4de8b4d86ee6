from sqlalchemy import Integer, Column, String, ForeignKey, Enum, DateTime
from sqlalchemy.orm import relationship
from travelplan.core.database import Base
from datetime import datetime
import enum

class InviteStatus(enum.Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    DECLINED = "declined"

class TripInvite(Base):
    __tablename__ = "trip_invites"

    id = Column(Integer, primary_key=True, index=True)
    trip_id = Column(Integer, ForeignKey("trips.id", ondelete="CASCADE"), nullable=False)
    sender_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    # Registered receivers are addressed by id, everyone else by email
    receiver_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=True, index=True)
    receiver_email = Column(String, nullable=True, index=True)
    status = Column(Enum(InviteStatus), nullable=False, default=InviteStatus.PENDING)
    created_at = Column(DateTime, default=datetime.utcnow)
    responded_at = Column(DateTime, nullable=True)

    trip = relationship("Trip", back_populates="invites")
    sender = relationship("User", back_populates="sent_invites", foreign_keys=[sender_id])
    receiver = relationship("User", foreign_keys=[receiver_id])
