from sqlalchemy import Column, String, Integer, DateTime
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from travelplan.core.database import Base

class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=True)
    email_verified = Column(DateTime, nullable=True)  # absent until a token is consumed
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    created_trips = relationship("Trip", back_populates="creator")

    trips = relationship("TripMember", back_populates="user", cascade="all, delete")

    sent_invites = relationship(
        "TripInvite", back_populates="sender", foreign_keys="TripInvite.sender_id"
    )
