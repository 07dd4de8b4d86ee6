from sqlalchemy import Column, Integer, String, Date, ForeignKey, DateTime, Text, func
from travelplan.core.database import Base
from sqlalchemy.orm import relationship

class Trip(Base):
    __tablename__ = "trips"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    start_date = Column(Date, nullable=True)
    end_date = Column(Date, nullable=True)

    creator_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    creator = relationship("User", back_populates="created_trips")

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    invites = relationship("TripInvite", back_populates="trip", cascade="all, delete")

    members = relationship("TripMember", back_populates="trip", cascade="all, delete")

    # Planning records live and die with the trip
    costs = relationship("TripCost", back_populates="trip", cascade="all, delete")
    items = relationship("ItineraryItem", back_populates="trip", cascade="all, delete")
    tasks = relationship("TripTask", back_populates="trip", cascade="all, delete")
    polls = relationship("TripPoll", back_populates="trip", cascade="all, delete")
