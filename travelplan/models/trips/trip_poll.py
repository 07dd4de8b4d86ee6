from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, Text, Enum, JSON, UniqueConstraint
from sqlalchemy.orm import relationship
from travelplan.core.database import Base
from datetime import datetime
import enum

class PollStatus(str, enum.Enum):
    ACTIVE = "ACTIVE"
    CLOSED = "CLOSED"
    EXPIRED = "EXPIRED"


class TripPoll(Base):
    __tablename__ = "trip_polls"

    id = Column(Integer, primary_key=True, index=True)
    trip_id = Column(Integer, ForeignKey("trips.id", ondelete="CASCADE"), nullable=False, index=True)
    question = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    options = Column(JSON, nullable=False)  # ordered list of option labels
    status = Column(Enum(PollStatus), nullable=False, default=PollStatus.ACTIVE)
    expires_at = Column(DateTime, nullable=False)
    created_by_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    trip = relationship("Trip", back_populates="polls")
    created_by = relationship("User", foreign_keys=[created_by_id])
    votes = relationship("PollVote", back_populates="poll", cascade="all, delete", order_by="PollVote.id")

    @property
    def vote_count(self):
        return len(self.votes)

    @property
    def results(self):
        counts = {option: 0 for option in self.options}
        for vote in self.votes:
            if vote.option in counts:
                counts[vote.option] += 1
        return counts


class PollVote(Base):
    __tablename__ = "poll_votes"

    id = Column(Integer, primary_key=True, index=True)
    poll_id = Column(Integer, ForeignKey("trip_polls.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    option = Column(String, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # One vote per user per poll; voting again changes the option
    __table_args__ = (
        UniqueConstraint('poll_id', 'user_id', name='uq_poll_user'),
    )

    poll = relationship("TripPoll", back_populates="votes")
    user = relationship("User", foreign_keys=[user_id])
