from sqlalchemy import Column, String, DateTime
from travelplan.core.database import Base

class VerificationToken(Base):
    __tablename__ = "verification_tokens"

    token = Column(String, primary_key=True)
    identifier = Column(String, index=True, nullable=False)  # email the token verifies
    expires = Column(DateTime, nullable=False)
