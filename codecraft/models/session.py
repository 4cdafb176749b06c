"""Login session: random bearer token mapped to a user, fixed 30-day lifetime."""
from sqlalchemy import Column, DateTime, ForeignKey, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from codecraft.db.session import Base


class UserSession(Base):
    __tablename__ = "sessions"

    id = Column(String(64), primary_key=True)
    user_id = Column(String(64), ForeignKey("users.id"), nullable=False, index=True)
    expires_at = Column(DateTime, nullable=False)  # naive UTC
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=True)

    user = relationship("User", back_populates="sessions")
