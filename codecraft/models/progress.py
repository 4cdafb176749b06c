"""Progress model: one row per user. List/map fields are stored as JSON text."""
from sqlalchemy import Column, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from codecraft.db.session import Base


class UserProgress(Base):
    __tablename__ = "user_progress"

    user_id = Column(String(64), ForeignKey("users.id"), primary_key=True)

    xp = Column(Integer, nullable=False, default=0)
    level = Column(Integer, nullable=False, default=1)  # derived from xp client-side
    streak = Column(Integer, nullable=False, default=0)
    last_active_date = Column(String(10), nullable=True)  # YYYY-MM-DD

    completed_lessons = Column(Text, nullable=False, default="[]")
    completed_exercises = Column(Text, nullable=False, default="[]")
    module_progress = Column(Text, nullable=False, default="{}")
    lab_progress = Column(Text, nullable=False, default="{}")

    user = relationship("User", back_populates="progress")
