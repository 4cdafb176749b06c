"""Daily challenge cache: one generated exercise per UTC date."""
from sqlalchemy import Column, DateTime, String, Text
from sqlalchemy.sql import func

from codecraft.db.session import Base


class DailyChallenge(Base):
    __tablename__ = "daily_challenges"

    date = Column(String(10), primary_key=True)  # YYYY-MM-DD
    language = Column(String(32), nullable=False)
    difficulty = Column(String(16), nullable=False)
    exercise_json = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=True)
