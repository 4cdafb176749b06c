"""User model: local (password) accounts and OAuth accounts share one table."""
from sqlalchemy import Boolean, Column, DateTime, String, false
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from codecraft.db.session import Base

GUEST_NAME = "Learner"


class User(Base):
    __tablename__ = "users"

    # "local_<uuid>" for password accounts, provider id for OAuth accounts
    id = Column(String(64), primary_key=True)
    email = Column(String(255), unique=True, nullable=True, index=True)
    name = Column(String(255), nullable=False, default=GUEST_NAME)
    avatar_url = Column(String(1024), nullable=True)
    password_hash = Column(String(255), nullable=True)  # null for OAuth-only accounts
    is_admin = Column(Boolean, nullable=False, default=False, server_default=false())
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=True)

    progress = relationship("UserProgress", back_populates="user", uselist=False)
    sessions = relationship("UserSession", back_populates="user")
