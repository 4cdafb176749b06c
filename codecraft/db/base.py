"""SQLAlchemy declarative base and model imports for Alembic."""
from codecraft.db.session import Base

# Import all models so Alembic can see them
from codecraft.models.daily_challenge import DailyChallenge  # noqa: F401
from codecraft.models.progress import UserProgress  # noqa: F401
from codecraft.models.session import UserSession  # noqa: F401
from codecraft.models.user import User  # noqa: F401

__all__ = ["Base", "User", "UserProgress", "UserSession", "DailyChallenge"]
