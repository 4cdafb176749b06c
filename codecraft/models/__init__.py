from codecraft.models.user import User
from codecraft.models.progress import UserProgress
from codecraft.models.session import UserSession
from codecraft.models.daily_challenge import DailyChallenge

__all__ = ["User", "UserProgress", "UserSession", "DailyChallenge"]
