from codecraft.schemas.auth import LoginSchema, RegisterSchema, ResetPasswordSchema
from codecraft.schemas.user import LeaderboardEntry, LeaderboardOut, ProgressIn, UserOut

__all__ = [
    "LoginSchema",
    "RegisterSchema",
    "ResetPasswordSchema",
    "LeaderboardEntry",
    "LeaderboardOut",
    "ProgressIn",
    "UserOut",
]
