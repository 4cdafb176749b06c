"""API routes: public progress lookup, progress save, leaderboard."""
from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from codecraft.core.errors import NotFound
from codecraft.db.session import get_db
from codecraft.models.progress import UserProgress
from codecraft.models.user import GUEST_NAME, User
from codecraft.schemas.user import LeaderboardEntry, LeaderboardOut, ProgressIn, UserOut
from codecraft.services.progress import save_progress, to_user_format
from codecraft.services.sessions import require_user

router = APIRouter(prefix="/api", tags=["api"])

LEADERBOARD_DEFAULT_LIMIT = 10
LEADERBOARD_MAX_LIMIT = 100


def _parse_int(raw: str | None, default: int) -> int:
    try:
        return int(raw) if raw is not None else default
    except ValueError:
        return default


@router.get("/user/{user_id}", response_model=UserOut)
async def get_user(
    user_id: str,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Public profile and progress of any user."""
    result = await db.execute(
        select(User, UserProgress)
        .outerjoin(UserProgress, UserProgress.user_id == User.id)
        .where(User.id == user_id)
    )
    row = result.first()
    if row is None:
        raise NotFound("User not found")

    user, progress = row
    return to_user_format(user, progress)


@router.post("/user")
async def update_progress(
    body: ProgressIn,
    db: Annotated[AsyncSession, Depends(get_db)],
    user_id: Annotated[str, Depends(require_user("Unauthorized"))],
):
    """Overwrite the caller's progress with the posted snapshot."""
    await save_progress(db, user_id, body)
    return {"success": True}


@router.get("/leaderboard", response_model=LeaderboardOut)
async def leaderboard(
    db: Annotated[AsyncSession, Depends(get_db)],
    limit: str | None = None,
    offset: str | None = None,
):
    """Users ranked by xp; anonymous guest rows are left out."""
    # 0 and garbage both fall back to the default
    limit_n = _parse_int(limit, LEADERBOARD_DEFAULT_LIMIT) or LEADERBOARD_DEFAULT_LIMIT
    limit_n = min(max(limit_n, 1), LEADERBOARD_MAX_LIMIT)
    offset_n = max(_parse_int(offset, 0), 0)

    result = await db.execute(
        select(User.id, User.name, User.avatar_url, UserProgress.xp, UserProgress.level, UserProgress.streak)
        .outerjoin(UserProgress, UserProgress.user_id == User.id)
        .where(or_(User.name != GUEST_NAME, User.avatar_url.is_not(None)))
        .order_by(UserProgress.xp.desc().nulls_last(), User.name.asc())
        .limit(limit_n)
        .offset(offset_n)
    )
    users = [
        LeaderboardEntry(
            id=row.id,
            name=row.name,
            avatar_url=row.avatar_url,
            xp=row.xp or 0,
            level=row.level or 1,
            streak=row.streak or 0,
        )
        for row in result.all()
    ]

    total = await db.scalar(select(func.count(User.id)))
    return LeaderboardOut(users=users, total=total or 0)
