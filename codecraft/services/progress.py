"""User/progress hydration and the full-overwrite progress save."""
import json
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from codecraft.models.progress import UserProgress
from codecraft.models.user import User
from codecraft.schemas.user import ProgressIn, UserOut


def _loads(raw: str | None, default: Any) -> Any:
    """Decode a JSON column; corrupt or mistyped data falls back to default."""
    if not raw:
        return default
    try:
        value = json.loads(raw)
    except ValueError:
        return default
    return value if isinstance(value, type(default)) else default


def unique_ids(ids: list[str]) -> list[str]:
    """Drop duplicate ids, keeping first occurrence order."""
    return list(dict.fromkeys(ids))


def to_user_format(user: User, progress: UserProgress | None) -> UserOut:
    out = UserOut(
        id=user.id,
        email=user.email,
        name=user.name,
        avatar_url=user.avatar_url,
    )
    if progress is None:
        return out

    out.xp = progress.xp or 0
    out.level = progress.level or 1
    out.streak = progress.streak or 0
    out.last_active_date = progress.last_active_date
    out.completed_lessons = _loads(progress.completed_lessons, [])
    out.completed_exercises = _loads(progress.completed_exercises, [])
    out.module_progress = _loads(progress.module_progress, {})
    out.lab_progress = _loads(progress.lab_progress, {})
    return out


def new_progress(user_id: str) -> UserProgress:
    return UserProgress(
        user_id=user_id,
        xp=0,
        level=1,
        streak=0,
        last_active_date=None,
        completed_lessons="[]",
        completed_exercises="[]",
        module_progress="{}",
        lab_progress="{}",
    )


async def get_progress(db: AsyncSession, user_id: str) -> UserProgress | None:
    result = await db.execute(select(UserProgress).where(UserProgress.user_id == user_id))
    return result.scalar_one_or_none()


async def ensure_progress(db: AsyncSession, user_id: str) -> UserProgress:
    """Return the user's progress row, creating an empty one if missing."""
    progress = await get_progress(db, user_id)
    if progress is None:
        progress = new_progress(user_id)
        db.add(progress)
        await db.commit()
        await db.refresh(progress)
    return progress


async def save_progress(db: AsyncSession, user_id: str, body: ProgressIn) -> None:
    """Replace the whole progress record. Last write wins: concurrent saves
    from two tabs are not merged."""
    progress = await get_progress(db, user_id)
    if progress is None:
        progress = UserProgress(user_id=user_id)
        db.add(progress)

    progress.xp = body.xp
    progress.level = body.level
    progress.streak = body.streak
    progress.last_active_date = body.last_active_date
    progress.completed_lessons = json.dumps(unique_ids(body.completed_lessons))
    progress.completed_exercises = json.dumps(unique_ids(body.completed_exercises))
    progress.module_progress = json.dumps(body.module_progress)
    progress.lab_progress = json.dumps(body.lab_progress)

    await db.commit()
