"""Admin maintenance routes. Every path under /api/admin requires users.is_admin."""
import logging
from datetime import datetime, timezone
from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy import and_, delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from codecraft.core.errors import Forbidden, NotFound
from codecraft.db.session import get_db
from codecraft.models.progress import UserProgress
from codecraft.models.session import UserSession
from codecraft.models.user import GUEST_NAME, User
from codecraft.services.sessions import get_authenticated_user_id, is_admin, utcnow

logger = logging.getLogger(__name__)


async def require_admin(
    db: Annotated[AsyncSession, Depends(get_db)],
    user_id: Annotated[str | None, Depends(get_authenticated_user_id)],
) -> str:
    if not await is_admin(db, user_id):
        raise Forbidden("Admin access required")
    return user_id


router = APIRouter(prefix="/api/admin", tags=["admin"], dependencies=[Depends(require_admin)])


def _isoformat(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


@router.post("/cleanup-guests")
async def cleanup_guests(db: Annotated[AsyncSession, Depends(get_db)]):
    """Delete unclaimed guest users (default name, no avatar) and their rows."""
    is_guest = and_(User.name == GUEST_NAME, User.avatar_url.is_(None))
    guest_ids = select(User.id).where(is_guest)
    for model in (UserSession, UserProgress):
        await db.execute(
            delete(model)
            .where(model.user_id.in_(guest_ids))
            .execution_options(synchronize_session=False)
        )
    result = await db.execute(delete(User).where(is_guest).execution_options(synchronize_session=False))
    await db.commit()

    logger.info("Admin cleanup removed %s guest users", result.rowcount)
    return {"success": True, "message": "Guest users removed", "deleted": result.rowcount}


@router.post("/cleanup-sessions")
async def cleanup_sessions(db: Annotated[AsyncSession, Depends(get_db)]):
    result = await db.execute(delete(UserSession).where(UserSession.expires_at < utcnow()))
    await db.commit()

    logger.info("Admin cleanup removed %s expired sessions", result.rowcount)
    return {"success": True, "message": "Expired sessions cleaned", "deleted": result.rowcount}


@router.get("/export")
async def export(db: Annotated[AsyncSession, Depends(get_db)]):
    """Dump users (without password hashes) and progress for backups."""
    users = (await db.execute(select(User).order_by(User.id))).scalars().all()
    progress = (await db.execute(select(UserProgress).order_by(UserProgress.user_id))).scalars().all()
    session_count = await db.scalar(select(func.count(UserSession.id)))

    return {
        "exported_at": datetime.now(timezone.utc).isoformat(),
        "users": [
            {
                "id": u.id,
                "email": u.email,
                "name": u.name,
                "avatar_url": u.avatar_url,
                "is_admin": bool(u.is_admin),
                "created_at": _isoformat(u.created_at),
            }
            for u in users
        ],
        "user_progress": [
            {
                "user_id": p.user_id,
                "xp": p.xp,
                "level": p.level,
                "streak": p.streak,
                "last_active_date": p.last_active_date,
                "completed_lessons": p.completed_lessons,
                "completed_exercises": p.completed_exercises,
                "module_progress": p.module_progress,
                "lab_progress": p.lab_progress,
            }
            for p in progress
        ],
        "active_sessions": session_count or 0,
    }


@router.get("/stats")
async def stats(db: Annotated[AsyncSession, Depends(get_db)]):
    total_users = await db.scalar(select(func.count(User.id)))
    active_sessions = await db.scalar(
        select(func.count(UserSession.id)).where(UserSession.expires_at > utcnow())
    )
    total_xp = await db.scalar(select(func.sum(UserProgress.xp)))

    return {
        "total_users": total_users or 0,
        "active_sessions": active_sessions or 0,
        "total_xp_awarded": total_xp or 0,
    }


@router.api_route("/{path:path}", methods=["GET", "POST", "PUT", "PATCH", "DELETE"], include_in_schema=False)
async def admin_not_found(path: str):
    raise NotFound("Admin endpoint not found")
