"""Session store: cookie parsing, session rows, per-request identity resolution.

A missing, unknown and expired session all resolve to None; callers cannot
tell them apart and answer 401 in every case.
"""
import logging
import re
from datetime import datetime, timedelta, timezone
from typing import Annotated

from fastapi import Depends, Request, Response
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from codecraft.core.config import get_settings
from codecraft.core.errors import Unauthorized
from codecraft.core.security import generate_session_id
from codecraft.db.session import get_db
from codecraft.models.session import UserSession
from codecraft.models.user import User

logger = logging.getLogger(__name__)
settings = get_settings()

_COOKIE_RE = re.compile(r"(?:^|;)\s*" + re.escape(settings.session_cookie_name) + r"=([^;]+)")


def utcnow() -> datetime:
    """Naive UTC, the form stored in sessions.expires_at."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def get_session_from_cookie(cookie_header: str | None) -> str | None:
    if not cookie_header:
        return None
    match = _COOKIE_RE.search(cookie_header)
    return match.group(1).strip() if match else None


async def create_session(db: AsyncSession, user_id: str) -> str:
    session_id = generate_session_id()
    db.add(
        UserSession(
            id=session_id,
            user_id=user_id,
            expires_at=utcnow() + timedelta(seconds=settings.session_max_age),
        )
    )
    await db.commit()
    logger.debug("Session created for user %s", user_id)
    return session_id


async def resolve_session(db: AsyncSession, session_id: str | None) -> str | None:
    """Return the owning user id of a live session, else None."""
    if not session_id:
        return None
    result = await db.execute(
        select(UserSession.user_id).where(
            UserSession.id == session_id,
            UserSession.expires_at > utcnow(),
        )
    )
    return result.scalar_one_or_none()


async def revoke_session(db: AsyncSession, session_id: str) -> None:
    await db.execute(delete(UserSession).where(UserSession.id == session_id))
    await db.commit()


async def get_authenticated_user_id(
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> str | None:
    """Resolve the caller from the session cookie; None when unauthenticated."""
    session_id = get_session_from_cookie(request.headers.get("cookie"))
    return await resolve_session(db, session_id)


def require_user(message: str = "Unauthorized"):
    """Dependency that yields the caller's user id or raises 401 with message.

    Dependencies are resolved before the request body is validated, so an
    anonymous caller gets the 401 even when the body is malformed.
    """

    async def dependency(
        user_id: Annotated[str | None, Depends(get_authenticated_user_id)],
    ) -> str:
        if not user_id:
            raise Unauthorized(message)
        return user_id

    return dependency


async def is_admin(db: AsyncSession, user_id: str | None) -> bool:
    if not user_id:
        return False
    result = await db.execute(select(User.is_admin).where(User.id == user_id))
    return bool(result.scalar_one_or_none())


def set_session_cookie(response: Response, session_id: str) -> None:
    response.set_cookie(
        key=settings.session_cookie_name,
        value=session_id,
        max_age=settings.session_max_age,
        path="/",
        httponly=True,
        secure=True,
        samesite="none",
    )


def clear_session_cookie(response: Response) -> None:
    # attributes must match set_session_cookie() or browsers keep the old cookie
    response.delete_cookie(
        settings.session_cookie_name,
        path="/",
        httponly=True,
        secure=True,
        samesite="none",
    )
