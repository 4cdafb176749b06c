"""Auth routes: register, login, me, logout, reset-password. Session cookie auth."""
import logging
import re
import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from codecraft.core.errors import Conflict, NotFound, Unauthorized, ValidationError
from codecraft.core.security import hash_password, verify_password
from codecraft.db.session import get_db
from codecraft.models.progress import UserProgress
from codecraft.models.session import UserSession
from codecraft.models.user import User
from codecraft.schemas.auth import LoginSchema, RegisterSchema, ResetPasswordSchema
from codecraft.services.progress import ensure_progress, new_progress, to_user_format
from codecraft.services.sessions import (
    clear_session_cookie,
    create_session,
    require_user,
    get_session_from_cookie,
    revoke_session,
    set_session_cookie,
    utcnow,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
MIN_PASSWORD_LENGTH = 6


def _normalize_email(email: str | None) -> str:
    return (email or "").strip().lower()


def _check_password_length(password: str) -> None:
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")


@router.get("/me")
async def me(
    request: Request,
    response: Response,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Current user with progress, or {"user": null} (never a 401)."""
    session_id = get_session_from_cookie(request.headers.get("cookie"))
    row = None
    if session_id:
        result = await db.execute(
            select(User, UserProgress)
            .join(UserSession, UserSession.user_id == User.id)
            .outerjoin(UserProgress, UserProgress.user_id == User.id)
            .where(UserSession.id == session_id, UserSession.expires_at > utcnow())
        )
        row = result.first()

    if row is None:
        clear_session_cookie(response)
        return {"user": None}

    user, progress = row
    return {"user": to_user_format(user, progress)}


@router.post("/logout")
async def logout(
    request: Request,
    response: Response,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Revoke the session if there is one; always clears the cookie."""
    session_id = get_session_from_cookie(request.headers.get("cookie"))
    if session_id:
        await revoke_session(db, session_id)
        logger.info("Session revoked on logout")
    clear_session_cookie(response)
    return {"success": True}


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(
    body: RegisterSchema,
    response: Response,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Create a password account with empty progress and log it in."""
    email = _normalize_email(body.email)
    password = body.password or ""
    name = (body.name or "").strip()

    if not email or not password or not name:
        raise ValidationError("Email, password and name are required")
    if not EMAIL_RE.match(email):
        raise ValidationError("Invalid email format")
    _check_password_length(password)

    existing = await db.execute(select(User.id).where(func.lower(User.email) == email).limit(1))
    if existing.first() is not None:
        raise Conflict("Email already registered")

    user = User(
        id=f"local_{uuid.uuid4()}",
        email=email,
        name=name,
        password_hash=hash_password(password),
    )
    db.add(user)
    db.add(new_progress(user.id))
    try:
        await db.commit()
    except IntegrityError:
        # lost a race with a concurrent registration for the same email
        await db.rollback()
        raise Conflict("Email already registered")

    session_id = await create_session(db, user.id)
    set_session_cookie(response, session_id)
    logger.info("Registered user %s", user.id)
    return {"success": True, "user": {"id": user.id, "email": user.email, "name": user.name}}


@router.post("/login")
async def login(
    body: LoginSchema,
    response: Response,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    email = _normalize_email(body.email)
    if not email or not body.password:
        raise ValidationError("Email and password are required")

    # rows created outside register (OAuth, imports) may keep mixed-case emails
    result = await db.execute(
        select(User).where(func.lower(User.email) == email).order_by(User.created_at).limit(1)
    )
    user = result.scalars().first()

    # OAuth-only accounts have no password_hash and cannot log in here
    if user is None or not user.password_hash or not verify_password(body.password, user.password_hash):
        raise Unauthorized("Invalid email or password")

    progress = await ensure_progress(db, user.id)
    session_id = await create_session(db, user.id)
    set_session_cookie(response, session_id)
    logger.info("User %s logged in", user.id)
    return {"success": True, "user": to_user_format(user, progress)}


@router.post("/reset-password")
async def reset_password(
    body: ResetPasswordSchema,
    db: Annotated[AsyncSession, Depends(get_db)],
    user_id: Annotated[str, Depends(require_user("Authentication required"))],
):
    """Change the password of the logged-in user after re-checking the current one."""
    if not body.current_password or not body.new_password:
        raise ValidationError("Current password and new password are required")
    _check_password_length(body.new_password)

    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()
    if user is None or not user.password_hash:
        raise NotFound("User not found")

    if not verify_password(body.current_password, user.password_hash):
        raise Unauthorized("Current password is incorrect")

    user.password_hash = hash_password(body.new_password)
    await db.commit()
    logger.info("Password updated for user %s", user_id)
    return {"success": True, "message": "Password updated successfully"}
