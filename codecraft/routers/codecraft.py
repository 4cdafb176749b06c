"""CodeCraft routes: AI-generated practice exercises and the daily challenge."""
import json
import logging
from datetime import datetime, timezone
from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from codecraft.core.errors import ValidationError
from codecraft.db.session import get_db
from codecraft.models.daily_challenge import DailyChallenge
from codecraft.routers.ai import require_ai_access
from codecraft.schemas.ai import GenerateSchema
from codecraft.services.deepseek import DeepSeekClient, get_completion_client
from codecraft.services.exercises import (
    DIFFICULTIES,
    SUPPORTED_LANGUAGES,
    daily_rotation,
    generate_exercise,
    practice_exercise_id,
    to_language_exercise,
)
from codecraft.services.sessions import require_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/codecraft", tags=["codecraft"])


@router.post("/generate", dependencies=[Depends(require_ai_access("generate exercises"))])
async def generate(
    body: GenerateSchema,
    client: Annotated[DeepSeekClient, Depends(get_completion_client)],
):
    """Generate a one-off practice exercise. Shares the AI rate limit."""
    if body.language not in SUPPORTED_LANGUAGES:
        raise ValidationError(f"Unsupported language: {body.language}")
    if body.difficulty not in DIFFICULTIES:
        raise ValidationError(f"Invalid difficulty: {body.difficulty}")

    data = await generate_exercise(client, body.language, body.difficulty)
    exercise = to_language_exercise(data, practice_exercise_id(body.language), body.language, body.difficulty)
    return {"exercise": exercise}


@router.get("/daily", dependencies=[Depends(require_user("Log in to access the daily challenge"))])
async def daily(
    db: Annotated[AsyncSession, Depends(get_db)],
    client: Annotated[DeepSeekClient, Depends(get_completion_client)],
):
    """Today's (UTC) challenge: served from the cache, generated on first request."""
    today = datetime.now(timezone.utc).date()
    date_str = today.isoformat()

    cached = await db.get(DailyChallenge, date_str)
    if cached is not None:
        try:
            return {"date": date_str, "exercise": json.loads(cached.exercise_json)}
        except ValueError:
            logger.warning("Corrupt cached daily challenge for %s, regenerating", date_str)
            await db.delete(cached)
            await db.commit()

    language, difficulty = daily_rotation(today)
    logger.info("Generating daily challenge for %s (%s, %s)", date_str, language, difficulty)
    data = await generate_exercise(client, language, difficulty)
    exercise = to_language_exercise(data, f"daily-{date_str}", language, difficulty)

    db.add(
        DailyChallenge(
            date=date_str,
            language=language,
            difficulty=difficulty,
            exercise_json=exercise.model_dump_json(by_alias=True),
        )
    )
    try:
        await db.commit()
    except SQLAlchemyError:
        # a concurrent request may have cached the same date first
        logger.exception("Failed to cache daily challenge for %s", date_str)
        await db.rollback()

    return {"date": date_str, "exercise": exercise}
