"""AI tutoring routes: validate, chat, hint. Auth + per-user rate limit."""
import logging
from typing import Annotated

from fastapi import APIRouter, Depends
from pydantic import ValidationError as SchemaError

from codecraft.core.config import get_settings
from codecraft.core.errors import RateLimited
from codecraft.core.rate_limit import RateLimiter, get_rate_limiter
from codecraft.schemas.ai import ChatSchema, HintSchema, ValidateSchema, ValidationResult
from codecraft.services.deepseek import DeepSeekClient, extract_json_object, get_completion_client
from codecraft.services.sessions import require_user
from codecraft.services.tutor import VALIDATION_FALLBACK, chat_messages, hint_messages, validation_messages

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["ai"])
settings = get_settings()

TOO_MANY_REQUESTS = "Too many requests. Please wait a moment before trying again."


def require_ai_access(action: str):
    """Dependency: 401 unless logged in, then 429 once the caller's AI budget is spent.

    Runs before body validation, so malformed requests still count.
    """

    async def dependency(
        user_id: Annotated[str, Depends(require_user(f"Log in to {action}"))],
        limiter: Annotated[RateLimiter, Depends(get_rate_limiter)],
    ) -> str:
        if limiter.is_rate_limited(f"ai:{user_id}", settings.ai_rate_limit, settings.ai_rate_window_ms):
            logger.warning("AI rate limit hit for user %s", user_id)
            raise RateLimited(TOO_MANY_REQUESTS)
        return user_id

    return dependency


@router.post("/validate", dependencies=[Depends(require_ai_access("validate your exercises"))])
async def validate_code(
    body: ValidateSchema,
    client: Annotated[DeepSeekClient, Depends(get_completion_client)],
):
    """Ask the model whether the code solves the exercise. Unparsable replies
    degrade to an "is not correct, try again" result instead of an error."""
    reply = await client.complete(validation_messages(body))

    data = extract_json_object(reply)
    if data is None:
        return VALIDATION_FALLBACK
    try:
        return ValidationResult.model_validate(data)
    except SchemaError:
        logger.info("Validation reply did not match the expected shape")
        return VALIDATION_FALLBACK


@router.post("/chat", dependencies=[Depends(require_ai_access("use the chat"))])
async def chat(
    body: ChatSchema,
    client: Annotated[DeepSeekClient, Depends(get_completion_client)],
):
    reply = await client.complete(chat_messages(body), max_tokens=400)
    return {"response": reply}


@router.post("/hint", dependencies=[Depends(require_ai_access("get hints"))])
async def hint(
    body: HintSchema,
    client: Annotated[DeepSeekClient, Depends(get_completion_client)],
):
    reply = await client.complete(hint_messages(body), max_tokens=150)
    return {"hint": reply}
