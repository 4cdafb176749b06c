"""Sandboxed code execution through Piston."""
import logging
from typing import Annotated

from fastapi import APIRouter, Depends

from codecraft.core.config import get_settings
from codecraft.core.errors import RateLimited, ValidationError
from codecraft.core.rate_limit import RateLimiter, get_rate_limiter
from codecraft.routers.ai import TOO_MANY_REQUESTS
from codecraft.schemas.ai import ExecuteSchema, ExecutionResult
from codecraft.services.sandbox import PistonSandbox, get_sandbox
from codecraft.services.sessions import require_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["execute"])
settings = get_settings()


async def execute_rate_limit(
    user_id: Annotated[str, Depends(require_user("Log in to run code"))],
    limiter: Annotated[RateLimiter, Depends(get_rate_limiter)],
) -> str:
    if limiter.is_rate_limited(f"execute:{user_id}", settings.execute_rate_limit, settings.execute_rate_window_ms):
        logger.warning("Execute rate limit hit for user %s", user_id)
        raise RateLimited(TOO_MANY_REQUESTS)
    return user_id


@router.post("/execute", response_model=ExecutionResult, dependencies=[Depends(execute_rate_limit)])
async def execute(
    body: ExecuteSchema,
    sandbox: Annotated[PistonSandbox, Depends(get_sandbox)],
):
    """Run the code and return stdout/stderr/exitCode. Aborts after execute_timeout."""
    if not sandbox.supports(body.language):
        raise ValidationError(f'Language "{body.language}" is not supported')

    return await sandbox.run(body.code, body.language)
