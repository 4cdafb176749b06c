"""DeepSeek chat-completion client (OpenAI-compatible API)."""
import json
import logging
import re
from functools import lru_cache
from typing import Any

import httpx
from openai import AsyncOpenAI, OpenAIError

from codecraft.core.config import get_settings
from codecraft.core.errors import UpstreamFailure

logger = logging.getLogger(__name__)

_JSON_OBJECT_RE = re.compile(r"\{.*\}", re.DOTALL)


class DeepSeekClient:
    """Treats the model as text in, text out. Callers parse the reply."""

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.deepseek.com",
        model: str = "deepseek-chat",
        max_retries: int = 2,
        http_client: httpx.AsyncClient | None = None,
    ):
        self.client = AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            max_retries=max_retries,
            http_client=http_client,
        )
        self.model = model

    async def complete(
        self,
        messages: list[dict[str, str]],
        max_tokens: int = 500,
        temperature: float = 0.7,
    ) -> str:
        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=messages,
                max_tokens=max_tokens,
                temperature=temperature,
            )
        except OpenAIError as e:
            logger.error("DeepSeek API error: %s", e)
            raise UpstreamFailure(f"DeepSeek API error: {e}") from e

        if not response.choices:
            raise UpstreamFailure("DeepSeek API error: empty response")
        return response.choices[0].message.content or ""


def extract_json_object(text: str) -> dict[str, Any] | None:
    """Parse the outermost {...} block of a model reply; None if there is none."""
    match = _JSON_OBJECT_RE.search(text or "")
    if not match:
        return None
    try:
        value = json.loads(match.group(0))
    except ValueError:
        return None
    return value if isinstance(value, dict) else None


@lru_cache
def get_completion_client() -> DeepSeekClient:
    settings = get_settings()
    return DeepSeekClient(
        api_key=settings.deepseek_api_key,
        base_url=settings.deepseek_base_url,
        model=settings.deepseek_model,
    )
