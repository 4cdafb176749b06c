"""Piston code-execution sandbox client."""
import asyncio
import logging
from functools import lru_cache

import httpx

from codecraft.core.config import get_settings
from codecraft.core.errors import UpstreamFailure, UpstreamTimeout
from codecraft.schemas.ai import ExecutionResult

logger = logging.getLogger(__name__)

# our language ids -> Piston runtime
LANGUAGE_RUNTIMES = {
    "python": {"language": "python", "version": "3.10.0"},
    "javascript": {"language": "javascript", "version": "18.15.0"},
    "typescript": {"language": "typescript", "version": "5.0.3"},
    "rust": {"language": "rust", "version": "1.68.2"},
    "go": {"language": "go", "version": "1.20.2"},
}


class PistonSandbox:
    def __init__(self, url: str, timeout: float = 10.0, transport: httpx.AsyncBaseTransport | None = None):
        self.url = url
        self.timeout = timeout
        self.transport = transport

    def supports(self, language: str) -> bool:
        return language in LANGUAGE_RUNTIMES

    async def run(self, code: str, language: str) -> ExecutionResult:
        runtime = LANGUAGE_RUNTIMES[language]
        payload = {
            "language": runtime["language"],
            "version": runtime["version"],
            "files": [{"content": code}],
        }

        try:
            data = await asyncio.wait_for(self._post(payload), self.timeout)
        except (asyncio.TimeoutError, httpx.TimeoutException) as e:
            raise UpstreamTimeout(f"Code execution timed out ({self.timeout:g}s limit)") from e
        except (httpx.HTTPError, ValueError) as e:
            logger.error("Piston API error: %s", e)
            raise UpstreamFailure("Failed to execute code") from e

        run = (data.get("run") if isinstance(data, dict) else None) or {}
        return ExecutionResult(
            stdout=run.get("stdout", ""),
            stderr=run.get("stderr", ""),
            exit_code=run.get("code"),
        )

    async def _post(self, payload: dict) -> dict:
        # httpx timeouts are per phase; wait_for in run() bounds the whole call
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            response = await client.post(self.url, json=payload)
            response.raise_for_status()
            return response.json()


@lru_cache
def get_sandbox() -> PistonSandbox:
    settings = get_settings()
    return PistonSandbox(settings.piston_url, timeout=settings.execute_timeout)
