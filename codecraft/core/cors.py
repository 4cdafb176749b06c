"""CORS headers: allow-listed origins are echoed, anything else gets the frontend URL."""
from codecraft.core.config import Settings


def get_cors_headers(origin: str | None, settings: Settings) -> dict[str, str]:
    allow_origin = origin if origin and origin in settings.allowed_origins else settings.frontend_url
    return {
        "Access-Control-Allow-Origin": allow_origin,
        "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
        "Access-Control-Allow-Headers": "Content-Type, Authorization",
        "Access-Control-Allow-Credentials": "true",
    }
