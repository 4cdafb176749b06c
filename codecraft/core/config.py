"""Application configuration from environment."""
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """App settings loaded from env / .env."""

    app_name: str = "CodeCraft API"
    debug: bool = False
    log_level: str = "INFO"

    # Database (async driver; alembic converts to a sync one)
    database_url: str = "sqlite+aiosqlite:///./codecraft.db"

    # CORS: frontend_url is also the fallback for unknown origins
    frontend_url: str = "http://localhost:5173"
    dev_origins: list[str] = [
        "http://localhost:5173",
        "http://localhost:3000",
        "http://localhost:4321",
    ]

    # Session cookie
    session_cookie_name: str = "session"
    session_max_age: int = 60 * 60 * 24 * 30  # 30 days

    # DeepSeek (OpenAI-compatible chat completions)
    deepseek_api_key: str = ""
    deepseek_base_url: str = "https://api.deepseek.com"
    deepseek_model: str = "deepseek-chat"

    # Piston code-execution sandbox
    piston_url: str = "https://emkc.org/api/v2/piston/execute"
    execute_timeout: float = 10.0

    # Rate limits (per user, per process)
    ai_rate_limit: int = 20
    ai_rate_window_ms: int = 60 * 1000
    execute_rate_limit: int = 20
    execute_rate_window_ms: int = 60 * 1000
    rate_limit_sweep_threshold: int = 100

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"

    @property
    def allowed_origins(self) -> list[str]:
        return [self.frontend_url, *self.dev_origins]


def get_settings() -> Settings:
    return Settings()
