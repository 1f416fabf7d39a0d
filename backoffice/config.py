"""Backoffice — Central Configuration via Pydantic Settings."""

import os
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables / .env file."""

    # ── Database ──
    database_url: str = ""

    # ── Exchange feed ──
    twse_base_url: str = "https://openapi.twse.com.tw/v1"
    twse_timeout_seconds: float = 30.0

    # ── App ──
    log_level: str = "INFO"
    scheduler_enabled: bool = True
    stock_fetch_interval_minutes: int = 60

    # ── Tables ──
    default_page_size: int = 10
    max_page_size: int = 100
    unknown_placeholder: str = "unknown"

    @property
    def effective_database_url(self) -> str:
        """Return the configured URL if set, otherwise fall back to SQLite."""
        if self.database_url:
            return self.database_url
        if os.environ.get("VERCEL"):
            return "sqlite:////tmp/backoffice.db"
        return "sqlite:///./backoffice.db"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


settings = Settings()
