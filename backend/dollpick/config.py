"""
DollPick — Configuration via pydantic-settings.

Environment variables (``DOLLPICK_*``) override defaults.  Projection
constants and the Korea bounding box live in ``dollpick.spatial.transform``
and are deliberately not configurable.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import ClassVar

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    env_path: ClassVar[str] = str(Path(__file__).resolve().parents[2] / ".env")
    model_config = SettingsConfigDict(
        env_file=env_path,
        env_file_encoding="utf-8",
        env_prefix="DOLLPICK_",
        # Ignore unrelated environment variables (for example the
        # POSTGRES_* variables used by Docker).
        extra="ignore",
    )

    # ── Application ────────────────────────────────────────────────
    app_name: str = "DollPick API"
    debug: bool = False
    log_level: str = "INFO"

    # ── Database (PostgreSQL) ──────────────────────────────────────
    db_host: str = "localhost"
    db_port: int = 5432
    db_user: str = "dollpick"
    db_password: str = "dollpick_secret"
    db_name: str = "dollpick"
    db_pool_size: int = 10
    db_max_overflow: int = 10

    @property
    def database_url(self) -> str:
        """Async SQLAlchemy connection string (asyncpg driver)."""
        return (
            f"postgresql+asyncpg://{self.db_user}:{self.db_password}"
            f"@{self.db_host}:{self.db_port}/{self.db_name}"
        )

    # ── Review listing ─────────────────────────────────────────────
    review_page_default: int = 20
    review_page_max: int = 100

    # ── CORS ───────────────────────────────────────────────────────
    cors_origins: str = "http://localhost:3000,http://localhost:3001"

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse the comma-separated CORS origins into a list."""
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
