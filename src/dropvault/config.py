"""Application settings, read from the environment and ``.env``."""
from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    DATA_DIR: Path = Path("data")
    DATABASE_URL: str | None = None

    # Upload gate + simulated progress
    MAX_UPLOAD_BYTES: int = Field(default=10 * 1024 * 1024, gt=0)
    UPLOAD_TICK_INTERVAL: float = Field(default=0.3, gt=0)
    UPLOAD_COMPLETION_DELAY: float = Field(default=0.5, ge=0)

    API_BASE_URL: str = "http://127.0.0.1:8000"
    SESSION_TTL_HOURS: int = Field(default=24, gt=0)
    LOG_LEVEL: str = "INFO"

    @property
    def data_dir(self) -> Path:
        return self.DATA_DIR

    @property
    def database_url(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return f"sqlite:///{self.DATA_DIR / 'dropvault.db'}"


settings = Settings()
