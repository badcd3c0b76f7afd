from functools import lru_cache
from typing import Literal, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Global application settings."""

    # Application
    ENVIRONMENT: Literal["local", "development", "production", "test"] = "local"
    LOG_LEVEL: str = "INFO"
    # Wall-clock zone of the dojo; "today" and calendar instants are computed here
    TIMEZONE: str = "America/Vancouver"

    # Database
    DATABASE_URL: str
    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 10
    DB_POOL_TIMEOUT: int = 30
    DB_POOL_RECYCLE: int = 1800

    # Scheduling
    DEFAULT_CLASS_DURATION_MINUTES: int = 60
    # class_schedules only stores a start time, so overlap checks assume this length
    CONFLICT_ASSUMED_DURATION_MINUTES: int = 60
    SESSION_DELETE_BATCH_SIZE: int = 50

    # Public schedule summary
    SCHEDULE_SUMMARY_CACHE_TTL_SECONDS: int = 300
    DEFAULT_MIN_AGE: int = 4
    DEFAULT_MAX_STUDENTS: int = 20

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    @field_validator("DATABASE_URL")
    @classmethod
    def assemble_db_connection(cls, v: Optional[str]) -> str:
        if isinstance(v, str):
            if v.startswith("postgresql://"):
                return v.replace("postgresql://", "postgresql+psycopg://", 1)
        return v


@lru_cache
def get_settings() -> Settings:
    """
    Return the global settings instance, cached.
    """
    return Settings()
