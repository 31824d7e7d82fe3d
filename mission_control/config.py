"""Application settings loaded from environment variables."""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

# Resolve .env relative to the project root (one level above mission_control/)
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_ENV_FILE = _PROJECT_ROOT / ".env"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    DATABASE_URL: str = "sqlite:///./mission_control.db"
    SQL_ECHO: bool = False
    SERVER_HOST: str = "0.0.0.0"
    SERVER_PORT: int = 8000
    ROOT_PATH: str = ""  # Set when behind a reverse proxy with a path prefix
    LOG_LEVEL: str = "INFO"

    NOTIFICATION_MAX_CHARS: int = 200  # Cap for notifications derived from free text
    ACTIVITY_DEFAULT_LIMIT: int = 50
    DEFAULT_REJECTION_REASON: str = "Rejected"


settings = Settings()
