"""Application configuration using pydantic-settings."""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


# Find .env file: check backend dir first, then project root
_BACKEND_DIR = Path(__file__).parent.parent
_PROJECT_ROOT = _BACKEND_DIR.parent
_ENV_FILE = _BACKEND_DIR / ".env" if (_BACKEND_DIR / ".env").exists() else _PROJECT_ROOT / ".env"


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Every value has a working default so the mock server starts with no
    configuration at all; the SQLite file is created next to the working
    directory.
    """

    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Embedded store
    database_url: str = "sqlite+aiosqlite:///./database.db"

    # Identity recorded in createdBy/updatedBy when no X-User header is sent
    default_identity: str = "system"

    # Artificial latency on the account search endpoint (0 disables it)
    search_delay_ms: int = 0

    # HTTP
    cors_origins: str = "*"
    host: str = "127.0.0.1"
    port: int = 5178

    # Logging
    log_level: str = "INFO"
    json_logs: bool = False

    # Application
    debug: bool = False


settings = Settings()
