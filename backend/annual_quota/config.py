from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration, read from the environment or a ``.env`` file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = "Annual Quota"
    app_version: str = "0.1.0"
    environment: Literal["development", "staging", "production"] = "development"
    debug: bool = False
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    cors_origins: list[str] = ["http://localhost:5173", "http://localhost:8000"]

    database_url: str = "postgresql+asyncpg://annual_quota:annual_quota@db:5432/annual_quota"
    database_pool_size: int = 5
    database_max_overflow: int = 10

    # The worker wakes at least this often and re-runs the (idempotent) sweep.
    rollover_check_interval_seconds: int = 86400
    rollover_on_startup: bool = True

    @property
    def uses_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")


_settings: Settings | None = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
