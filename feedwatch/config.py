"""Configuration management for Feedwatch."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env", env_prefix="FEEDWATCH_", extra="ignore"
    )

    # Redis (feed list storage)
    redis_url: str = "redis://localhost:6379/0"
    feeds_key: str = "feedwatch:feeds"

    # Outbound HTTP
    http_timeout_seconds: float = 15.0
    user_agent: str = "Feedwatch/1.0 (+https://github.com/feedwatch/feedwatch)"

    # Polling
    poll_interval_minutes: int = Field(default=60, ge=1)
    poll_on_startup: bool = True
    scheduler_enabled: bool = True

    # Unread badge
    badge_cap: int = Field(default=50, ge=1)

    # CORS
    frontend_origin: str = "http://localhost:5173"

    # Environment
    env: str = Field(default="dev", pattern="^(dev|prod)$")


_settings: Settings | None = None


def get_settings() -> Settings:
    """Get cached settings instance (singleton pattern)."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
