"""Process-wide settings for the osint-alerts host (pydantic-settings, env driven)."""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

USGS_SUMMARY_URL = (
    "https://earthquake.usgs.gov/earthquakes/feed/v1.0/summary/4.5_week.geojson"
)


class Settings(BaseSettings):
    """
    Central configuration for the osint-alerts host process.

    Every field maps to an unprefixed environment variable or a .env entry.
    Engine thresholds live in ``AlertConfig`` (``ALERTS_*``).
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Environment
    environment: Literal["development", "staging", "production"] = "development"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # Feeds (events and social point at the dashboard's own JSON endpoints)
    usgs_feed_url: str = USGS_SUMMARY_URL
    events_feed_url: str | None = None
    social_feed_url: str | None = None

    # Poll intervals, matching the dashboard's refresh cadence
    earthquake_poll_seconds: float = Field(default=60.0, ge=1.0)
    events_poll_seconds: float = Field(default=600.0, ge=1.0)
    social_poll_seconds: float = Field(default=300.0, ge=1.0)

    # HTTP retry configuration
    http_timeout_seconds: float = Field(default=10.0, gt=0.0, le=120.0)
    max_http_retries: int = Field(default=3, ge=0, le=10)
    max_backoff_seconds: float = Field(default=60.0, ge=1.0, le=300.0)

    # Notifications
    sound_enabled: bool = True
    webhook_url: str | None = None
    slack_webhook_url: str | None = None
    slack_channel: str | None = None

    # Observability
    metrics_enabled: bool = False
    metrics_port: int = 8000

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def push_configured(self) -> bool:
        """True when a webhook or Slack target is set."""
        return any([self.webhook_url, self.slack_webhook_url])


@lru_cache
def get_settings() -> Settings:
    """Settings loaded once per process; tests reset with ``get_settings.cache_clear()``."""
    return Settings()
