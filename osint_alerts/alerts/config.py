"""Alert engine configuration.

Controls log capacity, the rolling engagement window, and trigger
thresholds for all alert types. All settings can be overridden via
``ALERTS_*`` environment variables.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from osint_alerts.config.watchlists import get_default_gazetteer, get_default_keywords


class AlertConfig(BaseSettings):
    """Configuration for the alert detection engine."""

    model_config = SettingsConfigDict(
        env_prefix="ALERTS_",
        case_sensitive=False,
        extra="ignore",
    )

    # Alert log
    max_alerts: int = Field(
        default=50,
        ge=1,
        description="Maximum alerts retained in the log (oldest evicted first)",
    )
    description_max_chars: int = Field(
        default=200,
        ge=1,
        description="Social post content is truncated to this many characters",
    )

    # Seismic thresholds
    seismic_high_magnitude: float = Field(
        default=6.0,
        ge=0.0,
        description="Magnitude at or above which a new quake raises a high alert",
    )
    seismic_critical_magnitude: float = Field(
        default=7.0,
        ge=0.0,
        description="Magnitude at or above which a new quake raises a critical alert",
    )

    # Engagement spike detection
    rolling_window: int = Field(
        default=20,
        ge=1,
        description="Number of recent engagement scores kept per account",
    )
    spike_multiplier: float = Field(
        default=3.0,
        ge=1.0,
        description="Engagement >= multiplier x account average fires a viral alert",
    )

    # Cross-source correlation
    correlation_min_handles: int = Field(
        default=3,
        ge=2,
        description="Distinct accounts that must mention a term in one batch",
    )

    # Watchlists
    critical_keywords: list[str] = Field(
        default_factory=get_default_keywords,
        description="Case-insensitive substrings that fire a high social alert",
    )
    gazetteer: list[str] = Field(
        default_factory=get_default_gazetteer,
        description="Place names boosted into correlation candidate terms",
    )
