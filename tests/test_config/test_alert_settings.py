"""Tests for settings and alert configuration."""

import pytest
from pydantic import ValidationError

from osint_alerts.alerts.config import AlertConfig
from osint_alerts.alerts.dispatcher import NotificationConfig
from osint_alerts.config.settings import Settings
from osint_alerts.config.watchlists import (
    CRITICAL_KEYWORDS,
    get_default_gazetteer,
    get_default_keywords,
)


class TestAlertConfig:
    def test_defaults(self):
        config = AlertConfig()

        assert config.max_alerts == 50
        assert config.rolling_window == 20
        assert config.spike_multiplier == 3.0
        assert config.seismic_high_magnitude == 6.0
        assert config.seismic_critical_magnitude == 7.0
        assert config.correlation_min_handles == 3
        assert config.description_max_chars == 200
        assert config.critical_keywords == CRITICAL_KEYWORDS

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("ALERTS_MAX_ALERTS", "10")
        monkeypatch.setenv("ALERTS_CRITICAL_KEYWORDS", '["evacuation"]')

        config = AlertConfig()

        assert config.max_alerts == 10
        assert config.critical_keywords == ["evacuation"]

    def test_correlation_needs_two_handles(self):
        with pytest.raises(ValidationError):
            AlertConfig(correlation_min_handles=1)


class TestWatchlists:
    def test_defaults_are_copies(self):
        get_default_keywords().append("mutated")
        get_default_gazetteer().clear()

        assert "mutated" not in get_default_keywords()
        assert "Ukraine" in get_default_gazetteer()


class TestSettings:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("ENVIRONMENT", raising=False)
        settings = Settings(_env_file=None)

        assert settings.is_production is False
        assert settings.earthquake_poll_seconds == 60
        assert settings.events_poll_seconds == 600
        assert settings.social_poll_seconds == 300
        assert settings.usgs_feed_url.endswith("4.5_week.geojson")

    def test_push_configured(self):
        assert Settings(_env_file=None, webhook_url=None, slack_webhook_url=None).push_configured is False
        assert Settings(_env_file=None, slack_webhook_url="https://hooks.slack.com/x").push_configured is True

    def test_production(self):
        assert Settings(_env_file=None, environment="production").is_production is True

    def test_debug_comes_from_cli_flag_only(self, monkeypatch):
        monkeypatch.setenv("DEBUG", "true")
        settings = Settings(_env_file=None)

        assert "debug" not in Settings.model_fields
        assert not hasattr(settings, "debug")


class TestNotificationConfig:
    def test_env_prefix(self, monkeypatch):
        monkeypatch.setenv("NOTIFICATIONS_RETRY_MAX_ATTEMPTS", "5")
        assert NotificationConfig().retry_max_attempts == 5
