"""Pytest fixtures for osint-alerts tests."""

import itertools
from collections.abc import Callable

import pytest

from osint_alerts.alerts.config import AlertConfig
from osint_alerts.alerts.engine import AlertEngine
from osint_alerts.alerts.schemas import Alert
from osint_alerts.feeds.schemas import NewsArticle, SeismicEvent, SocialPost

_ids = itertools.count(1)


class RecordingNotifier:
    """Notifier double that remembers every call."""

    def __init__(self) -> None:
        self.calls: list[tuple[Alert, bool]] = []

    def notify(self, alert: Alert, play_sound: bool) -> None:
        self.calls.append((alert, play_sound))


@pytest.fixture
def config() -> AlertConfig:
    return AlertConfig()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def engine(config, notifier) -> AlertEngine:
    return AlertEngine(config=config, notifier=notifier)


@pytest.fixture
def make_quake() -> Callable[..., SeismicEvent]:
    def _make(**overrides) -> SeismicEvent:
        fields = {
            "id": f"eq-{next(_ids)}",
            "magnitude": 5.0,
            "place": "Test Location",
            "latitude": 35.0,
            "longitude": 139.0,
            "depth": 10.0,
            "url": "https://earthquake.usgs.gov/test",
            "time": 1_770_000_000_000,
            "significance": 500,
        }
        fields.update(overrides)
        return SeismicEvent(**fields)

    return _make


@pytest.fixture
def make_article() -> Callable[..., NewsArticle]:
    def _make(**overrides) -> NewsArticle:
        fields = {
            "url": f"https://example.com/{next(_ids)}",
            "title": "Test Article",
            "latitude": 35.0,
            "longitude": 139.0,
            "source_domain": "example.com",
            "location_name": "Test",
            "count": 1,
        }
        fields.update(overrides)
        return NewsArticle(**fields)

    return _make


@pytest.fixture
def make_post() -> Callable[..., SocialPost]:
    def _make(**overrides) -> SocialPost:
        fields = {
            "id": f"post-{next(_ids)}",
            "author": "TestUser",
            "author_handle": "@testuser.bsky.social",
            "platform": "bluesky",
            "content": "Some normal OSINT content",
            "url": "https://bsky.app/test",
            "topic": "conflict",
            "like_count": 10,
            "repost_count": 5,
        }
        fields.update(overrides)
        return SocialPost(**fields)

    return _make
