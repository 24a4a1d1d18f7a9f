"""Snapshot sources feeding the alert engine.

Components:
- SeismicEvent / NewsArticle / SocialPost: Snapshot item schemas
- HTTPClient / RetryConfig: Retrying HTTP layer
- USGSClient: USGS GeoJSON earthquake feed
- JsonSnapshotFeed: Dashboard JSON endpoints (news clusters, social posts)

The poller lives in ``osint_alerts.feeds.poller`` and is imported from
there, since it depends on the alert engine.
"""

from osint_alerts.feeds.base import SnapshotSource, parse_items
from osint_alerts.feeds.http_client import (
    FeedError,
    HTTPClient,
    HTTPClientError,
    RateLimitError,
    RetryConfig,
)
from osint_alerts.feeds.schemas import NewsArticle, SeismicEvent, SocialPost
from osint_alerts.feeds.snapshot import JsonSnapshotFeed, events_feed, social_feed
from osint_alerts.feeds.usgs import USGSClient

__all__ = [
    "FeedError",
    "HTTPClient",
    "HTTPClientError",
    "JsonSnapshotFeed",
    "NewsArticle",
    "RateLimitError",
    "RetryConfig",
    "SeismicEvent",
    "SnapshotSource",
    "SocialPost",
    "USGSClient",
    "events_feed",
    "parse_items",
    "social_feed",
]
