"""Generic JSON snapshot feed for the dashboard's news and social endpoints."""

from typing import Any

from osint_alerts.feeds.base import ItemT, SnapshotSource, parse_items
from osint_alerts.feeds.http_client import FeedError, HTTPClient, RetryConfig
from osint_alerts.feeds.schemas import NewsArticle, SocialPost


def extract_entries(payload: Any) -> list[Any]:
    """
    Find the item list in a decoded payload.

    Accepts a bare JSON array or an object wrapping it under ``items``,
    ``data``, ``events`` or ``posts``.

    Raises:
        FeedError: If no item list is present.
    """
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict):
        for key in ("items", "data", "events", "posts"):
            value = payload.get(key)
            if isinstance(value, list):
                return value
    raise FeedError(f"Snapshot payload has no item list: {type(payload).__name__}")


class JsonSnapshotFeed(SnapshotSource[ItemT]):
    """
    Fetches a JSON array of items and validates it into ``model``.

    Usage:
        feed = JsonSnapshotFeed("social", "http://localhost:3000/api/social", SocialPost)
        posts = await feed.fetch()
    """

    def __init__(
        self,
        source: str,
        url: str,
        model: type[ItemT],
        retry_config: RetryConfig | None = None,
        timeout: float = 10.0,
    ) -> None:
        super().__init__(retry_config=retry_config, timeout=timeout)
        self._source = source
        self._url = url
        self._model = model

    @property
    def source(self) -> str:
        return self._source

    @property
    def url(self) -> str:
        return self._url

    async def fetch(self) -> list[ItemT]:
        async with HTTPClient(self._retry_config, timeout=self._timeout) as client:
            payload = await client.get_json(self._url)
        return parse_items(self._model, extract_entries(payload), self._source)


def events_feed(url: str, **kwargs: Any) -> JsonSnapshotFeed[NewsArticle]:
    return JsonSnapshotFeed("event", url, NewsArticle, **kwargs)


def social_feed(url: str, **kwargs: Any) -> JsonSnapshotFeed[SocialPost]:
    return JsonSnapshotFeed("social", url, SocialPost, **kwargs)
