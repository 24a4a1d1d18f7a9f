"""USGS earthquake summary feed (GeoJSON)."""

from typing import Any

from osint_alerts.feeds.base import SnapshotSource, parse_items
from osint_alerts.feeds.http_client import FeedError, HTTPClient, RetryConfig
from osint_alerts.feeds.schemas import SeismicEvent

USGS_BASE_URL = "https://earthquake.usgs.gov/earthquakes/feed/v1.0/summary"


def summary_url(period: str = "week", min_magnitude: str = "4.5") -> str:
    """
    Build a summary feed URL.

    Args:
        period: hour, day, week or month
        min_magnitude: significant, 4.5, 2.5, 1.0 or all
    """
    return f"{USGS_BASE_URL}/{min_magnitude}_{period}.geojson"


def feature_to_event(feature: dict[str, Any]) -> dict[str, Any]:
    """Flatten a GeoJSON feature into SeismicEvent fields."""
    properties = feature.get("properties") or {}
    coordinates = (feature.get("geometry") or {}).get("coordinates") or []
    return {
        "id": feature.get("id"),
        "magnitude": properties.get("mag"),
        "place": properties.get("place") or "",
        "time": properties.get("time"),
        "url": properties.get("url"),
        "felt": properties.get("felt"),
        "significance": properties.get("sig"),
        "longitude": coordinates[0] if len(coordinates) > 0 else None,
        "latitude": coordinates[1] if len(coordinates) > 1 else None,
        "depth": coordinates[2] if len(coordinates) > 2 else None,
    }


class USGSClient(SnapshotSource[SeismicEvent]):
    """
    Fetches earthquakes from a USGS summary feed.

    Features without a magnitude or position are dropped.
    """

    def __init__(
        self,
        url: str | None = None,
        retry_config: RetryConfig | None = None,
        timeout: float = 10.0,
    ) -> None:
        super().__init__(retry_config=retry_config, timeout=timeout)
        self._url = url or summary_url()

    @property
    def source(self) -> str:
        return "earthquake"

    @property
    def url(self) -> str:
        return self._url

    async def fetch(self) -> list[SeismicEvent]:
        async with HTTPClient(self._retry_config, timeout=self._timeout) as client:
            data = await client.get_json(self._url)

        if not isinstance(data, dict) or not isinstance(data.get("features"), list):
            raise FeedError(f"USGS response from {self._url} has no feature list")

        return parse_items(
            SeismicEvent,
            (feature_to_event(f) for f in data["features"] if isinstance(f, dict)),
            self.source,
        )
