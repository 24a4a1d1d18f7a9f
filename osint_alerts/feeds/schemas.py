"""
Snapshot item schemas for the three polled sources.

Models accept the dashboard's camelCase JSON keys (``authorHandle``,
``likeCount``) as well as snake_case field names, and ignore anything
they do not use.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class SnapshotItem(BaseModel):
    """Base for items received in a source snapshot."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class SeismicEvent(SnapshotItem):
    """A single earthquake from the seismic feed. Identity is ``id``."""

    id: str
    magnitude: float
    place: str = ""
    latitude: float
    longitude: float
    url: str | None = None
    time: int | None = Field(default=None, description="Origin time, epoch ms")
    depth: float | None = None
    felt: int | None = None
    significance: int | None = None


class NewsArticle(SnapshotItem):
    """
    A news-cluster article. Identity is ``url``.

    Clusters carry no stable numeric id, so the article URL is the
    dedup key.
    """

    url: str
    title: str = ""
    latitude: float | None = None
    longitude: float | None = None
    source_domain: str | None = None
    location_name: str | None = None
    count: int | None = None


class SocialPost(SnapshotItem):
    """A post from the aggregated social feed. Identity is ``id``."""

    id: str
    author: str = ""
    author_handle: str
    content: str = ""
    url: str | None = None
    like_count: int | None = Field(default=None, ge=0)
    repost_count: int | None = Field(default=None, ge=0)
    platform: str | None = None
    topic: str | None = None
    timestamp: datetime | None = None

    @property
    def engagement(self) -> int:
        """Likes plus reposts, counting missing counters as zero."""
        return (self.like_count or 0) + (self.repost_count or 0)
