"""
Base interface for snapshot sources.

A snapshot source returns the *complete* current state of one feed on
every fetch, never a delta: diffing against what was seen before is the
alert engine's job.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable
from typing import Any, Generic, TypeVar

from pydantic import ValidationError

from osint_alerts.feeds.http_client import RetryConfig
from osint_alerts.feeds.schemas import SnapshotItem

logger = logging.getLogger(__name__)

ItemT = TypeVar("ItemT", bound=SnapshotItem)


def parse_items(
    model: type[ItemT],
    raw_items: Iterable[Any],
    source: str,
) -> list[ItemT]:
    """
    Validate raw feed entries, skipping the malformed ones.

    Args:
        model: Item model to validate into.
        raw_items: Decoded JSON entries.
        source: Source name for log messages.

    Returns:
        Valid items in feed order.
    """
    items: list[ItemT] = []
    skipped = 0
    for raw in raw_items:
        try:
            items.append(model.model_validate(raw))
        except ValidationError as e:
            skipped += 1
            logger.debug("Skipping malformed %s item: %s", source, e.errors()[:1])
    if skipped:
        logger.warning("Skipped %d malformed %s items", skipped, source)
    return items


class SnapshotSource(ABC, Generic[ItemT]):
    """Fetches the full current snapshot of one source."""

    def __init__(
        self,
        retry_config: RetryConfig | None = None,
        timeout: float = 10.0,
    ) -> None:
        self._retry_config = retry_config or RetryConfig()
        self._timeout = timeout

    @property
    @abstractmethod
    def source(self) -> str:
        """Alert source this feed supplies ('earthquake', 'event', 'social')."""

    @abstractmethod
    async def fetch(self) -> list[ItemT]:
        """
        Fetch the current snapshot.

        Raises:
            HTTPClientError: If the feed could not be fetched or decoded.
        """
