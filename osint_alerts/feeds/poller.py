"""
Feed poller - drives the alert engine from periodic snapshot fetches.

Runs one task per source at its own interval. Each task awaits its fetch
and then calls the engine synchronously, so engine state only changes
between awaits and no locking is needed.

Features:
- Independent poll intervals per source
- Per-cycle error isolation (a failed fetch just means no new items)
- Graceful shutdown
- Metrics collection
"""

import asyncio
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any

import structlog

from osint_alerts.alerts.engine import AlertEngine
from osint_alerts.alerts.schemas import Alert
from osint_alerts.config.settings import Settings
from osint_alerts.feeds.base import SnapshotSource
from osint_alerts.feeds.http_client import RetryConfig
from osint_alerts.feeds.snapshot import events_feed, social_feed
from osint_alerts.feeds.usgs import USGSClient
from osint_alerts.observability.logging import bind_context
from osint_alerts.observability.metrics import get_metrics

logger = structlog.get_logger(__name__)


@dataclass
class ScheduledFeed:
    """A snapshot source and how often to poll it."""

    feed: SnapshotSource
    interval: float


def feeds_from_settings(settings: Settings) -> list[ScheduledFeed]:
    """Create the feeds that are configured in settings."""
    retry = RetryConfig(
        max_retries=settings.max_http_retries,
        max_backoff_seconds=settings.max_backoff_seconds,
    )
    timeout = settings.http_timeout_seconds

    feeds = [
        ScheduledFeed(
            USGSClient(settings.usgs_feed_url, retry_config=retry, timeout=timeout),
            settings.earthquake_poll_seconds,
        )
    ]
    if settings.events_feed_url:
        feeds.append(ScheduledFeed(
            events_feed(settings.events_feed_url, retry_config=retry, timeout=timeout),
            settings.events_poll_seconds,
        ))
    if settings.social_feed_url:
        feeds.append(ScheduledFeed(
            social_feed(settings.social_feed_url, retry_config=retry, timeout=timeout),
            settings.social_poll_seconds,
        ))
    return feeds


class FeedPoller:
    """
    Polls snapshot sources and hands each snapshot to the engine.

    Usage:
        poller = FeedPoller(engine, feeds_from_settings(settings))
        await poller.start()  # Runs until stopped
    """

    def __init__(self, engine: AlertEngine, feeds: Sequence[ScheduledFeed]) -> None:
        self._engine = engine
        self._feeds = list(feeds)
        self._running = False
        self._tasks: list[asyncio.Task] = []
        self._metrics = get_metrics()
        self._checks: dict[str, Callable[[list[Any]], list[Alert]]] = {
            "earthquake": engine.check_earthquakes,
            "event": engine.check_events,
            "social": engine.check_social_posts,
        }

        for scheduled in self._feeds:
            if scheduled.feed.source not in self._checks:
                raise ValueError(f"Unknown feed source {scheduled.feed.source!r}")

        logger.info(
            "Feed poller initialized",
            feeds={f.feed.source: f.interval for f in self._feeds},
        )

    @property
    def is_running(self) -> bool:
        return self._running

    async def poll(self, feed: SnapshotSource) -> list[Alert]:
        """
        Fetch one snapshot and check it.

        Empty snapshots are not passed on: a source that has produced
        nothing yet should not be seeded with nothing.

        Returns:
            Alerts generated by this cycle (empty on fetch failure).
        """
        start_time = time.monotonic()
        try:
            items = await feed.fetch()
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.error("Feed fetch failed", source=feed.source, error=str(e))
            self._metrics.record_fetch_error(feed.source, type(e).__name__)
            return []

        elapsed = time.monotonic() - start_time
        self._metrics.record_fetch(feed.source, len(items), elapsed)

        if not items:
            logger.debug("Empty snapshot, skipping check", source=feed.source)
            return []

        alerts = self._checks[feed.source](items)
        logger.info(
            "Snapshot checked",
            source=feed.source,
            items=len(items),
            alerts=len(alerts),
            elapsed_seconds=round(elapsed, 2),
        )
        return alerts

    async def run_once(self) -> dict[str, list[Alert]]:
        """Poll every feed once, in order."""
        return {
            scheduled.feed.source: await self.poll(scheduled.feed)
            for scheduled in self._feeds
        }

    async def _run_feed(self, scheduled: ScheduledFeed) -> None:
        bind_context(source=scheduled.feed.source)
        logger.info("Starting feed", interval=scheduled.interval)

        while self._running:
            await self.poll(scheduled.feed)
            await asyncio.sleep(scheduled.interval)

        logger.info("Feed stopped")

    async def start(self) -> None:
        """Run all feeds until stop() is called."""
        self._running = True
        logger.info("Starting feed poller")

        self._tasks = [
            asyncio.create_task(
                self._run_feed(scheduled),
                name=f"feed_{scheduled.feed.source}",
            )
            for scheduled in self._feeds
        ]

        try:
            await asyncio.gather(*self._tasks, return_exceptions=True)
        except asyncio.CancelledError:
            logger.info("Feed poller cancelled")
        finally:
            self._tasks.clear()
            self._running = False

    async def stop(self) -> None:
        """Stop the poller gracefully."""
        logger.info("Stopping feed poller")
        self._running = False

        for task in self._tasks:
            task.cancel()

        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)
