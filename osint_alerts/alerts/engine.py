"""
Alert engine orchestrating novelty tracking, triggers and the alert log.

One engine instance owns all detection state for a process and is passed
to whichever scheduler drives the periodic checks. Every ``check_*`` call
is synchronous and runs to completion, so state only changes at call
boundaries and no locking is needed.
"""

import logging
from collections.abc import Iterable

from osint_alerts.alerts.config import AlertConfig
from osint_alerts.alerts.correlation import (
    CrossSourceCorrelator,
    RegexTermExtractor,
    TermExtractor,
)
from osint_alerts.alerts.engagement import EngagementTracker
from osint_alerts.alerts.log import AlertLog, AlertSink
from osint_alerts.alerts.novelty import NoveltyTracker
from osint_alerts.alerts.schemas import Alert, AlertDraft, Coordinates
from osint_alerts.alerts.triggers import (
    check_correlations,
    check_engagement_spike,
    check_keywords,
    classify_earthquake,
    summarize_articles,
)
from osint_alerts.feeds.schemas import NewsArticle, SeismicEvent, SocialPost
from osint_alerts.observability.metrics import get_metrics

logger = logging.getLogger(__name__)

# Canned alerts for operator smoke tests, keyed by source
TEST_ALERTS: dict[str, AlertDraft] = {
    "earthquake": AlertDraft(
        title="M7.2 Earthquake",
        description="120km SW of Tonga Islands",
        severity="critical",
        source="earthquake",
        url="https://earthquake.usgs.gov",
        coordinates=Coordinates(latitude=-21.2, longitude=-175.2),
    ),
    "event": AlertDraft(
        title="3 new articles",
        description="Ukraine confirms counter-offensive in Kherson region",
        severity="medium",
        source="event",
        url="https://news.google.com",
        coordinates=Coordinates(latitude=46.6, longitude=32.6),
    ),
    "social": AlertDraft(
        title="OSINT: @IntelCrab",
        description=(
            "BREAKING: Multiple explosions reported in southern Beirut, "
            "large plumes of smoke visible"
        ),
        severity="high",
        source="social",
        url="https://bsky.app",
    ),
}


class AlertEngine:
    """Decides, on every refresh, whether anything new is worth an alert.

    Combines per-source novelty trackers with stateless trigger functions,
    a rolling engagement tracker and a cross-source correlator, and writes
    the results to an AlertLog.

    Usage:
        engine = AlertEngine(notifier=AlertNotifier())
        engine.check_earthquakes(quakes)      # first call only seeds
        engine.check_earthquakes(new_quakes)  # alerts on new M6+ quakes
    """

    def __init__(
        self,
        config: AlertConfig | None = None,
        notifier: AlertSink | None = None,
        term_extractor: TermExtractor | None = None,
    ) -> None:
        self._config = config or AlertConfig()
        self._notifier = notifier
        self._log = AlertLog(max_alerts=self._config.max_alerts, notifier=notifier)
        self._metrics = get_metrics()

        self._earthquakes: NoveltyTracker[SeismicEvent] = NoveltyTracker(
            "earthquake", lambda q: q.id
        )
        self._events: NoveltyTracker[NewsArticle] = NoveltyTracker(
            "event", lambda a: a.url
        )
        self._social: NoveltyTracker[SocialPost] = NoveltyTracker(
            "social", lambda p: p.id
        )

        self._engagement = EngagementTracker(window=self._config.rolling_window)
        self._correlator = CrossSourceCorrelator(
            extractor=term_extractor or RegexTermExtractor(self._config.gazetteer),
            min_handles=self._config.correlation_min_handles,
        )

    # ── Read-only state ───────────────────────────────────────

    @property
    def config(self) -> AlertConfig:
        return self._config

    @property
    def log(self) -> AlertLog:
        return self._log

    @property
    def engagement(self) -> EngagementTracker:
        return self._engagement

    @property
    def alerts(self) -> tuple[Alert, ...]:
        return self._log.alerts

    @property
    def unread_count(self) -> int:
        return self._log.unread_count

    @property
    def is_muted(self) -> bool:
        return self._log.is_muted

    @property
    def is_panel_open(self) -> bool:
        return self._log.is_panel_open

    def is_initialized(self, source: str) -> bool:
        trackers = {
            "earthquake": self._earthquakes,
            "event": self._events,
            "social": self._social,
        }
        if source not in trackers:
            raise ValueError(f"Unknown source {source!r}")
        return trackers[source].initialized

    # ── Alert log operations ──────────────────────────────────

    def add_alert(self, draft: AlertDraft) -> Alert:
        alert = self._log.add_alert(draft)
        self._metrics.record_alert(alert.source, alert.severity)
        return alert

    def mark_as_read(self, alert_id: str) -> bool:
        return self._log.mark_as_read(alert_id)

    def mark_all_as_read(self) -> None:
        self._log.mark_all_as_read()

    def dismiss_alert(self, alert_id: str) -> bool:
        return self._log.dismiss_alert(alert_id)

    def toggle_mute(self) -> bool:
        return self._log.toggle_mute()

    def toggle_panel(self) -> bool:
        return self._log.toggle_panel()

    def close_panel(self) -> None:
        self._log.close_panel()

    def request_desktop_permission(self) -> str | None:
        """Ask the notifier to resolve its push permission, if it has one."""
        request = getattr(self._notifier, "request_permission", None)
        if request is None:
            return None
        return request()

    def trigger_test_alert(self, source: str) -> Alert:
        """Emit the canned sample alert for a source."""
        if source not in TEST_ALERTS:
            raise ValueError(
                f"Unknown source {source!r}. Must be one of: {sorted(TEST_ALERTS)}"
            )
        return self.add_alert(TEST_ALERTS[source])

    # ── Source checks ─────────────────────────────────────────

    def _emit(self, drafts: Iterable[AlertDraft | None]) -> list[Alert]:
        return [self.add_alert(d) for d in drafts if d is not None]

    def check_earthquakes(self, quakes: Iterable[SeismicEvent]) -> list[Alert]:
        """Alert on each new quake at or above the high magnitude.

        Args:
            quakes: Full current seismic snapshot.

        Returns:
            Alerts added by this call.
        """
        diff = self._earthquakes.observe(quakes)
        self._metrics.record_check("earthquake", len(diff.items), len(diff.new_items))
        if diff.cold_start:
            logger.info("Earthquake tracker seeded with %d items", len(diff.items))
            return []
        if not diff:
            return []

        return self._emit(classify_earthquake(q, self._config) for q in diff.new_items)

    def check_events(self, articles: Iterable[NewsArticle]) -> list[Alert]:
        """Alert once per call when new news-cluster articles appear.

        Args:
            articles: Full current news-cluster snapshot.

        Returns:
            Alerts added by this call (at most one).
        """
        diff = self._events.observe(articles)
        self._metrics.record_check("event", len(diff.items), len(diff.new_items))
        if diff.cold_start:
            logger.info("Event tracker seeded with %d items", len(diff.items))
            return []
        if not diff:
            return []

        return self._emit([summarize_articles(diff.new_items)])

    def check_social_posts(self, posts: Iterable[SocialPost]) -> list[Alert]:
        """Run keyword, engagement spike and correlation checks on new posts.

        The seeding snapshot only primes the rolling engagement histories.
        Spike checks use each account's average from before this batch;
        every new post is still recorded, so the history includes the
        post that caused a spike. Keyword alerts for the whole batch come
        first, then spike alerts, then correlation alerts.

        Args:
            posts: Full current social snapshot.

        Returns:
            Alerts added by this call.
        """
        diff = self._social.observe(posts)
        self._metrics.record_check("social", len(diff.items), len(diff.new_items))

        if diff.cold_start:
            for post in diff.items:
                self._engagement.record(post.author_handle, post.engagement)
            logger.info(
                "Social tracker seeded with %d items from %d accounts",
                len(diff.items), self._engagement.account_count,
            )
            return []
        if not diff:
            return []

        new_posts = diff.new_items

        # Every post in the batch is measured against its account average
        # from before the batch
        baselines = {
            post.author_handle: self._engagement.average(post.author_handle)
            for post in new_posts
        }
        for post in new_posts:
            self._engagement.record(post.author_handle, post.engagement)

        added = self._emit(check_keywords(p, self._config) for p in new_posts)
        added += self._emit(
            check_engagement_spike(p, baselines[p.author_handle], self._config)
            for p in new_posts
        )

        correlated = self._correlator.correlate(new_posts)
        added.extend(self._emit(check_correlations(correlated)))

        return added
