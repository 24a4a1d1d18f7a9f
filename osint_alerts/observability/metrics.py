"""
Prometheus metrics for monitoring the alert engine and its feeds.

Defines and exposes metrics for:
- Snapshot items checked and found new, per source
- Alerts generated, per source and severity
- Feed fetch latency and errors
- Notifier failures

Metrics are exposed via HTTP endpoint for Prometheus scraping.
"""

import logging

from prometheus_client import (
    REGISTRY,
    Counter,
    Gauge,
    Histogram,
    start_http_server,
)

from osint_alerts.config.settings import get_settings

logger = logging.getLogger(__name__)

# Buckets for fetch latency histograms (in seconds)
LATENCY_BUCKETS = (0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0)


class MetricsCollector:
    """
    Prometheus metrics collector for osint-alerts.

    Usage:
        metrics = get_metrics()
        metrics.start_server()

        metrics.record_alert("earthquake", "critical")
        metrics.record_fetch("social", count=50, latency=0.8)
    """

    def __init__(self):
        """Initialize Prometheus metrics."""

        # Engine counters
        self.items_checked = Counter(
            "osint_alerts_items_checked_total",
            "Total snapshot items passed to the engine",
            ["source"],
        )

        self.items_new = Counter(
            "osint_alerts_items_new_total",
            "Total snapshot items seen for the first time",
            ["source"],
        )

        self.alerts_generated = Counter(
            "osint_alerts_alerts_generated_total",
            "Total alerts added to the alert log",
            ["source", "severity"],
        )

        # Feed metrics
        self.fetch_latency = Histogram(
            "osint_alerts_fetch_latency_seconds",
            "Time to fetch one source snapshot",
            ["source"],
            buckets=LATENCY_BUCKETS,
        )

        self.fetch_errors = Counter(
            "osint_alerts_fetch_errors_total",
            "Total failed snapshot fetches",
            ["source", "error_type"],
        )

        self.snapshot_size = Gauge(
            "osint_alerts_snapshot_size",
            "Number of items in the latest snapshot",
            ["source"],
        )

        # Notification metrics
        self.notifier_failures = Counter(
            "osint_alerts_notifier_failures_total",
            "Total notification side effects that failed",
            ["effect"],  # toast, sound, push
        )

    def start_server(self, port: int | None = None) -> None:
        """
        Start Prometheus metrics HTTP server.

        Args:
            port: Port to expose metrics on (default from settings)
        """
        settings = get_settings()
        port = port or settings.metrics_port

        start_http_server(port, registry=REGISTRY)
        logger.info("Prometheus metrics server started on port %d", port)

    # Convenience methods

    def record_check(self, source: str, total: int, new: int) -> None:
        """
        Record one engine check of a source snapshot.

        Args:
            source: Source name
            total: Items in the snapshot
            new: Items not seen before (0 on cold start)
        """
        self.items_checked.labels(source=source).inc(total)
        if new:
            self.items_new.labels(source=source).inc(new)

    def record_alert(self, source: str, severity: str) -> None:
        """Record an alert added to the log."""
        self.alerts_generated.labels(source=source, severity=severity).inc()

    def record_fetch(self, source: str, count: int, latency: float) -> None:
        """
        Record a successful snapshot fetch.

        Args:
            source: Source name
            count: Items fetched
            latency: Fetch duration in seconds
        """
        self.snapshot_size.labels(source=source).set(count)
        self.fetch_latency.labels(source=source).observe(latency)

    def record_fetch_error(self, source: str, error_type: str) -> None:
        """Record a failed snapshot fetch."""
        self.fetch_errors.labels(source=source, error_type=error_type).inc()

    def record_notifier_failure(self, effect: str) -> None:
        """Record a notification effect that raised."""
        self.notifier_failures.labels(effect=effect).inc()


# Global metrics instance
_metrics: MetricsCollector | None = None


def get_metrics() -> MetricsCollector:
    """Get global metrics collector instance."""
    global _metrics
    if _metrics is None:
        _metrics = MetricsCollector()
    return _metrics
