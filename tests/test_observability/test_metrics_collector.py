"""Tests for the Prometheus metrics collector."""

from prometheus_client import REGISTRY

from osint_alerts.observability.metrics import get_metrics


def _sample(name: str, **labels) -> float:
    return REGISTRY.get_sample_value(name, labels) or 0.0


class TestMetricsCollector:
    def test_singleton(self):
        assert get_metrics() is get_metrics()

    def test_alerts_counted_by_engine(self, engine):
        before = _sample(
            "osint_alerts_alerts_generated_total", source="earthquake", severity="critical",
        )
        engine.trigger_test_alert("earthquake")
        after = _sample(
            "osint_alerts_alerts_generated_total", source="earthquake", severity="critical",
        )
        assert after == before + 1

    def test_check_counts_new_items(self, engine, make_post):
        before = _sample("osint_alerts_items_new_total", source="social")
        engine.check_social_posts([make_post()])
        engine.check_social_posts([make_post(), make_post()])
        after = _sample("osint_alerts_items_new_total", source="social")

        assert after == before + 2

    def test_fetch_metrics(self):
        metrics = get_metrics()
        metrics.record_fetch("event", count=7, latency=0.3)
        metrics.record_fetch_error("event", "FeedError")

        assert _sample("osint_alerts_snapshot_size", source="event") == 7
        assert _sample("osint_alerts_fetch_errors_total", source="event", error_type="FeedError") >= 1

    def test_notifier_failure(self):
        before = _sample("osint_alerts_notifier_failures_total", effect="sound")
        get_metrics().record_notifier_failure("sound")
        assert _sample("osint_alerts_notifier_failures_total", effect="sound") == before + 1
