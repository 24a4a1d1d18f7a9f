"""Observability layer - logging and metrics."""

from osint_alerts.observability.logging import setup_logging
from osint_alerts.observability.metrics import MetricsCollector, get_metrics

__all__ = ["setup_logging", "MetricsCollector", "get_metrics"]
