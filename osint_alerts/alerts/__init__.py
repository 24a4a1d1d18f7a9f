"""Alert detection and correlation engine.

Components:
- Alert / AlertDraft: Dataclasses for stored alerts and their drafts
- AlertConfig: Pydantic settings for thresholds and capacities
- NoveltyTracker: Per-source seen-set with cold-start seeding
- EngagementTracker: Rolling per-account engagement averages
- CrossSourceCorrelator / TermExtractor: Multi-account term correlation
- AlertLog: Capacity-bounded read/unread ledger
- AlertEngine: Orchestrator owning all detection state
- AlertNotifier: Toast, sound and push presentation
- NotificationChannel / WebhookChannel / SlackChannel: Push channels
- NotificationConfig / NotificationDispatcher: Push dispatch
"""

from osint_alerts.alerts.channels import (
    CircuitBreaker,
    NotificationChannel,
    SlackChannel,
    WebhookChannel,
)
from osint_alerts.alerts.config import AlertConfig
from osint_alerts.alerts.correlation import (
    CrossSourceCorrelator,
    RegexTermExtractor,
    SpacyTermExtractor,
    TermExtractor,
)
from osint_alerts.alerts.dispatcher import NotificationConfig, NotificationDispatcher
from osint_alerts.alerts.engagement import EngagementTracker
from osint_alerts.alerts.engine import AlertEngine
from osint_alerts.alerts.log import AlertLog
from osint_alerts.alerts.notifier import AlertNotifier, ConsoleToast, TerminalBell
from osint_alerts.alerts.novelty import NoveltyDiff, NoveltyTracker
from osint_alerts.alerts.schemas import (
    SEVERITY_RANK,
    VALID_SEVERITIES,
    VALID_SOURCES,
    Alert,
    AlertDraft,
    AlertSeverity,
    AlertSource,
    Coordinates,
)

__all__ = [
    "Alert",
    "AlertConfig",
    "AlertDraft",
    "AlertEngine",
    "AlertLog",
    "AlertNotifier",
    "AlertSeverity",
    "AlertSource",
    "CircuitBreaker",
    "ConsoleToast",
    "Coordinates",
    "CrossSourceCorrelator",
    "EngagementTracker",
    "NotificationChannel",
    "NotificationConfig",
    "NotificationDispatcher",
    "NoveltyDiff",
    "NoveltyTracker",
    "RegexTermExtractor",
    "SEVERITY_RANK",
    "SlackChannel",
    "SpacyTermExtractor",
    "TerminalBell",
    "TermExtractor",
    "VALID_SEVERITIES",
    "VALID_SOURCES",
    "WebhookChannel",
]
