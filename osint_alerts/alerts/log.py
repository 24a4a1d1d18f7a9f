"""
Capacity-bounded alert ledger with read tracking.

The log is the only place alerts are created: it assigns identity and
timestamp, keeps alerts newest-first, and maintains ``unread_count`` as
an exact count of unread alerts in the list. Every added alert triggers
one notifier call; a failing notifier never breaks ``add_alert``.
"""

import itertools
import logging
import time
from datetime import datetime, timezone
from typing import Protocol

from osint_alerts.alerts.schemas import Alert, AlertDraft

logger = logging.getLogger(__name__)


class AlertSink(Protocol):
    """Receives every alert the log accepts."""

    def notify(self, alert: Alert, play_sound: bool) -> None: ...


class AlertLog:
    """
    Newest-first list of alerts holding at most ``max_alerts`` entries.

    Lifecycle operations (mark read, dismiss) on unknown ids are no-ops.
    The mute flag only silences sound; visual and push notifications
    still happen while muted.
    """

    def __init__(self, max_alerts: int = 50, notifier: AlertSink | None = None) -> None:
        if max_alerts < 1:
            raise ValueError(f"max_alerts must be >= 1, got {max_alerts}")
        self._max_alerts = max_alerts
        self._notifier = notifier
        self._alerts: list[Alert] = []
        self._unread_count = 0
        self._is_muted = False
        self._is_panel_open = False
        self._counter = itertools.count(1)

    @property
    def alerts(self) -> tuple[Alert, ...]:
        """Alerts newest-first."""
        return tuple(self._alerts)

    @property
    def unread_count(self) -> int:
        return self._unread_count

    @property
    def is_muted(self) -> bool:
        return self._is_muted

    @property
    def is_panel_open(self) -> bool:
        return self._is_panel_open

    @property
    def max_alerts(self) -> int:
        return self._max_alerts

    def __len__(self) -> int:
        return len(self._alerts)

    def _next_id(self) -> str:
        return f"alert-{int(time.time() * 1000)}-{next(self._counter)}"

    def get(self, alert_id: str) -> Alert | None:
        for alert in self._alerts:
            if alert.id == alert_id:
                return alert
        return None

    def add_alert(self, draft: AlertDraft) -> Alert:
        """
        Turn a draft into an unread alert and put it at the head of the log.

        Evicts the oldest alerts beyond capacity, then notifies exactly
        once (sound only when not muted).

        Args:
            draft: Alert content without identity.

        Returns:
            The stored alert.
        """
        alert = Alert.from_draft(
            draft,
            alert_id=self._next_id(),
            timestamp=datetime.now(timezone.utc),
        )

        self._alerts.insert(0, alert)
        self._unread_count += 1

        evicted = self._alerts[self._max_alerts:]
        if evicted:
            del self._alerts[self._max_alerts:]
            self._unread_count -= sum(1 for a in evicted if not a.read)

        logger.info(
            "Alert added: %s [%s/%s] %s",
            alert.id, alert.source, alert.severity, alert.title,
        )

        if self._notifier is not None:
            try:
                self._notifier.notify(alert, play_sound=not self._is_muted)
            except Exception as e:
                logger.warning("Notifier failed for alert %s: %s", alert.id, e)

        return alert

    def mark_as_read(self, alert_id: str) -> bool:
        """Mark one alert read. Returns True if an unread alert was flipped."""
        alert = self.get(alert_id)
        if alert is None or alert.read:
            return False
        alert.read = True
        self._unread_count -= 1
        return True

    def mark_all_as_read(self) -> None:
        for alert in self._alerts:
            alert.read = True
        self._unread_count = 0

    def dismiss_alert(self, alert_id: str) -> bool:
        """Remove an alert. Returns True if it was present."""
        alert = self.get(alert_id)
        if alert is None:
            return False
        self._alerts.remove(alert)
        if not alert.read:
            self._unread_count -= 1
        return True

    def toggle_mute(self) -> bool:
        self._is_muted = not self._is_muted
        return self._is_muted

    def toggle_panel(self) -> bool:
        self._is_panel_open = not self._is_panel_open
        return self._is_panel_open

    def close_panel(self) -> None:
        self._is_panel_open = False
