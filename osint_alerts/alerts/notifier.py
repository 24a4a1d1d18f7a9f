"""
Alert presentation: visual message, severity-coded sound, and push.

The engine only decides *that* an alert exists and *what* it says; the
notifier decides how it is shown. Each of the three effects is
best-effort: a failing effect is logged and counted, never raised.

Effects:
- ConsoleToast: transient colored message on the terminal
- TerminalBell: 1/2/3 bells for medium/high/critical (skipped when muted)
- Push via NotificationDispatcher, only once permission is granted and
  nobody is attending the alert panel
"""

import asyncio
import logging
import sys
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Literal, TextIO

import click

from osint_alerts.alerts.dispatcher import NotificationDispatcher
from osint_alerts.alerts.schemas import Alert
from osint_alerts.observability.metrics import get_metrics

logger = logging.getLogger(__name__)

PushPermission = Literal["default", "granted", "denied"]

SEVERITY_COLORS = {
    "critical": "red",
    "high": "yellow",
    "medium": "cyan",
}


@dataclass(frozen=True)
class SoundPattern:
    """Beep pattern for one severity."""

    beeps: int
    interval: float


SOUND_PATTERNS: dict[str, SoundPattern] = {
    "medium": SoundPattern(beeps=1, interval=0.25),
    "high": SoundPattern(beeps=2, interval=0.25),
    "critical": SoundPattern(beeps=3, interval=0.25),
}


class ConsoleToast:
    """Writes a one-shot colored alert message to a terminal stream."""

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream

    def show(self, alert: Alert) -> None:
        stream = self._stream or sys.stderr
        color = SEVERITY_COLORS.get(alert.severity)
        click.secho(
            f"[{alert.severity_label}] {alert.title}",
            file=stream,
            fg=color,
            bold=alert.severity == "critical",
        )
        if alert.description:
            click.echo(f"  {alert.description}", file=stream)


class TerminalBell:
    """Rings the terminal bell with a severity-coded number of beeps.

    Beeps are spaced by the pattern interval; terminals merge back-to-back
    bells into one.
    """

    def __init__(
        self,
        stream: TextIO | None = None,
        sleep: Callable[[float], None] | None = None,
    ) -> None:
        self._stream = stream
        self._sleep = sleep or time.sleep

    def play(self, severity: str) -> None:
        stream = self._stream or sys.stdout
        pattern = SOUND_PATTERNS[severity]
        for i in range(pattern.beeps):
            if i:
                self._sleep(pattern.interval)
            stream.write("\a")
            stream.flush()


class AlertNotifier:
    """
    Presents each alert through toast, sound and push.

    Args:
        toast: Visual message effect (console toast by default).
        sound: Sound effect, or None for silence.
        dispatcher: Push dispatcher, or None to disable push.
        is_attended: Returns True while someone is watching the alerts,
            in which case push is skipped.
    """

    def __init__(
        self,
        toast: ConsoleToast | None = None,
        sound: TerminalBell | None = None,
        dispatcher: NotificationDispatcher | None = None,
        is_attended: Callable[[], bool] | None = None,
    ) -> None:
        self._toast = toast or ConsoleToast()
        self._sound = sound
        self._dispatcher = dispatcher
        self._is_attended = is_attended or (lambda: False)
        self._permission: PushPermission = "default"
        self._pending: set[asyncio.Task] = set()
        self._metrics = get_metrics()

    @property
    def permission(self) -> PushPermission:
        return self._permission

    def request_permission(self) -> PushPermission:
        """Resolve push permission once; later calls return the decision."""
        if self._permission == "default":
            has_channels = self._dispatcher is not None and bool(self._dispatcher.channels)
            self._permission = "granted" if has_channels else "denied"
            logger.info("Push permission %s", self._permission)
        return self._permission

    def notify(self, alert: Alert, play_sound: bool) -> None:
        try:
            self._toast.show(alert)
        except Exception as e:
            self._failed("toast", alert, e)

        if play_sound and self._sound is not None:
            try:
                self._sound.play(alert.severity)
            except Exception as e:
                self._failed("sound", alert, e)

        try:
            self._push(alert)
        except Exception as e:
            self._failed("push", alert, e)

    def _failed(self, effect: str, alert: Alert, error: Exception) -> None:
        logger.warning("Notification %s failed for alert %s: %s", effect, alert.id, error)
        self._metrics.record_notifier_failure(effect)

    def _push(self, alert: Alert) -> None:
        if self._dispatcher is None or self._permission != "granted":
            return
        if self._is_attended():
            return

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("No running event loop, push skipped for alert %s", alert.id)
            return

        task = loop.create_task(self._dispatcher.dispatch(alert))
        self._pending.add(task)
        task.add_done_callback(self._on_push_done)

    def _on_push_done(self, task: asyncio.Task) -> None:
        self._pending.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.warning("Push dispatch failed: %s", error)
            self._metrics.record_notifier_failure("push")

    async def drain(self) -> None:
        """Wait for in-flight pushes (used on shutdown and in tests)."""
        if self._pending:
            await asyncio.gather(*self._pending, return_exceptions=True)
