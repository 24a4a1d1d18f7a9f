"""Push channels for delivering alerts outside the terminal.

Every channel turns an alert into a JSON body and POSTs it somewhere;
subclasses only decide where and what the body looks like. Any channel
can be wrapped in a ``CircuitBreaker`` so that an endpoint which keeps
failing is left alone for a while.
"""

import enum
import logging
import time
from abc import ABC, abstractmethod
from typing import Any

import httpx

from osint_alerts.alerts.schemas import Alert

logger = logging.getLogger(__name__)

SEVERITY_EMOJI = {
    "critical": ":red_circle:",
    "high": ":large_orange_circle:",
    "medium": ":large_yellow_circle:",
}


class NotificationChannel(ABC):
    """A destination for pushed alerts."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Short channel name used in logs and delivery results."""

    @abstractmethod
    async def send(self, alert: Alert) -> bool:
        """Push one alert.

        Returns:
            True on a 2xx response. Failures are logged and reported as
            False, never raised.
        """


class HTTPPushChannel(NotificationChannel):
    """POSTs a JSON rendering of each alert to a fixed URL.

    A short-lived ``httpx.AsyncClient`` is opened per send; pushes are
    rare enough that pooling buys nothing.
    """

    def __init__(
        self,
        url: str,
        headers: dict[str, str] | None = None,
        timeout: float = 10.0,
    ) -> None:
        self._url = url
        self._headers = headers or {}
        self._timeout = timeout

    @abstractmethod
    def build_payload(self, alert: Alert) -> dict[str, Any]:
        """Render an alert as the JSON body for this endpoint."""

    async def send(self, alert: Alert) -> bool:
        body = self.build_payload(alert)
        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                response = await client.post(self._url, json=body, headers=self._headers)
        except httpx.TimeoutException:
            logger.warning("%s push of %s timed out", self.name, alert.id)
            return False
        except httpx.HTTPError as e:
            logger.warning("%s push of %s failed: %s", self.name, alert.id, e)
            return False

        if not response.is_success:
            logger.warning(
                "%s push of %s rejected with HTTP %d",
                self.name, alert.id, response.status_code,
            )
            return False
        return True


class WebhookChannel(HTTPPushChannel):
    """Generic webhook receiving ``Alert.to_dict()`` as its body."""

    @property
    def name(self) -> str:
        return "webhook"

    def build_payload(self, alert: Alert) -> dict[str, Any]:
        return alert.to_dict()


class SlackChannel(HTTPPushChannel):
    """Slack incoming webhook, rendered with Block Kit.

    The message links back to the originating item and mentions the map
    position when the alert has one.
    """

    def __init__(
        self,
        webhook_url: str,
        channel: str | None = None,
        timeout: float = 10.0,
    ) -> None:
        super().__init__(webhook_url, timeout=timeout)
        self._channel = channel

    @property
    def name(self) -> str:
        return "slack"

    def build_payload(self, alert: Alert) -> dict[str, Any]:
        emoji = SEVERITY_EMOJI.get(alert.severity, ":white_circle:")

        body = alert.description or alert.title
        if alert.url:
            body += f"\n<{alert.url}|Open source>"

        footer = [f"*Severity:* {alert.severity}", f"*Source:* {alert.source}"]
        if alert.coordinates is not None:
            lat, lon = alert.coordinates.latitude, alert.coordinates.longitude
            footer.append(f"*Location:* {lat:.2f}, {lon:.2f}")

        message: dict[str, Any] = {
            "blocks": [
                {
                    "type": "header",
                    "text": {
                        "type": "plain_text",
                        "text": f"{emoji} [{alert.severity_label}] {alert.title}",
                    },
                },
                {"type": "section", "text": {"type": "mrkdwn", "text": body}},
                {
                    "type": "context",
                    "elements": [{"type": "mrkdwn", "text": " | ".join(footer)}],
                },
            ],
        }
        if self._channel:
            message["channel"] = self._channel
        return message


class CircuitState(enum.Enum):
    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half_open"


class CircuitBreaker(NotificationChannel):
    """Stops calling a channel after repeated consecutive failures.

    Closed: every send goes through. Open: sends are refused until
    ``recovery_timeout`` seconds have passed since the last failure.
    Half-open: one trial send decides between closed and open again.
    """

    def __init__(
        self,
        channel: NotificationChannel,
        failure_threshold: int = 5,
        recovery_timeout: float = 60.0,
    ) -> None:
        self._inner = channel
        self._threshold = failure_threshold
        self._cooldown = recovery_timeout
        self._state = CircuitState.CLOSED
        self._failures = 0
        self._opened_at = 0.0

    @property
    def name(self) -> str:
        return self._inner.name

    @property
    def state(self) -> CircuitState:
        return self._state

    @property
    def failure_count(self) -> int:
        return self._failures

    def _allow(self) -> bool:
        if self._state is not CircuitState.OPEN:
            return True
        if time.monotonic() - self._opened_at < self._cooldown:
            return False
        self._state = CircuitState.HALF_OPEN
        logger.info("Circuit for %s half-open, trying one send", self.name)
        return True

    def _succeeded(self) -> None:
        if self._state is CircuitState.HALF_OPEN:
            logger.info("Circuit for %s closed after a successful trial send", self.name)
        self._state = CircuitState.CLOSED
        self._failures = 0

    def _failed(self) -> None:
        self._failures += 1
        self._opened_at = time.monotonic()
        on_trial = self._state is CircuitState.HALF_OPEN
        if on_trial or self._failures >= self._threshold:
            self._state = CircuitState.OPEN
            logger.warning(
                "Circuit for %s open (%d consecutive failures)",
                self.name, self._failures,
            )

    async def send(self, alert: Alert) -> bool:
        if not self._allow():
            logger.debug("Circuit for %s open, dropping %s", self.name, alert.id)
            return False

        if await self._inner.send(alert):
            self._succeeded()
            return True

        self._failed()
        return False
