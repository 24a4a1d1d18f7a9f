"""Fan-out of pushed alerts to every configured channel.

Channels are sent to concurrently. Each one gets a bounded number of
attempts within the same dispatch and sits behind its own circuit
breaker. There is no persistent queue: once the attempts are used up the
push is logged and given up.
"""

import asyncio
import logging

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from osint_alerts.alerts.channels import (
    CircuitBreaker,
    NotificationChannel,
    SlackChannel,
    WebhookChannel,
)
from osint_alerts.alerts.schemas import Alert
from osint_alerts.config.settings import Settings

logger = logging.getLogger(__name__)


class NotificationConfig(BaseSettings):
    """Push retry and circuit breaker tuning (``NOTIFICATIONS_*``)."""

    model_config = SettingsConfigDict(
        env_prefix="NOTIFICATIONS_",
        case_sensitive=False,
        extra="ignore",
    )

    retry_max_attempts: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Attempts per channel for one alert",
    )
    retry_delays: list[float] = Field(
        default=[1.0, 5.0, 15.0],
        description="Seconds to wait after attempt N fails; the last value repeats",
    )
    circuit_breaker_threshold: int = Field(
        default=5,
        ge=1,
        description="Consecutive failed sends that open a channel's circuit",
    )
    circuit_breaker_recovery_seconds: float = Field(
        default=60.0,
        ge=1.0,
        description="How long an open circuit waits before a trial send",
    )


class NotificationDispatcher:
    """
    Pushes alerts to a fixed set of channels.

    Usage:
        dispatcher = NotificationDispatcher.from_settings(get_settings())
        if dispatcher:
            await dispatcher.dispatch(alert)
    """

    def __init__(
        self,
        channels: list[NotificationChannel],
        config: NotificationConfig | None = None,
    ) -> None:
        self._config = config or NotificationConfig()
        self._channels = [self._guard(ch) for ch in channels]

    def _guard(self, channel: NotificationChannel) -> CircuitBreaker:
        if isinstance(channel, CircuitBreaker):
            return channel
        return CircuitBreaker(
            channel,
            failure_threshold=self._config.circuit_breaker_threshold,
            recovery_timeout=self._config.circuit_breaker_recovery_seconds,
        )

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        config: NotificationConfig | None = None,
    ) -> "NotificationDispatcher | None":
        """Build a dispatcher for the push targets named in settings.

        Returns:
            Dispatcher, or None when neither a webhook nor Slack is set.
        """
        timeout = settings.http_timeout_seconds
        channels: list[NotificationChannel] = []
        if settings.webhook_url:
            channels.append(WebhookChannel(settings.webhook_url, timeout=timeout))
        if settings.slack_webhook_url:
            channels.append(
                SlackChannel(
                    settings.slack_webhook_url,
                    channel=settings.slack_channel,
                    timeout=timeout,
                )
            )
        return cls(channels, config=config) if channels else None

    @property
    def channels(self) -> list[CircuitBreaker]:
        return self._channels

    async def dispatch(self, alert: Alert) -> list[tuple[str, bool]]:
        """Push one alert to every channel.

        Returns:
            ``(channel name, delivered)`` per channel, in channel order.
        """
        outcomes = await asyncio.gather(
            *(self._deliver(channel, alert) for channel in self._channels)
        )
        results = [(ch.name, ok) for ch, ok in zip(self._channels, outcomes)]
        self._log_outcome(alert, results)
        return results

    def _delay_for(self, attempt: int) -> float:
        delays = self._config.retry_delays
        if not delays:
            return 0.0
        return delays[min(attempt, len(delays) - 1)]

    async def _deliver(self, channel: NotificationChannel, alert: Alert) -> bool:
        attempts = self._config.retry_max_attempts

        for attempt in range(1, attempts + 1):
            try:
                delivered = await channel.send(alert)
            except Exception as e:
                logger.warning(
                    "Push of %s to %s raised on attempt %d: %s",
                    alert.id, channel.name, attempt, e,
                )
                delivered = False

            if delivered:
                if attempt > 1:
                    logger.info("Push of %s to %s succeeded on attempt %d", alert.id, channel.name, attempt)
                return True

            if attempt < attempts:
                await asyncio.sleep(self._delay_for(attempt - 1))

        logger.warning("Giving up on %s for %s after %d attempts", channel.name, alert.id, attempts)
        return False

    def _log_outcome(self, alert: Alert, results: list[tuple[str, bool]]) -> None:
        failed = [name for name, ok in results if not ok]
        if not failed:
            logger.debug("Alert %s pushed to %s", alert.id, [name for name, _ in results])
        elif len(failed) == len(results):
            logger.error("Alert %s (%s) could not be pushed anywhere", alert.id, alert.severity)
        else:
            logger.warning("Alert %s not pushed to %s", alert.id, failed)
