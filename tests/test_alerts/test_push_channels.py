"""Tests for push channels, circuit breaker, and dispatcher."""

import json
from datetime import datetime, timezone
from unittest.mock import AsyncMock, patch

import httpx
import pytest
import respx

from osint_alerts.alerts.channels import (
    CircuitBreaker,
    CircuitState,
    NotificationChannel,
    SlackChannel,
    WebhookChannel,
)
from osint_alerts.alerts.dispatcher import NotificationConfig, NotificationDispatcher
from osint_alerts.alerts.schemas import Alert, Coordinates
from osint_alerts.config.settings import Settings

WEBHOOK_URL = "https://hooks.example.com/alerts"
SLACK_URL = "https://hooks.slack.com/services/T000/B000/XXX"


# ── Fixtures ────────────────────────────────────────────


@pytest.fixture
def sample_alert():
    return Alert(
        id="alert-1770000000000-1",
        title="M7.2 Earthquake",
        description="120km SW of Tonga Islands",
        severity="critical",
        source="earthquake",
        timestamp=datetime(2026, 2, 7, 12, 0, 0, tzinfo=timezone.utc),
        url="https://earthquake.usgs.gov/x",
        coordinates=Coordinates(latitude=-21.2, longitude=-175.2),
    )


class FakeChannel(NotificationChannel):
    """Channel returning scripted results."""

    def __init__(self, results, name="fake"):
        self._results = list(results)
        self._name = name
        self.sent = 0

    @property
    def name(self) -> str:
        return self._name

    async def send(self, alert):
        self.sent += 1
        result = self._results.pop(0) if self._results else False
        if isinstance(result, Exception):
            raise result
        return result


# ── WebhookChannel ──────────────────────────────────────


class TestWebhookChannel:
    @pytest.mark.asyncio
    @respx.mock
    async def test_successful_send(self, sample_alert):
        route = respx.post(WEBHOOK_URL).mock(return_value=httpx.Response(200))

        assert await WebhookChannel(WEBHOOK_URL).send(sample_alert) is True

        payload = json.loads(route.calls.last.request.content)
        assert payload["id"] == "alert-1770000000000-1"
        assert payload["severity"] == "critical"
        assert payload["coordinates"] == {"latitude": -21.2, "longitude": -175.2}

    @pytest.mark.asyncio
    @respx.mock
    async def test_custom_headers(self, sample_alert):
        route = respx.post(WEBHOOK_URL).mock(return_value=httpx.Response(204))
        channel = WebhookChannel(WEBHOOK_URL, headers={"X-Token": "abc"})

        assert await channel.send(sample_alert) is True
        assert route.calls.last.request.headers["X-Token"] == "abc"

    @pytest.mark.asyncio
    @respx.mock
    async def test_server_error(self, sample_alert):
        respx.post(WEBHOOK_URL).mock(return_value=httpx.Response(500))
        assert await WebhookChannel(WEBHOOK_URL).send(sample_alert) is False

    @pytest.mark.asyncio
    @respx.mock
    async def test_timeout(self, sample_alert):
        respx.post(WEBHOOK_URL).mock(side_effect=httpx.ReadTimeout("slow"))
        assert await WebhookChannel(WEBHOOK_URL).send(sample_alert) is False

    @pytest.mark.asyncio
    @respx.mock
    async def test_connection_error(self, sample_alert):
        respx.post(WEBHOOK_URL).mock(side_effect=httpx.ConnectError("refused"))
        assert await WebhookChannel(WEBHOOK_URL).send(sample_alert) is False

    def test_name(self):
        assert WebhookChannel(WEBHOOK_URL).name == "webhook"


# ── SlackChannel ────────────────────────────────────────


class TestSlackChannel:
    def test_message_format(self, sample_alert):
        message = SlackChannel(SLACK_URL, channel="#osint").build_payload(sample_alert)

        assert message["channel"] == "#osint"
        header = message["blocks"][0]["text"]["text"]
        assert "[CRITICAL]" in header
        assert ":red_circle:" in header
        assert "<https://earthquake.usgs.gov/x|Open source>" in message["blocks"][1]["text"]["text"]
        assert "-21.20, -175.20" in message["blocks"][2]["elements"][0]["text"]

    def test_message_without_link_or_location(self):
        alert = Alert(
            id="a", title='Multi-source: "Kharkiv"', description="Mentioned by 3 accounts",
            severity="critical", source="social",
        )
        message = SlackChannel(SLACK_URL).build_payload(alert)

        assert "channel" not in message
        assert message["blocks"][1]["text"]["text"] == "Mentioned by 3 accounts"
        assert "Location" not in message["blocks"][2]["elements"][0]["text"]

    @pytest.mark.asyncio
    @respx.mock
    async def test_send(self, sample_alert):
        respx.post(SLACK_URL).mock(return_value=httpx.Response(200, text="ok"))
        assert await SlackChannel(SLACK_URL).send(sample_alert) is True

    @pytest.mark.asyncio
    @respx.mock
    async def test_send_failure(self, sample_alert):
        respx.post(SLACK_URL).mock(return_value=httpx.Response(404))
        assert await SlackChannel(SLACK_URL).send(sample_alert) is False


# ── CircuitBreaker ──────────────────────────────────────


class TestCircuitBreaker:
    """Tests for the CLOSED → OPEN → HALF_OPEN state machine."""

    @pytest.mark.asyncio
    async def test_opens_after_threshold(self, sample_alert):
        inner = FakeChannel([False] * 3)
        breaker = CircuitBreaker(inner, failure_threshold=3)

        for _ in range(3):
            await breaker.send(sample_alert)

        assert breaker.state == CircuitState.OPEN
        assert await breaker.send(sample_alert) is False
        assert inner.sent == 3

    @pytest.mark.asyncio
    async def test_success_resets_failures(self, sample_alert):
        breaker = CircuitBreaker(FakeChannel([False, True, False]), failure_threshold=2)

        for _ in range(3):
            await breaker.send(sample_alert)

        assert breaker.state == CircuitState.CLOSED
        assert breaker.failure_count == 1

    @pytest.mark.asyncio
    async def test_half_open_success_closes(self, sample_alert):
        breaker = CircuitBreaker(
            FakeChannel([False, True]), failure_threshold=1, recovery_timeout=30.0,
        )
        await breaker.send(sample_alert)
        assert breaker.state == CircuitState.OPEN

        with patch("osint_alerts.alerts.channels.time.monotonic", return_value=1e12):
            assert await breaker.send(sample_alert) is True

        assert breaker.state == CircuitState.CLOSED

    @pytest.mark.asyncio
    async def test_half_open_failure_reopens(self, sample_alert):
        breaker = CircuitBreaker(
            FakeChannel([False, False]), failure_threshold=1, recovery_timeout=30.0,
        )
        await breaker.send(sample_alert)

        with patch("osint_alerts.alerts.channels.time.monotonic", return_value=1e12):
            assert await breaker.send(sample_alert) is False

        assert breaker.state == CircuitState.OPEN

    def test_name_passthrough(self):
        assert CircuitBreaker(FakeChannel([], name="slack")).name == "slack"


# ── NotificationDispatcher ──────────────────────────────


def _fast_config(**overrides) -> NotificationConfig:
    fields = {"retry_max_attempts": 3, "retry_delays": [0.0]}
    fields.update(overrides)
    return NotificationConfig(**fields)


class TestNotificationDispatcher:
    @pytest.mark.asyncio
    async def test_delivers_to_all_channels(self, sample_alert):
        a, b = FakeChannel([True], "a"), FakeChannel([True], "b")
        dispatcher = NotificationDispatcher([a, b], config=_fast_config())

        assert await dispatcher.dispatch(sample_alert) == [("a", True), ("b", True)]

    @pytest.mark.asyncio
    async def test_retries_until_success(self, sample_alert):
        channel = FakeChannel([False, RuntimeError("flaky"), True])
        dispatcher = NotificationDispatcher([channel], config=_fast_config())

        assert await dispatcher.dispatch(sample_alert) == [("fake", True)]
        assert channel.sent == 3

    @pytest.mark.asyncio
    async def test_gives_up_after_max_attempts(self, sample_alert):
        channel = FakeChannel([False] * 5)
        dispatcher = NotificationDispatcher(
            [channel], config=_fast_config(retry_max_attempts=2),
        )

        assert await dispatcher.dispatch(sample_alert) == [("fake", False)]
        assert channel.sent == 2

    @pytest.mark.asyncio
    async def test_uses_configured_delays(self, sample_alert):
        dispatcher = NotificationDispatcher(
            [FakeChannel([False] * 3)],
            config=_fast_config(retry_delays=[1.0, 5.0]),
        )
        with patch("osint_alerts.alerts.dispatcher.asyncio.sleep", new=AsyncMock()) as sleep:
            await dispatcher.dispatch(sample_alert)

        assert [c.args[0] for c in sleep.await_args_list] == [1.0, 5.0]

    def test_wraps_channels_in_breakers(self):
        dispatcher = NotificationDispatcher([FakeChannel([])])
        assert isinstance(dispatcher.channels[0], CircuitBreaker)

    def test_keeps_existing_breaker(self):
        breaker = CircuitBreaker(FakeChannel([]))
        assert NotificationDispatcher([breaker]).channels == [breaker]


class TestFromSettings:
    def test_no_channels(self):
        assert NotificationDispatcher.from_settings(Settings(_env_file=None)) is None

    def test_webhook_and_slack(self):
        settings = Settings(
            _env_file=None,
            webhook_url=WEBHOOK_URL,
            slack_webhook_url=SLACK_URL,
        )
        dispatcher = NotificationDispatcher.from_settings(settings)

        assert [c.name for c in dispatcher.channels] == ["webhook", "slack"]
