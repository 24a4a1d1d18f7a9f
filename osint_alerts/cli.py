"""
Command-line interface for osint-alerts.

Usage:
    osint-alerts watch                 # Poll configured feeds and alert
    osint-alerts replay snapshots.json # Run recorded snapshots through the engine
    osint-alerts test-alert social     # Fire a canned alert
"""

import asyncio
import json
import signal
from pathlib import Path
from typing import Any

import click

from osint_alerts.alerts.config import AlertConfig
from osint_alerts.alerts.dispatcher import NotificationDispatcher
from osint_alerts.alerts.engine import AlertEngine
from osint_alerts.alerts.notifier import AlertNotifier, TerminalBell
from osint_alerts.alerts.schemas import Alert
from osint_alerts.config.settings import Settings, get_settings
from osint_alerts.feeds.base import parse_items
from osint_alerts.feeds.schemas import NewsArticle, SeismicEvent, SocialPost
from osint_alerts.observability.logging import setup_logging
from osint_alerts.observability.metrics import get_metrics

SOURCES = ("earthquake", "event", "social")

SOURCE_MODELS = {
    "earthquake": SeismicEvent,
    "event": NewsArticle,
    "social": SocialPost,
}


def build_engine(
    settings: Settings,
    quiet: bool = False,
    push: bool = True,
) -> tuple[AlertEngine, AlertNotifier | None]:
    """Wire an engine to a notifier according to settings."""
    if quiet:
        return AlertEngine(config=AlertConfig()), None

    dispatcher = NotificationDispatcher.from_settings(settings) if push else None
    notifier = AlertNotifier(
        sound=TerminalBell() if settings.sound_enabled else None,
        dispatcher=dispatcher,
    )
    engine = AlertEngine(config=AlertConfig(), notifier=notifier)
    engine.request_desktop_permission()
    return engine, notifier


def load_snapshots(path: Path) -> list[tuple[str, list[Any]]]:
    """
    Read recorded snapshots from a file.

    Accepts a JSON object ``{"source": ..., "items": [...]}``, a JSON array
    of such objects, or JSON lines with one object per line.
    """
    text = path.read_text(encoding="utf-8")
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        data = [json.loads(line) for line in text.splitlines() if line.strip()]

    records = data if isinstance(data, list) else [data]

    snapshots = []
    for i, record in enumerate(records):
        if not isinstance(record, dict) or record.get("source") not in SOURCES:
            raise click.BadParameter(
                f"record {i} needs a 'source' of {', '.join(SOURCES)}",
                param_hint=str(path),
            )
        snapshots.append((record["source"], record.get("items") or []))
    return snapshots


def format_alert(alert: Alert) -> str:
    status = " " if alert.read else "*"
    line = f"{status} {alert.timestamp:%H:%M:%S} [{alert.severity_label:<8}] {alert.title}"
    if alert.description:
        line += f" - {alert.description}"
    return line


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug logging")
def main(debug: bool) -> None:
    """OSINT Alerts - detect and correlate new items in live OSINT feeds."""
    setup_logging("DEBUG" if debug else None)


@main.command()
@click.option("--once", is_flag=True, help="Poll every feed once and exit")
@click.option("--metrics/--no-metrics", default=None, help="Serve Prometheus metrics")
def watch(once: bool, metrics: bool | None) -> None:
    """Poll the configured feeds and raise alerts."""
    from osint_alerts.feeds.poller import FeedPoller, feeds_from_settings

    settings = get_settings()
    engine, notifier = build_engine(settings)
    poller = FeedPoller(engine, feeds_from_settings(settings))

    serve_metrics = settings.metrics_enabled if metrics is None else metrics

    async def run() -> None:
        if serve_metrics:
            get_metrics().start_server(settings.metrics_port)

        if once:
            await poller.run_once()
        else:
            loop = asyncio.get_running_loop()
            for sig in (signal.SIGTERM, signal.SIGINT):
                loop.add_signal_handler(sig, lambda: asyncio.create_task(poller.stop()))
            await poller.start()

        if notifier is not None:
            await notifier.drain()

    asyncio.run(run())
    click.echo(f"{len(engine.alerts)} alerts, {engine.unread_count} unread")


@main.command()
@click.argument(
    "files",
    nargs=-1,
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option("--quiet", is_flag=True, help="Do not show toasts or ring the bell")
@click.option("--json", "as_json", is_flag=True, help="Print the alert log as JSON")
def replay(files: tuple[Path, ...], quiet: bool, as_json: bool) -> None:
    """Run recorded snapshots through the engine, in order."""
    settings = get_settings()
    engine, notifier = build_engine(settings, quiet=quiet, push=False)
    checks = {
        "earthquake": engine.check_earthquakes,
        "event": engine.check_events,
        "social": engine.check_social_posts,
    }

    for path in files:
        for source, raw_items in load_snapshots(path):
            items = parse_items(SOURCE_MODELS[source], raw_items, source)
            checks[source](items)

    if as_json:
        click.echo(json.dumps([a.to_dict() for a in engine.alerts], indent=2))
        return

    for alert in engine.alerts:
        click.echo(format_alert(alert))
    click.echo(f"{len(engine.alerts)} alerts, {engine.unread_count} unread")


@main.command("test-alert")
@click.argument("source", type=click.Choice(SOURCES))
@click.option("--mute", is_flag=True, help="Do not ring the bell")
def test_alert(source: str, mute: bool) -> None:
    """Fire the canned sample alert for SOURCE."""
    settings = get_settings()
    engine, notifier = build_engine(settings)
    if mute:
        engine.toggle_mute()

    async def run() -> Alert:
        alert = engine.trigger_test_alert(source)
        if notifier is not None:
            await notifier.drain()
        return alert

    alert = asyncio.run(run())
    click.echo(alert.id)


if __name__ == "__main__":
    main()
