"""
structlog setup shared by the CLI, the poller and the alert library.

Host code logs through ``structlog.get_logger(__name__)`` with keyword
fields; the ``osint_alerts.alerts`` and ``osint_alerts.feeds`` library
modules log through plain ``logging.getLogger(__name__)``. Both kinds of
record go through one stderr handler whose ``ProcessorFormatter`` renders
them alike: JSON lines in production, coloured console otherwise.
"""

import logging
import sys

import structlog
from structlog.types import Processor

from osint_alerts.config.settings import get_settings

QUIET_LOGGERS = ("httpx", "httpcore", "asyncio")


def setup_logging(level: str | None = None) -> None:
    """
    Configure logging for the process.

    Args:
        level: Overrides ``LOG_LEVEL`` from settings (e.g. "DEBUG" for --debug)

    Usage:
        setup_logging()
        logger = structlog.get_logger(__name__)
        logger.info("Snapshot checked", source="social", alerts=2)
    """
    settings = get_settings()
    level = level or settings.log_level

    pre_chain: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    renderer: Processor
    if settings.is_production:
        renderer = structlog.processors.JSONRenderer()
        pre_chain.append(structlog.processors.format_exc_info)
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    structlog.configure(
        processors=pre_chain + [
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.StackInfoRenderer(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=pre_chain,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                renderer,
            ],
        )
    )

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(getattr(logging, level))

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def bind_context(**kwargs) -> None:
    """Attach fields (e.g. ``source``) to every following log line in this context."""
    structlog.contextvars.bind_contextvars(**kwargs)
