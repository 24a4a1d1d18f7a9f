"""Schema definitions for alert records.

Each alert represents a new condition detected in one of the three
polled sources: a significant earthquake, a batch of new news-cluster
articles, or a notable social post (keyword hit, engagement spike, or a
term correlated across independent accounts).
"""

from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any, Literal

AlertSeverity = Literal["medium", "high", "critical"]

VALID_SEVERITIES: frozenset[str] = frozenset({
    "medium",
    "high",
    "critical",
})

# Display ordering, least to most urgent
SEVERITY_RANK: dict[str, int] = {
    "medium": 0,
    "high": 1,
    "critical": 2,
}

AlertSource = Literal["earthquake", "event", "social"]

VALID_SOURCES: frozenset[str] = frozenset({
    "earthquake",
    "event",
    "social",
})


@dataclass(frozen=True)
class Coordinates:
    """Map position used to center the map when an alert is clicked."""

    latitude: float
    longitude: float


def _validate(severity: str, source: str) -> None:
    if severity not in VALID_SEVERITIES:
        raise ValueError(
            f"Invalid severity {severity!r}. "
            f"Must be one of: {sorted(VALID_SEVERITIES)}"
        )
    if source not in VALID_SOURCES:
        raise ValueError(
            f"Invalid source {source!r}. "
            f"Must be one of: {sorted(VALID_SOURCES)}"
        )


@dataclass
class AlertDraft:
    """An alert before the log has assigned its identity.

    Trigger functions return drafts; only ``AlertLog.add_alert`` turns a
    draft into an ``Alert``.
    """

    title: str
    description: str
    severity: AlertSeverity
    source: AlertSource
    url: str | None = None
    coordinates: Coordinates | None = None

    def __post_init__(self) -> None:
        _validate(self.severity, self.source)


@dataclass
class Alert:
    """An alert held by the alert log.

    Attributes:
        id: ``alert-<epoch-ms>-<counter>`` identifier, unique per process.
        title: Short human-readable summary.
        description: One-line detail (place, article title, post excerpt).
        severity: Urgency level (medium, high, critical).
        source: Which tracker produced the alert.
        timestamp: When the alert was generated.
        read: Whether the operator has seen the alert.
        url: Link to the originating item, if any.
        coordinates: Where to center the map, if known.
    """

    id: str
    title: str
    description: str
    severity: AlertSeverity
    source: AlertSource
    timestamp: datetime = field(
        default_factory=lambda: datetime.now(timezone.utc)
    )
    read: bool = False
    url: str | None = None
    coordinates: Coordinates | None = None

    def __post_init__(self) -> None:
        _validate(self.severity, self.source)

    @classmethod
    def from_draft(
        cls,
        draft: AlertDraft,
        alert_id: str,
        timestamp: datetime,
    ) -> "Alert":
        """Create an unread Alert from a draft."""
        return cls(
            id=alert_id,
            title=draft.title,
            description=draft.description,
            severity=draft.severity,
            source=draft.source,
            timestamp=timestamp,
            url=draft.url,
            coordinates=draft.coordinates,
        )

    @property
    def severity_label(self) -> str:
        """Upper-case severity for notification titles."""
        return self.severity.upper()

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-serializable dictionary."""
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "severity": self.severity,
            "source": self.source,
            "timestamp": self.timestamp.isoformat(),
            "read": self.read,
            "url": self.url,
            "coordinates": asdict(self.coordinates) if self.coordinates else None,
        }
