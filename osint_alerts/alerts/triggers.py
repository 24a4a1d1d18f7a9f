"""Stateless trigger functions for alert detection.

Each function checks a single condition against new snapshot items and
returns an AlertDraft if the condition is met, or None otherwise. No I/O,
no state: novelty tracking, rolling statistics and the alert log all
live in AlertEngine.
"""

from collections.abc import Mapping, Sequence

from osint_alerts.alerts.config import AlertConfig
from osint_alerts.alerts.schemas import AlertDraft, Coordinates
from osint_alerts.feeds.schemas import NewsArticle, SeismicEvent, SocialPost


def _excerpt(content: str, config: AlertConfig) -> str:
    return content[: config.description_max_chars]


def classify_earthquake(
    quake: SeismicEvent,
    config: AlertConfig,
) -> AlertDraft | None:
    """Classify a new earthquake by magnitude.

    Critical at or above the critical magnitude, high at or above the
    high magnitude, nothing below that.

    Args:
        quake: Newly seen seismic event.
        config: Alert configuration with magnitude thresholds.

    Returns:
        AlertDraft or None.
    """
    if quake.magnitude >= config.seismic_critical_magnitude:
        severity = "critical"
    elif quake.magnitude >= config.seismic_high_magnitude:
        severity = "high"
    else:
        return None

    return AlertDraft(
        title=f"M{quake.magnitude:.1f} Earthquake",
        description=quake.place,
        severity=severity,
        source="earthquake",
        url=quake.url,
        coordinates=Coordinates(latitude=quake.latitude, longitude=quake.longitude),
    )


def summarize_articles(articles: Sequence[NewsArticle]) -> AlertDraft | None:
    """Summarize a batch of new news-cluster articles as one alert.

    Individual articles are too noisy to alert on, so a whole batch
    yields a single medium alert represented by its first article.

    Args:
        articles: Newly seen articles, in snapshot order.

    Returns:
        AlertDraft, or None for an empty batch.
    """
    if not articles:
        return None

    count = len(articles)
    first = articles[0]

    coordinates = None
    if first.latitude is not None and first.longitude is not None:
        coordinates = Coordinates(latitude=first.latitude, longitude=first.longitude)

    return AlertDraft(
        title=f"{count} new article{'s' if count > 1 else ''}",
        description=first.title,
        severity="medium",
        source="event",
        url=first.url,
        coordinates=coordinates,
    )


def check_keywords(post: SocialPost, config: AlertConfig) -> AlertDraft | None:
    """Check a new post for critical keywords.

    Case-insensitive substring match; one alert per post however many
    keywords match.

    Args:
        post: Newly seen social post.
        config: Alert configuration with the keyword list.

    Returns:
        AlertDraft or None.
    """
    lowered = post.content.lower()
    if not any(keyword.lower() in lowered for keyword in config.critical_keywords):
        return None

    return AlertDraft(
        title=f"OSINT: {post.author}",
        description=_excerpt(post.content, config),
        severity="high",
        source="social",
        url=post.url,
    )


def check_engagement_spike(
    post: SocialPost,
    baseline: float,
    config: AlertConfig,
) -> AlertDraft | None:
    """Check a new post's engagement against its account's rolling average.

    Fires when the account has a positive baseline and the post's
    engagement reaches ``spike_multiplier`` times that baseline.

    Args:
        post: Newly seen social post.
        baseline: Account average before this post was recorded.
        config: Alert configuration with the spike multiplier.

    Returns:
        AlertDraft or None.
    """
    if baseline <= 0:
        return None

    if post.engagement < config.spike_multiplier * baseline:
        return None

    return AlertDraft(
        title=f"Viral: {post.author}",
        description=_excerpt(post.content, config),
        severity="high",
        source="social",
        url=post.url,
    )


def check_correlations(correlated: Mapping[str, Sequence[str]]) -> list[AlertDraft]:
    """Create one critical alert per correlated term.

    Args:
        correlated: Term to distinct handles, already thresholded.

    Returns:
        List of drafts (may be empty). No coordinates: correlation has
        no geolocation.
    """
    return [
        AlertDraft(
            title=f'Multi-source: "{term}"',
            description=f"Mentioned by {len(handles)} accounts: {', '.join(handles)}",
            severity="critical",
            source="social",
        )
        for term, handles in correlated.items()
    ]
