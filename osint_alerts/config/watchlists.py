"""
Curated keyword and place-name watchlists for social post analysis.

Override via ALERTS_CRITICAL_KEYWORDS / ALERTS_GAZETTEER (JSON lists).
"""

# Terms implying a breaking or violent development (matched case-insensitively)
CRITICAL_KEYWORDS = [
    "breaking",
    "confirmed",
    "strike",
    "explosion",
    "attack",
    "missile",
]

# Conflict zones and frequently reported states
CONFLICT_REGIONS = [
    "Ukraine",
    "Russia",
    "Israel",
    "Gaza",
    "Palestine",
    "Iran",
    "Syria",
    "Lebanon",
    "Yemen",
    "Taiwan",
    "China",
    "Korea",
    "Myanmar",
]

# Sahel and Horn of Africa
AFRICA_REGIONS = [
    "Sudan",
    "Libya",
    "Somalia",
    "Mali",
    "Niger",
    "Ethiopia",
    "Eritrea",
]

# All gazetteer names combined (matched as case-sensitive substrings)
GAZETTEER = CONFLICT_REGIONS + AFRICA_REGIONS


def get_default_keywords() -> list[str]:
    """Get a copy of the default critical keyword list."""
    return CRITICAL_KEYWORDS.copy()


def get_default_gazetteer() -> list[str]:
    """Get a copy of the default gazetteer."""
    return GAZETTEER.copy()
