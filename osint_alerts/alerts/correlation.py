"""
Cross-source correlation of social posts.

Detects the same emerging topic being reported by several independent
accounts within one refresh batch. Candidate terms come from a pluggable
``TermExtractor``; the correlator only cares about how many *distinct*
handles mention each term, never how often a term occurs.

Extractors:
- RegexTermExtractor: capitalized-word heuristic plus gazetteer boost
- SpacyTermExtractor: spaCy named entities plus gazetteer boost (optional)
"""

import logging
import re
from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING, Protocol

from osint_alerts.config.watchlists import get_default_gazetteer
from osint_alerts.feeds.schemas import SocialPost

if TYPE_CHECKING:
    from spacy.language import Language

logger = logging.getLogger(__name__)

# Capitalized words of three or more letters ("Kharkiv", not "UN" or "in")
PROPER_NOUN_RE = re.compile(r"\b[A-Z][a-z]{2,}\b")

# spaCy labels that name places, organizations, groups, people and events
ENTITY_LABELS = frozenset({"GPE", "LOC", "ORG", "NORP", "PERSON", "EVENT", "FAC"})


class TermExtractor(Protocol):
    """Turns free text into a set of candidate topic terms."""

    def extract(self, text: str) -> set[str]: ...


def gazetteer_matches(text: str, gazetteer: Iterable[str]) -> set[str]:
    """Gazetteer names appearing as case-sensitive substrings of ``text``."""
    return {name for name in gazetteer if name in text}


class RegexTermExtractor:
    """
    Heuristic proper-noun extraction.

    Usage:
        >>> RegexTermExtractor().extract("Shelling reported near Kharkiv")
        {'Shelling', 'Kharkiv'}
    """

    def __init__(self, gazetteer: Sequence[str] | None = None) -> None:
        self._gazetteer = list(gazetteer) if gazetteer is not None else get_default_gazetteer()

    def extract(self, text: str) -> set[str]:
        terms = set(PROPER_NOUN_RE.findall(text))
        terms |= gazetteer_matches(text, self._gazetteer)
        return terms


class SpacyTermExtractor:
    """
    Named-entity term extraction using spaCy.

    The model is loaded lazily on the first ``extract()`` call. Install
    with ``pip install osint-alerts[ner]`` and
    ``python -m spacy download en_core_web_sm``.
    """

    def __init__(
        self,
        model_name: str = "en_core_web_sm",
        gazetteer: Sequence[str] | None = None,
        nlp: "Language | None" = None,
    ) -> None:
        self._model_name = model_name
        self._gazetteer = list(gazetteer) if gazetteer is not None else get_default_gazetteer()
        self._nlp = nlp

    @property
    def is_loaded(self) -> bool:
        return self._nlp is not None

    def _load(self) -> "Language":
        if self._nlp is not None:
            return self._nlp

        try:
            import spacy
        except ImportError as e:
            raise ImportError(
                "spaCy is required for NER term extraction. "
                "Install with: pip install osint-alerts[ner]"
            ) from e

        try:
            logger.info("Loading spaCy model: %s", self._model_name)
            self._nlp = spacy.load(self._model_name)
        except OSError as e:
            raise OSError(
                f"spaCy model '{self._model_name}' could not be loaded. "
                f"Install with: python -m spacy download {self._model_name}"
            ) from e

        return self._nlp

    def extract(self, text: str) -> set[str]:
        doc = self._load()(text)
        terms = {
            ent.text.strip()
            for ent in doc.ents
            if ent.label_ in ENTITY_LABELS and len(ent.text.strip()) >= 3
        }
        terms |= gazetteer_matches(text, self._gazetteer)
        return terms


class CrossSourceCorrelator:
    """
    Flags terms mentioned by several distinct accounts in one batch.

    Args:
        extractor: Candidate term extractor (regex heuristic by default).
        min_handles: Distinct handles required for a term to correlate.
    """

    def __init__(
        self,
        extractor: TermExtractor | None = None,
        min_handles: int = 3,
    ) -> None:
        self._extractor = extractor or RegexTermExtractor()
        self._min_handles = min_handles

    @property
    def min_handles(self) -> int:
        return self._min_handles

    def mentions(self, posts: Iterable[SocialPost]) -> dict[str, list[str]]:
        """
        Map every candidate term in the batch to the handles that used it.

        Handles are listed once each, in the order they first mentioned
        the term.
        """
        term_handles: dict[str, dict[str, None]] = {}
        for post in posts:
            for term in self._extractor.extract(post.content):
                term_handles.setdefault(term, {})[post.author_handle] = None
        return {term: list(handles) for term, handles in term_handles.items()}

    def correlate(self, posts: Iterable[SocialPost]) -> dict[str, list[str]]:
        """Terms whose distinct-handle count meets the threshold."""
        correlated = {
            term: handles
            for term, handles in self.mentions(posts).items()
            if len(handles) >= self._min_handles
        }
        if correlated:
            logger.debug("Correlated terms in batch: %s", sorted(correlated))
        return correlated
