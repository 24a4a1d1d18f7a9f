"""Tests for term extraction and cross-source correlation."""

from unittest.mock import MagicMock

import pytest

from osint_alerts.alerts.correlation import (
    CrossSourceCorrelator,
    RegexTermExtractor,
    SpacyTermExtractor,
    gazetteer_matches,
)


# ── Extractors ───────────────────────────────────────────


class TestRegexTermExtractor:
    """Test the capitalized-word heuristic and gazetteer boost."""

    def test_capitalized_words(self):
        terms = RegexTermExtractor(gazetteer=[]).extract("Shelling reported near Kharkiv today")
        assert terms == {"Shelling", "Kharkiv"}

    def test_ignores_short_and_upper_case_tokens(self):
        terms = RegexTermExtractor(gazetteer=[]).extract("UN says EU and Al met in town")
        assert terms == set()

    def test_gazetteer_substring_boost(self):
        # No word boundary inside "GazaCity", only the gazetteer sees "Gaza"
        terms = RegexTermExtractor(gazetteer=["Gaza"]).extract("reports from GazaCity")
        assert terms == {"Gaza"}

    def test_gazetteer_is_case_sensitive(self):
        terms = RegexTermExtractor(gazetteer=["Gaza"]).extract("the gaza strip")
        assert "Gaza" not in terms

    def test_default_gazetteer(self):
        terms = RegexTermExtractor().extract("in northern Syria")
        assert "Syria" in terms

    def test_term_from_both_heuristics_appears_once(self):
        terms = RegexTermExtractor(gazetteer=["Gaza"]).extract("Gaza Gaza Gaza")
        assert terms == {"Gaza"}


class TestGazetteerMatches:
    def test_matches(self):
        assert gazetteer_matches("Sudan and Mali", ["Sudan", "Mali", "Niger"]) == {"Sudan", "Mali"}


class TestSpacyTermExtractor:
    """Test entity filtering with an injected pipeline."""

    def _nlp(self, entities):
        doc = MagicMock()
        doc.ents = [MagicMock(text=text, label_=label) for text, label in entities]
        return MagicMock(return_value=doc)

    def test_keeps_place_and_org_entities(self):
        nlp = self._nlp([("Kharkiv", "GPE"), ("NATO", "ORG"), ("Tuesday", "DATE")])
        extractor = SpacyTermExtractor(gazetteer=[], nlp=nlp)

        assert extractor.extract("NATO says Kharkiv hit on Tuesday") == {"Kharkiv", "NATO"}
        assert extractor.is_loaded is True

    def test_drops_short_entities(self):
        nlp = self._nlp([("US", "GPE")])
        assert SpacyTermExtractor(gazetteer=[], nlp=nlp).extract("US") == set()

    def test_gazetteer_boost(self):
        nlp = self._nlp([])
        extractor = SpacyTermExtractor(gazetteer=["Yemen"], nlp=nlp)
        assert extractor.extract("strikes in Yemen") == {"Yemen"}

    def test_not_loaded_until_used(self):
        assert SpacyTermExtractor().is_loaded is False


# ── Correlator ───────────────────────────────────────────


class TestCrossSourceCorrelator:
    """Test the distinct-handle threshold."""

    def test_three_handles_correlate(self, make_post):
        posts = [
            make_post(author_handle="@handle1", content="Explosion in Kharkiv confirmed"),
            make_post(author_handle="@handle2", content="Reports of Kharkiv strike"),
            make_post(author_handle="@handle3", content="Kharkiv under attack"),
        ]
        correlated = CrossSourceCorrelator().correlate(posts)

        assert correlated == {"Kharkiv": ["@handle1", "@handle2", "@handle3"]}

    def test_two_handles_do_not_correlate(self, make_post):
        posts = [
            make_post(author_handle="@handle1", content="Reports from Damascus"),
            make_post(author_handle="@handle2", content="Damascus situation"),
        ]
        assert CrossSourceCorrelator().correlate(posts) == {}

    def test_same_handle_counts_once(self, make_post):
        posts = [
            make_post(author_handle="@same", content="Kherson update"),
            make_post(author_handle="@same", content="More from Kherson"),
            make_post(author_handle="@other", content="Kherson again"),
        ]
        correlator = CrossSourceCorrelator()

        assert correlator.mentions(posts)["Kherson"] == ["@same", "@other"]
        assert correlator.correlate(posts) == {}

    def test_custom_threshold(self, make_post):
        posts = [
            make_post(author_handle="@a", content="quiet in Odesa"),
            make_post(author_handle="@b", content="sirens in Odesa"),
        ]
        assert "Odesa" in CrossSourceCorrelator(min_handles=2).correlate(posts)

    def test_pluggable_extractor(self, make_post):
        extractor = MagicMock()
        extractor.extract.return_value = {"topic"}
        posts = [make_post(author_handle=f"@h{i}") for i in range(3)]

        correlated = CrossSourceCorrelator(extractor=extractor).correlate(posts)

        assert correlated == {"topic": ["@h0", "@h1", "@h2"]}
        assert extractor.extract.call_count == 3

    def test_empty_batch(self):
        assert CrossSourceCorrelator().correlate([]) == {}

    @pytest.mark.parametrize("min_handles", [3, 4])
    def test_threshold_is_inclusive(self, make_post, min_handles):
        posts = [
            make_post(author_handle=f"@h{i}", content="Rafah crossing")
            for i in range(min_handles)
        ]
        assert "Rafah" in CrossSourceCorrelator(min_handles=min_handles).correlate(posts)
