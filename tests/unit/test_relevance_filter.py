"""
Unit Tests for RelevanceFilter
==============================

Tests for keyword line selection with context windows.
"""

import pytest

from src.config.settings import DEFAULT_PRODUCT_KEYWORDS
from src.ingest.relevance_filter import RelevanceFilter


@pytest.fixture
def bottle_filter() -> RelevanceFilter:
    """Create filter matching only 'bottle' with one line of context."""
    return RelevanceFilter(["bottle"], context_lines=1)


class TestIsRelevant:
    """Tests for RelevanceFilter.is_relevant()."""

    def test_matches_case_insensitively(self, bottle_filter: RelevanceFilter) -> None:
        assert bottle_filter.is_relevant("BOTTLE A")
        assert bottle_filter.is_relevant("Amber bottles")

    def test_non_matching_line(self, bottle_filter: RelevanceFilter) -> None:
        assert not bottle_filter.is_relevant("Company history")


class TestFilter:
    """Tests for RelevanceFilter.filter()."""

    def test_keeps_context_window(self, bottle_filter: RelevanceFilter) -> None:
        """Lines around a relevant line should be kept."""
        text = "intro\nheader\nBottle A\nprice row\nfooter\nlegal"
        assert bottle_filter.filter(text) == "header\nBottle A\nprice row"

    def test_overlapping_windows_emit_each_line_once(self, bottle_filter: RelevanceFilter) -> None:
        """Overlapping windows should not repeat lines."""
        text = "a\nBottle A\nb\nBottle B\nc\nd"
        assert bottle_filter.filter(text) == "a\nBottle A\nb\nBottle B\nc"

    def test_identical_lines_all_kept(self, bottle_filter: RelevanceFilter) -> None:
        """Duplicate lines at different positions are distinct lines."""
        text = "Bottle A | HDPE | 250ml\nBottle A | HDPE | 250ml"
        assert bottle_filter.filter(text) == text

    def test_window_clipped_at_edges(self) -> None:
        """Windows should be clipped at the start and end of the text."""
        relevance_filter = RelevanceFilter(["bottle"], context_lines=5)
        text = "Bottle A\nx\ny"
        assert relevance_filter.filter(text) == text

    def test_no_match_returns_original(self, bottle_filter: RelevanceFilter) -> None:
        """Text without any keyword should be returned unchanged."""
        text = "About us\nContact"
        assert bottle_filter.filter(text) == text

    def test_zero_context(self) -> None:
        """With no context only relevant lines survive."""
        relevance_filter = RelevanceFilter(["jar"], context_lines=0)
        assert relevance_filter.filter("a\nJar B\nb") == "Jar B"

    def test_default_vocabulary_keeps_spreadsheet_rows(self) -> None:
        """Rows mentioning bottles, HDPE or ml should be kept."""
        relevance_filter = RelevanceFilter(DEFAULT_PRODUCT_KEYWORDS)
        text = "Bottle A | HDPE | 250ml\nBottle A | HDPE | 250ml"
        assert relevance_filter.filter(text) == text
