"""Unit tests for classification module."""

import pytest

from cfo_feeds.classification.classifier import (
    CATEGORY_KEYWORDS, CATEGORY_PRIORITY, KeywordClassifier, categorize, relevance_score
)
from cfo_feeds.classification.interfaces import Category


class TestCategorize:
    """Tests for categorize."""

    @pytest.mark.parametrize("title,description,expected", [
        ("Central bank holds interest rate steady", "", Category.CAPITAL_STRATEGY),
        ("Sponsors return with a wave of buyouts", "", Category.PRIVATE_MARKETS),
        ("Automation lifts productivity in the back office", "", Category.OPERATIONAL_EXCELLENCE),
        ("Why mindset shapes CFO influence", "", Category.LEADERSHIP),
        ("Nigeria's fintech boom", "", Category.AFRICA_FINANCE),
    ])
    def test_single_category_match(self, title, description, expected):
        """Text with keywords from one category should land in it."""
        assert categorize(title, description) == expected

    def test_keyword_in_description(self):
        """Description text counts as much as the title."""
        assert categorize("Weekly roundup", "A record buyout in logistics") == Category.PRIVATE_MARKETS

    def test_no_keyword_is_uncategorized(self):
        """Text without any keyword should be Uncategorized."""
        assert categorize("Photo essay: spring in Kyoto", "Cherry blossoms by the river") == Category.UNCATEGORIZED

    def test_missing_text_is_uncategorized(self):
        """None title and description should not raise."""
        assert categorize(None, None) == Category.UNCATEGORIZED
        assert categorize("", "") == Category.UNCATEGORIZED

    def test_case_insensitive(self):
        """Matching ignores case."""
        assert categorize("Record LBO financing", "") == Category.PRIVATE_MARKETS
        assert categorize("KENYA", "") == Category.AFRICA_FINANCE

    def test_earlier_category_wins(self):
        """Capital Strategy precedes Africa Finance in priority order."""
        assert categorize("Inflation worries spread across Africa", "") == Category.CAPITAL_STRATEGY

    def test_private_markets_beats_africa(self):
        """Private Markets precedes Africa Finance in priority order."""
        assert categorize("Kenya private equity deal closes", "") == Category.PRIVATE_MARKETS

    def test_multi_word_keyword(self):
        """Keywords with spaces match as substrings."""
        assert categorize("What is in a term sheet?", "") == Category.PRIVATE_MARKETS

    def test_priority_covers_every_keyword_category(self):
        """Every category with keywords has a place in the priority order."""
        assert set(CATEGORY_PRIORITY) == set(CATEGORY_KEYWORDS)
        assert Category.UNCATEGORIZED not in CATEGORY_PRIORITY


class TestRelevanceScore:
    """Tests for relevance_score."""

    @pytest.mark.parametrize("category,score", [
        (Category.PRIVATE_MARKETS, 5),
        (Category.AFRICA_FINANCE, 5),
        (Category.CAPITAL_STRATEGY, 4),
        (Category.OPERATIONAL_EXCELLENCE, 4),
        (Category.LEADERSHIP, 3),
        (Category.UNCATEGORIZED, 1),
    ])
    def test_table_values(self, category, score):
        assert relevance_score(category) == score

    def test_accepts_category_names(self):
        """Plain category strings score the same as enum members."""
        assert relevance_score("Private Markets & M&A") == 5
        assert relevance_score("Uncategorized") == 1

    def test_unknown_category_defaults_to_two(self):
        assert relevance_score("Crypto") == 2
        assert relevance_score("") == 2

    def test_scores_in_range(self):
        """Every category scores between 1 and 5."""
        for category in Category:
            assert 1 <= relevance_score(category) <= 5


class TestKeywordClassifier:
    """Tests for KeywordClassifier."""

    def test_classify_reports_keywords(self):
        """Should return category, score and the keywords that matched."""
        classifier = KeywordClassifier()

        result = classifier.classify(
            title="Merger talks stall over valuation",
            description="Both boards disagree on the valuation gap."
        )

        assert result.category == Category.PRIVATE_MARKETS
        assert result.relevance_score == 5
        assert "merger" in result.matched_keywords
        assert "valuation" in result.matched_keywords

    def test_classify_noise(self):
        """Should classify text without keywords as Uncategorized with score 1."""
        classifier = KeywordClassifier()

        result = classifier.classify("Photo essay: spring in Kyoto", "")

        assert result.category == Category.UNCATEGORIZED
        assert result.relevance_score == 1
        assert result.matched_keywords == []

    def test_classify_agrees_with_categorize(self):
        """The classifier and the plain function pick the same category."""
        classifier = KeywordClassifier()
        samples = [
            ("Inflation worries spread across Africa", ""),
            ("Automation lifts productivity in the back office", ""),
            ("Why mindset shapes CFO influence", "and team decisions"),
        ]
        for title, description in samples:
            assert classifier.classify(title, description).category == categorize(title, description)
