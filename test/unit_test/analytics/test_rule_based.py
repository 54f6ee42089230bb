"""Unit tests for the deterministic feedback analyser."""

from datetime import datetime
from typing import Optional

import pytest

from placemaker_ai.analytics import rule_based
from placemaker_ai.analytics.models import FeedbackItem, SentimentResult, ThemesResult


def _item(n: int, content: str, category: Optional[str] = None, kind: str = "pin") -> FeedbackItem:
    return FeedbackItem(id=f"{kind}-{n}", type=kind, content=content, category=category, created_at=datetime(2024, 5, 1))


class TestClassify:
    """Test single-item classification."""

    @pytest.mark.parametrize(
        "category,expected",
        [("positive", "positive"), ("support", "positive"), ("negative", "negative"), ("concern", "negative")],
    )
    def test_category_wins(self, category, expected):
        assert rule_based.classify(_item(1, "terrible idea", category)) == (expected, 0.9)

    def test_keyword_balance(self):
        assert rule_based.classify(_item(1, "I love the new park, great design")) == ("positive", 0.6)
        assert rule_based.classify(_item(1, "Worried about congestion and noise")) == ("negative", 0.6)
        assert rule_based.classify(_item(1, "When does construction start?")) == ("neutral", 0.5)


class TestAnalyzeSentiment:
    """Test the sentiment pass."""

    def test_counts_and_breakdown_by_source(self):
        items = [
            _item(1, "Great plan", "positive"),
            _item(2, "Dangerous junction", "negative"),
            _item(3, "Love it, excellent", kind="form"),
            _item(4, "What time is the event?", kind="enquiry"),
        ]
        result = rule_based.analyze_sentiment(items)

        assert result.breakdown.positive == 2
        assert result.breakdown.negative == 1
        assert result.breakdown.neutral == 1
        assert result.by_source.pins.positive == 1
        assert result.by_source.pins.negative == 1
        assert result.by_source.forms.positive == 1
        assert result.by_source.enquiries.neutral == 1
        assert result.score == 0.25
        assert result.overall == "mixed"
        assert [i.id for i in result.items] == ["pin-1", "pin-2", "form-3", "enquiry-4"]

    def test_one_sided_feedback(self):
        items = [_item(n, "good", "positive") for n in range(4)] + [_item(9, "bad", "negative")]
        result = rule_based.analyze_sentiment(items)
        assert result.overall == "positive"
        assert result.score == 0.6


class TestExtractThemes:
    """Test keyword theme extraction."""

    def test_themes_sorted_by_count(self):
        items = [
            _item(1, "Traffic on the main road is already bad"),
            _item(2, "More bus routes and cycle lanes please"),
            _item(3, "Not enough parking spaces"),
        ]
        result = rule_based.extract_themes(items)

        assert result.total_feedback == 3
        assert result.themes[0].name == "Traffic & Transport"
        assert result.themes[0].count == 2
        assert {t.name for t in result.themes} >= {"Traffic & Transport", "Parking"}
        assert len(result.themes[0].sample_quotes) == 2

    def test_limit(self):
        items = [_item(1, "traffic parking design trees housing school safety noise")]
        assert len(rule_based.extract_themes(items, max_themes=3).themes) == 3

    def test_no_matches(self):
        assert rule_based.extract_themes([_item(1, "Hello")]).themes == []


class TestGenerateSummary:
    """Test the summary pass."""

    def test_empty(self):
        summary = rule_based.generate_summary([], SentimentResult(), ThemesResult())
        assert summary.executive == "No feedback has been received yet."

    def test_concerns_drive_recommendations(self):
        items = [_item(1, "Traffic congestion is dangerous", "negative"), _item(2, "Traffic is awful", "negative")]
        sentiment = rule_based.analyze_sentiment(items)
        themes = rule_based.extract_themes(items)
        summary = rule_based.generate_summary(items, sentiment, themes)

        assert summary.executive.startswith("2 pieces of feedback")
        assert "traffic & transport" in summary.executive
        assert summary.concern_areas == ["Traffic & Transport"]
        assert summary.recommendations == ["Respond to concerns about traffic & transport."]

    def test_default_recommendation_without_concerns(self):
        items = [_item(1, "Lovely green park with trees", "positive")]
        summary = rule_based.generate_summary(
            items, rule_based.analyze_sentiment(items), rule_based.extract_themes(items)
        )
        assert summary.support_areas == ["Environment & Green Space"]
        assert summary.recommendations == ["Continue engagement and keep stakeholders informed of progress."]
