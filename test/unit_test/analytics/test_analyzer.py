"""Unit tests for the feedback analyser.

Model-backed passes run against pydantic-ai's ``TestModel`` so no language
model is ever called.
"""

from datetime import datetime
from unittest.mock import patch

import pytest
from pydantic_ai.models.test import TestModel

from placemaker_ai.analytics.analyzer import FeedbackAnalyzer, _resolve_index, build_model
from placemaker_ai.analytics.models import FeedbackItem, SentimentResult, ThemesResult


def _items():
    return [
        FeedbackItem(id="pin-4", type="pin", content="Great new park", category="positive", created_at=datetime(2024, 5, 1)),
        FeedbackItem(id="form-9", type="form", content="Too much traffic", created_at=datetime(2024, 5, 2)),
    ]


class TestResolveIndex:
    @pytest.mark.parametrize("raw,expected", [("1", 0), ("[2]", 1), (" 2 ", 1), ("3", None), ("0", None), ("x", None)])
    def test_resolve(self, raw, expected):
        assert _resolve_index(raw, 2) == expected


class TestBuildModel:
    def test_non_openai_identifier_passed_through(self):
        assert build_model("test", None) == "test"
        assert build_model("anthropic:claude-sonnet", "key") == "anthropic:claude-sonnet"


@pytest.mark.asyncio
class TestRuleBasedMode:
    """Analyser without a configured model."""

    async def test_uses_rules(self):
        analyzer = FeedbackAnalyzer()
        assert analyzer.uses_model is False
        assert analyzer.model_name is None

        sentiment = await analyzer.analyze_sentiment(_items())
        assert sentiment.breakdown.positive == 1

    async def test_empty_input(self):
        analyzer = FeedbackAnalyzer()
        assert await analyzer.analyze_sentiment([]) == SentimentResult()
        assert await analyzer.extract_themes([]) == ThemesResult()
        summary = await analyzer.generate_summary([], SentimentResult(), ThemesResult())
        assert summary.executive == "No feedback has been received yet."

    async def test_run_assembles_document(self):
        with patch("placemaker_ai.analytics.analyzer.log_analysis_run") as mock_log:
            result = await FeedbackAnalyzer().run(_items(), project_id=7)

        assert result.feedback_count == 2
        assert result.model is None
        assert result.geographic is None
        assert result.themes.total_feedback == 2
        mock_log.assert_called_once()
        assert mock_log.call_args.args[0] == 7
        assert mock_log.call_args.args[1] == 2

    async def test_document_serialises_in_camel_case(self):
        result = await FeedbackAnalyzer().run(_items())
        dumped = result.model_dump(by_alias=True, mode="json")
        assert {"sentiment", "themes", "summary", "analyzedAt", "feedbackCount"} <= set(dumped)
        assert "bySource" in dumped["sentiment"]
        assert "totalFeedback" in dumped["themes"]


@pytest.mark.asyncio
class TestModelMode:
    """Analyser backed by a pydantic-ai model."""

    async def test_sentiment_maps_numbered_ids_back(self):
        model = TestModel(
            custom_output_args={
                "overall": "mixed",
                "score": 0.1,
                "items": [
                    {"id": "1", "sentiment": "positive", "confidence": 0.9},
                    {"id": "[2]", "sentiment": "negative", "confidence": 0.8},
                    {"id": "7", "sentiment": "neutral", "confidence": 0.5},
                ],
            }
        )
        analyzer = FeedbackAnalyzer(sentiment_model=model)
        result = await analyzer.analyze_sentiment(_items())

        assert result.overall == "mixed"
        assert result.score == 0.1
        assert [(i.id, i.sentiment) for i in result.items] == [
            ("pin-4", "positive"),
            ("form-9", "negative"),
            ("7", "neutral"),
        ]
        assert result.breakdown.positive == 1
        assert result.breakdown.negative == 1
        assert result.breakdown.neutral == 0
        assert result.by_source.pins.positive == 1
        assert result.by_source.forms.negative == 1

    async def test_themes_fill_missing_values(self):
        model = TestModel(
            custom_output_args={
                "themes": [
                    {"name": "Traffic Concerns", "keywords": ["traffic"], "sample_quotes": ["a", "b", "c"]},
                ]
            }
        )
        result = await FeedbackAnalyzer(sentiment_model=model).extract_themes(_items())

        theme = result.themes[0]
        assert theme.name == "Traffic Concerns"
        assert theme.count == 1
        assert theme.sentiment == "neutral"
        assert theme.sample_quotes == ["a", "b"]
        assert result.total_feedback == 2

    async def test_summary_uses_summary_model(self):
        sentiment_model = TestModel(custom_output_args={"overall": "neutral", "score": 0, "items": []})
        summary_model = TestModel(
            custom_output_args={
                "executive": None,
                "key_findings": ["Parking is the main worry"],
                "recommendations": ["Publish a parking survey"],
            }
        )
        analyzer = FeedbackAnalyzer(sentiment_model=sentiment_model, summary_model=summary_model)
        summary = await analyzer.generate_summary(_items(), SentimentResult(), ThemesResult())

        assert summary.executive == "Analysis complete."
        assert summary.key_findings == ["Parking is the main worry"]
        assert analyzer.model_name == summary_model.model_name

    async def test_summary_model_defaults_to_sentiment_model(self):
        model = TestModel()
        analyzer = FeedbackAnalyzer(sentiment_model=model)
        assert analyzer.uses_model is True
        assert analyzer.model_name == model.model_name


class TestFromSettings:
    def test_rule_based_without_key(self):
        from placemaker_ai.analytics import analyzer as analyzer_module

        with patch.object(analyzer_module.settings, "openai_api_key", None):
            assert FeedbackAnalyzer.from_settings().uses_model is False

    def test_openai_models_with_key(self):
        from placemaker_ai.analytics import analyzer as analyzer_module

        with patch.object(analyzer_module.settings, "openai_api_key", "sk-test"):
            analyzer = FeedbackAnalyzer.from_settings()

        assert analyzer.uses_model is True
        assert analyzer.model_name == "gpt-4o"
