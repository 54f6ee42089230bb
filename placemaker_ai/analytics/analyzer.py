"""
Feedback analysis.

``FeedbackAnalyzer`` runs the three analysis passes over collected feedback:

- sentiment: overall label and score plus a per-item label
- themes: 5-10 recurring topics with sample quotes
- summary: executive summary, findings and recommendations

Sentiment and themes run concurrently; the summary builds on both. Each pass
is a single structured pydantic-ai agent call. When no model is configured
the analyser falls back to the deterministic rule-based passes, which
produce the same result shapes.
"""

from __future__ import annotations

import asyncio
import time
from typing import Any, List, Optional

from pydantic_ai import Agent
from pydantic_ai.models.openai import OpenAIResponsesModel
from pydantic_ai.providers.openai import OpenAIProvider

from placemaker_ai.core.logging_config import get_logger
from placemaker_ai.core.monitoring import log_analysis_run
from placemaker_ai.core.database.base import utc_now
from placemaker_ai.server.core.config import settings

from . import rule_based
from .geographic import analyze_geographic
from .models import (
    FeedbackItem,
    FullAnalysisResult,
    ItemSentiment,
    SentimentCounts,
    SentimentOutput,
    SentimentResult,
    SourceBreakdown,
    SummaryOutput,
    SummaryResult,
    Theme,
    ThemesOutput,
    ThemesResult,
)

logger = get_logger(__name__)

SENTIMENT_PROMPT = """You are an expert at analyzing public feedback sentiment for planning and development projects.
For each feedback item, determine if it's positive (supportive), negative (concerned/opposed), or neutral (informational/question).

Return:
- overall: "positive", "negative", "neutral", or "mixed"
- score: number from -1 (very negative) to 1 (very positive)
- items: one entry per feedback item with id (the number in brackets), sentiment and confidence (0-1)

Be accurate and consider the context of planning/development projects. Opposition or concerns = negative. Support or praise = positive."""

THEMES_PROMPT = """You are an expert at identifying themes in public feedback for planning and development projects.
Extract the main themes/topics being discussed. For each theme return:
- name: short theme name (e.g., "Traffic Concerns", "Environmental Impact", "Design Support")
- count: number of feedback items mentioning this theme
- sentiment: "positive", "negative", "neutral", or "mixed"
- keywords: 3-5 keywords related to this theme
- sample_quotes: 1-2 short quotes (max 100 chars) from the feedback

Identify 5-10 main themes. Be specific to planning/development contexts (traffic, parking, design, environment, community, housing, safety, etc.)"""

SUMMARY_PROMPT = """You are an expert at summarizing public consultation feedback for planning projects.
Write clear, actionable summaries that help project teams understand public sentiment.

Return:
- executive: 2-3 sentence executive summary
- key_findings: 3-5 key findings (short bullet points)
- recommendations: 2-3 actionable recommendations based on feedback
- concern_areas: main areas of concern raised
- support_areas: aspects receiving support"""

ANALYSIS_TEMPERATURE = 0.3
SUMMARY_TEMPERATURE = 0.5


def build_model(name: str, api_key: Optional[str]) -> Any:
    """Turn a ``provider:model`` identifier into a pydantic-ai model.

    OpenAI models are bound to the configured API key; any other identifier is
    handed to pydantic-ai as is.
    """
    provider, _, model_name = name.partition(":")
    if provider == "openai" and model_name:
        return OpenAIResponsesModel(model_name, provider=OpenAIProvider(api_key=api_key))
    return name


def _numbered(items: List[FeedbackItem], with_type: bool) -> str:
    if with_type:
        return "\n\n".join(f"[{i + 1}] ({item.type}) {item.content}" for i, item in enumerate(items))
    return "\n\n".join(f"[{i + 1}] {item.content}" for i, item in enumerate(items))


def _resolve_index(raw_id: str, size: int) -> Optional[int]:
    try:
        index = int(raw_id.strip().strip("[]")) - 1
    except ValueError:
        return None
    return index if 0 <= index < size else None


class FeedbackAnalyzer:
    """Runs sentiment, theme and summary analysis over feedback items.

    The analyser supports two modes:

    - ``sentiment_model=None``: deterministic rule-based analysis.
    - models given: pydantic-ai agents with structured outputs. The summary
      uses ``summary_model`` (a stronger model) and falls back to
      ``sentiment_model`` when only one is supplied.
    """

    def __init__(self, *, sentiment_model: Any | None = None, summary_model: Any | None = None) -> None:
        self._sentiment_model = sentiment_model
        self._summary_model = summary_model if summary_model is not None else sentiment_model

    @classmethod
    def from_settings(cls) -> "FeedbackAnalyzer":
        """Model-backed analyser when an OpenAI key is configured, rule-based otherwise."""
        config = settings.openai
        if not config.api_key:
            logger.info("OPENAI_API_KEY not configured, using rule-based feedback analysis")
            return cls()
        return cls(
            sentiment_model=build_model(config.sentiment_model, config.api_key),
            summary_model=build_model(config.summary_model, config.api_key),
        )

    @property
    def uses_model(self) -> bool:
        return self._sentiment_model is not None

    @property
    def model_name(self) -> Optional[str]:
        if not self.uses_model:
            return None
        return getattr(self._summary_model, "model_name", None) or str(self._summary_model)

    async def analyze_sentiment(self, items: List[FeedbackItem]) -> SentimentResult:
        if not items:
            return SentimentResult()
        if not self.uses_model:
            return rule_based.analyze_sentiment(items)

        agent: Agent = Agent(self._sentiment_model, output_type=SentimentOutput, system_prompt=SENTIMENT_PROMPT)
        result = await agent.run(
            f"Analyze the sentiment of this feedback:\n\n{_numbered(items, with_type=True)}",
            model_settings={"temperature": ANALYSIS_TEMPERATURE},
        )
        output: SentimentOutput = result.output

        breakdown = SentimentCounts()
        by_source = SourceBreakdown()
        mapped = []
        for entry in output.items:
            index = _resolve_index(entry.id, len(items))
            if index is None:
                mapped.append(ItemSentiment(id=entry.id, sentiment=entry.sentiment, confidence=entry.confidence))
                continue
            original = items[index]
            mapped.append(ItemSentiment(id=original.id, sentiment=entry.sentiment, confidence=entry.confidence))
            setattr(breakdown, entry.sentiment, getattr(breakdown, entry.sentiment) + 1)
            source = by_source.for_source(original.type)
            if source is not None:
                setattr(source, entry.sentiment, getattr(source, entry.sentiment) + 1)

        return SentimentResult(
            overall=output.overall,
            score=output.score,
            breakdown=breakdown,
            by_source=by_source,
            items=mapped,
        )

    async def extract_themes(self, items: List[FeedbackItem]) -> ThemesResult:
        if not items:
            return ThemesResult()
        if not self.uses_model:
            return rule_based.extract_themes(items)

        agent: Agent = Agent(self._sentiment_model, output_type=ThemesOutput, system_prompt=THEMES_PROMPT)
        result = await agent.run(
            f"Extract themes from this feedback:\n\n{_numbered(items, with_type=False)}",
            model_settings={"temperature": ANALYSIS_TEMPERATURE},
        )
        themes = [
            Theme(
                name=theme.name,
                count=theme.count or 1,
                sentiment=theme.sentiment or "neutral",
                keywords=theme.keywords,
                sample_quotes=theme.sample_quotes[:2],
            )
            for theme in result.output.themes
        ]
        return ThemesResult(themes=themes, total_feedback=len(items))

    async def generate_summary(
        self, items: List[FeedbackItem], sentiment: SentimentResult, themes: ThemesResult
    ) -> SummaryResult:
        if not items:
            return SummaryResult(executive="No feedback has been received yet.")
        if not self.uses_model:
            return rule_based.generate_summary(items, sentiment, themes)

        top_themes = ", ".join(f"{t.name} ({t.sentiment})" for t in themes.themes[:5])
        sample = "\n---\n".join(item.content for item in items[:20])
        b = sentiment.breakdown
        prompt = (
            "Summarize this consultation feedback.\n\n"
            f"Total responses: {len(items)}\n"
            f"Overall sentiment: {sentiment.overall} (score: {sentiment.score:.2f})\n"
            f"Sentiment breakdown: {b.positive} positive, {b.negative} negative, {b.neutral} neutral\n"
            f"Top themes: {top_themes}\n\n"
            f"Sample feedback:\n{sample}"
        )
        agent: Agent = Agent(self._summary_model, output_type=SummaryOutput, system_prompt=SUMMARY_PROMPT)
        result = await agent.run(prompt, model_settings={"temperature": SUMMARY_TEMPERATURE})
        output: SummaryOutput = result.output
        return SummaryResult(
            executive=output.executive or "Analysis complete.",
            key_findings=output.key_findings,
            recommendations=output.recommendations,
            concern_areas=output.concern_areas,
            support_areas=output.support_areas,
        )

    async def run(self, items: List[FeedbackItem], project_id: Optional[int] = None) -> FullAnalysisResult:
        """Run every pass and assemble the cached analysis document."""
        started = time.perf_counter()
        sentiment, themes = await asyncio.gather(self.analyze_sentiment(items), self.extract_themes(items))
        summary = await self.generate_summary(items, sentiment, themes)
        geographic = analyze_geographic(items)
        duration_ms = (time.perf_counter() - started) * 1000
        if project_id is not None:
            log_analysis_run(project_id, len(items), duration_ms, self.model_name)
        logger.info(f"Analysed {len(items)} feedback item(s) in {duration_ms:.0f}ms (model={self.model_name})")
        return FullAnalysisResult(
            sentiment=sentiment,
            themes=themes,
            summary=summary,
            geographic=geographic,
            analyzed_at=utc_now(),
            feedback_count=len(items),
            model=self.model_name,
        )
