"""
Deterministic feedback analyser.

Used when no language model is configured. Produces the same result shapes
as the model-backed analyser from feedback categories and a small keyword
lexicon, so dashboards work in development and tests without API keys.
"""

from __future__ import annotations

import re
from typing import Dict, List, Tuple

from .models import (
    FeedbackItem,
    ItemSentiment,
    OverallSentiment,
    Sentiment,
    SentimentCounts,
    SentimentResult,
    SourceBreakdown,
    SummaryResult,
    Theme,
    ThemesResult,
)

_WORD = re.compile(r"[a-z']+")

POSITIVE_WORDS = {
    "good", "great", "love", "like", "support", "welcome", "excellent", "improve", "improvement",
    "better", "benefit", "beautiful", "happy", "pleased", "positive", "agree", "nice", "needed",
}
NEGATIVE_WORDS = {
    "bad", "concern", "concerned", "worried", "oppose", "object", "objection", "against", "problem",
    "dangerous", "noise", "congestion", "ugly", "overdevelopment", "loss", "worse", "terrible", "unsafe",
    "disagree", "negative",
}

THEME_KEYWORDS: Dict[str, List[str]] = {
    "Traffic & Transport": ["traffic", "congestion", "road", "roads", "bus", "cycle", "cycling", "transport"],
    "Parking": ["parking", "car", "cars", "spaces"],
    "Design & Character": ["design", "height", "character", "architecture", "building", "buildings", "style"],
    "Environment & Green Space": ["green", "trees", "park", "environment", "wildlife", "nature", "biodiversity"],
    "Housing": ["housing", "homes", "affordable", "flats", "rent", "residents"],
    "Community & Facilities": ["community", "school", "schools", "shops", "facilities", "doctor", "gp"],
    "Safety": ["safety", "safe", "unsafe", "crime", "lighting", "pedestrian", "pedestrians"],
    "Noise & Disruption": ["noise", "construction", "disruption", "dust"],
}

CATEGORY_SENTIMENT: Dict[str, Sentiment] = {
    "positive": "positive",
    "support": "positive",
    "negative": "negative",
    "concern": "negative",
}


def _words(text: str) -> List[str]:
    return _WORD.findall(text.lower())


def classify(item: FeedbackItem) -> Tuple[Sentiment, float]:
    """Sentiment and confidence for one item: category first, then keyword balance."""
    if item.category in CATEGORY_SENTIMENT:
        return CATEGORY_SENTIMENT[item.category], 0.9
    words = _words(item.content)
    pos = sum(w in POSITIVE_WORDS for w in words)
    neg = sum(w in NEGATIVE_WORDS for w in words)
    if pos > neg:
        return "positive", 0.6
    if neg > pos:
        return "negative", 0.6
    return "neutral", 0.5


def _overall(counts: SentimentCounts) -> OverallSentiment:
    total = counts.positive + counts.negative + counts.neutral
    if total == 0:
        return "neutral"
    if counts.positive and counts.negative and min(counts.positive, counts.negative) / total >= 0.25:
        return "mixed"
    ranked = sorted(
        (("positive", counts.positive), ("negative", counts.negative), ("neutral", counts.neutral)),
        key=lambda kv: kv[1],
        reverse=True,
    )
    return ranked[0][0]  # type: ignore[return-value]


def analyze_sentiment(items: List[FeedbackItem]) -> SentimentResult:
    breakdown = SentimentCounts()
    by_source = SourceBreakdown()
    results = []
    for item in items:
        sentiment, confidence = classify(item)
        results.append(ItemSentiment(id=item.id, sentiment=sentiment, confidence=confidence))
        setattr(breakdown, sentiment, getattr(breakdown, sentiment) + 1)
        source = by_source.for_source(item.type)
        if source is not None:
            setattr(source, sentiment, getattr(source, sentiment) + 1)
    score = (breakdown.positive - breakdown.negative) / len(items) if items else 0.0
    return SentimentResult(
        overall=_overall(breakdown),
        score=round(score, 2),
        breakdown=breakdown,
        by_source=by_source,
        items=results,
    )


def extract_themes(items: List[FeedbackItem], max_themes: int = 10) -> ThemesResult:
    themes = []
    for name, keywords in THEME_KEYWORDS.items():
        matched = [i for i in items if set(_words(i.content)) & set(keywords)]
        if not matched:
            continue
        counts = SentimentCounts()
        for item in matched:
            sentiment, _ = classify(item)
            setattr(counts, sentiment, getattr(counts, sentiment) + 1)
        themes.append(
            Theme(
                name=name,
                count=len(matched),
                sentiment=_overall(counts),
                keywords=keywords[:5],
                sample_quotes=[i.content[:100] for i in matched[:2]],
            )
        )
    themes.sort(key=lambda t: t.count, reverse=True)
    return ThemesResult(themes=themes[:max_themes], total_feedback=len(items))


def generate_summary(items: List[FeedbackItem], sentiment: SentimentResult, themes: ThemesResult) -> SummaryResult:
    if not items:
        return SummaryResult(executive="No feedback has been received yet.")
    b = sentiment.breakdown
    top = themes.themes[:5]
    executive = (
        f"{len(items)} pieces of feedback were analysed with an overall {sentiment.overall} sentiment "
        f"({b.positive} positive, {b.negative} negative, {b.neutral} neutral)."
    )
    if top:
        executive += f" The most discussed topic was {top[0].name.lower()}."
    concerns = [t.name for t in top if t.sentiment in ("negative", "mixed")]
    support = [t.name for t in top if t.sentiment == "positive"]
    recommendations = [f"Respond to concerns about {name.lower()}." for name in concerns[:3]]
    if not recommendations:
        recommendations = ["Continue engagement and keep stakeholders informed of progress."]
    return SummaryResult(
        executive=executive,
        key_findings=[f"{t.name}: {t.count} mention(s), {t.sentiment}" for t in top],
        recommendations=recommendations,
        concern_areas=concerns,
        support_areas=support,
    )
