"""
Analytics data models.

``FeedbackItem`` is the normalised unit fed to every analyser. The result
models are stored verbatim (camelCase on the wire, matching the dashboard)
in the analysis cache. The ``*Output`` models are the structured outputs
requested from the language model.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

Sentiment = Literal["positive", "negative", "neutral"]
OverallSentiment = Literal["positive", "negative", "neutral", "mixed"]
FeedbackSource = Literal["pin", "form", "enquiry"]


class _ResultModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class FeedbackItem(BaseModel):
    """One piece of feedback, whatever channel it came through."""

    id: str = Field(description="Source-qualified id, e.g. 'pin-12'")
    type: FeedbackSource
    content: str
    category: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    created_at: datetime


class SentimentCounts(_ResultModel):
    positive: int = 0
    negative: int = 0
    neutral: int = 0


class SourceBreakdown(_ResultModel):
    pins: SentimentCounts = Field(default_factory=SentimentCounts)
    forms: SentimentCounts = Field(default_factory=SentimentCounts)
    enquiries: SentimentCounts = Field(default_factory=SentimentCounts)

    def for_source(self, source: str) -> Optional[SentimentCounts]:
        return {"pin": self.pins, "form": self.forms, "enquiry": self.enquiries}.get(source)


class ItemSentiment(_ResultModel):
    id: str
    sentiment: Sentiment
    confidence: float = Field(ge=0, le=1)


class SentimentResult(_ResultModel):
    overall: OverallSentiment = "neutral"
    score: float = Field(default=0.0, ge=-1, le=1)
    breakdown: SentimentCounts = Field(default_factory=SentimentCounts)
    by_source: SourceBreakdown = Field(default_factory=SourceBreakdown)
    items: List[ItemSentiment] = Field(default_factory=list)


class Theme(_ResultModel):
    name: str
    count: int = 1
    sentiment: OverallSentiment = "neutral"
    keywords: List[str] = Field(default_factory=list)
    sample_quotes: List[str] = Field(default_factory=list)


class ThemesResult(_ResultModel):
    themes: List[Theme] = Field(default_factory=list)
    total_feedback: int = 0


class SummaryResult(_ResultModel):
    executive: str
    key_findings: List[str] = Field(default_factory=list)
    recommendations: List[str] = Field(default_factory=list)
    concern_areas: List[str] = Field(default_factory=list)
    support_areas: List[str] = Field(default_factory=list)


class GeoCluster(_ResultModel):
    latitude: float
    longitude: float
    sentiment: OverallSentiment
    count: int
    themes: List[str] = Field(default_factory=list)


class GeographicResult(_ResultModel):
    clusters: List[GeoCluster] = Field(default_factory=list)


class FullAnalysisResult(_ResultModel):
    sentiment: SentimentResult
    themes: ThemesResult
    summary: SummaryResult
    geographic: Optional[GeographicResult] = None
    analyzed_at: datetime
    feedback_count: int
    model: Optional[str] = Field(default=None, description="Model used, None for the rule-based analyser")


# Structured outputs requested from the language model


class ItemSentimentOutput(BaseModel):
    id: str = Field(description="The number in brackets identifying the feedback item")
    sentiment: Sentiment
    confidence: float = Field(ge=0, le=1)


class SentimentOutput(BaseModel):
    overall: OverallSentiment = "neutral"
    score: float = Field(default=0.0, ge=-1, le=1, description="-1 very negative to 1 very positive")
    items: List[ItemSentimentOutput] = Field(default_factory=list)


class ThemeOutput(BaseModel):
    name: str = Field(description="Short theme name, e.g. 'Traffic Concerns'")
    count: Optional[int] = Field(default=None, description="Number of feedback items mentioning this theme")
    sentiment: Optional[OverallSentiment] = None
    keywords: List[str] = Field(default_factory=list, description="3-5 keywords")
    sample_quotes: List[str] = Field(default_factory=list, description="1-2 short quotes, max 100 chars")


class ThemesOutput(BaseModel):
    themes: List[ThemeOutput] = Field(default_factory=list)


class SummaryOutput(BaseModel):
    executive: Optional[str] = Field(default=None, description="2-3 sentence executive summary")
    key_findings: List[str] = Field(default_factory=list)
    recommendations: List[str] = Field(default_factory=list)
    concern_areas: List[str] = Field(default_factory=list)
    support_areas: List[str] = Field(default_factory=list)
