"""
Feedback analytics.

- collector: gathers feedback items from pins, forms and enquiries
- analyzer: sentiment, theme and summary passes (language model or rule-based)
- geographic: location clustering
- hashing: change detection for the analysis cache
"""

from .analyzer import FeedbackAnalyzer
from .collector import collect_feedback
from .hashing import feedback_hash
from .models import FeedbackItem, FullAnalysisResult

__all__ = ["FeedbackAnalyzer", "FeedbackItem", "FullAnalysisResult", "collect_feedback", "feedback_hash"]
