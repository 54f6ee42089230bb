"""
Analytics I/O models.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import BaseModel

from ..domain import UtcDatetime


class AnalyticsRead(BaseModel):
    analysis: Optional[Dict[str, Any]] = None
    needs_update: bool
    last_analyzed: Optional[UtcDatetime] = None
    feedback_count: int


class AnalyticsRunResponse(BaseModel):
    analysis: Optional[Dict[str, Any]] = None
    message: Optional[str] = None
    feedback_count: int
    last_analyzed: Optional[UtcDatetime] = None
