"""
Analysis result entity model.

Stores the latest feedback analysis per project and type together with the
hash of the feedback it was computed from.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy import JSON, Column, UniqueConstraint
from sqlmodel import Field

from ..base import Base, utc_now


class AnalysisResult(Base, table=True):
    """Cached analysis output.

    Table: analysis_results
    """

    __tablename__ = "analysis_results"
    __table_args__ = (
        UniqueConstraint("project_id", "type", name="uq_analysis_results_project_type"),
        {"extend_existing": True},
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    project_id: int = Field(foreign_key="projects.id", index=True, ondelete="CASCADE")
    type: str = Field(default="full")
    data: Dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON, nullable=False))
    feedback_hash: str
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
