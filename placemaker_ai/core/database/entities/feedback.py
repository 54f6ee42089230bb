"""
Public feedback entity models.

Covers map feedback dropped through the embed (pins, lines and polygons) and
feedback forms with their submitted responses.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import JSON, Column
from sqlmodel import Field

from ..base import Base, utc_now


class PublicPin(Base, table=True):
    """Map-anchored feedback item submitted by a site visitor.

    Pins carry a latitude and longitude; lines and polygons carry a GeoJSON
    geometry instead.

    Table: public_pins
    """

    __tablename__ = "public_pins"
    __table_args__ = ({"extend_existing": True},)

    id: Optional[int] = Field(default=None, primary_key=True)
    project_id: int = Field(foreign_key="projects.id", index=True, ondelete="CASCADE")
    shape_type: str = Field(default="pin", description="pin, line or polygon")
    latitude: Optional[float] = Field(default=None)
    longitude: Optional[float] = Field(default=None)
    geometry: Optional[Dict[str, Any]] = Field(default=None, sa_column=Column(JSON))
    category: str = Field(default="comment", description="positive, negative, question or comment")
    comment: str
    name: Optional[str] = Field(default=None)
    email: Optional[str] = Field(default=None)
    approved: bool = Field(default=True, index=True)
    votes: int = Field(default=0)
    gdpr_consent: bool = Field(default=False)
    gdpr_consent_date: Optional[datetime] = Field(default=None)
    mailing_consent: bool = Field(default=False)
    created_at: datetime = Field(default_factory=utc_now, index=True)

    def __repr__(self) -> str:
        return f"PublicPin(id={self.id}, shape={self.shape_type}, category={self.category})"


class FeedbackForm(Base, table=True):
    """Consultation questionnaire.

    ``fields`` is a list of ``{"id", "label", "type", "options"?, "required"?}``
    definitions.

    Table: feedback_forms
    """

    __tablename__ = "feedback_forms"
    __table_args__ = ({"extend_existing": True},)

    id: Optional[int] = Field(default=None, primary_key=True)
    project_id: int = Field(foreign_key="projects.id", index=True, ondelete="CASCADE")
    name: str
    fields: List[Dict[str, Any]] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    active: bool = Field(default=True)
    created_at: datetime = Field(default_factory=utc_now)


class FeedbackResponse(Base, table=True):
    """One submission of a feedback form.

    Table: feedback_responses
    """

    __tablename__ = "feedback_responses"
    __table_args__ = ({"extend_existing": True},)

    id: Optional[int] = Field(default=None, primary_key=True)
    form_id: int = Field(foreign_key="feedback_forms.id", index=True, ondelete="CASCADE")
    data: Dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON, nullable=False))
    gdpr_consent: bool = Field(default=False)
    gdpr_consent_date: Optional[datetime] = Field(default=None)
    mailing_consent: bool = Field(default=False)
    submitted_at: datetime = Field(default_factory=utc_now)
