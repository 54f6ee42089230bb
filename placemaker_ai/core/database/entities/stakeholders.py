"""
Stakeholder entity models.

Stakeholders are people or organisations with a stake in a project, either
entered by the team or auto-detected from the project location. Engagements
are the contact log kept against each stakeholder.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlmodel import Field

from ..base import Base, utc_now


class StakeholderBase(Base):
    """Base fields for a stakeholder."""

    name: str = Field(description="Person or organisation name")
    email: Optional[str] = Field(default=None, index=True)
    phone: Optional[str] = Field(default=None)
    organization: Optional[str] = Field(default=None)
    role: Optional[str] = Field(default=None)
    type: Optional[str] = Field(default=None, description="political, community_org, business, resident, ...")
    category: str = Field(default="neutral", description="supporter, neutral, opponent or unknown")
    influence: Optional[int] = Field(default=None, ge=1, le=5)
    interest: Optional[int] = Field(default=None, ge=1, le=5)
    notes: Optional[str] = Field(default=None)
    latitude: Optional[float] = Field(default=None)
    longitude: Optional[float] = Field(default=None)


class Stakeholder(StakeholderBase, table=True):
    """Persistent stakeholder record.

    Table: stakeholders
    """

    __tablename__ = "stakeholders"
    __table_args__ = ({"extend_existing": True},)

    id: Optional[int] = Field(default=None, primary_key=True)
    project_id: int = Field(foreign_key="projects.id", index=True, ondelete="CASCADE")

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})

    def __repr__(self) -> str:
        return f"Stakeholder(id={self.id}, name={self.name}, organization={self.organization})"


class StakeholderEngagement(Base, table=True):
    """Single logged contact with a stakeholder.

    Table: stakeholder_engagements
    """

    __tablename__ = "stakeholder_engagements"
    __table_args__ = ({"extend_existing": True},)

    id: Optional[int] = Field(default=None, primary_key=True)
    stakeholder_id: int = Field(foreign_key="stakeholders.id", index=True, ondelete="CASCADE")
    type: str = Field(description="meeting, call, inbound_email, outbound_email, ...")
    title: str
    description: Optional[str] = Field(default=None)
    date: datetime = Field(default_factory=utc_now, index=True)
    outcome: Optional[str] = Field(default=None)
    next_action: Optional[str] = Field(default=None)
    created_at: datetime = Field(default_factory=utc_now)
