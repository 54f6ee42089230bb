"""
Mailing list entity models.

Subscribers are unique per project and email address. Project emails record
every broadcast or direct send made from the platform.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import Field

from ..base import Base, utc_now


class Subscriber(Base, table=True):
    """Mailing list entry.

    Table: subscribers
    """

    __tablename__ = "subscribers"
    __table_args__ = (
        UniqueConstraint("project_id", "email", name="uq_subscribers_project_email"),
        {"extend_existing": True},
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    project_id: int = Field(foreign_key="projects.id", index=True, ondelete="CASCADE")
    email: str
    name: Optional[str] = Field(default=None)
    source: str = Field(default="manual", description="manual, public_pin, feedback_form or enquiry")
    source_id: Optional[int] = Field(default=None)
    subscribed: bool = Field(default=True)
    unsubscribed_at: Optional[datetime] = Field(default=None)
    gdpr_consent: bool = Field(default=False)
    gdpr_consent_date: Optional[datetime] = Field(default=None)
    created_at: datetime = Field(default_factory=utc_now, index=True)

    def __repr__(self) -> str:
        return f"Subscriber(id={self.id}, email={self.email}, subscribed={self.subscribed})"


class ProjectEmail(Base, table=True):
    """Record of an email sent from the platform.

    Table: project_emails
    """

    __tablename__ = "project_emails"
    __table_args__ = ({"extend_existing": True},)

    id: Optional[int] = Field(default=None, primary_key=True)
    project_id: int = Field(foreign_key="projects.id", index=True, ondelete="CASCADE")
    subject: str
    body: str
    sent_by: Optional[str] = Field(default=None)
    recipient_count: int = Field(default=0)
    sent_at: datetime = Field(default_factory=utc_now, index=True)
