"""
Enquiry entity models.

An enquiry is a message from the public routed to the project team inbox.
Its thread holds messages (notes, inbound and outbound email, sent
responses); queries are questions put to team members while drafting a
response, answered through a tokenised link.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlmodel import Field

from ..base import Base, utc_now


class EnquiryBase(Base):
    """Base fields for an enquiry."""

    submitter_name: str
    submitter_email: str = Field(index=True)
    submitter_phone: Optional[str] = Field(default=None)
    submitter_org: Optional[str] = Field(default=None)
    subject: str
    message: str
    category: str = Field(default="general")
    priority: str = Field(default="normal", description="low, normal, high or urgent")


class Enquiry(EnquiryBase, table=True):
    """Persistent enquiry.

    Table: enquiries
    """

    __tablename__ = "enquiries"
    __table_args__ = ({"extend_existing": True},)

    id: Optional[int] = Field(default=None, primary_key=True)
    project_id: int = Field(foreign_key="projects.id", index=True, ondelete="CASCADE")
    status: str = Field(default="new", index=True)
    assigned_to_id: Optional[int] = Field(default=None, foreign_key="team_members.id", ondelete="SET NULL")
    draft_response: Optional[str] = Field(default=None)
    final_response: Optional[str] = Field(default=None)
    sent_at: Optional[datetime] = Field(default=None)
    gdpr_consent: bool = Field(default=False)
    gdpr_consent_date: Optional[datetime] = Field(default=None)
    mailing_consent: bool = Field(default=False)

    created_at: datetime = Field(default_factory=utc_now, index=True)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})

    def __repr__(self) -> str:
        return f"Enquiry(id={self.id}, subject={self.subject}, status={self.status})"


class EnquiryMessage(Base, table=True):
    """Entry in an enquiry thread.

    Table: enquiry_messages
    """

    __tablename__ = "enquiry_messages"
    __table_args__ = ({"extend_existing": True},)

    id: Optional[int] = Field(default=None, primary_key=True)
    enquiry_id: int = Field(foreign_key="enquiries.id", index=True, ondelete="CASCADE")
    type: str = Field(default="internal_note")
    content: str
    author_name: Optional[str] = Field(default=None)
    created_at: datetime = Field(default_factory=utc_now)


class EnquiryQuery(Base, table=True):
    """Question sent to a team member about an enquiry.

    Table: enquiry_queries
    """

    __tablename__ = "enquiry_queries"
    __table_args__ = ({"extend_existing": True},)

    id: Optional[int] = Field(default=None, primary_key=True)
    enquiry_id: int = Field(foreign_key="enquiries.id", index=True, ondelete="CASCADE")
    team_member_id: int = Field(foreign_key="team_members.id", ondelete="CASCADE")
    question: str
    token: str = Field(index=True)
    status: str = Field(default="pending", description="pending or responded")
    response: Optional[str] = Field(default=None)
    sent_at: datetime = Field(default_factory=utc_now)
    responded_at: Optional[datetime] = Field(default=None)
