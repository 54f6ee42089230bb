"""
Mailing list and outbound email I/O models.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..domain import UtcDatetime


class SubscriberCreate(BaseModel):
    email: str = Field(min_length=3)
    name: Optional[str] = None
    gdpr_consent: bool = True


class SubscriberRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    project_id: int
    email: str
    name: Optional[str] = None
    source: str
    source_id: Optional[int] = None
    subscribed: bool
    unsubscribed_at: Optional[UtcDatetime] = None
    gdpr_consent: bool
    gdpr_consent_date: Optional[UtcDatetime] = None
    created_at: UtcDatetime


class BroadcastRequest(BaseModel):
    subject: str = Field(min_length=1)
    body: str = Field(min_length=1)
    sent_by: Optional[str] = None


class ProjectEmailRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    project_id: int
    subject: str
    body: str
    sent_by: Optional[str] = None
    recipient_count: int
    sent_at: UtcDatetime


class BroadcastResponse(BaseModel):
    project_email: ProjectEmailRead
    recipients: int
    stakeholder_engagements_logged: int
    email_sent: bool


class DirectSendRequest(BaseModel):
    """Presence rules are checked by the endpoint so failures surface as 400."""

    to: Optional[List[str]] = None
    subject: Optional[str] = None
    message: Optional[str] = None
    sent_by: Optional[str] = None


class DirectSendResponse(BaseModel):
    success: bool
    email_id: Optional[str] = None
    project_email_id: int
    recipient_count: int
    stakeholder_engagements_logged: int
