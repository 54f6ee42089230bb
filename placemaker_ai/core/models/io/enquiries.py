"""
Enquiry I/O models for API requests and responses.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..domain import EnquiryPriority, EnquiryStatus, MessageType, UtcDatetime


class EnquiryCreate(BaseModel):
    """Schema for an enquiry entered by the project team."""

    model_config = ConfigDict(use_enum_values=True, validate_default=True)

    submitter_name: str = Field(min_length=1)
    submitter_email: str = Field(min_length=3)
    submitter_phone: Optional[str] = None
    submitter_org: Optional[str] = None
    subject: str = Field(min_length=1)
    message: str = Field(min_length=1)
    category: str = "general"
    priority: EnquiryPriority = EnquiryPriority.normal
    gdpr_consent: bool = False
    mailing_consent: bool = False


class EnquiryUpdate(BaseModel):
    model_config = ConfigDict(use_enum_values=True, validate_default=True)

    status: Optional[EnquiryStatus] = None
    priority: Optional[EnquiryPriority] = None
    category: Optional[str] = None
    assigned_to_id: Optional[int] = None
    draft_response: Optional[str] = None
    final_response: Optional[str] = None
    sent_at: Optional[UtcDatetime] = None


class EnquiryRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    project_id: int
    submitter_name: str
    submitter_email: str
    submitter_phone: Optional[str] = None
    submitter_org: Optional[str] = None
    subject: str
    message: str
    category: str
    priority: str
    status: str
    assigned_to_id: Optional[int] = None
    draft_response: Optional[str] = None
    final_response: Optional[str] = None
    sent_at: Optional[UtcDatetime] = None
    mailing_consent: bool
    created_at: UtcDatetime
    updated_at: UtcDatetime


class EnquirySummaryRead(EnquiryRead):
    message_count: int = 0
    query_count: int = 0


class EnquiryMessageCreate(BaseModel):
    model_config = ConfigDict(use_enum_values=True, validate_default=True)

    content: str = Field(min_length=1)
    type: MessageType = MessageType.internal_note
    author_name: Optional[str] = None


class EnquiryMessageRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    enquiry_id: int
    type: str
    content: str
    author_name: Optional[str] = None
    created_at: UtcDatetime


class EnquiryQueryCreate(BaseModel):
    team_member_id: int
    question: str = Field(min_length=1)


class EnquiryQueryRead(BaseModel):
    """Query as seen by the project team. The access token is never returned."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    enquiry_id: int
    team_member_id: int
    question: str
    status: str
    response: Optional[str] = None
    sent_at: UtcDatetime
    responded_at: Optional[UtcDatetime] = None


class EnquiryQueryCreated(EnquiryQueryRead):
    email_sent: bool


class EnquiryDetailRead(EnquiryRead):
    messages: List[EnquiryMessageRead] = Field(default_factory=list)
    queries: List[EnquiryQueryRead] = Field(default_factory=list)


class EnquiryApprove(BaseModel):
    response: Optional[str] = Field(default=None, description="Final response text, required")
    author_name: Optional[str] = None


class EnquiryApproveResponse(BaseModel):
    enquiry: EnquiryRead
    email_sent: bool
    message: str


class PublicEnquirySubmit(BaseModel):
    """Enquiry submitted through the public embed. Presence rules are checked by the endpoint."""

    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    organization: Optional[str] = None
    subject: Optional[str] = None
    message: Optional[str] = None
    category: Optional[str] = None
    gdpr_consent: bool = False
    mailing_consent: bool = False


class PublicEnquiryResponse(BaseModel):
    success: bool
    reference: str
    message: str


class PublicQueryRead(BaseModel):
    """Query page shown to the team member who was asked."""

    id: int
    question: str
    status: str
    response: Optional[str] = None
    team_member_name: str
    enquiry_subject: str
    enquiry_message: str
    project_name: str


class PublicQueryAnswer(BaseModel):
    response: str = Field(min_length=1)
