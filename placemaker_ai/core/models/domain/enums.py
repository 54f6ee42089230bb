"""Domain enums for the consultation platform."""

from __future__ import annotations

from enum import Enum


class SystemRole(str, Enum):
    """Platform-wide role of a user."""

    SUPER_ADMIN = "SUPER_ADMIN"  # Every permission on every project.
    USER = "USER"  # Permissions come only from project access grants.


class ProjectRole(str, Enum):
    """Role of a user within a single project."""

    ADMIN = "ADMIN"
    CLIENT = "CLIENT"


class Permission(str, Enum):
    """Fine-grained permissions checked by the HTTP layer."""

    projects_create = "projects:create"
    projects_read = "projects:read"
    projects_update = "projects:update"
    projects_delete = "projects:delete"
    users_manage = "users:manage"
    users_invite = "users:invite"
    analytics_view = "analytics:view"
    feedback_manage = "feedback:manage"
    stakeholders_manage = "stakeholders:manage"
    settings_manage = "settings:manage"


class StakeholderCategory(str, Enum):
    supporter = "supporter"
    neutral = "neutral"
    opponent = "opponent"
    unknown = "unknown"


class StakeholderType(str, Enum):
    political = "political"
    community_org = "community_org"
    business = "business"
    resident = "resident"
    statutory = "statutory"
    other = "other"


class EngagementType(str, Enum):
    """Kinds of contact logged against a stakeholder."""

    meeting = "meeting"
    call = "call"
    email = "email"
    inbound_email = "inbound_email"
    outbound_email = "outbound_email"
    event = "event"
    letter = "letter"
    other = "other"


class ShapeType(str, Enum):
    pin = "pin"
    line = "line"
    polygon = "polygon"


class PinCategory(str, Enum):
    positive = "positive"
    negative = "negative"
    question = "question"
    comment = "comment"


class EnquiryStatus(str, Enum):
    """Lifecycle status of an enquiry."""

    new = "new"
    in_progress = "in_progress"
    awaiting_info = "awaiting_info"
    draft_ready = "draft_ready"
    sent = "sent"
    closed = "closed"


class EnquiryPriority(str, Enum):
    low = "low"
    normal = "normal"
    high = "high"
    urgent = "urgent"


class MessageType(str, Enum):
    """Kinds of entry in an enquiry thread."""

    internal_note = "internal_note"
    inbound = "inbound"
    outbound = "outbound"
    query_response = "query_response"
    response_sent = "response_sent"


class QueryStatus(str, Enum):
    pending = "pending"
    responded = "responded"


class SubscriberSource(str, Enum):
    manual = "manual"
    public_pin = "public_pin"
    feedback_form = "feedback_form"
    enquiry = "enquiry"


class LayerType(str, Enum):
    boundary = "boundary"
    constraint = "constraint"
    context = "context"
    proposal = "proposal"
    other = "other"


class ImportStatus(str, Enum):
    """Outcome of the latest councillor import for a council."""

    pending = "pending"
    success = "success"
    partial = "partial"
    failed = "failed"
