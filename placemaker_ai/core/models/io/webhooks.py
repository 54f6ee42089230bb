"""
Inbound email webhook I/O models.

Two payload shapes are accepted: the email provider's ``email.received``
event and a generic shape used by mail-forwarding workers.
"""

from __future__ import annotations

from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from ..domain import UtcDatetime


class _Payload(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class ProviderInboundData(_Payload):
    email_id: Optional[str] = None
    from_: str = Field(alias="from")
    to: List[str] = Field(default_factory=list)
    subject: Optional[str] = None
    text: Optional[str] = None
    html: Optional[str] = None


class ProviderInboundEvent(_Payload):
    type: str
    data: ProviderInboundData


class GenericInboundEmail(_Payload):
    """Presence of ``from``, ``to`` and ``subject`` is checked by the handler."""

    from_: Optional[str] = Field(default=None, alias="from")
    from_name: Optional[str] = Field(default=None, alias="fromName")
    to: Optional[Union[str, List[str]]] = None
    subject: Optional[str] = None
    text: Optional[str] = None
    html: Optional[str] = None


class InboundEmailResponse(BaseModel):
    success: bool
    warning: Optional[str] = None
    recipients: Optional[List[str]] = None
    enquiry_id: Optional[int] = None
    project_id: Optional[int] = None
    project_name: Optional[str] = None
    from_stakeholder: bool = False
    auto_reply_sent: bool = False


class WebhookHealth(BaseModel):
    status: str
    service: str
    timestamp: UtcDatetime
