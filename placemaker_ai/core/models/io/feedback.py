"""
Public feedback I/O models: map pins and feedback forms.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..domain import UtcDatetime


class PinSubmit(BaseModel):
    """Map feedback submitted through the public embed.

    Presence rules depend on ``shape_type`` and are checked by the endpoint so
    that failures surface as 400 responses.
    """

    shape_type: Optional[str] = Field(default="pin", description="pin, line or polygon")
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    geometry: Optional[Dict[str, Any]] = Field(default=None, description="GeoJSON geometry for lines and polygons")
    category: Optional[str] = Field(default="comment")
    comment: Optional[str] = None
    name: Optional[str] = None
    email: Optional[str] = None
    gdpr_consent: bool = False
    mailing_consent: bool = False


class PinModerate(BaseModel):
    approved: bool


class PinRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    project_id: int
    shape_type: str
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    geometry: Optional[Dict[str, Any]] = None
    category: str
    comment: str
    name: Optional[str] = None
    email: Optional[str] = None
    approved: bool
    votes: int
    mailing_consent: bool
    created_at: UtcDatetime
    area: Optional[int] = Field(default=None, description="Polygon area in square metres")
    length: Optional[int] = Field(default=None, description="Line length in metres")


class PublicPinRead(BaseModel):
    """Pin as exposed to the public embed, without contact details."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    shape_type: str
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    geometry: Optional[Dict[str, Any]] = None
    category: str
    comment: str
    name: Optional[str] = None
    votes: int
    created_at: UtcDatetime


class PinVoteResponse(BaseModel):
    id: int
    votes: int


class FormField(BaseModel):
    """Definition of one question on a feedback form."""

    id: str
    label: str
    type: str = Field(default="text", description="text, textarea, email, select, radio, checkbox, ...")
    options: Optional[List[str]] = None
    required: bool = False


class FeedbackFormCreate(BaseModel):
    name: str = Field(min_length=1)
    fields: List[FormField] = Field(default_factory=list)
    active: bool = True


class FeedbackFormRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    project_id: int
    name: str
    fields: List[FormField]
    active: bool
    created_at: UtcDatetime


class FeedbackResponseSubmit(BaseModel):
    data: Dict[str, Any] = Field(default_factory=dict, description="Answers keyed by field id")
    gdpr_consent: bool = False
    mailing_consent: bool = False


class FeedbackResponseRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    form_id: int
    data: Dict[str, Any]
    gdpr_consent: bool
    mailing_consent: bool
    submitted_at: UtcDatetime


class FeedbackFormDetailRead(FeedbackFormRead):
    responses: List[FeedbackResponseRead] = Field(default_factory=list)
