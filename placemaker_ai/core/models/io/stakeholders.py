"""
Stakeholder I/O models for API requests and responses.

Includes the engagement log schemas and the result shapes of stakeholder
auto-detection.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..domain import EngagementType, StakeholderCategory, UtcDatetime


class StakeholderCreate(BaseModel):
    """Schema for creating a stakeholder via API."""

    model_config = ConfigDict(use_enum_values=True, validate_default=True)

    name: str = Field(min_length=1)
    email: Optional[str] = None
    phone: Optional[str] = None
    organization: Optional[str] = None
    role: Optional[str] = None
    type: Optional[str] = None
    category: StakeholderCategory = StakeholderCategory.neutral
    influence: Optional[int] = Field(default=None, ge=1, le=5)
    interest: Optional[int] = Field(default=None, ge=1, le=5)
    notes: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None


class StakeholderUpdate(BaseModel):
    model_config = ConfigDict(use_enum_values=True, validate_default=True)

    name: Optional[str] = Field(default=None, min_length=1)
    email: Optional[str] = None
    phone: Optional[str] = None
    organization: Optional[str] = None
    role: Optional[str] = None
    type: Optional[str] = None
    category: Optional[StakeholderCategory] = None
    influence: Optional[int] = Field(default=None, ge=1, le=5)
    interest: Optional[int] = Field(default=None, ge=1, le=5)
    notes: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None


class StakeholderRead(BaseModel):
    """Schema for reading a stakeholder from API."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    project_id: int
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    organization: Optional[str] = None
    role: Optional[str] = None
    type: Optional[str] = None
    category: str
    influence: Optional[int] = None
    interest: Optional[int] = None
    notes: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    created_at: UtcDatetime
    updated_at: UtcDatetime


class EngagementCreate(BaseModel):
    model_config = ConfigDict(use_enum_values=True, validate_default=True)

    type: EngagementType
    title: str = Field(min_length=1)
    description: Optional[str] = None
    date: Optional[UtcDatetime] = Field(default=None, description="Defaults to now")
    outcome: Optional[str] = None
    next_action: Optional[str] = None


class EngagementUpdate(BaseModel):
    model_config = ConfigDict(use_enum_values=True, validate_default=True)

    type: Optional[EngagementType] = None
    title: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    date: Optional[UtcDatetime] = None
    outcome: Optional[str] = None
    next_action: Optional[str] = None


class EngagementRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    stakeholder_id: int
    type: str
    title: str
    description: Optional[str] = None
    date: UtcDatetime
    outcome: Optional[str] = None
    next_action: Optional[str] = None
    created_at: UtcDatetime


class RelatedEnquiry(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    subject: str
    status: str
    created_at: UtcDatetime


class StakeholderDetailRead(StakeholderRead):
    """Stakeholder with its engagement log and the enquiries sent from its email address."""

    engagements: List[EngagementRead] = Field(default_factory=list)
    related_enquiries: List[RelatedEnquiry] = Field(default_factory=list)


class DetectedStakeholder(BaseModel):
    """A stakeholder proposed by auto-detection, before it is persisted."""

    name: str
    organization: Optional[str] = None
    role: Optional[str] = None
    type: str
    source: str
    email: Optional[str] = None
    notes: Optional[str] = None


class DetectionLocation(BaseModel):
    latitude: float
    longitude: float
    postcode: Optional[str] = None
    council: Optional[str] = None
    ward: Optional[str] = None


class AutoDetectDetails(BaseModel):
    created: List[str] = Field(default_factory=list)
    skipped: List[str] = Field(default_factory=list)
    searched: DetectionLocation
    councillor_data_available: bool = False
    note: Optional[str] = None


class AutoDetectResponse(BaseModel):
    message: str
    created: int
    skipped: int
    details: AutoDetectDetails


class PreviewDetectRequest(BaseModel):
    latitude: Optional[float] = None
    longitude: Optional[float] = None


class PreviewDetectResponse(BaseModel):
    stakeholders: List[DetectedStakeholder]
    location: DetectionLocation
    councillor_data_available: bool = False
