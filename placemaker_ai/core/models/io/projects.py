"""
Project, user and team I/O models for API requests and responses.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..domain import ProjectRole, SystemRole, UtcDatetime


class ProjectCreate(BaseModel):
    """Schema for creating a project via API."""

    name: str = Field(min_length=1, description="Project name")
    description: Optional[str] = Field(default=None, description="Public description of the scheme")
    latitude: Optional[float] = Field(default=None, ge=-90, le=90)
    longitude: Optional[float] = Field(default=None, ge=-180, le=180)
    email_from_name: Optional[str] = Field(default=None, description="Sender display name for project email")
    email_from_address: Optional[str] = Field(default=None, description="Sender address for project email")


class ProjectUpdate(BaseModel):
    """Schema for updating a project via API. Only supplied fields are written."""

    name: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    latitude: Optional[float] = Field(default=None, ge=-90, le=90)
    longitude: Optional[float] = Field(default=None, ge=-180, le=180)
    map_zoom: Optional[int] = Field(default=None, ge=1, le=22)
    embed_enabled: Optional[bool] = None
    allow_pins: Optional[bool] = None
    allow_drawing: Optional[bool] = None
    email_from_name: Optional[str] = None
    email_from_address: Optional[str] = None
    auto_reply_enabled: Optional[bool] = None
    auto_reply_subject: Optional[str] = None
    auto_reply_message: Optional[str] = None


class ProjectRead(BaseModel):
    """Schema for reading a project from API."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    map_zoom: int
    embed_enabled: bool
    allow_pins: bool
    allow_drawing: bool
    email_from_name: Optional[str] = None
    email_from_address: Optional[str] = None
    auto_reply_enabled: bool
    auto_reply_subject: Optional[str] = None
    auto_reply_message: Optional[str] = None
    created_at: UtcDatetime
    updated_at: UtcDatetime


class ProjectCounts(BaseModel):
    stakeholders: int = 0
    forms: int = 0
    markers: int = 0


class ProjectSummaryRead(ProjectRead):
    """Project as listed on the dashboard, with record counts."""

    counts: ProjectCounts = Field(default_factory=ProjectCounts)


class ProjectDetailRead(ProjectRead):
    """Project together with the caller's role on it."""

    user_role: ProjectRole
    is_admin: bool


class ProjectAccessGrant(BaseModel):
    """A project role granted to a user."""

    model_config = ConfigDict(from_attributes=True, use_enum_values=True, validate_default=True)

    project_id: int
    role: ProjectRole = ProjectRole.CLIENT


class ProjectAccessRead(ProjectAccessGrant):
    project_name: Optional[str] = None


class UserCreate(BaseModel):
    """Schema for creating a user via the admin API."""

    model_config = ConfigDict(use_enum_values=True, validate_default=True)

    email: Optional[str] = Field(default=None, description="Login email, required")
    name: Optional[str] = None
    system_role: SystemRole = SystemRole.USER
    project_access: List[ProjectAccessGrant] = Field(default_factory=list)


class UserUpdate(BaseModel):
    """Schema for updating a user. ``project_access`` replaces every existing grant when supplied."""

    model_config = ConfigDict(use_enum_values=True, validate_default=True)

    name: Optional[str] = None
    system_role: Optional[SystemRole] = None
    project_access: Optional[List[ProjectAccessGrant]] = None


class UserRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    name: Optional[str] = None
    system_role: SystemRole
    created_at: UtcDatetime
    project_access: List[ProjectAccessRead] = Field(default_factory=list)


class TeamMemberCreate(BaseModel):
    name: str = Field(min_length=1)
    email: str = Field(min_length=3)
    role: Optional[str] = None


class TeamMemberUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    email: Optional[str] = None
    role: Optional[str] = None


class TeamMemberRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    project_id: int
    name: str
    email: str
    role: Optional[str] = None
    created_at: UtcDatetime
