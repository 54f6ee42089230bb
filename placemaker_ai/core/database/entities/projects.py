"""
Project, user and access entity models.

A project is one planning scheme under consultation. Users reach projects
either as super admins or through a per-project access grant; team members
are the (not necessarily registered) people enquiries are routed to.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import Field

from ..base import Base, utc_now


class ProjectBase(Base):
    """Base fields for a project."""

    name: str = Field(description="Project name")
    description: Optional[str] = Field(default=None, description="Public description of the scheme")
    latitude: Optional[float] = Field(default=None, description="Site latitude (WGS84)")
    longitude: Optional[float] = Field(default=None, description="Site longitude (WGS84)")
    map_zoom: int = Field(default=15, description="Initial map zoom level")
    embed_enabled: bool = Field(default=False, description="Whether the public embed is served")
    allow_pins: bool = Field(default=True, description="Whether visitors may drop pins")
    allow_drawing: bool = Field(default=True, description="Whether visitors may draw lines and polygons")
    email_from_name: Optional[str] = Field(default=None, description="Sender display name for project email")
    email_from_address: Optional[str] = Field(default=None, description="Sender address for project email")
    auto_reply_enabled: bool = Field(default=False, description="Reply automatically to inbound email")
    auto_reply_subject: Optional[str] = Field(default=None)
    auto_reply_message: Optional[str] = Field(default=None)


class Project(ProjectBase, table=True):
    """Persistent consultation project.

    Table: projects
    """

    __tablename__ = "projects"
    __table_args__ = ({"extend_existing": True},)

    id: Optional[int] = Field(default=None, primary_key=True)

    created_at: datetime = Field(default_factory=utc_now, index=True)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})

    def __repr__(self) -> str:
        return f"Project(id={self.id}, name={self.name})"


class User(Base, table=True):
    """Registered platform user.

    Table: users
    """

    __tablename__ = "users"
    __table_args__ = ({"extend_existing": True},)

    id: Optional[int] = Field(default=None, primary_key=True)
    email: str = Field(unique=True, index=True)
    name: Optional[str] = Field(default=None)
    system_role: str = Field(default="USER", description="SUPER_ADMIN or USER")
    created_at: datetime = Field(default_factory=utc_now)

    def __repr__(self) -> str:
        return f"User(id={self.id}, email={self.email}, role={self.system_role})"


class ProjectAccess(Base, table=True):
    """Grant of a project role to a user.

    Table: project_access
    """

    __tablename__ = "project_access"
    __table_args__ = (
        UniqueConstraint("user_id", "project_id", name="uq_project_access_user_project"),
        {"extend_existing": True},
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.id", index=True, ondelete="CASCADE")
    project_id: int = Field(foreign_key="projects.id", index=True, ondelete="CASCADE")
    role: str = Field(default="CLIENT", description="ADMIN or CLIENT")
    created_at: datetime = Field(default_factory=utc_now)


class TeamMember(Base, table=True):
    """Member of a project team who can be assigned or queried about enquiries.

    Table: team_members
    """

    __tablename__ = "team_members"
    __table_args__ = ({"extend_existing": True},)

    id: Optional[int] = Field(default=None, primary_key=True)
    project_id: int = Field(foreign_key="projects.id", index=True, ondelete="CASCADE")
    name: str
    email: str
    role: Optional[str] = Field(default=None)
    created_at: datetime = Field(default_factory=utc_now)

    def __repr__(self) -> str:
        return f"TeamMember(id={self.id}, name={self.name})"
