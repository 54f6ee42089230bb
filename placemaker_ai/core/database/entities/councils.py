"""
Council and councillor entity models.

Councils are local authorities known to the platform; councillors are the
imported member lists used to resolve ward representatives during
stakeholder auto-detection.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlmodel import Field

from ..base import Base, utc_now


class Council(Base, table=True):
    """Local authority.

    Table: councils
    """

    __tablename__ = "councils"
    __table_args__ = ({"extend_existing": True},)

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(unique=True, index=True)
    mapit_name: Optional[str] = Field(default=None, index=True, description="Name as returned by MapIt")
    type: Optional[str] = Field(default=None, description="district, county, unitary, metropolitan, london_borough")
    website: Optional[str] = Field(default=None)
    councillors_url: Optional[str] = Field(default=None)
    source_type: Optional[str] = Field(default=None, description="Kind of member directory the council publishes")
    gss_code: Optional[str] = Field(default=None)
    import_status: str = Field(default="pending", description="pending, success, partial or failed")
    import_error: Optional[str] = Field(default=None)
    last_updated: Optional[datetime] = Field(default=None)
    created_at: datetime = Field(default_factory=utc_now)

    def __repr__(self) -> str:
        return f"Council(id={self.id}, name={self.name}, status={self.import_status})"


class Councillor(Base, table=True):
    """Elected member of a council.

    Table: councillors
    """

    __tablename__ = "councillors"
    __table_args__ = ({"extend_existing": True},)

    id: Optional[int] = Field(default=None, primary_key=True)
    council_id: int = Field(foreign_key="councils.id", index=True, ondelete="CASCADE")
    name: str = Field(index=True)
    title: Optional[str] = Field(default="Cllr")
    first_name: Optional[str] = Field(default=None)
    last_name: Optional[str] = Field(default=None)
    party: Optional[str] = Field(default=None)
    ward_name: str
    ward_mapit_name: Optional[str] = Field(default=None)
    email: Optional[str] = Field(default=None)
    phone: Optional[str] = Field(default=None)
    profile_url: Optional[str] = Field(default=None)
    photo_url: Optional[str] = Field(default=None)
    source: str = Field(default="import")
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})
