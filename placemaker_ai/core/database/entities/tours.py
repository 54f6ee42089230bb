"""
Tour entity models.

A tour is an ordered walk through a project site; each stop frames a map
viewpoint with narrative content.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from sqlalchemy import JSON, Column
from sqlmodel import Field

from ..base import Base, utc_now


class Tour(Base, table=True):
    """Guided tour of a project.

    Table: tours
    """

    __tablename__ = "tours"
    __table_args__ = ({"extend_existing": True},)

    id: Optional[int] = Field(default=None, primary_key=True)
    project_id: int = Field(foreign_key="projects.id", index=True, ondelete="CASCADE")
    name: str
    description: Optional[str] = Field(default=None)
    active: bool = Field(default=True)
    created_at: datetime = Field(default_factory=utc_now, index=True)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})

    def __repr__(self) -> str:
        return f"Tour(id={self.id}, name={self.name})"


class TourStop(Base, table=True):
    """Viewpoint within a tour. ``order`` is zero-based and dense within a tour.

    Table: tour_stops
    """

    __tablename__ = "tour_stops"
    __table_args__ = ({"extend_existing": True},)

    id: Optional[int] = Field(default=None, primary_key=True)
    tour_id: int = Field(foreign_key="tours.id", index=True, ondelete="CASCADE")
    order: int = Field(default=0)
    title: str
    description: Optional[str] = Field(default=None)
    image_url: Optional[str] = Field(default=None)
    latitude: float
    longitude: float
    zoom: int = Field(default=16)
    highlight: Optional[Any] = Field(default=None, sa_column=Column(JSON))
    show_overlay: Optional[str] = Field(default=None)
    icon: Optional[str] = Field(default=None)
