"""
Map data entity models.

Team-authored map content: markers and shapes, georeferenced image overlays
and imported GeoJSON layers.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy import JSON, Column, Text
from sqlmodel import Field

from ..base import Base, utc_now


class MapMarker(Base, table=True):
    """Point marker or drawn shape placed by the project team.

    Table: map_markers
    """

    __tablename__ = "map_markers"
    __table_args__ = ({"extend_existing": True},)

    id: Optional[int] = Field(default=None, primary_key=True)
    project_id: int = Field(foreign_key="projects.id", index=True, ondelete="CASCADE")
    label: str
    type: str = Field(default="point", description="point, polygon or line")
    latitude: Optional[float] = Field(default=None)
    longitude: Optional[float] = Field(default=None)
    geometry: Optional[Dict[str, Any]] = Field(default=None, sa_column=Column(JSON))
    color: str = Field(default="#3B82F6")
    notes: Optional[str] = Field(default=None)
    created_at: datetime = Field(default_factory=utc_now)


class ImageOverlay(Base, table=True):
    """Image pinned to a rectangular map extent.

    Table: image_overlays
    """

    __tablename__ = "image_overlays"
    __table_args__ = ({"extend_existing": True},)

    id: Optional[int] = Field(default=None, primary_key=True)
    project_id: int = Field(foreign_key="projects.id", index=True, ondelete="CASCADE")
    name: str
    image_url: str = Field(sa_column=Column(Text, nullable=False))
    south_lat: float
    west_lng: float
    north_lat: float
    east_lng: float
    opacity: float = Field(default=0.7)
    rotation: float = Field(default=0.0)
    visible: bool = Field(default=True)
    created_at: datetime = Field(default_factory=utc_now)

    @property
    def bounds(self) -> list[list[float]]:
        """Extent as ``[[south, west], [north, east]]``."""
        return [[self.south_lat, self.west_lng], [self.north_lat, self.east_lng]]

    def set_bounds(self, bounds: list[list[float]]) -> None:
        (self.south_lat, self.west_lng), (self.north_lat, self.east_lng) = bounds


class GeoLayer(Base, table=True):
    """Imported GeoJSON layer, always stored as a FeatureCollection or GeometryCollection.

    Table: geo_layers
    """

    __tablename__ = "geo_layers"
    __table_args__ = ({"extend_existing": True},)

    id: Optional[int] = Field(default=None, primary_key=True)
    project_id: int = Field(foreign_key="projects.id", index=True, ondelete="CASCADE")
    name: str
    type: str = Field(default="boundary")
    geojson: Dict[str, Any] = Field(sa_column=Column(JSON, nullable=False))
    style: Dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON, nullable=False))
    visible: bool = Field(default=True)
    created_at: datetime = Field(default_factory=utc_now)
