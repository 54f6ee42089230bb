"""
Map data I/O models: markers, image overlays and GeoJSON layers.
"""

from __future__ import annotations

from typing import Annotated, Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..domain import LayerType, UtcDatetime

Corner = Annotated[List[float], Field(min_length=2, max_length=2)]
Bounds = List[Corner]


class MarkerCreate(BaseModel):
    label: str = Field(min_length=1)
    type: str = "point"
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    geometry: Optional[Dict[str, Any]] = None
    color: str = "#3B82F6"
    notes: Optional[str] = None


class MarkerRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    project_id: int
    label: str
    type: str
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    geometry: Optional[Dict[str, Any]] = None
    color: str
    notes: Optional[str] = None
    created_at: UtcDatetime


class OverlayCreate(BaseModel):
    name: str = Field(min_length=1)
    image_url: str = Field(min_length=1, description="Image URL or data URI")
    bounds: Bounds = Field(description="[[south, west], [north, east]]", min_length=2, max_length=2)
    opacity: float = Field(default=0.7, ge=0, le=1)
    rotation: float = 0.0
    visible: bool = True


class OverlayUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    opacity: Optional[float] = Field(default=None, ge=0, le=1)
    rotation: Optional[float] = None
    visible: Optional[bool] = None
    bounds: Optional[Bounds] = Field(default=None, min_length=2, max_length=2)


class OverlayRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    project_id: int
    name: str
    image_url: str
    bounds: Bounds
    opacity: float
    rotation: float
    visible: bool
    created_at: UtcDatetime


class LayerCreate(BaseModel):
    """Presence of ``name`` and ``geojson`` is checked by the endpoint."""

    model_config = ConfigDict(use_enum_values=True, validate_default=True)

    name: Optional[str] = None
    geojson: Optional[Dict[str, Any]] = None
    type: LayerType = LayerType.boundary
    style: Optional[Dict[str, Any]] = None
    visible: bool = True


class LayerUpdate(BaseModel):
    model_config = ConfigDict(use_enum_values=True, validate_default=True)

    name: Optional[str] = Field(default=None, min_length=1)
    type: Optional[LayerType] = None
    style: Optional[Dict[str, Any]] = None
    visible: Optional[bool] = None


class LayerRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    project_id: int
    name: str
    type: str
    geojson: Dict[str, Any]
    style: Dict[str, Any]
    visible: bool
    created_at: UtcDatetime
