"""
Tour I/O models for API requests and responses.
"""

from __future__ import annotations

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..domain import UtcDatetime


class TourCreate(BaseModel):
    name: str = Field(min_length=1)
    description: Optional[str] = None
    active: bool = True


class TourUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    active: Optional[bool] = None


class TourStopCreate(BaseModel):
    title: str = Field(min_length=1)
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)
    order: Optional[int] = Field(default=None, ge=0, description="Defaults to after the last stop")
    description: Optional[str] = None
    image_url: Optional[str] = None
    zoom: int = Field(default=16, ge=1, le=22)
    highlight: Optional[Any] = None
    show_overlay: Optional[str] = None
    icon: Optional[str] = None


class TourStopUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1)
    latitude: Optional[float] = Field(default=None, ge=-90, le=90)
    longitude: Optional[float] = Field(default=None, ge=-180, le=180)
    description: Optional[str] = None
    image_url: Optional[str] = None
    zoom: Optional[int] = Field(default=None, ge=1, le=22)
    highlight: Optional[Any] = None
    show_overlay: Optional[str] = None
    icon: Optional[str] = None


class TourStopRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    tour_id: int
    order: int
    title: str
    description: Optional[str] = None
    image_url: Optional[str] = None
    latitude: float
    longitude: float
    zoom: int
    highlight: Optional[Any] = None
    show_overlay: Optional[str] = None
    icon: Optional[str] = None


class TourRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    project_id: int
    name: str
    description: Optional[str] = None
    active: bool
    created_at: UtcDatetime
    updated_at: UtcDatetime
    stops: List[TourStopRead] = Field(default_factory=list)


class StopReorder(BaseModel):
    stop_ids: List[int] = Field(min_length=1, description="Every stop id of the tour in the new order")
