"""
Public embed I/O models.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel

from .feedback import PublicPinRead
from .map_data import OverlayRead
from .tours import TourRead


class EmbedProject(BaseModel):
    """Public-safe subset of a project."""

    id: int
    name: str
    description: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    map_zoom: int
    allow_pins: bool
    allow_drawing: bool


class EmbedRead(BaseModel):
    project: EmbedProject
    overlays: List[OverlayRead]
    pins: List[PublicPinRead]
    tour: Optional[TourRead] = None
