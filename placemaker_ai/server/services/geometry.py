"""
Drawing metrics for GeoJSON shapes.

Areas use the spherical ring-area formula on the WGS84 equatorial radius;
lengths sum haversine distances on the mean Earth radius. Both are rounded
to whole units.
"""

from __future__ import annotations

import math
from typing import Any, Dict, List, Optional, Sequence

from placemaker_ai.core.logging_config import get_logger

logger = get_logger(__name__)

EQUATORIAL_RADIUS_M = 6378137.0
MEAN_RADIUS_M = 6371008.8

Position = Sequence[float]


def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance between two points in metres."""
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    delta_phi = math.radians(lat2 - lat1)
    delta_lambda = math.radians(lon2 - lon1)

    a = math.sin(delta_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(delta_lambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return MEAN_RADIUS_M * c


def line_length(coordinates: List[Position]) -> float:
    """Length in metres of a GeoJSON LineString coordinate list (``[lng, lat]`` pairs)."""
    return sum(
        haversine_distance(start[1], start[0], end[1], end[0])
        for start, end in zip(coordinates, coordinates[1:])
    )


def ring_area(ring: List[Position]) -> float:
    """Signed area in square metres of a closed ring of ``[lng, lat]`` positions."""
    size = len(ring) - 1
    if size <= 2:
        return 0.0
    total = 0.0
    for i in range(size):
        lower = ring[i]
        middle = ring[(i + 1) % size]
        upper = ring[(i + 2) % size]
        total += (math.radians(upper[0]) - math.radians(lower[0])) * math.sin(math.radians(middle[1]))
    return total * EQUATORIAL_RADIUS_M * EQUATORIAL_RADIUS_M / 2


def polygon_area(rings: List[List[Position]]) -> float:
    """Area in square metres of a GeoJSON Polygon: outer ring minus its holes."""
    if not rings:
        return 0.0
    area = abs(ring_area(rings[0]))
    for hole in rings[1:]:
        area -= abs(ring_area(hole))
    return area


def drawing_metrics(geometry: Optional[Dict[str, Any]]) -> Dict[str, int]:
    """Rounded ``area`` (m²) for polygons or ``length`` (m) for lines.

    Returns an empty dict for points, unsupported types and malformed input.
    """
    if not geometry:
        return {}
    kind = geometry.get("type")
    coordinates = geometry.get("coordinates")
    try:
        if kind == "Polygon":
            return {"area": round(polygon_area(coordinates))}
        if kind == "MultiPolygon":
            return {"area": round(sum(polygon_area(polygon) for polygon in coordinates))}
        if kind == "LineString":
            return {"length": round(line_length(coordinates))}
        if kind == "MultiLineString":
            return {"length": round(sum(line_length(line) for line in coordinates))}
    except (TypeError, IndexError, ValueError) as e:
        logger.warning(f"Error calculating metrics for {kind} geometry: {e}")
    return {}
