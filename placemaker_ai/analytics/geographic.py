"""Geographic clustering of located feedback."""

from __future__ import annotations

from typing import Dict, List, Optional, Tuple

from .models import FeedbackItem, GeoCluster, GeographicResult

MIN_LOCATED_ITEMS = 3

_POSITIVE = {"positive", "support"}
_NEGATIVE = {"negative", "concern"}


def analyze_geographic(items: List[FeedbackItem]) -> Optional[GeographicResult]:
    """Group located feedback into ~100 m cells and summarise each cell.

    Items are bucketed by coordinates rounded to three decimals; categories
    stand in for sentiment. A cell holding both positive and negative items
    is ``mixed``; otherwise the largest count wins, ties resolved in
    positive, negative, neutral order.

    Returns:
        Clusters in first-seen order, or ``None`` when fewer than three items
        carry coordinates.
    """
    located = [i for i in items if i.latitude is not None and i.longitude is not None]
    if len(located) < MIN_LOCATED_ITEMS:
        return None

    cells: Dict[Tuple[str, str], List[FeedbackItem]] = {}
    for item in located:
        key = (f"{item.latitude:.3f}", f"{item.longitude:.3f}")
        cells.setdefault(key, []).append(item)

    clusters = []
    for (lat, lng), members in cells.items():
        counts = {"positive": 0, "negative": 0, "neutral": 0}
        for member in members:
            if member.category in _POSITIVE:
                counts["positive"] += 1
            elif member.category in _NEGATIVE:
                counts["negative"] += 1
            else:
                counts["neutral"] += 1
        dominant = max(counts, key=lambda k: counts[k])
        mixed = counts["positive"] > 0 and counts["negative"] > 0
        clusters.append(
            GeoCluster(
                latitude=float(lat),
                longitude=float(lng),
                sentiment="mixed" if mixed else dominant,
                count=len(members),
            )
        )
    return GeographicResult(clusters=clusters)
