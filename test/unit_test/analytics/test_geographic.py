"""Unit tests for geographic clustering of feedback."""

from datetime import datetime
from typing import Optional

from placemaker_ai.analytics.geographic import analyze_geographic
from placemaker_ai.analytics.models import FeedbackItem


def _pin(n: int, lat: Optional[float], lng: Optional[float], category: Optional[str] = None) -> FeedbackItem:
    return FeedbackItem(
        id=f"pin-{n}",
        type="pin",
        content="comment",
        category=category,
        latitude=lat,
        longitude=lng,
        created_at=datetime(2024, 5, 1),
    )


class TestAnalyzeGeographic:
    """Test clustering of located feedback into ~100 m cells."""

    def test_needs_three_located_items(self):
        items = [_pin(1, 51.5, -0.1), _pin(2, 51.5, -0.1), _pin(3, None, None)]
        assert analyze_geographic(items) is None

    def test_zero_is_a_valid_coordinate(self):
        items = [_pin(1, 0.0, 0.0), _pin(2, 0.0, 0.0), _pin(3, 0.0, 0.0)]
        result = analyze_geographic(items)
        assert result is not None
        assert result.clusters[0].latitude == 0.0
        assert result.clusters[0].count == 3

    def test_groups_by_rounded_coordinates_in_first_seen_order(self):
        items = [
            _pin(1, 51.50141, -0.14190, "positive"),
            _pin(2, 51.52000, -0.10000, "negative"),
            _pin(3, 51.50138, -0.14194, "positive"),
        ]
        result = analyze_geographic(items)
        assert [(c.latitude, c.longitude, c.count) for c in result.clusters] == [
            (51.501, -0.142, 2),
            (51.52, -0.1, 1),
        ]
        assert result.clusters[0].sentiment == "positive"
        assert result.clusters[1].sentiment == "negative"

    def test_cell_with_both_sides_is_mixed(self):
        items = [
            _pin(1, 51.5, -0.1, "support"),
            _pin(2, 51.5, -0.1, "concern"),
            _pin(3, 51.5, -0.1, "positive"),
        ]
        assert analyze_geographic(items).clusters[0].sentiment == "mixed"

    def test_uncategorised_items_are_neutral(self):
        items = [_pin(1, 51.5, -0.1, "question"), _pin(2, 51.5, -0.1), _pin(3, 51.5, -0.1, "positive")]
        assert analyze_geographic(items).clusters[0].sentiment == "neutral"

    def test_ties_prefer_positive_then_negative(self):
        items = [
            _pin(1, 51.5, -0.1, "positive"),
            _pin(2, 51.5, -0.1, "question"),
            _pin(3, 52.5, -1.1, "negative"),
            _pin(4, 52.5, -1.1, "comment"),
        ]
        clusters = analyze_geographic(items).clusters
        assert clusters[0].sentiment == "positive"
        assert clusters[1].sentiment == "negative"
