"""Unit tests for drawing metrics."""

import math

import pytest

from placemaker_ai.server.services.geometry import (
    EQUATORIAL_RADIUS_M,
    MEAN_RADIUS_M,
    drawing_metrics,
    haversine_distance,
    line_length,
    polygon_area,
)

SQUARE = [[0.0, 0.0], [1.0, 0.0], [1.0, 1.0], [0.0, 1.0], [0.0, 0.0]]
HOLE = [[0.25, 0.25], [0.75, 0.25], [0.75, 0.75], [0.25, 0.75], [0.25, 0.25]]
SQUARE_AREA = EQUATORIAL_RADIUS_M**2 * math.radians(1) * math.sin(math.radians(1))


class TestDistances:
    def test_haversine_one_degree_of_longitude_on_equator(self):
        assert haversine_distance(0, 0, 0, 1) == pytest.approx(MEAN_RADIUS_M * math.radians(1))

    def test_same_point(self):
        assert haversine_distance(51.5, -0.1, 51.5, -0.1) == 0

    def test_line_length_sums_segments(self):
        coords = [[0, 0], [1, 0], [2, 0]]
        assert line_length(coords) == pytest.approx(2 * MEAN_RADIUS_M * math.radians(1))

    def test_single_point_line(self):
        assert line_length([[0, 0]]) == 0


class TestPolygonArea:
    def test_square_on_equator(self):
        assert polygon_area([SQUARE]) == pytest.approx(SQUARE_AREA, rel=1e-6)

    def test_orientation_does_not_matter(self):
        assert polygon_area([list(reversed(SQUARE))]) == pytest.approx(polygon_area([SQUARE]))

    def test_holes_are_subtracted(self):
        assert polygon_area([SQUARE, HOLE]) < polygon_area([SQUARE])

    def test_degenerate(self):
        assert polygon_area([]) == 0
        assert polygon_area([[[0, 0], [1, 1], [0, 0]]]) == 0


class TestDrawingMetrics:
    def test_polygon(self):
        assert drawing_metrics({"type": "Polygon", "coordinates": [SQUARE]}) == {"area": round(polygon_area([SQUARE]))}

    def test_multipolygon(self):
        metrics = drawing_metrics({"type": "MultiPolygon", "coordinates": [[SQUARE], [SQUARE]]})
        assert metrics["area"] == pytest.approx(2 * polygon_area([SQUARE]), abs=1)

    def test_linestring(self):
        metrics = drawing_metrics({"type": "LineString", "coordinates": [[0, 0], [1, 0]]})
        assert metrics == {"length": round(MEAN_RADIUS_M * math.radians(1))}

    def test_multilinestring(self):
        metrics = drawing_metrics({"type": "MultiLineString", "coordinates": [[[0, 0], [1, 0]], [[0, 0], [0, 1]]]})
        assert metrics["length"] == pytest.approx(2 * MEAN_RADIUS_M * math.radians(1), abs=1)

    @pytest.mark.parametrize(
        "geometry",
        [None, {}, {"type": "Point", "coordinates": [0, 0]}, {"type": "LineString", "coordinates": [[0], [1]]}],
    )
    def test_no_metrics(self, geometry):
        assert drawing_metrics(geometry) == {}
