"""Tests for bounding rectangle computation and aggregation."""

import pytest
from shapely.geometry import LineString, MultiPolygon, Point, Polygon

from geoadapter import (
    BoundingRect,
    Line,
    Rect,
    RenderMultiPolygon,
    Triangle,
    UnsupportedGeometryError,
    bounded_multipolygon,
    bounded_polygon,
    bounding_rect,
    geometry_bounds,
    merge_bounds,
    ring_bounds,
)

from conftest import ISLAND, SQUARE, SQUARE_HOLE


def _rect(x_min, y_min, x_max, y_max):
    return BoundingRect(x_min=x_min, y_min=y_min, x_max=x_max, y_max=y_max)


class TestRingBounds:
    def test_ring(self):
        assert ring_bounds(LineString(SQUARE)) == _rect(0, 0, 10, 10)

    def test_empty_ring(self):
        assert ring_bounds(LineString()) is None


class TestBoundedPolygon:
    def test_hole_does_not_change_bounds(self):
        poly, rect = bounded_polygon(Polygon(SQUARE, [SQUARE_HOLE]))
        assert rect.as_tuple() == (0, 0, 10, 10)
        assert len(poly.inner_contours) == 1


class TestMergeBounds:
    def test_folds_min_and_max(self):
        merged = merge_bounds([_rect(0, 5, 1, 6), _rect(-3, 2, 0, 4), _rect(2, -1, 8, 3)])
        assert merged == _rect(-3, -1, 8, 6)

    def test_skips_missing_parts(self):
        assert merge_bounds([None, _rect(1, 1, 2, 2), None]) == _rect(1, 1, 2, 2)

    def test_nothing_contributes(self):
        assert merge_bounds([]) is None
        assert merge_bounds([None, None]) is None

    def test_single_point_rect(self):
        assert merge_bounds([_rect(4, 4, 4, 4)]) == _rect(4, 4, 4, 4)


class TestBoundedMultiPolygon:
    def test_contains_every_part(self):
        parts = [
            Polygon(SQUARE, [SQUARE_HOLE]),
            Polygon(ISLAND),
            Polygon([(-5, 3), (-5, 4), (-4, 4), (-4, 3)]),
        ]
        rendered, rect = bounded_multipolygon(MultiPolygon(parts))
        assert isinstance(rendered, RenderMultiPolygon)
        assert len(rendered.parts) == 3
        for part in parts:
            x_min, y_min, x_max, y_max = part.bounds
            assert rect.x_min <= x_min and rect.y_min <= y_min
            assert rect.x_max >= x_max and rect.y_max >= y_max
        assert rect == _rect(-5, 0, 25, 25)

    def test_part_order(self):
        rendered, _ = bounded_multipolygon([Polygon(ISLAND), Polygon(SQUARE)])
        assert rendered.parts[0].outer_contour.points[0].x == 20.0
        assert rendered.parts[1].outer_contour.points[0].x == 0.0

    def test_empty_multipolygon(self):
        rendered, rect = bounded_multipolygon(MultiPolygon())
        assert rendered.parts == []
        assert rect is None


class TestGeometryBounds:
    def test_rect(self):
        assert bounding_rect(Rect(min=(1, 2), max=(3, 4))) == _rect(1, 2, 3, 4)
        assert geometry_bounds(Rect(min=(1, 2), max=(3, 4))) == _rect(1, 2, 3, 4)

    def test_line_and_triangle(self):
        assert geometry_bounds(Line(start=(5, 1), end=(2, 3))) == _rect(2, 1, 5, 3)
        assert geometry_bounds(Triangle(a=(0, 0), b=(4, 0), c=(2, 3))) == _rect(0, 0, 4, 3)

    def test_point(self):
        assert geometry_bounds(Point(7, 8)) == _rect(7, 8, 7, 8)

    def test_null_geometry(self):
        assert geometry_bounds(None) is None

    def test_unsupported(self):
        with pytest.raises(UnsupportedGeometryError):
            geometry_bounds({"type": "Point"})
