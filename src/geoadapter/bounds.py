"""Bounding rectangles for rendering output and source metadata."""

from __future__ import annotations

import sys
from collections.abc import Iterable

from shapely.geometry import MultiPolygon, Polygon
from shapely.geometry.base import BaseGeometry

from .convert import render_polygon
from .errors import UnsupportedGeometryError
from .models import BoundingRect, Line, Rect, RenderMultiPolygon, RenderPolygon, Triangle
from .parallel import ordered_map


def ring_bounds(ring: BaseGeometry) -> BoundingRect | None:
    """Bounding rectangle of a ring (or any shapely geometry), ``None`` when empty."""
    if ring.is_empty:
        return None
    x_min, y_min, x_max, y_max = ring.bounds
    return BoundingRect(x_min=x_min, y_min=y_min, x_max=x_max, y_max=y_max)


def bounded_polygon(polygon: Polygon) -> tuple[RenderPolygon, BoundingRect | None]:
    """Convert a polygon for rendering together with the bounds of its exterior.

    Holes lie inside the exterior, so they never widen the rectangle.
    """
    return render_polygon(polygon), ring_bounds(polygon.exterior)


def merge_bounds(rects: Iterable[BoundingRect | None]) -> BoundingRect | None:
    """Fold part rectangles into the rectangle that encloses all of them.

    ``None`` parts are skipped. When nothing contributes the result is ``None``
    rather than the inverted sentinel rectangle.
    """
    x_min = y_min = sys.float_info.max
    x_max = y_max = -sys.float_info.max
    seen = False

    for rect in rects:
        if rect is None:
            continue
        seen = True
        x_min = min(x_min, rect.x_min)
        y_min = min(y_min, rect.y_min)
        x_max = max(x_max, rect.x_max)
        y_max = max(y_max, rect.y_max)

    if not seen:
        return None
    return BoundingRect(x_min=x_min, y_min=y_min, x_max=x_max, y_max=y_max)


def bounded_multipolygon(
    multipolygon: MultiPolygon | list[Polygon],
) -> tuple[RenderMultiPolygon, BoundingRect | None]:
    """Convert a multipolygon for rendering along with the bounds of all its parts.

    Parts are converted on the worker pool; only the final fold is sequential.
    """
    polygons = list(multipolygon.geoms) if isinstance(multipolygon, MultiPolygon) else list(multipolygon)
    bounded = ordered_map(bounded_polygon, polygons)
    parts = [part for part, _ in bounded]
    return RenderMultiPolygon(parts=parts), merge_bounds(rect for _, rect in bounded)


def bounding_rect(rect: Rect) -> BoundingRect:
    """Convert an analytical ``Rect`` to the rendering rectangle."""
    (x_min, y_min), (x_max, y_max) = rect.min, rect.max
    return BoundingRect(x_min=x_min, y_min=y_min, x_max=x_max, y_max=y_max)


def geometry_bounds(geometry) -> BoundingRect | None:
    """Bounding rectangle of any supported geometry variant."""
    if geometry is None:
        return None
    if isinstance(geometry, Rect):
        return bounding_rect(geometry)
    if isinstance(geometry, Line):
        geometry = geometry.to_linestring()
    elif isinstance(geometry, Triangle):
        geometry = geometry.to_polygon()
    if not isinstance(geometry, BaseGeometry):
        raise UnsupportedGeometryError(geometry, "bounds")
    return ring_bounds(geometry)
