"""Point and contour conversions between the reader, analytical, rendering and GeoJSON models.

Every function returns a new value and leaves its argument untouched. Z values
are dropped: all target models are planar.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

import geojson
from shapely.geometry import LineString, MultiLineString, MultiPolygon, Point, Polygon

from .errors import UnsupportedGeometryError
from .models import Contour, Coord, CoordinatePoint, RenderMultiPolygon, RenderPoint, RenderPolygon
from .parallel import ordered_map

# geojson rounds every coordinate to this many decimal places. A double has at
# most 1074 fractional digits, so rounding there returns the value unchanged.
GEOJSON_PRECISION = 1074


def coord(point) -> Coord:
    """Return ``point`` as an ``(x, y)`` float tuple.

    Accepts ``(x, y[, z])`` sequences, :class:`CoordinatePoint`,
    :class:`RenderPoint`, shapely points and GeoJSON points.
    """
    if isinstance(point, (CoordinatePoint, RenderPoint, Point)):
        return float(point.x), float(point.y)
    if isinstance(point, geojson.Point):
        x, y = point["coordinates"][:2]
        return float(x), float(y)
    if isinstance(point, (tuple, list)):
        return float(point[0]), float(point[1])
    raise UnsupportedGeometryError(point, "coordinate")


def render_point(point) -> RenderPoint:
    x, y = coord(point)
    return RenderPoint(x=x, y=y)


def shapely_point(point) -> Point:
    return Point(coord(point))


def geojson_point(point) -> geojson.Point:
    return geojson.Point(coord(point), precision=GEOJSON_PRECISION)


def coords(points: Iterable) -> list[Coord]:
    """Convert a sequence of points of any supported kind to coordinate tuples."""
    if isinstance(points, LineString):
        points = points.coords
    return [coord(p) for p in points]


def contour(points: Iterable) -> Contour:
    """Build a rendering contour from an ordered point sequence or shapely ring.

    Points are taken as-is: a repeated closing point is kept and an open
    sequence is not closed, since the contour is closed by definition.
    """
    return Contour(points=[RenderPoint(x=x, y=y) for x, y in coords(points)])


def linestring(points: Iterable) -> LineString:
    """Build an analytical line string from an ordered point sequence."""
    return LineString(coords(points))


def multilinestring(parts: Iterable[Iterable]) -> MultiLineString:
    """Build a multi-line string from the parts of a polyline record."""
    return MultiLineString([coords(part) for part in parts])


def render_polygon(polygon: Polygon) -> RenderPolygon:
    """Convert a shapely polygon to a rendering polygon with one contour per ring."""
    return RenderPolygon(
        outer_contour=contour(polygon.exterior),
        inner_contours=[contour(ring) for ring in polygon.interiors],
    )


def render_multipolygon(multipolygon: MultiPolygon | Sequence[Polygon]) -> RenderMultiPolygon:
    """Convert every part of a multipolygon, in parallel, keeping part order."""
    parts = list(multipolygon.geoms) if isinstance(multipolygon, MultiPolygon) else list(multipolygon)
    return RenderMultiPolygon(parts=ordered_map(render_polygon, parts))
