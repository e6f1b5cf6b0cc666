"""GeoJSON output for every geometry variant.

The analytical model is closed over ten variants: the eight shapely classes
below plus :class:`Line`, :class:`Rect` and :class:`Triangle`. Each has exactly
one arm in :func:`geojson_value`; anything else raises
:class:`UnsupportedGeometryError`.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import geojson
from shapely.geometry import (
    GeometryCollection,
    LineString,
    MultiLineString,
    MultiPoint,
    MultiPolygon,
    Point,
    Polygon,
)

from .bounds import geometry_bounds, merge_bounds
from .convert import GEOJSON_PRECISION, coord, coords, geojson_point
from .errors import UnsupportedGeometryError
from .models import GeoRecord, Line, Rect, Triangle

logger = logging.getLogger(__name__)

GEOMETRY_VARIANTS = (
    Point,
    Line,
    LineString,
    Polygon,
    MultiPoint,
    MultiLineString,
    MultiPolygon,
    GeometryCollection,
    Rect,
    Triangle,
)


def _polygon_rings(polygon: Polygon) -> list[list[tuple[float, float]]]:
    return [coords(polygon.exterior)] + [coords(ring) for ring in polygon.interiors]


def geojson_value(geometry) -> geojson.geometry.Geometry:
    """Convert an analytical geometry to the matching GeoJSON geometry object."""
    p = GEOJSON_PRECISION

    if isinstance(geometry, Point):
        return geojson_point(geometry)
    if isinstance(geometry, LineString):
        # LinearRing is a LineString subclass and lands here too
        return geojson.LineString(coords(geometry), precision=p)
    if isinstance(geometry, Polygon):
        return geojson.Polygon(_polygon_rings(geometry), precision=p)
    if isinstance(geometry, MultiPoint):
        return geojson.MultiPoint([coord(pt) for pt in geometry.geoms], precision=p)
    if isinstance(geometry, MultiLineString):
        return geojson.MultiLineString([coords(line) for line in geometry.geoms], precision=p)
    if isinstance(geometry, MultiPolygon):
        return geojson.MultiPolygon([_polygon_rings(poly) for poly in geometry.geoms], precision=p)
    if isinstance(geometry, GeometryCollection):
        return geojson.GeometryCollection([geojson_value(g) for g in geometry.geoms])
    if isinstance(geometry, Line):
        return geojson.LineString([geometry.start, geometry.end], precision=p)
    if isinstance(geometry, (Rect, Triangle)):
        return geojson.Polygon([geometry.exterior()], precision=p)

    raise UnsupportedGeometryError(geometry, "GeoJSON")


def geojson_feature(geometry, properties: dict[str, Any] | None = None, id=None) -> geojson.Feature:
    """Wrap a geometry in a GeoJSON feature with an optional property bag.

    A ``None`` geometry yields a feature with a null geometry.
    """
    value = geojson_value(geometry) if geometry is not None else None
    return geojson.Feature(id=id, geometry=value, properties=dict(properties or {}))


def feature_collection(records: Iterable[GeoRecord]) -> geojson.FeatureCollection:
    """Build a feature collection from reader records, with an overall ``bbox`` when known."""
    records = list(records)
    features = [geojson_feature(r.geometry, r.properties, id=r.index) for r in records]
    bounds = merge_bounds(geometry_bounds(r.geometry) for r in records)
    if bounds is None:
        return geojson.FeatureCollection(features)
    return geojson.FeatureCollection(features, bbox=list(bounds.as_tuple()))


def write_geojson(collection: geojson.FeatureCollection, path: str | Path) -> Path:
    """Write a feature collection to ``path`` and return the path."""
    path = Path(path)
    with path.open("w", encoding="utf-8") as f:
        geojson.dump(collection, f)
    logger.info("Wrote %d features to %s", len(collection["features"]), path)
    return path
