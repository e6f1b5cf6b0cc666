"""Geometry adapters between shapefile/KML records, shapely, rendering contours and GeoJSON."""

from .bounds import bounded_multipolygon, bounded_polygon, bounding_rect, geometry_bounds, merge_bounds, ring_bounds
from .convert import (
    contour,
    coord,
    coords,
    geojson_point,
    linestring,
    multilinestring,
    render_multipolygon,
    render_point,
    render_polygon,
    shapely_point,
)
from .errors import GeometryAdapterError, OrphanRingError, UnsupportedGeometryError
from .interchange import GEOMETRY_VARIANTS, feature_collection, geojson_feature, geojson_value, write_geojson
from .kml_reader import read_kmz
from .models import (
    BoundingRect,
    Contour,
    CoordinatePoint,
    GeoRecord,
    Line,
    Rect,
    RenderMultiPolygon,
    RenderPoint,
    RenderPolygon,
    Role,
    SourceMetadata,
    TaggedRing,
    Triangle,
)
from .parallel import ordered_map
from .reader import detect_crs, read_shapefile, shape_geometry, shape_rings
from .rings import assemble_polygons, polygons_from_ring_lists

__all__ = [
    "BoundingRect",
    "Contour",
    "CoordinatePoint",
    "GEOMETRY_VARIANTS",
    "GeoRecord",
    "GeometryAdapterError",
    "Line",
    "OrphanRingError",
    "Rect",
    "RenderMultiPolygon",
    "RenderPoint",
    "RenderPolygon",
    "Role",
    "SourceMetadata",
    "TaggedRing",
    "Triangle",
    "UnsupportedGeometryError",
    "assemble_polygons",
    "bounded_multipolygon",
    "bounded_polygon",
    "bounding_rect",
    "contour",
    "coord",
    "coords",
    "detect_crs",
    "feature_collection",
    "geojson_feature",
    "geojson_point",
    "geojson_value",
    "geometry_bounds",
    "linestring",
    "merge_bounds",
    "multilinestring",
    "ordered_map",
    "polygons_from_ring_lists",
    "read_kmz",
    "read_shapefile",
    "render_multipolygon",
    "render_point",
    "render_polygon",
    "ring_bounds",
    "shape_geometry",
    "shape_rings",
    "shapely_point",
    "write_geojson",
]
