"""Shapefile reader producing analytical geometries, attributes and source metadata."""

from __future__ import annotations

import datetime
import logging
from pathlib import Path
from typing import Any, BinaryIO

import shapefile
from pyproj import CRS
from pyproj.exceptions import CRSError
from shapely.geometry import LinearRing, MultiPoint, MultiPolygon

from .bounds import geometry_bounds, merge_bounds
from .convert import coord, multilinestring, shapely_point
from .models import CoordinatePoint, GeoRecord, SourceMetadata, TaggedRing
from .parallel import ordered_map
from .rings import assemble_polygons

logger = logging.getLogger(__name__)


def detect_crs(prj_source: str | Path | None) -> tuple[int | None, str | None, bool | None]:
    """Parse CRS from a .prj WKT string or file path.

    Returns (epsg_code, crs_name, is_projected) or (None, None, None) on failure.
    """
    if prj_source is None:
        return None, None, None

    wkt = prj_source if isinstance(prj_source, str) else ""
    if isinstance(prj_source, Path):
        if not prj_source.exists():
            return None, None, None
        wkt = prj_source.read_text()

    if not wkt.strip():
        return None, None, None

    try:
        crs = CRS.from_wkt(wkt)
    except CRSError:
        logger.warning("Could not parse CRS from .prj WKT")
        return None, None, None

    return crs.to_epsg(), crs.name, crs.is_projected


def read_shapefile(
    shp_path: str | Path | None = None,
    *,
    shp_file: BinaryIO | None = None,
    shx_file: BinaryIO | None = None,
    dbf_file: BinaryIO | None = None,
    prj_wkt: str | None = None,
    strict_rings: bool = False,
) -> tuple[list[GeoRecord], SourceMetadata]:
    """Read a shapefile and return one record per shape with metadata.

    Supports two modes:
    - File path: pass ``shp_path`` (the .prj is auto-discovered)
    - File objects: pass ``shp_file``, ``shx_file``, ``dbf_file``, and optionally ``prj_wkt``

    ``strict_rings`` rejects polygon records whose first ring is a hole instead
    of dropping the orphaned ring.
    """
    if shp_path is not None:
        shp_path = Path(shp_path)
        sf = shapefile.Reader(str(shp_path))
        prj_path = shp_path.with_suffix(".prj")
        if not prj_path.exists():
            # shp_path might already lack an extension (pyshp convention)
            prj_path = Path(str(shp_path) + ".prj")
        epsg, crs_name, is_projected = detect_crs(prj_path if prj_path.exists() else None)
    elif shp_file is not None:
        components = {"shp": shp_file, "shx": shx_file, "dbf": dbf_file}
        sf = shapefile.Reader(**{k: v for k, v in components.items() if v is not None})
        epsg, crs_name, is_projected = detect_crs(prj_wkt)
    else:
        raise ValueError("Provide either shp_path or shp_file")

    with sf:
        shape_type_name = sf.shapeTypeName
        upper = shape_type_name.upper()
        fields = [f[0] for f in sf.fields[1:]]  # skip DeletionFlag
        if upper == "MULTIPATCH":
            raise ValueError(f"Unsupported shape type: {shape_type_name}")

        has_z = upper.endswith("Z")
        if sf.dbf is None:
            pairs = [(shape, {}) for shape in sf.iterShapes()]
        else:
            pairs = [(sr.shape, sr.record.as_dict()) for sr in sf.iterShapeRecords()]

    records = ordered_map(
        lambda item: _to_record(item[0], *item[1], has_z=has_z, strict_rings=strict_rings),
        list(enumerate(pairs, start=1)),
    )
    logger.info("Read %d %s records", len(records), shape_type_name)

    metadata = SourceMetadata(
        shape_type_name=shape_type_name,
        crs_epsg=epsg,
        crs_name=crs_name,
        is_projected=is_projected,
        num_records=len(records),
        has_z=has_z,
        fields=fields,
        bounds=merge_bounds(geometry_bounds(r.geometry) for r in records),
    )
    return records, metadata


def _to_record(
    index: int, shape: shapefile.Shape, attributes: dict[str, Any], *, has_z: bool, strict_rings: bool
) -> GeoRecord:
    return GeoRecord(
        index=index,
        geometry=shape_geometry(shape, has_z=has_z, strict=strict_rings),
        properties=_properties(attributes),
    )


def shape_geometry(shape: shapefile.Shape, *, has_z: bool = False, strict: bool = False):
    """Convert a single pyshp shape to its analytical geometry (``None`` for null shapes)."""
    if shape.shapeType == shapefile.NULL:
        return None

    upper = shape.shapeTypeName.upper()
    if upper.startswith("POINT"):
        return shapely_point(shape_point(shape, has_z=has_z))
    if upper.startswith("MULTIPOINT"):
        return MultiPoint([coord(p) for p in shape.points])
    if upper.startswith("POLYLINE"):
        return multilinestring(_split_parts(shape))
    if upper.startswith("POLYGON"):
        polygons = assemble_polygons(shape_rings(shape, has_z=has_z), strict=strict)
        if len(polygons) == 1:
            return polygons[0]
        return MultiPolygon(polygons)

    raise ValueError(f"Unsupported shape type: {shape.shapeTypeName}")


def shape_point(shape: shapefile.Shape, index: int = 1, *, has_z: bool = False) -> CoordinatePoint:
    """Read the raw point record of a POINT / POINTZ shape."""
    x, y = shape.points[0][:2]
    z = shape.z[0] if has_z and getattr(shape, "z", None) else None
    return CoordinatePoint(index=index, x=x, y=y, z=z)


def shape_rings(shape: shapefile.Shape, *, has_z: bool = False) -> list[TaggedRing]:
    """Split a polygon shape into rings tagged by winding order.

    Shapefiles store outer rings clockwise and holes counter-clockwise.
    """
    rings: list[TaggedRing] = []
    for part in _split_parts(shape, has_z=has_z):
        if LinearRing([p[:2] for p in part]).is_ccw:
            rings.append(TaggedRing.inner(part))
        else:
            rings.append(TaggedRing.outer(part))
    return rings


def _split_parts(shape: shapefile.Shape, *, has_z: bool = False) -> list[list[tuple[float, ...]]]:
    """Slice a shape's flat vertex list into parts using its part start indices."""
    part_starts = list(shape.parts)
    zs = list(getattr(shape, "z", None) or []) if has_z else []
    parts = []
    for part_idx, start in enumerate(part_starts):
        end = part_starts[part_idx + 1] if part_idx + 1 < len(part_starts) else len(shape.points)
        part = []
        for v in range(start, end):
            x, y = shape.points[v][:2]
            part.append((x, y, zs[v]) if v < len(zs) else (x, y))
        parts.append(part)
    return parts


def _properties(record: dict[str, Any]) -> dict[str, Any]:
    """Make dBASE values JSON-friendly: dates become ISO strings, bytes are decoded."""
    props = {}
    for key, value in record.items():
        if isinstance(value, (datetime.date, datetime.datetime)):
            value = value.isoformat()
        elif isinstance(value, bytes):
            value = value.decode("utf-8", errors="replace")
        props[key] = value
    return props
