"""KMZ/KML reader: extracts Placemark geometries from KML documents.

KMZ is a ZIP archive containing KML. KML coordinates are always WGS84 (EPSG:4326)
in ``longitude,latitude,altitude`` format.

Polygon boundaries are read in document order as role-tagged rings
(``outerBoundaryIs`` is outer, ``innerBoundaryIs`` is inner) and grouped with the
same ring assembly used for shapefiles.
"""

from __future__ import annotations

import io
import logging
import zipfile
import xml.etree.ElementTree as ET
from typing import Any, BinaryIO

from shapely.geometry import GeometryCollection, LineString, LinearRing, MultiPolygon, Point

from .bounds import geometry_bounds, merge_bounds
from .models import GeoRecord, SourceMetadata, TaggedRing
from .rings import assemble_polygons

logger = logging.getLogger(__name__)

KML_NS = "{http://www.opengis.net/kml/2.2}"
GEOMETRY_TAGS = ("Point", "LineString", "LinearRing", "Polygon", "MultiGeometry")


def read_kmz(
    file: str | bytes | BinaryIO,
    *,
    strict_rings: bool = False,
) -> tuple[list[GeoRecord], SourceMetadata]:
    """Read a KMZ (or plain KML) file and return one record per Placemark with metadata.

    Args:
        file: Path to a .kmz/.kml file, raw bytes, or a file-like object containing KMZ/KML bytes.
        strict_rings: Reject polygons whose first boundary is an inner one.
    """
    data = _read_bytes(file)

    # KMZ is a ZIP; plain KML is XML text
    if _is_zip(data):
        kml_text = _extract_kml_from_kmz(data)
    else:
        kml_text = data.decode("utf-8", errors="replace")

    try:
        root = ET.fromstring(kml_text)
    except ET.ParseError as exc:
        raise ValueError(f"Invalid KML document: {exc}") from exc
    records = []
    geometry_types = set()
    has_z = False

    for idx, placemark in enumerate(root.iter(f"{KML_NS}Placemark"), start=1):
        geom_elem = _first_geometry(placemark)
        geometry = None
        if geom_elem is not None:
            geometry_types.add(_local(geom_elem.tag).upper())
            has_z = has_z or _has_altitude(geom_elem)
            geometry = _element_geometry(geom_elem, strict_rings)
        records.append(GeoRecord(index=idx, geometry=geometry, properties=_placemark_properties(placemark)))

    if len(geometry_types) == 1:
        geometry_type = geometry_types.pop()
    else:
        geometry_type = "MIXED" if geometry_types else "UNKNOWN"
    logger.info("Read %d KML placemarks", len(records))

    metadata = SourceMetadata(
        shape_type_name=f"KML_{geometry_type}",
        crs_epsg=4326,
        crs_name="WGS 84",
        is_projected=False,
        num_records=len(records),
        has_z=has_z,
        fields=sorted({key for r in records for key in r.properties}),
        bounds=merge_bounds(geometry_bounds(r.geometry) for r in records),
    )
    return records, metadata


def _read_bytes(file: str | bytes | BinaryIO) -> bytes:
    if isinstance(file, (str, bytes)):
        if isinstance(file, str):
            with open(file, "rb") as f:
                return f.read()
        return file
    return file.read()


def _is_zip(data: bytes) -> bool:
    return data[:4] == b"PK\x03\x04"


def _extract_kml_from_kmz(data: bytes) -> str:
    """Extract the first .kml file from a KMZ (ZIP) archive."""
    with zipfile.ZipFile(io.BytesIO(data)) as zf:
        # Prefer doc.kml, fall back to any .kml
        names = zf.namelist()
        kml_name = None
        for name in names:
            if name.lower() == "doc.kml":
                kml_name = name
                break
        if kml_name is None:
            for name in names:
                if name.lower().endswith(".kml"):
                    kml_name = name
                    break
        if kml_name is None:
            raise ValueError("No .kml file found in KMZ archive")
        return zf.read(kml_name).decode("utf-8", errors="replace")


def _local(tag: str) -> str:
    return tag.replace(KML_NS, "")


def _first_geometry(elem: ET.Element) -> ET.Element | None:
    for child in elem:
        if _local(child.tag) in GEOMETRY_TAGS:
            return child
    return None


def _element_geometry(elem: ET.Element, strict_rings: bool):
    """Convert one KML geometry element to its analytical geometry."""
    tag = _local(elem.tag)

    if tag == "Point":
        return Point(_required_coordinates(elem, 1)[0][:2])
    if tag == "LineString":
        return LineString([p[:2] for p in _required_coordinates(elem, 2)])
    if tag == "LinearRing":
        return LinearRing([p[:2] for p in _required_coordinates(elem, 3)])
    if tag == "Polygon":
        polygons = assemble_polygons(_boundary_rings(elem), strict=strict_rings)
        if len(polygons) == 1:
            return polygons[0]
        return MultiPolygon(polygons)
    if tag == "MultiGeometry":
        parts = [
            _element_geometry(child, strict_rings)
            for child in elem
            if _local(child.tag) in GEOMETRY_TAGS
        ]
        return GeometryCollection(parts)

    raise ValueError(f"Unsupported KML geometry: {tag}")


def _boundary_rings(polygon: ET.Element) -> list[TaggedRing]:
    """Read a Polygon's boundaries, in document order, as role-tagged rings."""
    rings = []
    for boundary in polygon:
        tag = _local(boundary.tag)
        if tag not in ("outerBoundaryIs", "innerBoundaryIs"):
            continue
        ring = boundary.find(f"{KML_NS}LinearRing")
        if ring is None:
            continue
        points = _coordinates(ring)
        if not points:
            continue
        if tag == "outerBoundaryIs":
            rings.append(TaggedRing.outer(points))
        else:
            rings.append(TaggedRing.inner(points))
    return rings


def _coordinates(elem: ET.Element) -> list[tuple[float, ...]]:
    coords_elem = elem.find(f"{KML_NS}coordinates")
    if coords_elem is None or not coords_elem.text:
        return []
    return _parse_coordinates_text(coords_elem.text)


def _required_coordinates(elem: ET.Element, minimum: int) -> list[tuple[float, ...]]:
    points = _coordinates(elem)
    if len(points) < minimum:
        raise ValueError(f"KML {_local(elem.tag)} needs at least {minimum} coordinate(s), got {len(points)}")
    return points


def _has_altitude(elem: ET.Element) -> bool:
    return any(len(p) > 2 for c in elem.iter(f"{KML_NS}coordinates") for p in _parse_coordinates_text(c.text or ""))


def _parse_coordinates_text(text: str) -> list[tuple[float, ...]]:
    """Parse a KML ``<coordinates>`` text block.

    Format: ``lon,lat[,alt] lon,lat[,alt] ...`` (whitespace-separated tuples).
    """
    points: list[tuple[float, ...]] = []
    for token in text.strip().split():
        parts = token.split(",")
        if len(parts) < 2:
            continue
        # In KML, x=lon, y=lat (geographic coordinates)
        points.append(tuple(float(v) for v in parts[:3]))
    return points


def _placemark_properties(placemark: ET.Element) -> dict[str, Any]:
    props: dict[str, Any] = {}
    for key in ("name", "description"):
        elem = placemark.find(f"{KML_NS}{key}")
        if elem is not None and elem.text:
            props[key] = elem.text.strip()
    for data in placemark.iter(f"{KML_NS}Data"):
        value = data.find(f"{KML_NS}value")
        if data.get("name"):
            props[data.get("name")] = value.text if value is not None else None
    return props
