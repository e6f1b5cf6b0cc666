"""Pydantic data models shared by the readers and the geometry adapters."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from shapely.geometry import LineString, Polygon

Coord = tuple[float, float]


class CoordinatePoint(BaseModel):
    """A single coordinate point extracted from a point shapefile."""

    model_config = ConfigDict(frozen=True)

    index: int
    x: float
    y: float
    z: float | None = None


class Role(str, Enum):
    """Ring role derived from winding order when the ring was read."""

    OUTER = "outer"
    INNER = "inner"


class TaggedRing(BaseModel):
    """One ring of a legacy polygon record, in file order."""

    model_config = ConfigDict(frozen=True)

    role: Role
    points: list[tuple[float, ...]] = Field(min_length=1)

    @classmethod
    def outer(cls, points) -> TaggedRing:
        return cls(role=Role.OUTER, points=[tuple(p) for p in points])

    @classmethod
    def inner(cls, points) -> TaggedRing:
        return cls(role=Role.INNER, points=[tuple(p) for p in points])


# Rendering model


class RenderPoint(BaseModel):
    model_config = ConfigDict(frozen=True)

    x: float
    y: float


class Contour(BaseModel):
    """Closed contour. Closure is implied, so the last point need not repeat the first."""

    model_config = ConfigDict(frozen=True)

    points: list[RenderPoint]


class RenderPolygon(BaseModel):
    model_config = ConfigDict(frozen=True)

    outer_contour: Contour
    inner_contours: list[Contour] = []


class RenderMultiPolygon(BaseModel):
    model_config = ConfigDict(frozen=True)

    parts: list[RenderPolygon]


class BoundingRect(BaseModel):
    """Axis-aligned rectangle used by the rendering model."""

    model_config = ConfigDict(frozen=True)

    x_min: float
    y_min: float
    x_max: float
    y_max: float

    def as_tuple(self) -> tuple[float, float, float, float]:
        return self.x_min, self.y_min, self.x_max, self.y_max


# Analytical shapes with no shapely class of their own


class Line(BaseModel):
    """A single segment between two coordinates."""

    model_config = ConfigDict(frozen=True)

    start: Coord
    end: Coord

    def to_linestring(self) -> LineString:
        return LineString([self.start, self.end])


class Rect(BaseModel):
    """Axis-aligned rectangle given by its min and max corners."""

    model_config = ConfigDict(frozen=True)

    min: Coord
    max: Coord

    def exterior(self) -> list[Coord]:
        """Closed exterior ring, starting at the (max x, min y) corner."""
        (x0, y0), (x1, y1) = self.min, self.max
        return [(x1, y0), (x1, y1), (x0, y1), (x0, y0), (x1, y0)]

    def to_polygon(self) -> Polygon:
        return Polygon(self.exterior())


class Triangle(BaseModel):
    model_config = ConfigDict(frozen=True)

    a: Coord
    b: Coord
    c: Coord

    def exterior(self) -> list[Coord]:
        return [self.a, self.b, self.c, self.a]

    def to_polygon(self) -> Polygon:
        return Polygon(self.exterior())


# Reader output


class GeoRecord(BaseModel):
    """A single record read from a geometry source."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    index: int
    geometry: Any = None
    properties: dict[str, Any] = {}


class SourceMetadata(BaseModel):
    """Metadata about a parsed shapefile or KML document."""

    shape_type_name: str
    crs_epsg: int | None = None
    crs_name: str | None = None
    is_projected: bool | None = None
    num_records: int
    has_z: bool
    fields: list[str]
    bounds: BoundingRect | None = None


class ConversionSummary(BaseModel):
    """Summary returned by the service when GeoJSON output is not requested."""

    metadata: SourceMetadata
    geometry_types: dict[str, int]
