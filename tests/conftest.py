import datetime

import pytest
import shapefile
from pyproj import CRS

from geoadapter import TaggedRing

# Shapefile winding: outer rings clockwise, holes counter-clockwise
SQUARE = [(0, 0), (0, 10), (10, 10), (10, 0), (0, 0)]
SQUARE_HOLE = [(2, 2), (4, 2), (4, 4), (2, 4), (2, 2)]
ISLAND = [(20, 20), (20, 25), (25, 25), (25, 20), (20, 20)]


@pytest.fixture
def square_with_hole_rings():
    return [TaggedRing.outer(SQUARE), TaggedRing.inner([(2, 2), (2, 4), (4, 4), (4, 2), (2, 2)])]


@pytest.fixture
def utm_wkt():
    return CRS.from_epsg(32610).to_wkt()


@pytest.fixture
def polygon_shapefile_path(tmp_path, utm_wkt):
    """Two records: a square with a hole plus an island, and a plain square."""
    base = tmp_path / "parcels"
    with shapefile.Writer(str(base), shapeType=shapefile.POLYGON) as w:
        w.field("NAME", "C", size=20)
        w.field("SURVEYED", "D")
        w.poly([SQUARE, SQUARE_HOLE, ISLAND])
        w.record("lot-a", datetime.date(2024, 1, 2))
        w.poly([ISLAND])
        w.record("lot-b", datetime.date(2023, 6, 30))
    (tmp_path / "parcels.prj").write_text(utm_wkt)
    return base


@pytest.fixture
def orphan_hole_shapefile_path(tmp_path):
    base = tmp_path / "orphan"
    with shapefile.Writer(str(base), shapeType=shapefile.POLYGON) as w:
        w.field("NAME", "C")
        w.poly([SQUARE_HOLE, SQUARE])
        w.record("hole-first")
    return base


@pytest.fixture
def pointz_shapefile_path(tmp_path):
    base = tmp_path / "manholes"
    with shapefile.Writer(str(base), shapeType=shapefile.POINTZ) as w:
        w.field("ASSETID", "C")
        w.pointz(100.5, 200.25, 12.0)
        w.record("MH-1")
        w.pointz(101.5, 201.25, 11.5)
        w.record("MH-2")
        w.pointz(99.0, 205.0, 10.0)
        w.record("MH-3")
    return base


@pytest.fixture
def polyline_shapefile_path(tmp_path):
    base = tmp_path / "mains"
    with shapefile.Writer(str(base), shapeType=shapefile.POLYLINE) as w:
        w.field("ASSETID", "C")
        w.line([[(0, 0), (5, 0), (5, 5)], [(10, 10), (12, 14)]])
        w.record("GM-1")
        w.null()
        w.record("GM-2")
    return base

