"""FastAPI server converting uploaded shapefiles and KML/KMZ documents to GeoJSON."""

from __future__ import annotations

import io
import logging
import tempfile
import zipfile
from collections import Counter
from pathlib import Path

from fastapi import FastAPI, HTTPException, Query, UploadFile

from .interchange import feature_collection
from .kml_reader import read_kmz
from .models import ConversionSummary, GeoRecord, SourceMetadata
from .reader import read_shapefile

logger = logging.getLogger(__name__)

app = FastAPI(title="Geometry Adapter", version="0.1.0")

COMPANION_EXTS = {".shp", ".shx", ".dbf", ".prj"}


@app.post("/convert")
async def convert_upload(
    files: list[UploadFile],
    format: str = Query("geojson", pattern="^(geojson|summary)$"),
    strict_rings: bool = False,
):
    """Convert uploaded shapefile(s) or KMZ/KML to a GeoJSON FeatureCollection.

    Accepts:
    - A single .kmz or .kml file
    - A single .zip containing shapefile components
    - Multiple files (.shp, .shx, .dbf, and optionally .prj)

    With ``format=summary`` only the source metadata and a count of geometry
    types are returned.
    """
    filename = (files[0].filename or "").lower() if len(files) == 1 else ""

    try:
        if filename.endswith((".kmz", ".kml")):
            records, metadata = await _handle_kmz(files[0], strict_rings)
        elif filename.endswith(".zip"):
            records, metadata = await _handle_zip(files[0], strict_rings)
        else:
            records, metadata = await _handle_multi_file(files, strict_rings)
    except ValueError as exc:
        logger.warning("Rejected upload: %s", exc)
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    logger.info("Converted %d %s records", metadata.num_records, metadata.shape_type_name)

    if format == "summary":
        return _summary(records, metadata)

    collection = feature_collection(records)
    collection["metadata"] = metadata.model_dump()
    return collection


def _summary(records: list[GeoRecord], metadata: SourceMetadata) -> ConversionSummary:
    counts = Counter(
        r.geometry.geom_type if hasattr(r.geometry, "geom_type") else type(r.geometry).__name__
        for r in records
        if r.geometry is not None
    )
    return ConversionSummary(metadata=metadata, geometry_types=dict(counts))


async def _handle_zip(upload: UploadFile, strict_rings: bool):
    """Extract shapefile from a zip archive and read it."""
    content = await upload.read()
    try:
        archive = zipfile.ZipFile(io.BytesIO(content))
    except zipfile.BadZipFile as exc:
        raise ValueError("Uploaded .zip is not a valid archive") from exc

    with archive, tempfile.TemporaryDirectory() as extract_dir:
        archive.extractall(extract_dir)
        shp_files = sorted(Path(extract_dir).rglob("*.shp"))
        if not shp_files:
            raise HTTPException(status_code=400, detail="No .shp file found in zip archive")
        # .prj beside the .shp is picked up by read_shapefile
        return read_shapefile(shp_files[0], strict_rings=strict_rings)


async def _handle_kmz(upload: UploadFile, strict_rings: bool):
    """Read a KMZ or KML file upload."""
    content = await upload.read()
    return read_kmz(io.BytesIO(content), strict_rings=strict_rings)


async def _handle_multi_file(files: list[UploadFile], strict_rings: bool):
    """Read a shapefile from multiple uploaded component files."""
    file_map: dict[str, bytes] = {}
    for f in files:
        ext = Path(f.filename or "").suffix.lower()
        if ext in COMPANION_EXTS:
            file_map[ext] = await f.read()

    if ".shp" not in file_map:
        raise HTTPException(status_code=400, detail="Missing required .shp file")

    shp_file = io.BytesIO(file_map[".shp"])
    shx_file = io.BytesIO(file_map[".shx"]) if ".shx" in file_map else None
    dbf_file = io.BytesIO(file_map[".dbf"]) if ".dbf" in file_map else None

    prj_wkt = None
    if ".prj" in file_map:
        prj_wkt = file_map[".prj"].decode("utf-8", errors="replace")

    return read_shapefile(
        shp_file=shp_file,
        shx_file=shx_file,
        dbf_file=dbf_file,
        prj_wkt=prj_wkt,
        strict_rings=strict_rings,
    )
