# raster_io.py
from __future__ import annotations
import os
from dataclasses import replace
from typing import List, Sequence, Union
import numpy as np, rasterio
from rasterio.crs import CRS
from rasterio.errors import CRSError, RasterioError
from rasterio.warp import transform as warp_transform, transform_bounds
from rasterio.io import MemoryFile

from flood_impact.area import is_geographic_crs
from flood_impact.config import UNKNOWN_CRS
from flood_impact.errors import RasterReadError
from flood_impact.models import GeoPoint, RasterBands, RoadFeature

Source = Union[str, os.PathLike, bytes]


def _bands_from_dataset(ds) -> RasterBands:
    arr = ds.read()  # (bands, H, W)
    left, bottom, right, top = ds.bounds
    tf = ds.transform
    return RasterBands(
        width=int(ds.width),
        height=int(ds.height),
        bands=[np.asarray(b) for b in arr],
        bounds=[min(left, right), min(bottom, top), max(left, right), max(bottom, top)],
        resolution=(float(tf.a), float(tf.e)),
        crs=ds.crs.to_string() if ds.crs else UNKNOWN_CRS,
    )


def read_raster(source: Source) -> RasterBands:
    """Read every band of a GeoTIFF given as a path or as raw file bytes."""
    try:
        if isinstance(source, (bytes, bytearray)):
            with MemoryFile(bytes(source)) as mem, mem.open() as ds:
                return _bands_from_dataset(ds)
        with rasterio.open(source) as ds:
            return _bands_from_dataset(ds)
    except RasterioError as e:
        raise RasterReadError(f"cannot read raster: {e}") from e


def lonlat_bounds(raster: RasterBands) -> List[float]:
    """Raster bbox as [min_lon, min_lat, max_lon, max_lat] (EPSG:4326)."""
    if is_geographic_crs(raster.crs):
        return [float(b) for b in raster.bounds]
    if not raster.crs or raster.crs == UNKNOWN_CRS:
        raise RasterReadError("raster has no CRS, cannot place it in lat/lon")
    left, bottom, right, top = raster.bounds
    try:
        return list(transform_bounds(CRS.from_user_input(raster.crs), CRS.from_epsg(4326),
                                     left, bottom, right, top))
    except (CRSError, RasterioError) as e:
        raise RasterReadError(f"cannot reproject bounds from {raster.crs}: {e}") from e


def roads_to_raster_crs(roads: Sequence[RoadFeature], raster: RasterBands) -> List[RoadFeature]:
    """Reproject lat/lon roads into the raster's CRS so they share its bbox frame."""
    if is_geographic_crs(raster.crs):
        return list(roads)
    try:
        dst = CRS.from_user_input(raster.crs)
        out = []
        for road in roads:
            if not road.coords:
                out.append(road)
                continue
            xs, ys = warp_transform(CRS.from_epsg(4326), dst,
                                    [p.lon for p in road.coords], [p.lat for p in road.coords])
            coords = tuple(GeoPoint(float(x), float(y)) for x, y in zip(xs, ys))
            out.append(replace(road, coords=coords))
        return out
    except (CRSError, RasterioError) as e:
        raise RasterReadError(f"cannot reproject roads to {raster.crs}: {e}") from e
