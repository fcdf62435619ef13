# mask.py
from __future__ import annotations
import logging
from typing import Optional, Sequence, Tuple
import numpy as np

from flood_impact.config import HAZARD_VALUE, UNKNOWN_CRS
from flood_impact.errors import DegenerateBounds, ImpactError, InvalidRasterData
from flood_impact.models import DecodeResult, GridSpec, RasterBands, RasterMask

logger = logging.getLogger(__name__)


def _is_scalar_band(band) -> bool:
    return np.ndim(band) == 0


def _resolve_resolution(
    resolution: Optional[Sequence[float]], spec: GridSpec
) -> Tuple[Tuple[float, float], bool]:
    if resolution is not None and len(resolution) >= 2:
        rx, ry = float(resolution[0]), float(resolution[1])
        if not (rx == 0.0 and ry == 0.0):
            return (rx, ry), False
    rx = (spec.max_x - spec.min_x) / spec.W
    ry = (spec.max_y - spec.min_y) / spec.H
    logger.warning("resolution missing or zero, derived %.6g x %.6g from bounds", rx, ry)
    return (rx, ry), True


def build_mask(raster: RasterBands, hazard_value: float = HAZARD_VALUE) -> RasterMask:
    """
    Threshold band 0 into a hazard mask. Raises InvalidRasterData or
    DegenerateBounds.

    Only cells exactly equal to hazard_value are hazard-present; nodata and
    fractional confidences are absent.
    """
    W, H = int(raster.width), int(raster.height)
    if W < 1 or H < 1:
        raise InvalidRasterData(f"raster size must be positive, got {W}x{H}")
    if not raster.bands:
        raise InvalidRasterData("raster has no bands")

    band = raster.bands[0]
    if _is_scalar_band(band):
        logger.warning("band 0 is a single value (%r), nothing to classify", band)
        raise InvalidRasterData(f"band 0 is a scalar ({band!r})")

    arr = np.asarray(band)
    if arr.size != W * H:
        raise InvalidRasterData(f"band 0 has {arr.size} values, expected {W}*{H}={W * H}")

    if raster.bounds is None or len(raster.bounds) != 4:
        raise DegenerateBounds(f"bounds must be [min_x, min_y, max_x, max_y], got {raster.bounds!r}")
    spec = GridSpec.from_bounds(raster.bounds, W, H)
    if spec.is_degenerate:
        raise DegenerateBounds(f"zero-size bounding box {spec.bounds}")

    resolution, derived = _resolve_resolution(raster.resolution, spec)
    data = np.ascontiguousarray(arr.reshape(H, W) == hazard_value, dtype=bool)

    return RasterMask(
        data=data,
        grid=spec,
        resolution=resolution,
        crs=raster.crs or UNKNOWN_CRS,
        resolution_derived=derived,
    )


def decode_mask(raster: RasterBands, hazard_value: float = HAZARD_VALUE) -> DecodeResult:
    """Same as build_mask, but failures come back in DecodeResult.error."""
    try:
        return DecodeResult(mask=build_mask(raster, hazard_value))
    except ImpactError as e:
        return DecodeResult(error=e)
