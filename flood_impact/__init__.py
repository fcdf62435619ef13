"""Road impact analysis against a georeferenced binary hazard (flood) mask."""

from flood_impact.area import estimate_area, is_geographic_crs
from flood_impact.errors import (
    DegenerateBounds,
    ImpactError,
    InvalidPixelArea,
    InvalidRasterData,
    RasterReadError,
    RoadSourceError,
)
from flood_impact.grid import contains, in_bounds, to_geo, to_pixel
from flood_impact.impact import classify_road, classify_roads
from flood_impact.mask import build_mask, decode_mask
from flood_impact.models import (
    AreaEstimate,
    Classification,
    DecodeResult,
    GeoPoint,
    GridSpec,
    ImpactParams,
    Outcome,
    RasterBands,
    RasterMask,
    RoadFeature,
)
from flood_impact.pipeline import ImpactReport, analyze

__all__ = [
    "analyze",
    "ImpactReport",
    "build_mask",
    "decode_mask",
    "to_pixel",
    "to_geo",
    "in_bounds",
    "contains",
    "classify_road",
    "classify_roads",
    "estimate_area",
    "is_geographic_crs",
    "AreaEstimate",
    "Classification",
    "DecodeResult",
    "GeoPoint",
    "GridSpec",
    "ImpactParams",
    "Outcome",
    "RasterBands",
    "RasterMask",
    "RoadFeature",
    "ImpactError",
    "InvalidRasterData",
    "DegenerateBounds",
    "InvalidPixelArea",
    "RasterReadError",
    "RoadSourceError",
]
