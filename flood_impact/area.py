# area.py
import logging
import math
from pyproj import CRS
from pyproj.exceptions import CRSError

from flood_impact.config import UNKNOWN_CRS
from flood_impact.errors import InvalidPixelArea
from flood_impact.geometry import geographic_pixel_area_m2, planar_pixel_area_m2
from flood_impact.models import AreaEstimate, RasterMask

logger = logging.getLogger(__name__)

_PROJECTED_HINTS = ("projcs", "utm", "mercator", "metre", "meter")
_GEOGRAPHIC_HINTS = ("4326", "crs84", "wgs 84", "wgs84", "geogcs", "geographic", "degree")


def is_geographic_crs(label: str) -> bool:
    """
    Degree-based CRS? Labels pyproj can parse use its answer; anything else
    (free-form GDAL SRS text, "Unknown") goes through keyword matching and
    defaults to linear units.
    """
    if not label or label.strip().lower() == UNKNOWN_CRS.lower():
        return False
    try:
        return bool(CRS.from_user_input(label).is_geographic)
    except CRSError:
        text = label.lower()
        if any(h in text for h in _PROJECTED_HINTS):
            return False
        return any(h in text for h in _GEOGRAPHIC_HINTS)


def pixel_area_m2(mask: RasterMask) -> float:
    res_x, res_y = mask.resolution
    if is_geographic_crs(mask.crs):
        mid_lat = 0.5 * (mask.grid.min_y + mask.grid.max_y)
        return geographic_pixel_area_m2(res_x, res_y, mid_lat)
    return planar_pixel_area_m2(res_x, res_y)


def estimate_area(mask: RasterMask) -> AreaEstimate:
    """Total hazard area in km^2, or an InvalidPixelArea failure."""
    px_area = pixel_area_m2(mask)
    if not math.isfinite(px_area) or px_area == 0.0:
        return AreaEstimate(
            error=InvalidPixelArea(f"pixel area {px_area!r} m^2 from resolution {mask.resolution}")
        )
    n = mask.hazard_count
    km2 = n * px_area / 1_000_000.0
    logger.info(
        "hazard area %.4f km^2 (%d cells x %.4g m^2%s)",
        km2, n, px_area, ", derived resolution" if mask.resolution_derived else "",
    )
    return AreaEstimate(km2=km2)
