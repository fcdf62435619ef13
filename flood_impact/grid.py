# region Imports
import math
from typing import Tuple, Union
from flood_impact.errors import DegenerateBounds
from flood_impact.models import GeoPoint, GridSpec, RasterMask
# endregion

Frame = Union[GridSpec, RasterMask]


def _spec(frame: Frame) -> GridSpec:
    return frame.grid if isinstance(frame, RasterMask) else frame


def checked_spec(frame: Frame) -> GridSpec:
    spec = _spec(frame)
    if spec.max_x == spec.min_x or spec.max_y == spec.min_y:
        raise DegenerateBounds(f"zero-size bounding box {spec.bounds}")
    return spec


# region Geo -> Pixel
def to_pixel(point: Tuple[float, float], frame: Frame) -> Tuple[int, int]:
    """
    Map (lon, lat) to (pixel_x, pixel_y). Row 0 is the northern edge.

    Not clamped: points outside the bbox give indices outside [0,W)x[0,H),
    and a point exactly on max_x lands on column W.
    """
    spec = checked_spec(frame)
    lon, lat = point
    nx = (lon - spec.min_x) / (spec.max_x - spec.min_x)
    ny = 1.0 - (lat - spec.min_y) / (spec.max_y - spec.min_y)
    return math.floor(nx * spec.W), math.floor(ny * spec.H)
# endregion

# region Pixel -> Geo
def to_geo(px: int, py: int, frame: Frame) -> GeoPoint:
    """Centre of cell (px, py); feeding it back to to_pixel returns (px, py)."""
    spec = checked_spec(frame)
    lon = spec.min_x + (px + 0.5) / spec.W * (spec.max_x - spec.min_x)
    lat = spec.max_y - (py + 0.5) / spec.H * (spec.max_y - spec.min_y)
    return GeoPoint(lon, lat)
# endregion

# region Bounds Helpers
def in_bounds(px: int, py: int, frame: Frame) -> bool:
    spec = _spec(frame)
    return 0 <= px < spec.W and 0 <= py < spec.H


def contains(point: Tuple[float, float], frame: Frame) -> bool:
    # inclusive on all edges
    spec = _spec(frame)
    lon, lat = point
    return spec.min_x <= lon <= spec.max_x and spec.min_y <= lat <= spec.max_y
# endregion
