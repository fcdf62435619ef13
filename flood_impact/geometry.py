# region Imports
import math
from flood_impact.config import EARTH_R
# endregion

# region Meters per Degree
def meters_per_deg_lat(lat: float) -> float:
    phi = math.radians(lat)
    return 111132.954 - 559.822 * math.cos(2.0 * phi) + 1.175 * math.cos(4.0 * phi)


def meters_per_deg_lon(lat: float) -> float:
    return (math.pi / 180.0) * EARTH_R * math.cos(math.radians(lat))
# endregion

# region Pixel Area
def geographic_pixel_area_m2(res_x: float, res_y: float, mid_lat: float) -> float:
    """Ground area of one res_x x res_y degree cell, linearised at mid_lat."""
    return (
        abs(res_x) * meters_per_deg_lon(mid_lat)
        * abs(res_y) * meters_per_deg_lat(mid_lat)
    )


def planar_pixel_area_m2(res_x: float, res_y: float) -> float:
    return abs(res_x * res_y)
# endregion
