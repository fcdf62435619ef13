# impact.py
from __future__ import annotations
import logging
from typing import Iterable, List, Optional

from flood_impact.config import NEIGHBORHOOD_RADIUS_PX
from flood_impact.connectivity import hazard_within, is_hazard
from flood_impact.grid import checked_spec, contains, to_pixel
from flood_impact.models import Classification, ImpactParams, Outcome, RasterMask, RoadFeature

logger = logging.getLogger(__name__)


def classify_road(
    road: RoadFeature,
    mask: RasterMask,
    radius: Optional[int] = None,
) -> Outcome:
    """
    Walk the road's vertices against the mask.

    A vertex whose own cell is hazard-present makes the road IN_HAZARD and
    ends the walk. A hazard cell inside the (2r+1)x(2r+1) window around a
    vertex makes it NEAR_HAZARD, but later vertices can still upgrade it.
    Vertices outside the bounding box are ignored.

    The window is measured in pixels, so "near" means roughly r pixel-widths:
    on a 10 m raster that is ~50 m, on a 0.01 degree raster over a kilometre.
    Segments between vertices are not sampled.
    """
    r = NEIGHBORHOOD_RADIUS_PX if radius is None else int(radius)
    data = mask.data
    near = False
    for point in road.coords:
        if not contains(point, mask):
            continue
        px, py = to_pixel(point, mask)
        if is_hazard(data, px, py):
            return Outcome.IN_HAZARD
        if not near and hazard_within(data, px, py, r):
            near = True
    return Outcome.NEAR_HAZARD if near else Outcome.UNAFFECTED


def classify_roads(
    roads: Iterable[RoadFeature],
    mask: RasterMask,
    params: Optional[ImpactParams] = None,
) -> List[Classification]:
    """Classify every road; output order follows input order. Raises DegenerateBounds."""
    params = params or ImpactParams()
    checked_spec(mask)
    results = [
        Classification(road.id, classify_road(road, mask, params.neighborhood_radius_px))
        for road in roads
    ]
    n_in = sum(1 for c in results if c.outcome is Outcome.IN_HAZARD)
    n_near = sum(1 for c in results if c.outcome is Outcome.NEAR_HAZARD)
    logger.info("found %d roads in hazard areas, %d near hazard areas", n_in, n_near)
    return results
