# pipeline.py
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional
import logging

from flood_impact.area import estimate_area
from flood_impact.errors import ImpactError
from flood_impact.impact import classify_roads
from flood_impact.mask import decode_mask
from flood_impact.models import (
    AreaEstimate,
    Classification,
    ImpactParams,
    Outcome,
    RasterBands,
    RasterMask,
    RoadFeature,
)

logger = logging.getLogger(__name__)


@dataclass
class ImpactReport:
    mask: Optional[RasterMask]
    classifications: List[Classification]
    area: AreaEstimate
    roads: Dict[Any, RoadFeature] = field(default_factory=dict)
    errors: List[str] = field(default_factory=list)

    def ids_with(self, outcome: Outcome) -> List[Any]:
        return [c.feature_id for c in self.classifications if c.outcome is outcome]

    def to_dict(self) -> Dict[str, Any]:
        def _named(ids):
            return [
                {"id": i, "name": self.roads[i].label if i in self.roads else f"Road-{i}"}
                for i in ids
            ]

        raster = None
        if self.mask is not None:
            raster = {
                "width": self.mask.W,
                "height": self.mask.H,
                "bounds": list(self.mask.grid.bounds),
                "crs": self.mask.crs,
                "resolution": list(self.mask.resolution),
                "resolution_derived": self.mask.resolution_derived,
                "hazard_pixels": self.mask.hazard_count,
            }
        return {
            "raster": raster,
            "area_km2": self.area.km2,
            "area_error": None if self.area.ok else str(self.area.error),
            "in_hazard": _named(self.ids_with(Outcome.IN_HAZARD)),
            "near_hazard": _named(self.ids_with(Outcome.NEAR_HAZARD)),
            "unaffected_count": len(self.ids_with(Outcome.UNAFFECTED)),
            "errors": list(self.errors),
        }


def analyze(
    raster: RasterBands,
    roads: Iterable[RoadFeature],
    params: Optional[ImpactParams] = None,
) -> ImpactReport:
    """
    Decode, classify and measure. Area and classification fail
    independently; a decode failure is reported for both.
    """
    params = params or ImpactParams()
    roads = list(roads)
    by_id = {r.id: r for r in roads}

    decoded = decode_mask(raster, params.hazard_value)
    if not decoded.ok:
        logger.warning("raster rejected: %s", decoded.error)
        return ImpactReport(
            mask=None,
            classifications=[],
            area=AreaEstimate(error=decoded.error),
            roads=by_id,
            errors=[f"{type(decoded.error).__name__}: {decoded.error}"],
        )

    mask = decoded.mask
    errors: List[str] = []
    try:
        classifications = classify_roads(roads, mask, params)
    except ImpactError as e:
        errors.append(f"{type(e).__name__}: {e}")
        classifications = []

    area = estimate_area(mask)
    if not area.ok:
        errors.append(f"{type(area.error).__name__}: {area.error}")

    return ImpactReport(
        mask=mask,
        classifications=classifications,
        area=area,
        roads=by_id,
        errors=errors,
    )
