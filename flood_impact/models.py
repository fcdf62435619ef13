# models.py
from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, NamedTuple, Optional, Sequence, Tuple, Union
import numpy as np

from flood_impact.config import HAZARD_VALUE, NEIGHBORHOOD_RADIUS_PX, UNKNOWN_CRS
from flood_impact.errors import ImpactError, InvalidRasterData


# region Georeferencing
@dataclass(frozen=True)
class GridSpec:
    min_x: float
    min_y: float
    max_x: float
    max_y: float
    W: int
    H: int

    @classmethod
    def from_bounds(cls, bounds: Sequence[float], W: int, H: int) -> "GridSpec":
        min_x, min_y, max_x, max_y = (float(b) for b in bounds)
        return cls(min_x, min_y, max_x, max_y, int(W), int(H))

    @property
    def bounds(self) -> Tuple[float, float, float, float]:
        return (self.min_x, self.min_y, self.max_x, self.max_y)

    @property
    def is_degenerate(self) -> bool:
        return not (self.max_x > self.min_x and self.max_y > self.min_y)


class GeoPoint(NamedTuple):
    lon: float
    lat: float
# endregion


# region Raster Input
@dataclass
class RasterBands:
    """
    Decoded raster as handed over by a reader.

    bands: one entry per band, each a dense array (flat W*H or (H,W)) or
           a bare scalar for a degenerate band
    bounds: [min_x, min_y, max_x, max_y] in the raster's native CRS
    resolution: signed (res_x, res_y), may be None or incomplete
    """
    width: int
    height: int
    bands: List[Union[np.ndarray, float, int]]
    bounds: Sequence[float]
    resolution: Optional[Sequence[float]] = None
    crs: str = UNKNOWN_CRS
# endregion


# region Hazard Mask
@dataclass(frozen=True, eq=False)
class RasterMask:
    """
    data: (H,W) read-only bool array, row 0 = northern edge
    resolution_derived: True when resolution was estimated from bounds/size
                        instead of read from the raster
    """
    data: np.ndarray
    grid: GridSpec
    resolution: Tuple[float, float]
    crs: str = UNKNOWN_CRS
    resolution_derived: bool = False

    def __post_init__(self):
        if self.data.dtype != np.bool_:
            raise InvalidRasterData(f"mask data must be bool, got {self.data.dtype}")
        if self.data.shape != (self.grid.H, self.grid.W):
            raise InvalidRasterData(
                f"mask shape {self.data.shape} does not match grid {self.grid.H}x{self.grid.W}"
            )
        self.data.setflags(write=False)

    @property
    def W(self) -> int:
        return self.grid.W

    @property
    def H(self) -> int:
        return self.grid.H

    @property
    def buffer(self) -> np.ndarray:
        """Flat row-major view of the mask (length W*H), read-only."""
        flat = self.data.reshape(-1)
        flat.setflags(write=False)
        return flat

    @property
    def hazard_count(self) -> int:
        return int(np.count_nonzero(self.data))
# endregion


# region Roads
@dataclass(frozen=True)
class RoadFeature:
    id: Union[int, str]
    coords: Tuple[GeoPoint, ...]
    name: Optional[str] = None
    tags: Dict[str, str] = field(default_factory=dict, hash=False)

    @property
    def label(self) -> str:
        return self.name or f"Road-{self.id}"
# endregion


# region Results
class Outcome(str, Enum):
    IN_HAZARD = "in_hazard"
    NEAR_HAZARD = "near_hazard"
    UNAFFECTED = "unaffected"


@dataclass(frozen=True)
class Classification:
    feature_id: Union[int, str]
    outcome: Outcome


@dataclass(frozen=True)
class DecodeResult:
    mask: Optional[RasterMask] = None
    error: Optional[ImpactError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> RasterMask:
        if self.error is not None:
            raise self.error
        return self.mask


@dataclass(frozen=True)
class AreaEstimate:
    km2: Optional[float] = None
    error: Optional[ImpactError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> float:
        if self.error is not None:
            raise self.error
        return self.km2
# endregion


# region Parameters
@dataclass(frozen=True)
class ImpactParams:
    neighborhood_radius_px: int = NEIGHBORHOOD_RADIUS_PX
    hazard_value: float = HAZARD_VALUE

    def __post_init__(self):
        if int(self.neighborhood_radius_px) < 0:
            raise ValueError(
                f"neighborhood_radius_px must be >= 0, got {self.neighborhood_radius_px}"
            )
# endregion
