# region Imports
import numpy as np
# endregion

# region Cell Lookup
def is_hazard(mask: np.ndarray, px: int, py: int) -> bool:
    """Out-of-range cells count as hazard-absent."""
    H, W = mask.shape
    return 0 <= px < W and 0 <= py < H and bool(mask[py, px])
# endregion

# region Neighborhood Search
def hazard_within(mask: np.ndarray, px: int, py: int, radius: int) -> bool:
    """
    True if any cell with |dx| <= radius and |dy| <= radius around (px, py)
    is hazard-present. The window is clipped to the grid, so a centre outside
    the raster can still see cells along its edge.
    """
    H, W = mask.shape
    r0, r1 = max(0, py - radius), min(H, py + radius + 1)
    c0, c1 = max(0, px - radius), min(W, px + radius + 1)
    if r0 >= r1 or c0 >= c1:
        return False
    return bool(mask[r0:r1, c0:c1].any())
# endregion
