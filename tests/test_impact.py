import numpy as np
import pytest

from flood_impact.connectivity import hazard_within, is_hazard
from flood_impact.grid import to_geo
from flood_impact.impact import classify_road, classify_roads
from flood_impact.mask import build_mask
from flood_impact.models import GeoPoint, ImpactParams, Outcome, RasterBands, RoadFeature


def mask_with(cells, W=20, H=20):
    """Mask over bbox [0,0,W,H] with hazard at the given (px, py) cells."""
    arr = np.zeros((H, W), dtype=np.uint8)
    for px, py in cells:
        arr[py, px] = 1
    return build_mask(RasterBands(W, H, [arr], [0, 0, W, H], (1.0, -1.0)))


def road(rid, *points):
    return RoadFeature(id=rid, coords=tuple(GeoPoint(*p) for p in points))


def test_vertex_on_hazard_cell_is_in_hazard():
    mask = mask_with([(10, 10)])
    r = road(1, to_geo(10, 10, mask))
    assert classify_road(r, mask) is Outcome.IN_HAZARD


def test_six_cells_away_unaffected_five_cells_near():
    mask = mask_with([(10, 10)])
    assert classify_road(road(1, to_geo(16, 10, mask)), mask) is Outcome.UNAFFECTED
    assert classify_road(road(2, to_geo(15, 10, mask)), mask) is Outcome.NEAR_HAZARD
    assert classify_road(road(3, to_geo(10, 4, mask)), mask) is Outcome.UNAFFECTED
    assert classify_road(road(4, to_geo(10, 5, mask)), mask) is Outcome.NEAR_HAZARD


def test_window_is_square():
    mask = mask_with([(10, 10)])
    assert classify_road(road(1, to_geo(15, 15, mask)), mask) is Outcome.NEAR_HAZARD
    assert classify_road(road(2, to_geo(16, 15, mask)), mask) is Outcome.UNAFFECTED


def test_later_hit_upgrades_near():
    mask = mask_with([(10, 10)])
    r = road(1, to_geo(13, 10, mask), to_geo(2, 2, mask), to_geo(10, 10, mask))
    assert classify_road(r, mask) is Outcome.IN_HAZARD


def test_near_is_kept_after_far_vertices():
    mask = mask_with([(10, 10)])
    r = road(1, to_geo(13, 10, mask), to_geo(1, 1, mask), to_geo(19, 19, mask))
    assert classify_road(r, mask) is Outcome.NEAR_HAZARD


def test_vertices_outside_bbox_are_skipped():
    # (-0.5, 9.5) maps to column -1; its window would reach the hazard at column 0
    mask = mask_with([(0, 10)])
    r = road(1, (-0.5, 9.5))
    assert classify_road(r, mask) is Outcome.UNAFFECTED


def test_vertex_on_max_x_is_not_a_direct_hit():
    # lands on column W, so only the neighborhood can see column W-1
    mask = mask_with([(19, 10)])
    r = road(1, (20.0, 9.5))
    assert classify_road(r, mask) is Outcome.NEAR_HAZARD


def test_no_row_wraparound_in_window():
    # hazard at the far end of the previous row must not leak through a flat index
    mask = mask_with([(19, 9)])
    r = road(1, to_geo(0, 10, mask))
    assert classify_road(r, mask) is Outcome.UNAFFECTED


def test_empty_road_is_unaffected():
    mask = mask_with([(10, 10)])
    assert classify_road(road(1), mask) is Outcome.UNAFFECTED


def test_radius_override():
    mask = mask_with([(10, 10)])
    r = road(1, to_geo(16, 10, mask))
    out = classify_roads([r], mask, ImpactParams(neighborhood_radius_px=6))
    assert out[0].outcome is Outcome.NEAR_HAZARD
    out = classify_roads([r], mask, ImpactParams(neighborhood_radius_px=0))
    assert out[0].outcome is Outcome.UNAFFECTED


def test_negative_radius_rejected():
    with pytest.raises(ValueError):
        ImpactParams(neighborhood_radius_px=-1)


def _sample_roads(mask):
    return [
        road("a", to_geo(10, 10, mask)),
        road("b", to_geo(12, 12, mask), to_geo(3, 3, mask)),
        road("c", to_geo(19, 0, mask)),
        road("d", to_geo(0, 19, mask), to_geo(4, 17, mask)),
        road("e", (-5.0, -5.0), to_geo(5, 15, mask)),
    ]


def test_order_and_ids_preserved_and_idempotent():
    mask = mask_with([(10, 10), (4, 15)])
    roads = _sample_roads(mask)
    first = classify_roads(roads, mask)
    second = classify_roads(roads, mask)
    assert first == second
    assert [c.feature_id for c in first] == ["a", "b", "c", "d", "e"]
    assert [c.outcome for c in first] == [
        Outcome.IN_HAZARD,
        Outcome.NEAR_HAZARD,
        Outcome.UNAFFECTED,
        Outcome.NEAR_HAZARD,
        Outcome.NEAR_HAZARD,
    ]


def test_in_hazard_is_monotone_in_radius():
    mask = mask_with([(10, 10), (4, 15)])
    roads = _sample_roads(mask)
    base = classify_roads(roads, mask, ImpactParams(neighborhood_radius_px=2))
    for radius in range(3, 12):
        out = classify_roads(roads, mask, ImpactParams(neighborhood_radius_px=radius))
        for before, after in zip(base, out):
            if before.outcome is Outcome.IN_HAZARD:
                assert after.outcome is Outcome.IN_HAZARD


def test_inputs_not_mutated():
    mask = mask_with([(10, 10)])
    before = mask.data.copy()
    roads = _sample_roads(mask)
    coords_before = [r.coords for r in roads]
    classify_roads(roads, mask)
    assert np.array_equal(mask.data, before)
    assert [r.coords for r in roads] == coords_before


def test_cell_helpers_out_of_range():
    data = np.ones((3, 3), dtype=bool)
    assert not is_hazard(data, 3, 0)
    assert not is_hazard(data, -1, 0)
    assert is_hazard(data, 2, 2)
    assert hazard_within(data, -3, 1, 3)
    assert not hazard_within(data, -4, 1, 3)
    assert not hazard_within(data, 1, 10, 5)
