import numpy as np
import pytest
import rasterio
from rasterio.transform import from_bounds

from flood_impact.errors import RasterReadError
from flood_impact.mask import build_mask
from flood_impact.models import GeoPoint, RoadFeature
from flood_impact.raster_io import lonlat_bounds, read_raster, roads_to_raster_crs


def write_tif(path, arr, bounds, crs="EPSG:4326"):
    count, H, W = arr.shape
    profile = dict(driver="GTiff", width=W, height=H, count=count, dtype=arr.dtype.name,
                   transform=from_bounds(*bounds, W, H))
    if crs:
        profile["crs"] = crs
    with rasterio.open(path, "w", **profile) as dst:
        dst.write(arr)
    return path


def test_read_from_path(tmp_path):
    arr = np.zeros((2, 4, 8), dtype=np.uint8)
    arr[0, 1, 2] = 1
    p = write_tif(tmp_path / "flood.tif", arr, (10.0, 40.0, 10.4, 40.2))

    raster = read_raster(str(p))
    assert (raster.width, raster.height) == (8, 4)
    assert len(raster.bands) == 2
    assert raster.bands[0].shape == (4, 8)
    assert raster.bounds == pytest.approx([10.0, 40.0, 10.4, 40.2])
    assert raster.resolution == pytest.approx((0.05, -0.05))
    assert raster.crs == "EPSG:4326"

    mask = build_mask(raster)
    assert mask.hazard_count == 1
    assert mask.data[1, 2]


def test_read_from_bytes(tmp_path):
    arr = np.ones((1, 3, 3), dtype=np.uint8)
    p = write_tif(tmp_path / "flood.tif", arr, (0, 0, 3, 3), crs="EPSG:32633")
    raster = read_raster(p.read_bytes())
    assert raster.crs == "EPSG:32633"
    assert raster.resolution == pytest.approx((1.0, -1.0))
    assert build_mask(raster).hazard_count == 9


def test_missing_crs_is_unknown(tmp_path):
    arr = np.zeros((1, 2, 2), dtype=np.uint8)
    p = write_tif(tmp_path / "nocrs.tif", arr, (0, 0, 2, 2), crs=None)
    assert read_raster(str(p)).crs == "Unknown"


def test_unreadable_raster(tmp_path):
    with pytest.raises(RasterReadError):
        read_raster(b"definitely not a tiff")
    with pytest.raises(RasterReadError):
        read_raster(str(tmp_path / "missing.tif"))


def test_lonlat_bounds(tmp_path):
    arr = np.zeros((1, 2, 2), dtype=np.uint8)
    geo = read_raster(str(write_tif(tmp_path / "geo.tif", arr, (10.0, 40.0, 10.4, 40.2))))
    assert lonlat_bounds(geo) == pytest.approx([10.0, 40.0, 10.4, 40.2])

    utm = read_raster(str(write_tif(tmp_path / "utm.tif", arr, (500000, 4649776, 501000, 4650776),
                                    crs="EPSG:32633")))
    west, south, east, north = lonlat_bounds(utm)
    # UTM 33N central meridian is 15E; northing ~4.65e6 m is ~42N
    assert 14.9 < west < east < 15.1
    assert 41.9 < south < north < 42.1

    nocrs = read_raster(str(write_tif(tmp_path / "nocrs.tif", arr, (0, 0, 2, 2), crs=None)))
    with pytest.raises(RasterReadError):
        lonlat_bounds(nocrs)


def test_roads_to_raster_crs(tmp_path):
    arr = np.zeros((1, 2, 2), dtype=np.uint8)
    utm = read_raster(str(write_tif(tmp_path / "utm.tif", arr, (500000, 0, 501000, 1000),
                                    crs="EPSG:32633")))
    roads = [RoadFeature(id=1, coords=(GeoPoint(15.0, 0.0),), name="Equator Rd"),
             RoadFeature(id=2, coords=())]
    out = roads_to_raster_crs(roads, utm)
    assert out[0].coords[0].lon == pytest.approx(500000.0, abs=1e-3)
    assert out[0].coords[0].lat == pytest.approx(0.0, abs=1e-3)
    assert out[0].name == "Equator Rd"
    assert out[1].coords == ()
    # geographic rasters keep roads as they are
    geo = read_raster(str(write_tif(tmp_path / "geo.tif", arr, (14, -1, 16, 1))))
    assert roads_to_raster_crs(roads, geo) == roads
