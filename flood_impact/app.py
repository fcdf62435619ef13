# app.py
# Flask API around the raster/road impact analysis
# deps: pip install flask numpy rasterio pyproj requests

from __future__ import annotations
import json
import logging
from flask import Flask, request, jsonify

from flood_impact.config import HAZARD_VALUE, NEIGHBORHOOD_RADIUS_PX, OVERPASS_URL
from flood_impact.errors import RasterReadError, RoadSourceError
from flood_impact.models import ImpactParams
from flood_impact.pipeline import analyze
from flood_impact.raster_io import lonlat_bounds, read_raster, roads_to_raster_crs
from flood_impact.roads import fetch_roads, parse_roads

logger = logging.getLogger(__name__)

app = Flask(__name__)

# ======= CORS =======
@app.after_request
def _cors(resp):
    resp.headers["Access-Control-Allow-Origin"]  = "*"
    resp.headers["Access-Control-Allow-Headers"] = "*"
    resp.headers["Access-Control-Allow-Methods"] = "GET,POST,OPTIONS"
    return resp

@app.route("/", methods=["GET"])
def root():
    return {
        "ok": True,
        "analyze": "/analyze (POST multipart: raster, roads | fetch_roads=1)",
        "road_source": OVERPASS_URL,
        "defaults": {"radius": NEIGHBORHOOD_RADIUS_PX, "hazard_value": HAZARD_VALUE},
    }

# ======= analysis =======
@app.route("/analyze", methods=["POST"])
def analyze_upload():
    """
    multipart/form-data:
      raster        GeoTIFF file (required)
      roads         GeoJSON FeatureCollection or Overpass JSON (text)
      fetch_roads   "1" to query Overpass for the raster bbox instead
      radius        neighborhood radius in pixels (default 5)
      hazard_value  band-0 value treated as hazard (default 1)
    """
    upload = request.files.get("raster")
    if upload is None:
        return jsonify({"error": "raster file required"}), 400

    try:
        params = ImpactParams(
            neighborhood_radius_px=int(request.form.get("radius", NEIGHBORHOOD_RADIUS_PX)),
            hazard_value=float(request.form.get("hazard_value", HAZARD_VALUE)),
        )
    except ValueError as e:
        return jsonify({"error": f"bad parameter: {e}"}), 400

    try:
        raster = read_raster(upload.read())
    except RasterReadError as e:
        return jsonify({"error": str(e)}), 400

    if request.form.get("fetch_roads") in ("1", "true", "yes"):
        try:
            bbox = lonlat_bounds(raster)
        except RasterReadError as e:
            return jsonify({"error": f"road fetching needs a georeferenced raster: {e}"}), 422
        try:
            roads = roads_to_raster_crs(fetch_roads(bbox), raster)
        except RoadSourceError as e:
            logger.warning("road fetch failed: %s", e)
            return jsonify({"error": str(e)}), 502
        except RasterReadError as e:
            return jsonify({"error": str(e)}), 422
    else:
        text = request.form.get("roads")
        try:
            roads = parse_roads(json.loads(text)) if text else []
        except json.JSONDecodeError as e:
            return jsonify({"error": f"roads is not valid JSON: {e}"}), 400
        except RoadSourceError as e:
            return jsonify({"error": str(e)}), 400

    report = analyze(raster, roads, params)
    if report.mask is None:
        return jsonify({"error": "cannot classify raster", **report.to_dict()}), 422
    return jsonify(report.to_dict())


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    app.run(host="0.0.0.0", port=8081, threaded=True)
