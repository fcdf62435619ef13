# region Imports
from __future__ import annotations
import logging
from typing import Any, Dict, List, Optional, Sequence
import requests

from flood_impact.config import EXCLUDED_HIGHWAYS, OVERPASS_TIMEOUT_S, OVERPASS_URL
from flood_impact.errors import RoadSourceError
from flood_impact.models import GeoPoint, RoadFeature
# endregion

logger = logging.getLogger(__name__)


# region Overpass Query
def build_overpass_query(bounds: Sequence[float]) -> str:
    """Overpass QL for drivable highway ways in [min_lon, min_lat, max_lon, max_lat]."""
    west, south, east, north = bounds
    excluded = "".join(f'["highway"!="{h}"]' for h in EXCLUDED_HIGHWAYS)
    return (
        "[out:json];\n"
        "(\n"
        f'  way["highway"]{excluded}\n'
        f"    ({south},{west},{north},{east});\n"
        ");\n"
        "out body;\n"
        ">;\n"
        "out skel qt;\n"
    )


def fetch_roads(
    bounds: Sequence[float],
    url: str = OVERPASS_URL,
    timeout: float = OVERPASS_TIMEOUT_S,
) -> List[RoadFeature]:
    try:
        r = requests.post(url, data=build_overpass_query(bounds), timeout=timeout)
        r.raise_for_status()
        data = r.json()
    except requests.RequestException as e:
        raise RoadSourceError(f"road query failed: {e}") from e
    except ValueError as e:
        raise RoadSourceError(f"road service returned invalid JSON: {e}") from e
    return roads_from_overpass(data)
# endregion


# region Overpass JSON -> Roads
def roads_from_overpass(data: Dict[str, Any]) -> List[RoadFeature]:
    """
    Join `way` elements to their `node` coordinates. Node references with no
    matching node are dropped from the polyline; ways without a highway tag
    are skipped.
    """
    try:
        elements = data["elements"]
    except (KeyError, TypeError) as e:
        raise RoadSourceError("Overpass payload has no 'elements'") from e
    try:
        return _overpass_roads(elements)
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        raise RoadSourceError(f"malformed Overpass element: {e!r}") from e


def _overpass_roads(elements) -> List[RoadFeature]:
    nodes = {
        el["id"]: GeoPoint(float(el["lon"]), float(el["lat"]))
        for el in elements
        if el.get("type") == "node" and "lat" in el and "lon" in el
    }

    roads: List[RoadFeature] = []
    for el in elements:
        tags = el.get("tags") or {}
        if el.get("type") != "way" or "highway" not in tags:
            continue
        coords = tuple(nodes[n] for n in el.get("nodes", []) if n in nodes)
        roads.append(
            RoadFeature(id=_scalar_id(el["id"]), coords=coords, name=tags.get("name"), tags=dict(tags))
        )
    return roads
# endregion


# region GeoJSON -> Roads
def _scalar_id(v):
    # ids key the report, so they must be hashable JSON scalars
    if isinstance(v, bool) or not isinstance(v, (int, float, str)):
        raise RoadSourceError(f"feature id must be a string or number, got {v!r}")
    return v


def _feature_id(feature: Dict[str, Any], props: Dict[str, Any], idx: int):
    for v in (props.get("id"), feature.get("id")):
        if v is not None:
            return _scalar_id(v)
    return idx


def _geojson_road(feature: Dict[str, Any], idx: int) -> Optional[RoadFeature]:
    geom = feature.get("geometry") or {}
    if geom.get("type") != "LineString":
        logger.debug("skipping feature %d with geometry %r", idx, geom.get("type"))
        return None
    props = feature.get("properties") or {}
    try:
        coords = tuple(GeoPoint(float(c[0]), float(c[1])) for c in geom["coordinates"])
    except (KeyError, IndexError, TypeError, ValueError) as e:
        raise RoadSourceError(f"feature {idx} has malformed coordinates") from e
    tags = {k: str(v) for k, v in props.items() if k not in ("id", "name") and v is not None}
    return RoadFeature(
        id=_feature_id(feature, props, idx),
        coords=coords,
        name=props.get("name"),
        tags=tags,
    )


def roads_from_geojson(collection: Dict[str, Any]) -> List[RoadFeature]:
    """LineString features of a FeatureCollection; other geometries are skipped."""
    if not isinstance(collection, dict) or collection.get("type") != "FeatureCollection":
        raise RoadSourceError("expected a GeoJSON FeatureCollection")

    roads: List[RoadFeature] = []
    try:
        for idx, feature in enumerate(collection.get("features", [])):
            road = _geojson_road(feature, idx)
            if road is not None:
                roads.append(road)
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        raise RoadSourceError(f"malformed GeoJSON feature: {e!r}") from e
    return roads


def parse_roads(payload: Optional[Dict[str, Any]]) -> List[RoadFeature]:
    """Accept either a GeoJSON FeatureCollection or an Overpass JSON response."""
    if payload is None:
        return []
    if isinstance(payload, dict) and "elements" in payload:
        return roads_from_overpass(payload)
    return roads_from_geojson(payload)
# endregion
