# config.py
EARTH_R = 6_378_137.0  # WGS84 equatorial radius (m)

# A cell is hazard-present only when its band-0 value equals this exactly
HAZARD_VALUE = 1

# Half-width of the square window searched around a vertex (21x21 cells at 5)
NEIGHBORHOOD_RADIUS_PX = 5

UNKNOWN_CRS = "Unknown"

# Road source (Overpass API)
OVERPASS_URL = "https://overpass-api.de/api/interpreter"
OVERPASS_TIMEOUT_S = 30
EXCLUDED_HIGHWAYS = ("footway", "path", "cycleway", "steps")
