"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

EARTH_RADIUS_METERS = 6_371_000.0

MIN_POLYGON_VERTICES = 3

# Upper bound on candidate events scanned by a proximity query.
DEFAULT_NEARBY_SCAN_CAP = 100
DEFAULT_NEARBY_RADIUS_KM = 5.0
DEFAULT_NEARBY_LIMIT = 10
MAX_NEARBY_LIMIT = 100

DEFAULT_HISTORY_LIMIT = 30
