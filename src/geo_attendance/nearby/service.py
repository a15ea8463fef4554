from __future__ import annotations

import logging
from typing import List

from ..core.constants import DEFAULT_NEARBY_SCAN_CAP
from ..events.model import Event
from ..events.repository import EventRepository
from ..geofence.engine import great_circle_distance
from ..geofence.model import CircleGeofence, Point

logger = logging.getLogger(__name__)


class ProximityService:
    """Finds upcoming events whose circular geofence is within range of a point.

    Only circle geofences are measured: the query radius is added to the
    geofence's own radius (point-to-region). Polygon and geofence-less events
    never match.
    """

    def __init__(self, events: EventRepository, *, scan_cap: int = DEFAULT_NEARBY_SCAN_CAP):
        self._events = events
        self._scan_cap = int(scan_cap)

    def _in_range(self, event: Event, point: Point, radius_meters: float) -> bool:
        fence = event.geofence
        if not isinstance(fence, CircleGeofence):
            return False
        return great_circle_distance(point, fence.center) <= fence.radius_meters + radius_meters

    def find_nearby(self, point: Point, radius_meters: float, *, limit: int, offset: int = 0) -> List[Event]:
        candidates = self._events.list_upcoming(self._scan_cap)
        matches = [e for e in candidates if self._in_range(e, point, radius_meters)]
        matches.sort(key=lambda e: (e.start_time, e.event_id))

        logger.debug(
            "nearby scanned=%d matched=%d radius=%.0fm", len(candidates), len(matches), radius_meters
        )
        return matches[offset : offset + limit]
