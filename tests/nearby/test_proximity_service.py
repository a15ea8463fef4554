from __future__ import annotations

import math
from datetime import datetime, timedelta

from geo_attendance.core.constants import EARTH_RADIUS_METERS
from geo_attendance.events.model import Event
from geo_attendance.geofence.codec import circle, polygon
from geo_attendance.geofence.model import Point
from geo_attendance.nearby.service import ProximityService
from tests.fakes import InMemoryEvents

HERE = Point(10.7769, 106.7009)
BASE = datetime(2026, 3, 1, 9, 0, 0)


def east_of(p: Point, meters: float) -> Point:
    return Point(lat=p.lat, lng=p.lng + math.degrees(meters / (EARTH_RADIUS_METERS * math.cos(math.radians(p.lat)))))


def event(event_id: int, *, starts_in_hours: int, geofence=None) -> Event:
    start = BASE + timedelta(hours=starts_in_hours)
    return Event(event_id=event_id, name=f"E{event_id}", start_time=start, end_time=start + timedelta(hours=2), geofence=geofence)


def test_query_radius_is_added_to_geofence_radius():
    # Center 1,000 m away, fence radius 300 m: reachable with a 710 m query radius, not with 600 m.
    far_center = east_of(HERE, 1000)
    svc = ProximityService(InMemoryEvents([event(1, starts_in_hours=1, geofence=circle(far_center, 300))]))

    assert [e.event_id for e in svc.find_nearby(HERE, 710, limit=10, offset=0)] == [1]
    assert svc.find_nearby(HERE, 600, limit=10, offset=0) == []


def test_zero_radius_matches_only_when_inside_fence():
    svc = ProximityService(InMemoryEvents([event(1, starts_in_hours=1, geofence=circle(east_of(HERE, 40), 50))]))

    assert [e.event_id for e in svc.find_nearby(HERE, 0, limit=10, offset=0)] == [1]


def test_polygon_and_unfenced_events_are_excluded():
    square = polygon([Point(10.77, 106.70), Point(10.77, 106.71), Point(10.78, 106.71), Point(10.78, 106.70)])
    svc = ProximityService(
        InMemoryEvents(
            [
                event(1, starts_in_hours=1, geofence=square),
                event(2, starts_in_hours=2),
                event(3, starts_in_hours=3, geofence=circle(HERE, 100)),
            ]
        )
    )

    assert [e.event_id for e in svc.find_nearby(HERE, 50_000, limit=10, offset=0)] == [3]


def test_results_sorted_by_start_time_then_id():
    fence = circle(HERE, 100)
    svc = ProximityService(
        InMemoryEvents(
            [
                event(4, starts_in_hours=5, geofence=fence),
                event(2, starts_in_hours=1, geofence=fence),
                event(3, starts_in_hours=3, geofence=fence),
                event(1, starts_in_hours=3, geofence=fence),
            ]
        )
    )

    result = svc.find_nearby(HERE, 0, limit=10, offset=0)

    assert [e.event_id for e in result] == [2, 1, 3, 4]
    assert [e.start_time for e in result] == sorted(e.start_time for e in result)


def test_limit_and_offset_page_through_sorted_results():
    fence = circle(HERE, 100)
    svc = ProximityService(InMemoryEvents([event(i, starts_in_hours=10 - i, geofence=fence) for i in range(1, 6)]))

    everything = svc.find_nearby(HERE, 0, limit=100, offset=0)
    page = svc.find_nearby(HERE, 0, limit=1, offset=1)

    assert page == [everything[1]]
    assert svc.find_nearby(HERE, 0, limit=2, offset=4) == everything[4:]
    assert svc.find_nearby(HERE, 0, limit=10, offset=99) == []
    assert svc.find_nearby(HERE, 0, limit=0, offset=0) == []


def test_scan_is_bounded_by_cap():
    repo = InMemoryEvents([event(i, starts_in_hours=i, geofence=circle(HERE, 100)) for i in range(1, 6)])
    svc = ProximityService(repo, scan_cap=3)

    result = svc.find_nearby(HERE, 0, limit=10, offset=0)

    assert repo.last_cap == 3
    assert len(result) == 3
