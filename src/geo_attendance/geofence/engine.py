"""Containment tests and distances on geofences.

Everything here is pure; no locking needed.
"""

from __future__ import annotations

from math import atan2, cos, radians, sin, sqrt
from typing import Sequence

from ..core.constants import EARTH_RADIUS_METERS
from .model import CircleGeofence, GeofenceSpec, Point, PolygonGeofence


def great_circle_distance(p1: Point, p2: Point) -> float:
    """Haversine distance in meters over a spherical earth."""
    φ1, φ2 = radians(p1.lat), radians(p2.lat)
    Δφ = radians(p2.lat - p1.lat)
    Δλ = radians(p2.lng - p1.lng)

    a = sin(Δφ / 2) ** 2 + cos(φ1) * cos(φ2) * sin(Δλ / 2) ** 2
    c = 2 * atan2(sqrt(a), sqrt(1 - a))
    return EARTH_RADIUS_METERS * c


def is_within_radius(point: Point, center: Point, radius_meters: float) -> bool:
    return great_circle_distance(point, center) <= radius_meters


def _in_polygon(point: Point, vertices: Sequence[Point]) -> bool:
    # Even-odd rule, ray cast along the longitude axis.
    # Points exactly on an edge may land on either side.
    inside = False
    j = len(vertices) - 1
    for i in range(len(vertices)):
        vi, vj = vertices[i], vertices[j]
        if (vi.lat > point.lat) != (vj.lat > point.lat):
            cross_lng = (vj.lng - vi.lng) * (point.lat - vi.lat) / (vj.lat - vi.lat) + vi.lng
            if point.lng < cross_lng:
                inside = not inside
        j = i
    return inside


def contains(point: Point, spec: GeofenceSpec) -> bool:
    """True if `point` lies inside `spec`."""
    if isinstance(spec, CircleGeofence):
        return is_within_radius(point, spec.center, spec.radius_meters)
    if isinstance(spec, PolygonGeofence):
        return _in_polygon(point, spec.vertices)
    raise TypeError(f"Unsupported geofence type: {type(spec)!r}")
