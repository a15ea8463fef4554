from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Tuple, Union

from ..core.enums import GeofenceType


@dataclass(frozen=True)
class Point:
    """A (latitude, longitude) pair in decimal degrees."""

    lat: float
    lng: float


@dataclass(frozen=True)
class CircleGeofence:
    center: Point
    radius_meters: float

    type: ClassVar[GeofenceType] = GeofenceType.CIRCLE


@dataclass(frozen=True)
class PolygonGeofence:
    """Closed ring: the last vertex connects back to the first."""

    vertices: Tuple[Point, ...]

    type: ClassVar[GeofenceType] = GeofenceType.POLYGON


GeofenceSpec = Union[CircleGeofence, PolygonGeofence]
