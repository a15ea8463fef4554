"""Parse, validate and serialize geofence definitions.

Persisted encoding (the `events.geofence_data` column)::

    {"type": "circle", "circle": {"center": {"lat": 1.0, "lng": 2.0}, "radius": 50}}
    {"type": "polygon", "polygon": {"points": [{"lat": 0, "lng": 0}, ...]}}
"""

from __future__ import annotations

import json
import math
from typing import Any, Iterable, Mapping, Union

from ..core.constants import MIN_POLYGON_VERTICES
from ..core.enums import GeofenceType
from ..core.exceptions import InvalidGeofence
from .model import CircleGeofence, GeofenceSpec, Point, PolygonGeofence


def circle(center: Point, radius_meters: float) -> CircleGeofence:
    if not radius_meters > 0:
        raise InvalidGeofence("Circle geofence radius must be positive")
    return CircleGeofence(center=center, radius_meters=float(radius_meters))


def polygon(vertices: Iterable[Point]) -> PolygonGeofence:
    vertices = tuple(vertices)
    if len(vertices) < MIN_POLYGON_VERTICES:
        raise InvalidGeofence(f"Polygon geofence must have at least {MIN_POLYGON_VERTICES} points")
    return PolygonGeofence(vertices=vertices)


def _as_number(value: Any, field_name: str) -> float:
    # bool is an int subclass; reject it explicitly.
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidGeofence(f"{field_name} must be a number")
    if not math.isfinite(value):
        raise InvalidGeofence(f"{field_name} must be finite")
    return float(value)


def _as_point(raw: Any, field_name: str) -> Point:
    if not isinstance(raw, Mapping):
        raise InvalidGeofence(f"{field_name} must be an object with lat/lng")
    if "lat" not in raw or "lng" not in raw:
        raise InvalidGeofence(f"{field_name} is missing lat/lng")
    return Point(lat=_as_number(raw["lat"], f"{field_name}.lat"), lng=_as_number(raw["lng"], f"{field_name}.lng"))


def _section(raw: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    section = raw.get(name)
    if section is None:
        raise InvalidGeofence(f"Missing {name} data for {name} geofence")
    if not isinstance(section, Mapping):
        raise InvalidGeofence(f"{name} data must be an object")
    return section


def parse_geofence(raw: Union[str, bytes, Mapping[str, Any]]) -> GeofenceSpec:
    """Parse persisted geofence JSON (or an already decoded mapping).

    Raises InvalidGeofence for anything that is not a well-formed circle or
    polygon. A returned spec is always valid.
    """

    if isinstance(raw, (str, bytes)):
        if not raw:
            raise InvalidGeofence("Empty geofence data")
        try:
            raw = json.loads(raw)
        except ValueError as e:
            raise InvalidGeofence(f"Geofence data is not valid JSON: {e}") from e

    if not isinstance(raw, Mapping):
        raise InvalidGeofence("Geofence data must be a JSON object")

    try:
        kind = GeofenceType(raw.get("type"))
    except ValueError:
        raise InvalidGeofence(f"Invalid geofence type: {raw.get('type')!r}") from None

    if kind is GeofenceType.CIRCLE:
        data = _section(raw, "circle")
        center = _as_point(data.get("center"), "circle.center")
        return circle(center, _as_number(data.get("radius"), "circle.radius"))

    data = _section(raw, "polygon")
    points = data.get("points")
    if not isinstance(points, list):
        raise InvalidGeofence("polygon.points must be a list")
    return polygon(_as_point(p, f"polygon.points[{i}]") for i, p in enumerate(points))


def geofence_to_dict(spec: GeofenceSpec) -> dict:
    if isinstance(spec, CircleGeofence):
        return {
            "type": spec.type.value,
            "circle": {
                "center": {"lat": spec.center.lat, "lng": spec.center.lng},
                "radius": spec.radius_meters,
            },
        }
    if isinstance(spec, PolygonGeofence):
        return {
            "type": spec.type.value,
            "polygon": {"points": [{"lat": p.lat, "lng": p.lng} for p in spec.vertices]},
        }
    raise TypeError(f"Unsupported geofence type: {type(spec)!r}")


def dump_geofence(spec: GeofenceSpec) -> str:
    return json.dumps(geofence_to_dict(spec))
