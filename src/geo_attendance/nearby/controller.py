from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import format_datetime
from ..common.responses import error_response, login_required
from ..common.validators import float_or_default, int_or_default, require_float
from ..core.constants import DEFAULT_NEARBY_LIMIT, DEFAULT_NEARBY_RADIUS_KM, MAX_NEARBY_LIMIT
from ..core.exceptions import DomainError
from ..container import Container
from ..events.model import Event
from ..geofence.codec import geofence_to_dict
from ..geofence.model import Point


def event_to_dict(e: Event) -> dict:
    return {
        "event_id": e.event_id,
        "name": e.name,
        "description": e.description,
        "location": e.location,
        "start_time": format_datetime(e.start_time),
        "end_time": format_datetime(e.end_time),
        "geofence": geofence_to_dict(e.geofence) if e.geofence else None,
    }


def register(app: Flask, container: Container) -> None:
    service = container.proximity_service

    @app.route("/events/nearby", methods=["GET"], endpoint="events_nearby")
    @login_required
    def nearby():
        args = request.args
        try:
            point = Point(
                lat=require_float(args.get("latitude"), "latitude"),
                lng=require_float(args.get("longitude"), "longitude"),
            )
            # Out-of-range paging values are clamped here, not rejected.
            radius_km = float_or_default(args.get("radiusKm"), DEFAULT_NEARBY_RADIUS_KM)
            limit = int_or_default(args.get("limit"), DEFAULT_NEARBY_LIMIT, maximum=MAX_NEARBY_LIMIT)
            offset = int_or_default(args.get("offset"), 0)

            events = service.find_nearby(point, radius_km * 1000, limit=limit, offset=offset)
        except DomainError as e:
            return error_response(e)
        return jsonify({"success": True, "items": [event_to_dict(e) for e in events]})
