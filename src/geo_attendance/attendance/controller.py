from __future__ import annotations

from flask import Flask, jsonify, request, session

from ..common.datetime_utils import format_datetime
from ..common.responses import error_response, login_required
from ..common.validators import require_float
from ..core.exceptions import DomainError
from ..container import Container
from ..geofence.model import Point
from .model import AttendanceRecord


def record_to_dict(r: AttendanceRecord) -> dict:
    out = r.check_out_location
    return {
        "attendance_id": r.attendance_id,
        "user_id": r.user_id,
        "event_id": r.event_id,
        "check_in_time": format_datetime(r.check_in_time),
        "check_out_time": format_datetime(r.check_out_time),
        "check_in_location": {"lat": r.check_in_location.lat, "lng": r.check_in_location.lng},
        "check_out_location": {"lat": out.lat, "lng": out.lng} if out else None,
    }


def _point_from_body() -> Point:
    data = request.get_json(silent=True) or {}
    return Point(
        lat=require_float(data.get("latitude"), "latitude"),
        lng=require_float(data.get("longitude"), "longitude"),
    )


def register(app: Flask, container: Container) -> None:
    service = container.attendance_service

    @app.route("/events/<int:event_id>/checkin", methods=["POST"], endpoint="event_checkin")
    @login_required
    def checkin(event_id: int):
        try:
            record = service.check_in(int(session["user_id"]), event_id, _point_from_body())
        except DomainError as e:
            return error_response(e)
        return jsonify({"success": True, "attendance": record_to_dict(record)}), 201

    @app.route("/events/<int:event_id>/checkout", methods=["POST"], endpoint="event_checkout")
    @login_required
    def checkout(event_id: int):
        try:
            record = service.check_out(int(session["user_id"]), event_id, _point_from_body())
        except DomainError as e:
            return error_response(e)
        return jsonify({"success": True, "attendance": record_to_dict(record)}), 200

    @app.route("/events/<int:event_id>/presence", methods=["GET"], endpoint="event_presence")
    @login_required
    def presence(event_id: int):
        try:
            record = service.get_active_session(int(session["user_id"]), event_id)
        except DomainError as e:
            return error_response(e)
        return jsonify(
            {
                "success": True,
                "present": record is not None,
                "attendance": record_to_dict(record) if record else None,
            }
        )

    @app.route("/events/<int:event_id>/attendees", methods=["GET"], endpoint="event_attendees")
    @login_required
    def attendees(event_id: int):
        try:
            user_ids = service.list_attendees(event_id)
        except DomainError as e:
            return error_response(e)
        return jsonify({"success": True, "event_id": event_id, "user_ids": user_ids})

    @app.route("/me/attendance", methods=["GET"], endpoint="my_attendance")
    @login_required
    def my_attendance():
        try:
            rows = service.get_history(int(session["user_id"]))
        except DomainError as e:
            return error_response(e)
        return jsonify({"success": True, "items": [record_to_dict(r) for r in rows]})
