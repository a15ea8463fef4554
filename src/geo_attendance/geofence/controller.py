from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.responses import error_response
from ..core.exceptions import InvalidGeofence
from ..container import Container
from .codec import geofence_to_dict, parse_geofence


def register(app: Flask, container: Container) -> None:
    @app.route("/geofences/validate", methods=["POST"], endpoint="geofence_validate")
    def validate():
        """Parse a geofence definition and echo its canonical encoding."""
        try:
            spec = parse_geofence(request.get_json(silent=True))
        except InvalidGeofence as e:
            return error_response(e)
        return jsonify({"success": True, "geofence": geofence_to_dict(spec)})
