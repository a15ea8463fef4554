from __future__ import annotations

from enum import Enum


class GeofenceType(str, Enum):
    """Shape discriminator stored in the `type` field of geofence JSON."""

    CIRCLE = "circle"
    POLYGON = "polygon"


class PresenceState(str, Enum):
    """State of a (user, event) pair."""

    ABSENT = "ABSENT"
    PRESENT = "PRESENT"
