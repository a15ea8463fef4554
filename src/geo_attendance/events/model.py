from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..geofence.model import GeofenceSpec


@dataclass(frozen=True)
class Event:
    """Domain entity: an event users can attend. Read-only in this package."""

    event_id: int
    name: str
    start_time: datetime
    end_time: datetime
    geofence: Optional[GeofenceSpec] = None
    description: Optional[str] = None
    location: Optional[str] = None
