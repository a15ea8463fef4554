from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..geofence.model import Point


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one user's presence episode at one event."""

    attendance_id: int
    user_id: int
    event_id: int
    check_in_time: datetime
    check_in_location: Point
    check_out_time: Optional[datetime] = None
    check_out_location: Optional[Point] = None

    @property
    def is_open(self) -> bool:
        return self.check_out_time is None
