from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..geofence.model import Point
from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    """Persistence collaborator for attendance records.

    Implementations must refuse a second open record for the same (user, event)
    by raising AlreadyCheckedIn from insert_attendance.
    """

    def insert_attendance(
        self,
        *,
        user_id: int,
        event_id: int,
        check_in_time: datetime,
        location: Point,
    ) -> AttendanceRecord:
        raise NotImplementedError

    def update_attendance_checkout(
        self,
        *,
        attendance_id: int,
        check_out_time: datetime,
        location: Point,
    ) -> bool:
        """Close an open record. Returns False if it was already closed."""

        raise NotImplementedError

    def find_open_attendance(self, user_id: int, event_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def list_for_event(self, event_id: int) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def get_recent_for_user(self, user_id: int, limit: int) -> Sequence[AttendanceRecord]:
        raise NotImplementedError
