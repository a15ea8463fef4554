from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime
from typing import List, Optional, Sequence

from ..common.datetime_utils import now_local
from ..core.constants import DEFAULT_HISTORY_LIMIT
from ..core.enums import PresenceState
from ..core.exceptions import (
    AlreadyCheckedIn,
    AttendanceError,
    EventEnded,
    EventNotFound,
    EventNotStarted,
    NoActiveSession,
    OutsideGeofence,
)
from ..events.repository import EventRepository
from ..geofence.engine import contains
from ..geofence.model import Point
from .locks import KeyedLocks
from .model import AttendanceRecord
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class AttendanceService:
    """Gates check-in/check-out on event time bounds and geofence, and persists the transition.

    Per (user, event) pair the state is ABSENT (no open record) or PRESENT
    (one open record). Checking out closes the record; checking in again
    afterwards opens a new one.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        events: EventRepository,
        *,
        locks: KeyedLocks | None = None,
    ):
        self._attendance = attendance
        self._events = events
        self._locks = locks or KeyedLocks()

    def _reject(self, action: str, user_id: int, event_id: int, error: AttendanceError) -> AttendanceError:
        logger.info("%s rejected user=%s event=%s: %s", action, user_id, event_id, type(error).__name__)
        return error

    def check_in(self, user_id: int, event_id: int, point: Point, *, now: datetime | None = None) -> AttendanceRecord:
        now = now or now_local()

        event = self._events.get_event(event_id)
        if not event:
            raise self._reject("check-in", user_id, event_id, EventNotFound())

        if now < event.start_time:
            raise self._reject("check-in", user_id, event_id, EventNotStarted())
        if now > event.end_time:
            raise self._reject("check-in", user_id, event_id, EventEnded())

        if event.geofence is not None and not contains(point, event.geofence):
            raise self._reject("check-in", user_id, event_id, OutsideGeofence())

        with self._locks.hold((user_id, event_id)):
            if self._attendance.find_open_attendance(user_id, event_id):
                raise self._reject("check-in", user_id, event_id, AlreadyCheckedIn())
            record = self._attendance.insert_attendance(
                user_id=user_id,
                event_id=event_id,
                check_in_time=now,
                location=point,
            )

        logger.info("check-in user=%s event=%s attendance=%s", user_id, event_id, record.attendance_id)
        return record

    def check_out(self, user_id: int, event_id: int, point: Point, *, now: datetime | None = None) -> AttendanceRecord:
        """Close the open session. Location and time window are not re-checked."""

        now = now or now_local()

        with self._locks.hold((user_id, event_id)):
            record = self._attendance.find_open_attendance(user_id, event_id)
            if not record:
                raise self._reject("check-out", user_id, event_id, NoActiveSession())

            closed = self._attendance.update_attendance_checkout(
                attendance_id=record.attendance_id,
                check_out_time=now,
                location=point,
            )
            if not closed:
                # Closed by another process between the lookup and the update.
                raise self._reject("check-out", user_id, event_id, NoActiveSession())

        logger.info("check-out user=%s event=%s attendance=%s", user_id, event_id, record.attendance_id)
        return replace(
            record,
            check_out_time=now,
            check_out_location=record.check_out_location or point,
        )

    def get_active_session(self, user_id: int, event_id: int) -> Optional[AttendanceRecord]:
        return self._attendance.find_open_attendance(user_id, event_id)

    def is_present(self, user_id: int, event_id: int) -> bool:
        return self.get_active_session(user_id, event_id) is not None

    def presence_state(self, user_id: int, event_id: int) -> PresenceState:
        return PresenceState.PRESENT if self.is_present(user_id, event_id) else PresenceState.ABSENT

    def list_event_attendance(self, event_id: int) -> Sequence[AttendanceRecord]:
        return self._attendance.list_for_event(event_id)

    def list_attendees(self, event_id: int) -> List[int]:
        """Distinct user ids that checked in to the event, most recent first."""

        seen: dict[int, None] = {}
        for r in self._attendance.list_for_event(event_id):
            seen.setdefault(r.user_id, None)
        return list(seen)

    def get_history(self, user_id: int, *, limit: int = DEFAULT_HISTORY_LIMIT) -> Sequence[AttendanceRecord]:
        return self._attendance.get_recent_for_user(user_id, limit)
