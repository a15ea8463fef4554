from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional, Sequence

import mysql.connector

from ..core.exceptions import AlreadyCheckedIn, PersistenceError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key, storage_errors
from ..geofence.model import Point
from .model import AttendanceRecord
from .repository import AttendanceRepository

_COLUMNS = """
    attendance_id, user_id, event_id, check_in_time, check_out_time,
    check_in_lat, check_in_lng, check_out_lat, check_out_lng
"""


def _to_record(r: Dict[str, Any]) -> AttendanceRecord:
    check_out_location = None
    if r.get("check_out_lat") is not None and r.get("check_out_lng") is not None:
        check_out_location = Point(lat=float(r["check_out_lat"]), lng=float(r["check_out_lng"]))

    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        user_id=int(r["user_id"]),
        event_id=int(r["event_id"]),
        check_in_time=r["check_in_time"],
        check_out_time=r.get("check_out_time"),
        check_in_location=Point(lat=float(r["check_in_lat"]), lng=float(r["check_in_lng"])),
        check_out_location=check_out_location,
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def insert_attendance(
        self,
        *,
        user_id: int,
        event_id: int,
        check_in_time: datetime,
        location: Point,
    ) -> AttendanceRecord:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO attendances(user_id, event_id, check_in_time, check_in_lat, check_in_lng)
                    VALUES(%s,%s,%s,%s,%s)
                    """,
                    (int(user_id), int(event_id), check_in_time, location.lat, location.lng),
                )
                attendance_id = int(cur.lastrowid)
        except mysql.connector.Error as e:
            # uq_attendance_open rejects a second open session for the pair.
            if is_duplicate_key(e):
                raise AlreadyCheckedIn() from e
            raise PersistenceError("insert_attendance", e) from e

        return AttendanceRecord(
            attendance_id=attendance_id,
            user_id=int(user_id),
            event_id=int(event_id),
            check_in_time=check_in_time,
            check_in_location=location,
        )

    def update_attendance_checkout(
        self,
        *,
        attendance_id: int,
        check_out_time: datetime,
        location: Point,
    ) -> bool:
        with storage_errors("update_attendance_checkout"), db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendances
                SET check_out_time=%s,
                    check_out_lat=COALESCE(check_out_lat, %s),
                    check_out_lng=COALESCE(check_out_lng, %s)
                WHERE attendance_id=%s AND check_out_time IS NULL
                """,
                (check_out_time, location.lat, location.lng, int(attendance_id)),
            )
            return cur.rowcount > 0

    def find_open_attendance(self, user_id: int, event_id: int) -> Optional[AttendanceRecord]:
        with storage_errors("find_open_attendance"), db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendances
                WHERE user_id=%s AND event_id=%s AND check_out_time IS NULL
                ORDER BY check_in_time DESC
                LIMIT 1
                """,
                (int(user_id), int(event_id)),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def list_for_event(self, event_id: int) -> Sequence[AttendanceRecord]:
        with storage_errors("list_for_event"), db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendances
                WHERE event_id=%s
                ORDER BY check_in_time DESC, attendance_id DESC
                """,
                (int(event_id),),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def get_recent_for_user(self, user_id: int, limit: int) -> Sequence[AttendanceRecord]:
        with storage_errors("get_recent_for_user"), db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendances
                WHERE user_id=%s
                ORDER BY check_in_time DESC, attendance_id DESC
                LIMIT %s
                """,
                (int(user_id), int(limit)),
            )
            return [_to_record(r) for r in fetchall(cur)]
