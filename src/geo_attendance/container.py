from __future__ import annotations

from dataclasses import dataclass

from .attendance.locks import KeyedLocks
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.service import AttendanceService
from .core.constants import DEFAULT_NEARBY_SCAN_CAP
from .database.connection import DBConfig, DatabaseConnection
from .events.mysql_event_repository import MySQLEventRepository
from .nearby.service import ProximityService


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection

    events_repo: MySQLEventRepository
    attendance_repo: MySQLAttendanceRepository

    attendance_service: AttendanceService
    proximity_service: ProximityService


def build_container(*, db_config: dict, nearby_scan_cap: int = DEFAULT_NEARBY_SCAN_CAP) -> Container:
    conn = DatabaseConnection(DBConfig.from_dict(db_config))

    events_repo = MySQLEventRepository(conn)
    attendance_repo = MySQLAttendanceRepository(conn)

    attendance_service = AttendanceService(attendance_repo, events_repo, locks=KeyedLocks())
    proximity_service = ProximityService(events_repo, scan_cap=nearby_scan_cap)

    return Container(
        conn=conn,
        events_repo=events_repo,
        attendance_repo=attendance_repo,
        attendance_service=attendance_service,
        proximity_service=proximity_service,
    )
