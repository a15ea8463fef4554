from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Sequence

from ..core.exceptions import InvalidGeofence
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, storage_errors
from ..geofence.codec import parse_geofence
from .model import Event
from .repository import EventRepository

logger = logging.getLogger(__name__)

_COLUMNS = "event_id, name, description, location, geofence_data, start_time, end_time"


class MySQLEventRepository(EventRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @staticmethod
    def _to_event(r: Dict[str, Any], *, strict: bool) -> Event:
        geofence = None
        raw = r.get("geofence_data")
        if raw:
            try:
                geofence = parse_geofence(raw)
            except InvalidGeofence:
                if strict:
                    raise
                logger.warning("Skipping unparseable geofence on event %s", r["event_id"])

        return Event(
            event_id=int(r["event_id"]),
            name=r["name"],
            description=r.get("description"),
            location=r.get("location"),
            geofence=geofence,
            start_time=r["start_time"],
            end_time=r["end_time"],
        )

    def get_event(self, event_id: int) -> Optional[Event]:
        with storage_errors("get_event"), db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM events
                WHERE event_id=%s
                """,
                (int(event_id),),
            )
            r = fetchone(cur)
        if not r:
            return None
        # A check-in must never lose its location constraint to bad data.
        return self._to_event(r, strict=True)

    def list_upcoming(self, cap: int) -> Sequence[Event]:
        with storage_errors("list_upcoming"), db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM events
                WHERE end_time >= NOW()
                ORDER BY start_time ASC, event_id ASC
                LIMIT %s
                """,
                (int(cap),),
            )
            rows = fetchall(cur)
        return [self._to_event(r, strict=False) for r in rows]
