from __future__ import annotations

from datetime import datetime

import mysql.connector
import pytest
from mysql.connector import errorcode

from geo_attendance.core.exceptions import InvalidGeofence, PersistenceError
from geo_attendance.events.mysql_event_repository import MySQLEventRepository
from geo_attendance.geofence.model import CircleGeofence, Point
from tests.fakes import FakeConnectionFactory

T0 = datetime(2026, 2, 1, 9, 0, 0)
T1 = datetime(2026, 2, 1, 18, 0, 0)


def event_row(event_id, geofence_data):
    return {
        "event_id": event_id,
        "name": f"Event {event_id}",
        "description": None,
        "location": None,
        "geofence_data": geofence_data,
        "start_time": T0,
        "end_time": T1,
    }


CIRCLE_JSON = '{"type": "circle", "circle": {"center": {"lat": 1, "lng": 2}, "radius": 50}}'


def test_get_event_parses_geofence():
    repo = MySQLEventRepository(FakeConnectionFactory(rows=[event_row(1, CIRCLE_JSON)]))

    event = repo.get_event(1)

    assert event.geofence == CircleGeofence(center=Point(1, 2), radius_meters=50.0)


def test_get_event_missing_returns_none():
    assert MySQLEventRepository(FakeConnectionFactory()).get_event(1) is None


def test_get_event_with_unparseable_geofence_raises():
    repo = MySQLEventRepository(FakeConnectionFactory(rows=[event_row(1, '{"type": "hexagon"}')]))

    with pytest.raises(InvalidGeofence):
        repo.get_event(1)


def test_list_upcoming_drops_unparseable_geofence_only():
    rows = [event_row(1, '{"type": "hexagon"}'), event_row(2, CIRCLE_JSON), event_row(3, None)]
    conn = FakeConnectionFactory(rows=rows)

    events = MySQLEventRepository(conn).list_upcoming(100)

    assert [e.event_id for e in events] == [1, 2, 3]
    assert events[0].geofence is None
    assert isinstance(events[1].geofence, CircleGeofence)
    assert events[2].geofence is None
    assert conn.statements[0][1] == (100,)


def test_connector_errors_are_tagged_with_operation():
    down = mysql.connector.OperationalError(msg="Can't connect", errno=errorcode.CR_CONN_HOST_ERROR)
    repo = MySQLEventRepository(FakeConnectionFactory(error=down))

    with pytest.raises(PersistenceError) as exc:
        repo.get_event(1)
    assert exc.value.operation == "get_event"

    with pytest.raises(PersistenceError) as exc:
        repo.list_upcoming(10)
    assert exc.value.operation == "list_upcoming"
