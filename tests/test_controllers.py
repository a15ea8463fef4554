from __future__ import annotations

from datetime import datetime, timedelta
from types import SimpleNamespace

import pytest

from geo_attendance.attendance.service import AttendanceService
from geo_attendance.core.exceptions import PersistenceError
from geo_attendance.events.model import Event
from geo_attendance.geofence.codec import circle
from geo_attendance.geofence.model import Point
from geo_attendance.main import create_app
from geo_attendance.nearby.service import ProximityService
from tests.fakes import InMemoryAttendance, InMemoryEvents

CENTER = Point(10.7769, 106.7009)


@pytest.fixture
def events_repo():
    now = datetime.now()
    return InMemoryEvents(
        [
            Event(
                event_id=1,
                name="Launch",
                start_time=now - timedelta(hours=1),
                end_time=now + timedelta(hours=1),
                geofence=circle(CENTER, 50),
            ),
            Event(
                event_id=2,
                name="Tomorrow",
                start_time=now + timedelta(days=1),
                end_time=now + timedelta(days=1, hours=2),
                geofence=circle(CENTER, 50),
            ),
        ]
    )


@pytest.fixture
def client(monkeypatch, events_repo):
    monkeypatch.setenv("APP_ENV", "testing")
    container = SimpleNamespace(
        attendance_service=AttendanceService(InMemoryAttendance(), events_repo),
        proximity_service=ProximityService(events_repo),
    )
    app = create_app(container=container)
    client = app.test_client()
    with client.session_transaction() as sess:
        sess["user_id"] = 7
    return client


def test_requires_login(monkeypatch, events_repo):
    monkeypatch.setenv("APP_ENV", "testing")
    container = SimpleNamespace(
        attendance_service=AttendanceService(InMemoryAttendance(), events_repo),
        proximity_service=ProximityService(events_repo),
    )
    anonymous = create_app(container=container).test_client()

    resp = anonymous.post("/events/1/checkin", json={"latitude": CENTER.lat, "longitude": CENTER.lng})

    assert resp.status_code == 401


def test_checkin_checkout_roundtrip(client):
    resp = client.post("/events/1/checkin", json={"latitude": CENTER.lat, "longitude": CENTER.lng})
    assert resp.status_code == 201
    assert resp.get_json()["attendance"]["check_out_time"] is None

    presence = client.get("/events/1/presence").get_json()
    assert presence["present"] is True

    resp = client.post("/events/1/checkout", json={"latitude": 0, "longitude": 0})
    assert resp.status_code == 200
    assert resp.get_json()["attendance"]["check_out_location"] == {"lat": 0.0, "lng": 0.0}

    assert client.get("/events/1/presence").get_json()["present"] is False
    assert client.get("/events/1/attendees").get_json()["user_ids"] == [7]


@pytest.mark.parametrize(
    "url, body, status, error",
    [
        ("/events/99/checkin", {"latitude": 10.7769, "longitude": 106.7009}, 404, "EventNotFound"),
        ("/events/2/checkin", {"latitude": 10.7769, "longitude": 106.7009}, 403, "EventNotStarted"),
        ("/events/1/checkin", {"latitude": 10.8, "longitude": 106.7009}, 403, "OutsideGeofence"),
        ("/events/1/checkout", {"latitude": 10.7769, "longitude": 106.7009}, 409, "NoActiveSession"),
        ("/events/1/checkin", {"latitude": "here"}, 400, "ValidationError"),
        ("/events/1/checkin", {"latitude": "nan", "longitude": 106.7009}, 400, "ValidationError"),
        ("/events/1/checkin", {"latitude": 10.7769, "longitude": "inf"}, 400, "ValidationError"),
    ],
)
def test_rejections_have_distinct_errors(client, url, body, status, error):
    resp = client.post(url, json=body)

    assert resp.status_code == status
    assert resp.get_json()["error"] == error
    assert resp.get_json()["message"]


def test_duplicate_checkin_conflicts(client):
    body = {"latitude": CENTER.lat, "longitude": CENTER.lng}
    client.post("/events/1/checkin", json=body)

    resp = client.post("/events/1/checkin", json=body)

    assert resp.status_code == 409
    assert resp.get_json()["error"] == "AlreadyCheckedIn"


def test_storage_failure_is_not_reported_as_success(client, events_repo, monkeypatch):
    def broken(event_id):
        raise PersistenceError("get_event", RuntimeError("connection refused"))

    monkeypatch.setattr(events_repo, "get_event", broken)

    resp = client.post("/events/1/checkin", json={"latitude": CENTER.lat, "longitude": CENTER.lng})

    assert resp.status_code == 500
    assert resp.get_json()["success"] is False


def test_nearby_uses_km_radius_and_clamps_paging(client):
    resp = client.get(f"/events/nearby?latitude={CENTER.lat}&longitude={CENTER.lng}&radiusKm=1&limit=-3&offset=-1")

    assert resp.status_code == 200
    assert [e["event_id"] for e in resp.get_json()["items"]] == [1, 2]


def test_nearby_requires_coordinates(client):
    resp = client.get("/events/nearby?latitude=abc")

    assert resp.status_code == 400


def test_geofence_validate_echoes_canonical_form(client):
    resp = client.post("/geofences/validate", json={"type": "circle", "circle": {"center": {"lat": 1, "lng": 2}, "radius": 10}})

    assert resp.status_code == 200
    assert resp.get_json()["geofence"]["circle"]["radius"] == 10.0

    bad = client.post("/geofences/validate", json={"type": "circle", "circle": {"center": {"lat": 1, "lng": 2}, "radius": 0}})
    assert bad.status_code == 400
    assert bad.get_json()["error"] == "InvalidGeofence"
