"""Example: use the service layer directly (no Flask).

Controllers are a thin layer; the check-in rules live in the services.
"""

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
for p in (REPO_ROOT, REPO_ROOT / "src"):
    if str(p) not in sys.path:
        sys.path.insert(0, str(p))

from config import get_settings_module

from geo_attendance.container import build_container
from geo_attendance.core.exceptions import AttendanceError
from geo_attendance.geofence.model import Point


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG)

    here = Point(lat=10.7769, lng=106.7009)
    for event in container.proximity_service.find_nearby(here, 5000, limit=5):
        print(event.event_id, event.name, event.start_time)

    try:
        record = container.attendance_service.check_in(1, 1, here)
        print("checked in:", record)
    except AttendanceError as e:
        print("rejected:", e)


if __name__ == "__main__":
    main()
