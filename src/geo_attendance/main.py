from __future__ import annotations

import importlib
import logging
from pathlib import Path

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .container import Container, build_container
from .core.constants import DEFAULT_NEARBY_SCAN_CAP
from .database.bootstrap import apply_schema, list_tables
from .geofence.controller import register as register_geofence
from .nearby.controller import register as register_nearby

logger = logging.getLogger("geo_attendance")

SCHEMA_PATH = Path(__file__).resolve().parents[2] / "database" / "schema.sql"


def create_app(*, container: Container | None = None) -> Flask:
    """Build the Flask app. Pass `container` to wire pre-built services (tests)."""

    load_dotenv(override=False)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        handlers=[logging.StreamHandler()],
    )

    app = Flask(__name__)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=SCHEMA_PATH)
            logger.info("schema ready (tables=%d)", len(list_tables(db_config)))

        container = build_container(
            db_config=db_config,
            nearby_scan_cap=int(getattr(settings, "NEARBY_SCAN_CAP", DEFAULT_NEARBY_SCAN_CAP)),
        )

    register_nearby(app, container)
    register_attendance(app, container)
    register_geofence(app, container)

    return app
