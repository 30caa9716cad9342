"""Timekeeper package.

Employee attendance tracking: clock events from QR codes or face scans are
paired into work sessions, summarized per day and week, and rolled up into
reports, leave management and hourly pay. Organized by feature modules
(users, attendance, scanning, leaves, reports, payroll) with a thin Flask
JSON controller layer over service and repository layers.
"""
from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .common.datetime_utils import parse_time_of_day
from .common.web import register_error_handlers
from .container import Container, build_container
from .core.enums import Workplace
from .core.log_config import configure_logging
from .database.bootstrap import apply_schema, apply_seed_sql, ensure_demo_users, list_tables
from .database.connection import DBConfig

from .attendance.controller import register as register_attendance
from .leaves.controller import register as register_leaves
from .payroll.controller import register as register_payroll
from .reports.controller import register as register_reports
from .users.controller import register as register_users

logger = logging.getLogger(__name__)

REPO_ROOT = Path(__file__).resolve().parents[3]


def create_app(container: Optional[Container] = None) -> Flask:
    """Application factory.

    Pass a ready ``container`` to skip database setup (tests wire one from
    in-memory repositories).
    """

    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"), getattr(settings, "LOG_FILE", None))

    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["MAX_CONTENT_LENGTH"] = int(getattr(settings, "MAX_PROFILE_BYTES")) * 2

    if container is None:
        container = _build_from_settings(settings, settings_module)

    register_error_handlers(app)
    register_users(app, container)
    register_attendance(app, container)
    register_leaves(app, container)
    register_reports(app, container)
    register_payroll(app, container)

    app.extensions["timekeeper"] = container
    return app


def _build_from_settings(settings, settings_module: str) -> Container:
    db_config = getattr(settings, "DB_CONFIG")
    logger.info("Starting with settings=%s db=%s", settings_module, DBConfig.from_dict(db_config).describe())

    if bool(getattr(settings, "AUTO_INIT_DB", False)):
        apply_schema(db_config, schema_path=REPO_ROOT / "database" / "schema.sql")
        logger.info("Schema ready (tables=%d)", len(list_tables(db_config)))
    if bool(getattr(settings, "AUTO_SEED_DB", False)):
        apply_seed_sql(db_config, seed_path=REPO_ROOT / "database" / "seed.sql")
        ensure_demo_users(db_config)

    try:
        late_threshold = parse_time_of_day(getattr(settings, "LATE_THRESHOLD", "10:00"))
    except ValueError:
        logger.warning("Invalid LATE_THRESHOLD %r, using 10:00", getattr(settings, "LATE_THRESHOLD", None))
        late_threshold = parse_time_of_day("10:00")

    return build_container(
        db_config=db_config,
        late_threshold=late_threshold,
        default_workplace=Workplace(getattr(settings, "DEFAULT_WORKPLACE", "office")),
        face_service_url=getattr(settings, "FACE_SERVICE_URL", ""),
        face_service_timeout=float(getattr(settings, "FACE_SERVICE_TIMEOUT", 15)),
        profile_upload_dir=getattr(settings, "PROFILE_UPLOAD_DIR", "static/user-profile"),
        max_profile_bytes=int(getattr(settings, "MAX_PROFILE_BYTES")),
        base_dir=REPO_ROOT,
    )
