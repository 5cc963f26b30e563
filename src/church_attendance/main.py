from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .checkin.controller import register as register_checkin
from .container import Container, build_container
from .core.exceptions import ConfigurationError
from .database.bootstrap import apply_schema, list_tables
from .database.connection import DBConfig
from .stats.controller import register as register_stats

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).resolve().parents[2] / "database" / "schema.sql"


def create_app(*, settings_module: Optional[str] = None, container: Optional[Container] = None) -> Flask:
    """Application factory.

    `container` lets callers (tests, scripts) supply pre-wired services;
    otherwise MySQL-backed services are built from the settings module.
    """
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["TIMEZONE"] = getattr(settings, "TIMEZONE", "UTC")

    logging.basicConfig(
        level=logging.DEBUG if app.config["DEBUG"] else logging.INFO,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    if container is None:
        db_config = getattr(settings, "DB_CONFIG", None)
        if not db_config:
            raise ConfigurationError(f"{settings_module} does not define DB_CONFIG")

        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"), db_config.get("host"), db_config.get("port", 3306), db_config.get("database"),
        )

        fetch_timeout = int(getattr(settings, "FETCH_TIMEOUT_SECONDS", 10))
        container = build_container(
            db_config=db_config,
            timezone=app.config["TIMEZONE"],
            site_url=getattr(settings, "SITE_URL", "http://localhost:5000"),
            qr_session_hours=int(getattr(settings, "QR_SESSION_HOURS", 4)),
            fetch_timeout=fetch_timeout,
            top_limit=int(getattr(settings, "TOP_ATTENDEES_LIMIT", 10)),
        )

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            db = DBConfig.from_mapping(db_config, timeout=fetch_timeout)
            apply_schema(db, schema_path=SCHEMA_PATH)
            logger.info("schema ready (tables=%d)", len(list_tables(db)))

    app.extensions["container"] = container

    register_stats(app, container)
    register_attendance(app, container)
    register_checkin(app, container)

    return app
