from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask
from werkzeug.exceptions import HTTPException

from config import get_settings_module

from .common.http import fail
from .database.bootstrap import apply_schema, apply_seed_sql, list_tables

from .container import Container, build_container
from .attendance.controller import register as register_attendance
from .certificates.controller import register as register_certificates
from .grades.controller import register as register_grades
from .promotion.controller import register as register_promotion

logger = logging.getLogger(__name__)

DATABASE_DIR = Path(__file__).resolve().parents[3] / "database"


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["HONOR_TIER_POLICY"] = getattr(settings, "HONOR_TIER_POLICY", "strict")
    app.config["LATE_CONVERSION_THRESHOLD"] = int(getattr(settings, "LATE_CONVERSION_THRESHOLD", 4))

    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))
    logger.debug(
        "settings=%s db=%s@%s:%s/%s",
        settings_module,
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
    )

    if container is None:
        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=DATABASE_DIR / "schema.sql")
            logger.info("Schema ready (tables=%s)", len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            apply_seed_sql(db_config, seed_path=DATABASE_DIR / "seed.sql")
            logger.info("Demo seed ready")

        container = build_container(
            db_config=db_config,
            honor_policy=app.config["HONOR_TIER_POLICY"],
            late_threshold=app.config["LATE_CONVERSION_THRESHOLD"],
        )

    app.extensions["school_records"] = container

    @app.errorhandler(HTTPException)
    def json_http_error(e: HTTPException):
        return fail(e.description or e.name, e.code or 500)

    register_attendance(app, container)
    register_grades(app, container)
    register_promotion(app, container)
    register_certificates(app, container)

    return app
