from __future__ import annotations

import importlib
import logging
from pathlib import Path

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .container import Container, build_container
from .core.constants import DEFAULT_APPROVED_VISIBILITY_HOURS
from .cycles.model import CycleConfig
from .database.bootstrap import apply_schema, list_tables
from .payroll.controller import register as register_payroll
from .records.controller import register as register_records

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).resolve().parents[3] / "database" / "schema.sql"


def register_routes(app: Flask, container: Container) -> None:
    register_records(app, container)
    register_payroll(app, container)


def create_app() -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))

    logging.basicConfig(
        level=logging.DEBUG if app.config["DEBUG"] else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    cycle_config = CycleConfig.from_settings(settings)
    logger.info(
        "settings=%s db=%s@%s:%s/%s cycle_ref=%s (v%s)",
        settings_module,
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
        cycle_config.reference_date.isoformat(),
        cycle_config.version,
    )

    if bool(getattr(settings, "AUTO_INIT_DB", False)):
        apply_schema(db_config, schema_path=SCHEMA_PATH)
        logger.info("schema ready (tables=%d)", len(list_tables(db_config)))

    container = build_container(
        db_config=db_config,
        cycle_config=cycle_config,
        visibility_hours=float(getattr(settings, "APPROVED_VISIBILITY_HOURS", DEFAULT_APPROVED_VISIBILITY_HOURS)),
        hourly_rate=float(getattr(settings, "DEFAULT_HOURLY_RATE", 0.0)),
    )
    register_routes(app, container)

    return app
