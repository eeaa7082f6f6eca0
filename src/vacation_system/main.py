from __future__ import annotations

import importlib
import logging
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from .calendars.controller import register as register_calendar
from .container import Container, build_container
from .database.bootstrap import apply_schema, ensure_demo_users, list_tables
from .logging_config import setup_logging
from .settings import get_settings_module
from .vacations.controller import register as register_vacations

logger = logging.getLogger(__name__)


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    setup_logging(level=getattr(settings, "LOG_LEVEL", "INFO"), fmt=getattr(settings, "LOG_FORMAT", "text"))

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
            apply_schema(db_config)
            logger.info("Schema ready (tables=%s)", len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            ensure_demo_users(db_config)
            logger.info("Demo users ready")

        container = build_container(
            db_config=db_config,
            lock_wait_timeout=int(getattr(settings, "LOCK_WAIT_TIMEOUT_SECONDS", 10)),
        )

    register_vacations(app, container)
    register_calendar(app, container)

    return app
