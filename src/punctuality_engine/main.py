from __future__ import annotations

import importlib
import logging

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .common.web import register_error_handlers
from .container import build_container
from .database.bootstrap import apply_schema, list_tables
from .checkins.controller import register as register_checkins
from .issues.controller import register as register_issues
from .notifications.controller import register as register_notifications
from .policy.controller import register as register_policy
from .schedules.controller import register as register_schedules

logger = logging.getLogger(__name__)


def load_settings():
    load_dotenv(override=False)
    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    logging.basicConfig(level=getattr(settings, "LOG_LEVEL", "INFO"))
    logger.info("Loaded settings from %s", settings_module)
    return settings


def create_app() -> Flask:
    settings = load_settings()
    app = Flask(__name__)

    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    logger.debug(
        "Database %s@%s:%s/%s",
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
    )

    if bool(getattr(settings, "AUTO_INIT_DB", False)):
        apply_schema(db_config)
        logger.info("Schema ready (tables=%d)", len(list_tables(db_config)))

    container = build_container(
        db_config=db_config,
        slack_timeout=float(getattr(settings, "SLACK_TIMEOUT_SECONDS", 10)),
        slack_username=getattr(settings, "SLACK_USERNAME", None),
    )

    register_error_handlers(app)
    register_checkins(app, container)
    register_issues(app, container)
    register_notifications(app, container)
    register_policy(app, container)
    register_schedules(app, container)

    return app
