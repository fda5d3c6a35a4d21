from __future__ import annotations

import importlib
import logging
from datetime import timedelta
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .common.auth_guards import current_user
from .container import Container, build_container
from .core.constants import DEFAULT_SESSION_DAYS, HIGH_PENALTY_THRESHOLD, MAX_PENALTY_POINTS
from .database.bootstrap import apply_schema, list_tables, seed_fixtures
from .dashboard.controller import register as register_dashboard
from .drivers.controller import register as register_drivers
from .licenses.controller import register as register_licenses
from .notifications.controller import register as register_notifications
from .users.controller import register as register_users

logger = logging.getLogger(__name__)

REPO_ROOT = Path(__file__).resolve().parents[3]


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def create_app(*, container: Optional[Container] = None, settings_module: Optional[str] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__, template_folder="../../../templates", static_folder="../../../static")

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    app.secret_key = getattr(settings, "SECRET_KEY")
    app.permanent_session_lifetime = timedelta(days=DEFAULT_SESSION_DAYS)
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
            apply_schema(db_config, schema_path=REPO_ROOT / "database" / "schema.sql")
            logger.info("Schema ready (tables=%s)", len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            seed_fixtures(db_config)

        container = build_container(db_config=db_config)

    app.extensions["license_tracker"] = container

    @app.context_processor
    def inject_navbar():
        user = current_user()
        unread = 0
        if user is not None:
            try:
                unread = container.notification_service.unread_count(user_id=user.user_id)
            except Exception:
                # badge only; the page still renders without it
                logger.exception("Unread notification count failed")
        return {
            "current_user": user,
            "unread_count": unread,
            "max_points": MAX_PENALTY_POINTS,
            "high_points": HIGH_PENALTY_THRESHOLD,
        }

    register_users(app, container)
    register_dashboard(app, container)
    register_drivers(app, container)
    register_licenses(app, container)
    register_notifications(app, container)

    return app
