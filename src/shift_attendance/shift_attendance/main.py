from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from apscheduler.schedulers.background import BackgroundScheduler
from dotenv import load_dotenv
from flask import Flask, jsonify

from config import get_settings_module

from .background.scheduler import build_scheduler
from .common.http import error_response
from .container import Container, build_container
from .core.exceptions import DomainError
from .database.bootstrap import drop_legacy_unique_key, ensure_database_exists, run_startup_migrations
from .attendance.controller import register as register_attendance
from .shifts.controller import register as register_shifts

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).resolve().parents[3] / "database" / "schema.sql"


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def start_background_tasks(container: Container, settings) -> BackgroundScheduler:
    scheduler = build_scheduler(container, settings)
    scheduler.start()
    logger.info("Started background jobs: %s", ", ".join(job.id for job in scheduler.get_jobs()))
    if container.notification_worker:
        container.notification_worker.start()
    return scheduler


def create_app(container: Optional[Container] = None) -> Flask:
    """Build the Flask app.

    Passing a ready ``container`` skips the database bootstrap and background
    tasks; tests use this with in-memory repositories.
    """

    load_dotenv(override=False)
    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    _configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    app = Flask(__name__)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["API_TOKEN"] = getattr(settings, "API_TOKEN", "")

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
        container = build_container(settings)

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            ensure_database_exists(container.conn)
            run_startup_migrations(container.conn, schema_path=SCHEMA_PATH)
        elif drop_legacy_unique_key(container.conn):
            logger.info("Dropped legacy unique key on attendance_records")

        if bool(getattr(settings, "RUN_BACKGROUND_TASKS", False)):
            app.extensions["scheduler"] = start_background_tasks(container, settings)

    app.extensions["container"] = container

    @app.errorhandler(DomainError)
    def handle_domain_error(exc: DomainError):
        return error_response(str(exc), exc.status_code)

    @app.errorhandler(500)
    def handle_unexpected(exc):
        # Flask has already logged the original exception
        return error_response("Internal server error", 500)

    @app.route("/", methods=["GET"], endpoint="health")
    def health():
        return jsonify({"status": "ok", "message": "Shift attendance API is running"})

    register_attendance(app, container)
    register_shifts(app, container)

    return app
