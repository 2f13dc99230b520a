from __future__ import annotations

import importlib
import logging
from typing import Optional

import click
from dotenv import load_dotenv
from flask import Flask

from .attendance.controller import register as register_attendance
from .common.datetime_utils import parse_iso_date
from .config import get_settings_module
from .container import Container, build_container
from .core.exceptions import DomainError
from .database.bootstrap import apply_schema, list_tables
from .notifications.controller import register as register_notifications

logger = logging.getLogger(__name__)


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def create_app(container: Optional[Container] = None, *, settings_module: Optional[str] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    _configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    db_config = getattr(settings, "DB_CONFIG")
    if container is None:
        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config)
            logger.info("Schema ready (tables=%d)", len(list_tables(db_config)))
        container = build_container(settings=settings)

    app.extensions["household_attendance"] = container

    register_attendance(app, container)
    register_notifications(app, container)
    _register_commands(app, container, db_config)

    logger.debug("App created with settings=%s", settings_module)
    return app


def _register_commands(app: Flask, container: Container, db_config: dict) -> None:
    @app.cli.command("init-db")
    def init_db_command():
        """Apply schema.sql to the configured database."""
        apply_schema(db_config)
        click.echo(f"OK: schema applied (tables={len(list_tables(db_config))})")

    @app.cli.command("absence-sweep")
    @click.option("--date", "day", default=None, help="Day to check (YYYY-MM-DD), defaults to today.")
    def absence_sweep_command(day: Optional[str]):
        """Flag scheduled employees who did not clock in."""
        try:
            target = parse_iso_date(day) if day else None
        except DomainError as e:
            raise click.BadParameter(str(e), param_hint="--date")
        report = container.absence_sweep.run(target)
        click.echo(
            f"{report.work_date}: created={report.created} already_notified={report.already_notified} "
            f"present={report.present} not_configured={len(report.skipped_not_configured)} errors={len(report.errors)}"
        )

    @app.cli.command("reminder-sweep")
    def reminder_sweep_command():
        """Send due entry/break/exit reminders."""
        report = container.reminder_sweep.run()
        click.echo(f"{report.work_date}: created={report.created} already_notified={report.already_notified}")
