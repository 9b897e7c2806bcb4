import json
import logging
import os

import click
from flask import Flask
from flask_cors import CORS

from massage_api.extensions import db, init_db
from massage_api.models import load_all
from massage_api.store import StoreGateway

ROSTER_INDEX = "ux_schedule_year_month"


def _env_config(app: Flask):
    app.config["SQLALCHEMY_DATABASE_URI"] = os.getenv("DATABASE_URL")
    app.config["SQLALCHEMY_TRACK_MODIFICATIONS"] = False
    app.config["ROSTER_MERGE_POLICY"] = os.getenv("ROSTER_MERGE_POLICY", "partial-merge")
    app.config["SALES_DATE_REPRESENTATION"] = os.getenv("SALES_DATE_REPRESENTATION", "native")
    app.config["EMPLOYEE_DEFAULT_POSITION"] = os.getenv("EMPLOYEE_DEFAULT_POSITION", "Staff")
    app.config["STORE_PING_INTERVAL"] = float(os.getenv("STORE_PING_INTERVAL", "5"))
    app.config["STORE_RETRY_AFTER"] = 5
    app.config["LOG_LEVEL"] = os.getenv("LOG_LEVEL", "INFO")


def _check_config(app: Flask):
    from massage_api.services.dates import REPRESENTATIONS
    from massage_api.services.roster_service import RosterMergePolicy

    if not app.config.get("SQLALCHEMY_DATABASE_URI"):
        raise RuntimeError("DATABASE_URL is not set; refusing to start without a backing store")

    # normalise to the enum's string value; ValueError here aborts startup
    app.config["ROSTER_MERGE_POLICY"] = RosterMergePolicy.parse(app.config["ROSTER_MERGE_POLICY"]).value

    rep = str(app.config["SALES_DATE_REPRESENTATION"]).strip().lower()
    if rep not in REPRESENTATIONS:
        raise ValueError(f"SALES_DATE_REPRESENTATION must be one of {REPRESENTATIONS}, got {rep!r}")
    app.config["SALES_DATE_REPRESENTATION"] = rep


def create_app(config_object: str | None = None, overrides: dict | None = None):
    app = Flask(__name__)

    _env_config(app)
    if config_object:
        app.config.from_object(config_object)
    if overrides:
        app.config.update(overrides)
    _check_config(app)

    logging.getLogger("massage_api").setLevel(app.config["LOG_LEVEL"])

    # CORS (browser roster editor)
    CORS(app, resources={r"/api/*": {"origins": "*"}})

    # Extensions
    init_db(app)
    with app.app_context():
        load_all()

    store = StoreGateway(db, ping_interval=app.config["STORE_PING_INTERVAL"])
    app.extensions["store"] = store

    from massage_api.common.errors import bp_errors
    from massage_api.common.gate import register_availability_gate

    app.register_blueprint(bp_errors)
    register_availability_gate(app)

    # Blueprints
    from massage_api.blueprints.health import bp as health_bp
    from massage_api.blueprints.schedules import bp as schedules_bp
    from massage_api.blueprints.employees import bp as employees_bp
    from massage_api.blueprints.shifts import bp as shifts_bp
    from massage_api.blueprints.sales import bp as sales_bp
    from massage_api.blueprints.holidays import bp as holidays_bp

    app.register_blueprint(health_bp)
    app.register_blueprint(schedules_bp)
    app.register_blueprint(employees_bp)
    app.register_blueprint(shifts_bp)
    app.register_blueprint(sales_bp)
    app.register_blueprint(holidays_bp)

    # ----------------- CLI COMMANDS -----------------

    @app.cli.command("init-db")
    def init_db_cmd():
        """Create tables and make sure the roster (year, month) key is unique."""
        from massage_api.models.schedule import MonthlySchedule

        db.create_all()
        store.ensure_unique_index(MonthlySchedule, ROSTER_INDEX, "year", "month")
        click.echo("Database ready")

    @app.cli.command("seed-shifts")
    def seed_shifts():
        """Add the default shift catalog (skips names that already exist)."""
        from massage_api.services.shift_catalog import ShiftCatalog

        added = ShiftCatalog(store).seed_defaults()
        click.echo(f"Seeded {added} shift(s)")

    @app.cli.command("import-holidays")
    @click.argument("path", type=click.Path(exists=True, dir_okay=False))
    def import_holidays(path):
        """Load a JSON array of {date, th, en} into the holiday calendar."""
        from massage_api.common.errors import APIError
        from massage_api.services.holiday_calendar import HolidayCalendar

        with open(path, encoding="utf-8") as fh:
            try:
                items = json.load(fh)
            except json.JSONDecodeError as e:
                raise click.ClickException(f"{path}: invalid JSON ({e})")
        try:
            created, updated = HolidayCalendar(store).import_holidays(items)
        except APIError as e:
            raise click.ClickException(e.message)
        click.echo(f"Holidays: {created} created, {updated} updated")

    return app
