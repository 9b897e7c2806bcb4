# massage_api/blueprints/schedules.py
from __future__ import annotations

from flask import Blueprint, current_app

from massage_api.common.gate import get_store
from massage_api.common.http import ok
from massage_api.common.payload import json_body
from massage_api.services.roster_service import RosterService, schedule_row

bp = Blueprint("schedules", __name__, url_prefix="/api/schedules")


def _service() -> RosterService:
    return RosterService(get_store(), current_app.config["ROSTER_MERGE_POLICY"])


@bp.get("/<year>/<month>")
def get_schedule(year, month):
    doc = _service().get_roster(year, month)
    return ok(schedule_row(doc))


@bp.post("")
def upsert_schedule():
    data = json_body()
    # createdAt in the body is ignored on purpose
    doc, created = _service().upsert_roster(
        data.get("year"),
        data.get("month"),
        data.get("schedule"),
        data.get("summary"),
    )
    return ok(schedule_row(doc), 201 if created else 200)
