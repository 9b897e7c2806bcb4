# massage_api/blueprints/shifts.py
from __future__ import annotations

from flask import Blueprint

from massage_api.common.gate import get_store
from massage_api.common.http import ok, no_content
from massage_api.common.payload import json_body
from massage_api.services.shift_catalog import ShiftCatalog, shift_row

bp = Blueprint("shifts", __name__, url_prefix="/api/shifts")


@bp.get("")
def list_shifts():
    items = ShiftCatalog(get_store()).list_shifts()
    return ok([shift_row(x) for x in items], total=len(items))


@bp.get("/<int:shift_id>")
def get_shift(shift_id: int):
    return ok(shift_row(ShiftCatalog(get_store()).get_shift(shift_id)))


@bp.post("")
def create_shift():
    data = json_body()
    return ok(shift_row(ShiftCatalog(get_store()).create_shift(data)), 201)


@bp.put("/<int:shift_id>")
def update_shift(shift_id: int):
    data = json_body()
    return ok(shift_row(ShiftCatalog(get_store()).update_shift(shift_id, data)))


@bp.delete("/<int:shift_id>")
def delete_shift(shift_id: int):
    ShiftCatalog(get_store()).delete_shift(shift_id)
    return no_content()
