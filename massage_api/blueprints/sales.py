# massage_api/blueprints/sales.py
from __future__ import annotations

from flask import Blueprint, current_app, request

from massage_api.common.gate import get_store
from massage_api.common.http import ok, no_content
from massage_api.common.payload import json_body
from massage_api.services.sales_ledger import SalesLedger, sale_row

bp = Blueprint("sales", __name__, url_prefix="/api/sales")


def _ledger() -> SalesLedger:
    return SalesLedger(get_store(), current_app.config["SALES_DATE_REPRESENTATION"])


def _arg(*names: str):
    """First present query arg among names (camelCase/snake_case); blank counts as absent."""
    for n in names:
        v = request.args.get(n)
        if v is not None and v.strip() != "":
            return v
    return None


@bp.get("")
def list_sales():
    start = _arg("startDate", "start_date")
    end = _arg("endDate", "end_date")
    items = _ledger().find_by_date_range(start, end)
    return ok([sale_row(x) for x in items], total=len(items))


@bp.get("/<int:sale_id>")
def get_sale(sale_id: int):
    return ok(sale_row(_ledger().get_sale(sale_id)))


@bp.post("")
def create_sale():
    data = json_body()
    return ok(sale_row(_ledger().create_sale(data)), 201)


@bp.put("/<int:sale_id>")
def update_sale(sale_id: int):
    data = json_body()
    return ok(sale_row(_ledger().update_sale(sale_id, data)))


@bp.delete("/<int:sale_id>")
def delete_sale(sale_id: int):
    _ledger().delete_sale(sale_id)
    return no_content()
