# massage_api/services/sales_ledger.py
from __future__ import annotations

import logging
import math
from typing import List

from massage_api.common.errors import InvalidArgument, NotFound
from massage_api.models.sale import REPR_NATIVE, SalesRecord
from massage_api.services import dates

log = logging.getLogger(__name__)

# wire name -> column
AMOUNT_FIELDS = {
    "staffOil": "staff_oil",
    "customers": "customers",
    "income": "income",
    "commission": "commission",
    "extraCommission": "extra_commission",
    "expense": "expense",
    "creditCard": "credit_card",
    "cash": "cash",
}


def _as_number(val, field_name):
    if val is None or val == "":
        return None
    if isinstance(val, bool):
        raise InvalidArgument(f"{field_name} must be a number")
    if not isinstance(val, (int, float)):
        try:
            val = int(val)
        except (TypeError, ValueError):
            try:
                val = float(val)
            except (TypeError, ValueError):
                raise InvalidArgument(f"{field_name} must be a number")
    if isinstance(val, float) and not math.isfinite(val):
        raise InvalidArgument(f"{field_name} must be a finite number")
    return val


class SalesLedger:
    """
    Sales CRUD plus inclusive date-range queries.

    New writes use `representation` ('native' or 'epoch'); records already
    stored in the other shape are left as they are and still match queries.
    """

    def __init__(self, store, representation: str = REPR_NATIVE):
        if representation not in dates.REPRESENTATIONS:
            raise ValueError(f"unknown sales date representation {representation!r}")
        self.store = store
        self.representation = representation

    def _apply(self, obj: SalesRecord, data: dict, partial: bool):
        if "date" in data or not partial:
            occurred = dates.parse_occurred_at(data.get("date"), "date")
            dates.store_occurred_at(obj, occurred, self.representation)
        for wire, col in AMOUNT_FIELDS.items():
            if wire in data:
                setattr(obj, col, _as_number(data.get(wire), wire))
        if "timeWork" in data:
            tw = data.get("timeWork")
            obj.time_work = None if tw is None else str(tw)

    def create_sale(self, data: dict) -> SalesRecord:
        obj = SalesRecord()
        self._apply(obj, data, partial=False)
        self.store.insert(obj)
        log.info("sale %s created for %s", obj.id, dates.isoformat(dates.normalize(obj)))
        return obj

    def get_sale(self, sale_id: int) -> SalesRecord:
        obj = self.store.get(SalesRecord, sale_id)
        if obj is None:
            raise NotFound("Sale not found")
        return obj

    def update_sale(self, sale_id: int, data: dict) -> SalesRecord:
        obj = self.get_sale(sale_id)
        self._apply(obj, data, partial=True)
        self.store.save(obj)
        return obj

    def delete_sale(self, sale_id: int) -> None:
        obj = self.get_sale(sale_id)
        self.store.delete(obj)
        log.info("sale %s deleted", sale_id)

    def find_by_date_range(self, start=None, end=None) -> List[SalesRecord]:
        """
        Records with start <= occurred <= end, ascending by occurred time.

        Either boundary may be omitted. A date-only `end` includes that whole day.
        Unparseable boundaries raise InvalidArgument before the store is queried.
        """
        lo = dates.parse_boundary(start, "startDate")
        hi = dates.parse_boundary(end, "endDate")
        limit, inclusive = dates.upper_limit(hi)
        if lo is not None and limit is not None:
            if lo.instant > limit or (lo.instant == limit and not inclusive):
                raise InvalidArgument("startDate must not be after endDate")

        cond = dates.range_condition(lo, hi)
        rows = self.store.find(SalesRecord, cond) if cond is not None else self.store.find(SalesRecord)
        return sorted(rows, key=_sort_key)


def _sort_key(obj: SalesRecord):
    occurred = dates.normalize(obj)
    # undated legacy rows sort first
    return (occurred is not None, occurred or dates.EPOCH, obj.id)


def _plain(val):
    # amount columns are floating point; whole values go back out as integers
    if isinstance(val, float) and val.is_integer():
        return int(val)
    return val


def sale_row(obj: SalesRecord):
    out = {"id": obj.id, "date": dates.isoformat(dates.normalize(obj))}
    for wire, col in AMOUNT_FIELDS.items():
        out[wire] = _plain(getattr(obj, col))
    out["timeWork"] = obj.time_work
    return out
