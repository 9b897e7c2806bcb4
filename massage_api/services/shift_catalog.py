# massage_api/services/shift_catalog.py
from __future__ import annotations

import logging

from massage_api.common.errors import InvalidArgument, NotFound
from massage_api.models.shift import ShiftDefinition

log = logging.getLogger(__name__)

DEFAULT_SHIFTS = [
    {"name": "Morning", "description": "10:00 - 18:00", "order": 1},
    {"name": "Evening", "description": "14:00 - 22:00", "order": 2},
    {"name": "Day off", "description": "", "order": 3},
]


def _as_bool(val, field_name):
    if isinstance(val, bool):
        return val
    v = str(val).strip().lower()
    if v in ("true", "1", "yes"):  return True
    if v in ("false", "0", "no"):  return False
    raise InvalidArgument(f"{field_name} must be true/false")


def _as_int(val, field_name):
    if isinstance(val, bool):
        raise InvalidArgument(f"{field_name} must be integer")
    try:
        return int(val)
    except (TypeError, ValueError):
        raise InvalidArgument(f"{field_name} must be integer")


class ShiftCatalog:
    def __init__(self, store):
        self.store = store

    def list_shifts(self):
        return self.store.find(ShiftDefinition, order_by=(ShiftDefinition.order.asc(), ShiftDefinition.id.asc()))

    def get_shift(self, shift_id: int) -> ShiftDefinition:
        x = self.store.get(ShiftDefinition, shift_id)
        if x is None:
            raise NotFound("Shift not found")
        return x

    def create_shift(self, data: dict) -> ShiftDefinition:
        name = (data.get("name") or "").strip() if isinstance(data.get("name"), str) else ""
        if not name:
            raise InvalidArgument("name is required")
        obj = ShiftDefinition(
            name=name,
            description=data.get("description") or "",
            active=_as_bool(data.get("active", True), "active"),
            order=_as_int(data.get("order", 0), "order"),
        )
        self.store.insert(obj)
        log.info("shift %r created", name)
        return obj

    def update_shift(self, shift_id: int, data: dict) -> ShiftDefinition:
        obj = self.get_shift(shift_id)
        if "name" in data:
            candidate = (data.get("name") or "").strip() if isinstance(data.get("name"), str) else ""
            if not candidate:
                raise InvalidArgument("name cannot be empty")
            obj.name = candidate
        if "description" in data:
            obj.description = data.get("description") or ""
        if "active" in data:
            obj.active = _as_bool(data.get("active"), "active")
        if "order" in data:
            obj.order = _as_int(data.get("order"), "order")
        self.store.save(obj)
        return obj

    def delete_shift(self, shift_id: int) -> None:
        obj = self.get_shift(shift_id)
        self.store.delete(obj)
        log.info("shift %s deleted", shift_id)

    def seed_defaults(self) -> int:
        """Insert DEFAULT_SHIFTS that are not present yet (matched by name)."""
        added = 0
        for item in DEFAULT_SHIFTS:
            if self.store.find_one(ShiftDefinition, name=item["name"]) is None:
                self.create_shift(item)
                added += 1
        return added


def shift_row(x: ShiftDefinition):
    return {
        "id": x.id,
        "name": x.name,
        "description": x.description,
        "active": x.active,
        "order": x.order,
    }
