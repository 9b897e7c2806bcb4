# massage_api/services/holiday_calendar.py
from __future__ import annotations

import logging
from datetime import date

from massage_api.common.errors import InvalidArgument
from massage_api.models.holiday import Holiday

log = logging.getLogger(__name__)


class HolidayCalendar:
    """Special shop holidays with Thai and English labels."""

    def __init__(self, store):
        self.store = store

    def list_holidays(self):
        return self.store.find(Holiday, order_by=(Holiday.date.asc(),))

    def import_holidays(self, items) -> tuple[int, int]:
        """Upsert by date. Returns (created, updated)."""
        if not isinstance(items, list):
            raise InvalidArgument("holidays must be a JSON array")

        created = updated = 0
        for i, item in enumerate(items):
            if not isinstance(item, dict):
                raise InvalidArgument(f"item {i} must be an object")
            raw = str(item.get("date") or "").strip()
            try:
                day = date.fromisoformat(raw).isoformat()
            except ValueError:
                raise InvalidArgument(f"item {i}: invalid date {raw!r}")

            obj = self.store.find_one(Holiday, date=day)
            if obj is None:
                self.store.insert(Holiday(date=day, th=item.get("th"), en=item.get("en")))
                created += 1
            else:
                obj.th = item.get("th", obj.th)
                obj.en = item.get("en", obj.en)
                self.store.save(obj)
                updated += 1

        log.info("holidays imported: %d created, %d updated", created, updated)
        return created, updated


def holiday_row(x: Holiday):
    return {"id": x.id, "date": x.date, "th": x.th, "en": x.en}
