# massage_api/blueprints/holidays.py
from flask import Blueprint

from massage_api.common.gate import get_store
from massage_api.common.http import ok
from massage_api.services.holiday_calendar import HolidayCalendar, holiday_row

bp = Blueprint("holidays", __name__, url_prefix="/api/holidays")


@bp.get("")
def list_holidays():
    items = HolidayCalendar(get_store()).list_holidays()
    return ok([holiday_row(x) for x in items], total=len(items))
