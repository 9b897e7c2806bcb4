# massage_api/blueprints/employees.py
from __future__ import annotations

from flask import Blueprint, current_app

from massage_api.common.gate import get_store
from massage_api.common.http import ok, no_content
from massage_api.common.payload import json_body
from massage_api.services.employee_directory import EmployeeDirectory, employee_row

bp = Blueprint("employees", __name__, url_prefix="/api/employees")


def _directory() -> EmployeeDirectory:
    return EmployeeDirectory(get_store(), current_app.config["EMPLOYEE_DEFAULT_POSITION"])


@bp.get("")
def list_employees():
    items = _directory().list_employees()
    return ok([employee_row(x) for x in items], total=len(items))


@bp.post("")
def create_employee():
    data = json_body()
    emp = _directory().create_employee(data.get("name"), data.get("position"))
    return ok(employee_row(emp), 201)


@bp.get("/<path:name>")
def get_employee(name: str):
    return ok(employee_row(_directory().get_employee(name)))


@bp.put("/<path:name>")
def update_employee(name: str):
    """Update position in place, or rename when the body carries a different name."""
    data = json_body()
    emp = _directory().update_employee(name, data.get("name"), data.get("position"))
    return ok(employee_row(emp))


@bp.delete("/<path:name>")
def delete_employee(name: str):
    _directory().delete_employee(name)
    return no_content()
