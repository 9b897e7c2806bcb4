# massage_api/services/employee_directory.py
from __future__ import annotations

import logging
from typing import List

from massage_api.common.errors import Conflict, InvalidArgument, NotFound
from massage_api.models.employee import Employee

log = logging.getLogger(__name__)

DEFAULT_POSITION = "Staff"


def _clean_name(val, field_name="name"):
    if val is None:
        raise InvalidArgument(f"{field_name} is required")
    if not isinstance(val, str):
        raise InvalidArgument(f"{field_name} must be a string")
    name = val.strip()
    if not name:
        raise InvalidArgument(f"{field_name} is required")
    return name


def _clean_position(val):
    if val is None:
        return None
    if not isinstance(val, str):
        raise InvalidArgument("position must be a string")
    return val.strip() or None


class EmployeeDirectory:
    """
    Employees are addressed by name.

    The row carries an internal surrogate id, so a rename is an update of one
    uniquely-constrained column rather than delete + re-create: the employee
    never disappears mid-rename, and a rename onto a taken name is refused
    before anything changes.
    """

    def __init__(self, store, default_position: str = DEFAULT_POSITION):
        self.store = store
        self.default_position = default_position

    def _require(self, name: str) -> Employee:
        emp = self.store.find_one(Employee, name=name)
        if emp is None:
            raise NotFound(f"Employee {name!r} not found")
        return emp

    def create_employee(self, name, position=None) -> Employee:
        name = _clean_name(name)
        position = _clean_position(position) or self.default_position
        if self.store.find_one(Employee, name=name) is not None:
            raise Conflict(f"Employee {name!r} already exists")
        emp = Employee(name=name, position=position)
        self.store.insert(emp)
        log.info("employee %r created", name)
        return emp

    def get_employee(self, name) -> Employee:
        return self._require(_clean_name(name))

    def list_employees(self) -> List[Employee]:
        return self.store.find(Employee, order_by=(Employee.id,))

    def update_employee(self, current_name, new_name=None, new_position=None) -> Employee:
        current_name = _clean_name(current_name)
        new_name = current_name if new_name is None else _clean_name(new_name)
        new_position = _clean_position(new_position)

        emp = self._require(current_name)

        if new_name != current_name:
            taken = self.store.find_one(Employee, name=new_name)
            if taken is not None and taken.id != emp.id:
                raise Conflict(f"Employee {new_name!r} already exists")
            emp.name = new_name

        if new_position is not None:
            emp.position = new_position

        # a racing writer that claimed new_name after the check trips the unique constraint here
        self.store.save(emp)
        if new_name != current_name:
            log.info("employee %r renamed to %r", current_name, new_name)
        return emp

    def delete_employee(self, name) -> None:
        emp = self._require(_clean_name(name))
        self.store.delete(emp)
        log.info("employee %r deleted", emp.name)


def employee_row(emp: Employee):
    # the public id is the name; the surrogate key stays internal
    return {"id": emp.name, "name": emp.name, "position": emp.position}
