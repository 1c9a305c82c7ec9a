from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..common.validators import require_non_empty, require_non_negative_number
from ..core.exceptions import EmployeeNotFound
from .model import Employee
from .repository import EmployeeRepository

logger = logging.getLogger(__name__)


class EmployeeService:
    """Admin CRUD for employees."""

    def __init__(self, employees: EmployeeRepository):
        self._employees = employees

    def get(self, employee_id: int) -> Employee:
        employee = self._employees.get_by_id(int(employee_id))
        if not employee:
            raise EmployeeNotFound(employee_id)
        return employee

    def list_all(self) -> Sequence[Employee]:
        return self._employees.list_all()

    def create(self, *, name: str, pay_rate) -> Employee:
        name = require_non_empty(name, "Name")
        rate = require_non_negative_number(pay_rate, "Pay rate")

        employee_id = self._employees.create(name=name, pay_rate=rate)
        logger.info("Created employee %s (%s)", employee_id, name)
        return Employee(employee_id=employee_id, name=name, pay_rate=rate)

    def update(self, employee_id: int, *, name: Optional[str] = None, pay_rate=None) -> Employee:
        current = self.get(employee_id)
        new_name = require_non_empty(name, "Name") if name is not None else current.name
        new_rate = require_non_negative_number(pay_rate, "Pay rate") if pay_rate is not None else current.pay_rate

        self._employees.update(current.employee_id, name=new_name, pay_rate=new_rate)
        return Employee(employee_id=current.employee_id, name=new_name, pay_rate=new_rate)

    def delete(self, employee_id: int) -> None:
        if not self._employees.delete_by_id(int(employee_id)):
            raise EmployeeNotFound(employee_id)
        logger.info("Deleted employee %s", employee_id)
