from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..attendance.repository import AttendanceRepository
from ..core.exceptions import EmployeeNotFound, InvalidDateRange
from ..employees.repository import EmployeeRepository
from .calculator.base import PayrollCalculator
from .calculator.standard_calculator import StandardPayrollCalculator


@dataclass(frozen=True)
class TimesheetRow:
    session_id: str
    work_date: date
    clock_in: str
    clock_out: str
    hours_worked: float
    pay: float
    auto_closed: bool


@dataclass(frozen=True)
class Timesheet:
    employee_id: int
    name: str
    pay_rate: float
    rows: list[TimesheetRow]
    total_hours: float
    total_pay: float


class PayrollReportService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        employees: EmployeeRepository,
        *,
        calculator: Optional[PayrollCalculator] = None,
    ):
        self._attendance = attendance
        self._employees = employees
        self._calculator = calculator or StandardPayrollCalculator()

    def build_timesheet(
        self,
        employee_id: int,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> Timesheet:
        if start and end and start > end:
            raise InvalidDateRange("Start date must be before end date")

        employee = self._employees.get_by_id(int(employee_id))
        if not employee:
            raise EmployeeNotFound(employee_id)

        rows: list[TimesheetRow] = []
        total_minutes = 0
        for s in sorted(self._attendance.list_for_employee(employee.employee_id), key=lambda s: s.clock_in_time):
            work_date = s.clock_in_time.date()
            if (start and work_date < start) or (end and work_date > end):
                continue

            minutes = self._calculator.worked_minutes(s)
            total_minutes += minutes
            hours = round(minutes / 60, 2)
            rows.append(
                TimesheetRow(
                    session_id=s.session_id,
                    work_date=work_date,
                    clock_in=s.clock_in_time.strftime("%H:%M"),
                    clock_out=s.clock_out_time.strftime("%H:%M") if s.clock_out_time else "-",
                    hours_worked=hours,
                    pay=round(minutes / 60 * employee.pay_rate, 2),
                    auto_closed=s.auto_closed,
                )
            )

        total_hours = total_minutes / 60
        return Timesheet(
            employee_id=employee.employee_id,
            name=employee.name,
            pay_rate=employee.pay_rate,
            rows=rows,
            total_hours=round(total_hours, 2),
            total_pay=round(total_hours * employee.pay_rate, 2),
        )
