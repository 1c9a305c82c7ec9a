from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.reconciler import AttendanceReconciler, AutoClockOutPolicy
from .attendance.service import AttendanceService
from .core.constants import DEFAULT_PTO_UNITS, DEFAULT_RUN_AT, DEFAULT_SICK_UNITS
from .database.connection import DBConfig, DatabaseConnection
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.service import EmployeeService
from .events.mysql_event_repository import MySQLSystemEventRepository
from .leave.ledger import LeaveLedger
from .leave.mysql_leave_repository import MySQLAllocationRepository, MySQLLeaveRequestRepository
from .payroll.service import PayrollReportService
from .scheduling.scheduler import AutoClockOutScheduler


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection

    employees_repo: MySQLEmployeeRepository
    attendance_repo: MySQLAttendanceRepository
    allocations_repo: MySQLAllocationRepository
    leave_requests_repo: MySQLLeaveRequestRepository
    events_repo: MySQLSystemEventRepository

    employee_service: EmployeeService
    attendance_service: AttendanceService
    reconciler: AttendanceReconciler
    auto_clock_out: AutoClockOutScheduler
    leave_ledger: LeaveLedger
    payroll_report_service: PayrollReportService


def build_container(
    *,
    db_config: dict,
    auto_clock_out: Optional[Mapping] = None,
    leave: Optional[Mapping] = None,
) -> Container:
    config = DBConfig(
        host=str(db_config["host"]),
        port=int(db_config.get("port", 3306)),
        user=str(db_config["user"]),
        password=str(db_config["password"]),
        database=str(db_config["database"]),
    )
    conn = DatabaseConnection.get_instance(config)
    auto_clock_out = dict(auto_clock_out or {})
    leave = dict(leave or {})

    employees_repo = MySQLEmployeeRepository(conn)
    attendance_repo = MySQLAttendanceRepository(conn)
    allocations_repo = MySQLAllocationRepository(conn)
    leave_requests_repo = MySQLLeaveRequestRepository(conn)
    events_repo = MySQLSystemEventRepository(conn)

    employee_service = EmployeeService(employees_repo)
    attendance_service = AttendanceService(attendance_repo, employees_repo, conn)
    reconciler = AttendanceReconciler(attendance_repo, conn, events=events_repo)
    scheduler = AutoClockOutScheduler(
        reconciler,
        AutoClockOutPolicy.from_settings(auto_clock_out),
        run_at=auto_clock_out.get("run_at") or DEFAULT_RUN_AT,
    )
    leave_ledger = LeaveLedger(
        leave_requests_repo,
        allocations_repo,
        employees_repo,
        conn,
        default_pto_units=int(leave.get("default_pto_units", DEFAULT_PTO_UNITS)),
        default_sick_units=int(leave.get("default_sick_units", DEFAULT_SICK_UNITS)),
        allow_reversal=bool(leave.get("allow_reversal", False)),
    )
    payroll_report_service = PayrollReportService(attendance_repo, employees_repo)

    return Container(
        conn=conn,
        employees_repo=employees_repo,
        attendance_repo=attendance_repo,
        allocations_repo=allocations_repo,
        leave_requests_repo=leave_requests_repo,
        events_repo=events_repo,
        employee_service=employee_service,
        attendance_service=attendance_service,
        reconciler=reconciler,
        auto_clock_out=scheduler,
        leave_ledger=leave_ledger,
        payroll_report_service=payroll_report_service,
    )
