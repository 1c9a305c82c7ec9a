from __future__ import annotations

import logging
import uuid
from datetime import datetime
from typing import Optional, Sequence

from ..core.constants import DEFAULT_HISTORY_LIMIT
from ..core.exceptions import EmployeeNotFound, NotFound, ValidationError
from ..core.transaction import TransactionManager
from ..employees.repository import EmployeeRepository
from .model import AttendanceSession, SessionClose
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class AttendanceService:
    """Clock in/out for employees and admin edits of time records."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        employees: EmployeeRepository,
        tx: TransactionManager,
    ):
        self._attendance = attendance
        self._employees = employees
        self._tx = tx

    def clock_in(self, employee_id: int, *, now: datetime | None = None) -> AttendanceSession:
        now = now or datetime.now()

        with self._tx.transaction():
            # Row lock on the employee serializes clock-ins for the same person.
            if not self._employees.get_by_id(int(employee_id), for_update=True):
                raise EmployeeNotFound(employee_id)

            if self._attendance.get_open_for_employee(int(employee_id)):
                raise ValidationError("Already clocked in")

            session = AttendanceSession(
                session_id=str(uuid.uuid4()),
                employee_id=int(employee_id),
                clock_in_time=now,
            )
            self._attendance.create_session(
                session_id=session.session_id,
                employee_id=session.employee_id,
                clock_in_time=session.clock_in_time,
            )

        logger.info("Employee %s clocked in (session %s)", employee_id, session.session_id)
        return session

    def clock_out(self, employee_id: int, *, now: datetime | None = None) -> AttendanceSession:
        now = now or datetime.now()

        with self._tx.transaction():
            record = self._attendance.get_open_for_employee(int(employee_id))
            if not record:
                raise ValidationError("Not currently clocked in")

            # Keep clock_out_time >= clock_in_time.
            out_time = max(now, record.clock_in_time)
            self._attendance.close_sessions_batch(
                [SessionClose(session_id=record.session_id, clock_out_time=out_time, auto_closed=False)]
            )

        logger.info("Employee %s clocked out (session %s)", employee_id, record.session_id)
        return AttendanceSession(
            session_id=record.session_id,
            employee_id=record.employee_id,
            clock_in_time=record.clock_in_time,
            clock_out_time=out_time,
            auto_closed=False,
        )

    def current_session(self, employee_id: int) -> Optional[AttendanceSession]:
        return self._attendance.get_open_for_employee(int(employee_id))

    def history(self, employee_id: int, *, limit: int = DEFAULT_HISTORY_LIMIT) -> Sequence[AttendanceSession]:
        return self._attendance.list_for_employee(int(employee_id), limit=limit)

    def list_all(self) -> Sequence[AttendanceSession]:
        return self._attendance.list_all()

    def update_session(
        self,
        session_id: str,
        *,
        clock_in_time: datetime,
        clock_out_time: Optional[datetime],
    ) -> AttendanceSession:
        if clock_out_time is not None and clock_out_time < clock_in_time:
            raise ValidationError("Clock-out cannot be earlier than clock-in")

        with self._tx.transaction():
            existing = self._attendance.get_by_id(session_id)
            if not existing:
                raise NotFound(f"Time record not found: {session_id}")

            if clock_out_time is None and not existing.is_open:
                # Reopening must not leave the employee with two open sessions.
                self._employees.get_by_id(existing.employee_id, for_update=True)
                other = self._attendance.get_open_for_employee(existing.employee_id)
                if other and other.session_id != existing.session_id:
                    raise ValidationError("Already clocked in")

            self._attendance.admin_update_times(
                session_id=session_id,
                clock_in_time=clock_in_time,
                clock_out_time=clock_out_time,
            )
        return AttendanceSession(
            session_id=existing.session_id,
            employee_id=existing.employee_id,
            clock_in_time=clock_in_time,
            clock_out_time=clock_out_time,
            auto_closed=existing.auto_closed,
        )

    def delete_session(self, session_id: str) -> None:
        if not self._attendance.delete_by_id(session_id):
            raise NotFound(f"Time record not found: {session_id}")
