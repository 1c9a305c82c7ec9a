from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import AttendanceSession, SessionClose


class AttendanceRepository(Protocol):
    def get_by_id(self, session_id: str) -> Optional[AttendanceSession]:
        raise NotImplementedError

    def get_open_for_employee(self, employee_id: int) -> Optional[AttendanceSession]:
        raise NotImplementedError

    def list_open_sessions(self) -> Sequence[AttendanceSession]:
        raise NotImplementedError

    def list_for_employee(self, employee_id: int, *, limit: Optional[int] = None) -> Sequence[AttendanceSession]:
        raise NotImplementedError

    def list_all(self) -> Sequence[AttendanceSession]:
        raise NotImplementedError

    def create_session(self, *, session_id: str, employee_id: int, clock_in_time: datetime) -> None:
        raise NotImplementedError

    def close_sessions_batch(self, updates: Sequence[SessionClose]) -> int:
        """Set clock-out on every listed session. Call inside a transaction."""

        raise NotImplementedError

    def admin_update_times(
        self,
        *,
        session_id: str,
        clock_in_time: datetime,
        clock_out_time: Optional[datetime],
    ) -> bool:
        """Admin-only override of a session's times."""

        raise NotImplementedError

    def delete_by_id(self, session_id: str) -> bool:
        raise NotImplementedError
