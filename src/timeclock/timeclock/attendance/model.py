from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class AttendanceSession:
    """Domain entity: one clock-in to clock-out interval.

    ``clock_out_time`` is None while the session is open. ``auto_closed`` marks
    sessions closed by the automatic clock-out job rather than by the employee.
    """

    session_id: str
    employee_id: int
    clock_in_time: datetime
    clock_out_time: Optional[datetime] = None
    auto_closed: bool = False

    @property
    def is_open(self) -> bool:
        return self.clock_out_time is None

    @property
    def duration_minutes(self) -> int:
        if self.clock_out_time is None:
            return 0
        return int((self.clock_out_time - self.clock_in_time).total_seconds() // 60)


@dataclass(frozen=True)
class SessionClose:
    """One row of a batch close."""

    session_id: str
    clock_out_time: datetime
    auto_closed: bool
