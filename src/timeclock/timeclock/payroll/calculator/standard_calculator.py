from __future__ import annotations

from .base import PayrollCalculator
from ...attendance.model import AttendanceSession


class StandardPayrollCalculator(PayrollCalculator):
    """Standard rule: out - in, not below 0; open sessions count as 0."""

    def worked_minutes(self, session: AttendanceSession) -> int:
        return max(session.duration_minutes, 0)
