from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import LeaveTrack, LeaveType, RequestStatus


@dataclass(frozen=True)
class LeaveAllocation:
    """Per-employee, per-year bank of PTO and sick units (one unit = one business day)."""

    allocation_id: int
    employee_id: int
    year: int
    pto_total: int
    pto_remaining: int
    sick_total: int
    sick_remaining: int

    def remaining_for(self, track: LeaveTrack) -> int:
        return self.pto_remaining if track is LeaveTrack.PTO else self.sick_remaining

    def total_for(self, track: LeaveTrack) -> int:
        return self.pto_total if track is LeaveTrack.PTO else self.sick_total


@dataclass(frozen=True)
class LeaveRequest:
    request_id: int
    employee_id: int
    request_type: LeaveType
    start_date: date
    end_date: date
    duration_units: int
    status: RequestStatus
    created_at: datetime
    notes: str = ""
    updated_at: Optional[datetime] = None

    @property
    def allocation_year(self) -> int:
        return self.start_date.year
