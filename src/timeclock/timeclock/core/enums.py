from __future__ import annotations

from enum import Enum


class RequestStatus(str, Enum):
    """Review state of a time-off request."""

    PENDING = "pending"
    APPROVED = "approved"
    DENIED = "denied"

    @property
    def is_terminal(self) -> bool:
        return self is not RequestStatus.PENDING


class LeaveTrack(str, Enum):
    """Balance track on a yearly allocation."""

    PTO = "pto"
    SICK = "sick"


class LeaveType(str, Enum):
    """Kind of time off requested. Only PTO and Sick draw on an allocation."""

    PTO = "PTO"
    SICK = "Sick"
    UNPAID = "Unpaid"
    OTHER = "Other"

    @property
    def track(self) -> LeaveTrack | None:
        return {
            LeaveType.PTO: LeaveTrack.PTO,
            LeaveType.SICK: LeaveTrack.SICK,
        }.get(self)

    @property
    def uses_allocation(self) -> bool:
        return self.track is not None
