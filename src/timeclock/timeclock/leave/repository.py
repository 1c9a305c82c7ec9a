from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import LeaveType, RequestStatus
from .model import LeaveAllocation, LeaveRequest


class AllocationRepository(Protocol):
    def get_allocation(self, employee_id: int, year: int, *, for_update: bool = False) -> Optional[LeaveAllocation]:
        """``for_update`` locks the row until the enclosing transaction ends."""

        raise NotImplementedError

    def create_allocation(self, *, employee_id: int, year: int, pto_total: int, sick_total: int) -> LeaveAllocation:
        """Insert a fresh row with remaining == total on both tracks.

        If a row for (employee_id, year) already exists it is left untouched and
        returned instead.
        """

        raise NotImplementedError

    def adjust_allocation(
        self,
        allocation_id: int,
        *,
        pto_remaining_delta: int = 0,
        sick_remaining_delta: int = 0,
        pto_total: Optional[int] = None,
        sick_total: Optional[int] = None,
    ) -> LeaveAllocation:
        raise NotImplementedError

    def list_allocations(self, *, year: int, employee_id: Optional[int] = None) -> Sequence[LeaveAllocation]:
        raise NotImplementedError


class LeaveRequestRepository(Protocol):
    def get_request(self, request_id: int, *, for_update: bool = False) -> Optional[LeaveRequest]:
        raise NotImplementedError

    def create_request(
        self,
        *,
        employee_id: int,
        request_type: LeaveType,
        start_date: date,
        end_date: date,
        duration_units: int,
        notes: str,
        created_at: datetime,
    ) -> LeaveRequest:
        """Insert with status pending."""

        raise NotImplementedError

    def update_request_status(
        self,
        request_id: int,
        *,
        status: RequestStatus,
        notes: Optional[str],
        updated_at: datetime,
    ) -> LeaveRequest:
        """Set status; ``notes`` of None keeps the stored notes."""

        raise NotImplementedError

    def delete_request(self, request_id: int) -> bool:
        raise NotImplementedError

    def list_requests(
        self,
        *,
        status: Optional[RequestStatus] = None,
        employee_id: Optional[int] = None,
    ) -> Sequence[LeaveRequest]:
        raise NotImplementedError
