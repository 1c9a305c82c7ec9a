"""Time-off requests and the yearly allocation ledger.

Only PTO and Sick requests touch an allocation. Units are debited when a
request is approved and credited back when an approved request is reversed
or deleted; nothing is debited at creation time.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Callable, Optional, Sequence

from ..common.datetime_utils import business_days_between, now_local
from ..core.constants import DEFAULT_PTO_UNITS, DEFAULT_SICK_UNITS
from ..core.enums import LeaveTrack, LeaveType, RequestStatus
from ..core.exceptions import (
    AlreadyProcessed,
    EmployeeNotFound,
    InvalidDateRange,
    NotFound,
    QuotaExceeded,
    ValidationError,
)
from ..core.transaction import TransactionManager
from ..employees.repository import EmployeeRepository
from .model import LeaveAllocation, LeaveRequest
from .repository import AllocationRepository, LeaveRequestRepository

logger = logging.getLogger(__name__)


def _coerce_leave_type(value) -> LeaveType:
    try:
        return LeaveType(value)
    except ValueError:
        raise ValidationError(f"Unknown request type: {value!r}")


def _coerce_status(value) -> RequestStatus:
    try:
        return RequestStatus(value)
    except ValueError:
        raise ValidationError("Valid status (approved, denied, or pending) is required")


def _require_units(value, field_name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ValidationError(f"{field_name} must be a non-negative whole number")
    return value


class LeaveLedger:
    def __init__(
        self,
        requests: LeaveRequestRepository,
        allocations: AllocationRepository,
        employees: EmployeeRepository,
        tx: TransactionManager,
        *,
        default_pto_units: int = DEFAULT_PTO_UNITS,
        default_sick_units: int = DEFAULT_SICK_UNITS,
        allow_reversal: bool = False,
        clock: Callable[[], datetime] = now_local,
    ):
        self._requests = requests
        self._allocations = allocations
        self._employees = employees
        self._tx = tx
        self._default_pto = int(default_pto_units)
        self._default_sick = int(default_sick_units)
        # When set, approved -> denied/pending is accepted by set_request_status and credits back.
        self._allow_reversal = bool(allow_reversal)
        self._clock = clock

    def _require_employee(self, employee_id: int) -> None:
        # Locking the employee row serializes allocation bootstrap per employee.
        if not self._employees.get_by_id(int(employee_id), for_update=True):
            raise EmployeeNotFound(employee_id)

    # -------- Allocations --------
    def get_or_create_allocation(self, employee_id: int, year: int) -> LeaveAllocation:
        """Return the (employee, year) allocation, creating it with default totals if absent."""
        with self._tx.transaction():
            self._require_employee(employee_id)
            return self._bootstrap_allocation(int(employee_id), int(year))

    def _bootstrap_allocation(self, employee_id: int, year: int) -> LeaveAllocation:
        allocation = self._allocations.get_allocation(employee_id, year, for_update=True)
        if allocation:
            return allocation

        allocation = self._allocations.create_allocation(
            employee_id=employee_id,
            year=year,
            pto_total=self._default_pto,
            sick_total=self._default_sick,
        )
        logger.info(
            "Created default allocation for employee %s/%s (pto=%s, sick=%s)",
            employee_id, year, self._default_pto, self._default_sick,
        )
        return allocation

    def upsert_allocation(
        self,
        employee_id: int,
        year: int,
        *,
        pto_total: Optional[int] = None,
        sick_total: Optional[int] = None,
    ) -> LeaveAllocation:
        """Admin path. Changing a total moves remaining by the same delta, keeping used units."""
        if pto_total is not None:
            _require_units(pto_total, "PTO total")
        if sick_total is not None:
            _require_units(sick_total, "Sick total")

        with self._tx.transaction():
            self._require_employee(employee_id)

            existing = self._allocations.get_allocation(int(employee_id), int(year), for_update=True)
            if not existing:
                return self._allocations.create_allocation(
                    employee_id=int(employee_id),
                    year=int(year),
                    pto_total=self._default_pto if pto_total is None else pto_total,
                    sick_total=self._default_sick if sick_total is None else sick_total,
                )

            new_pto = existing.pto_total if pto_total is None else pto_total
            new_sick = existing.sick_total if sick_total is None else sick_total
            return self._allocations.adjust_allocation(
                existing.allocation_id,
                pto_remaining_delta=new_pto - existing.pto_total,
                sick_remaining_delta=new_sick - existing.sick_total,
                pto_total=new_pto,
                sick_total=new_sick,
            )

    def list_allocations(self, *, year: int, employee_id: Optional[int] = None) -> Sequence[LeaveAllocation]:
        return self._allocations.list_allocations(year=int(year), employee_id=employee_id)

    # -------- Requests --------
    def get_request(self, request_id: int) -> LeaveRequest:
        req = self._requests.get_request(int(request_id))
        if not req:
            raise NotFound(f"Time-off request not found: {request_id}")
        return req

    def list_requests(
        self,
        *,
        status: Optional[RequestStatus] = None,
        employee_id: Optional[int] = None,
    ) -> Sequence[LeaveRequest]:
        if status is not None:
            status = _coerce_status(status)
        return self._requests.list_requests(status=status, employee_id=employee_id)

    def create_request(
        self,
        employee_id: int,
        request_type,
        start_date: date,
        end_date: date,
        duration_units: Optional[int] = None,
        *,
        notes: str = "",
    ) -> LeaveRequest:
        leave_type = _coerce_leave_type(request_type)
        if start_date > end_date:
            raise InvalidDateRange("Start date must be before end date")
        if duration_units is None:
            duration_units = business_days_between(start_date, end_date)
        else:
            _require_units(duration_units, "Duration")

        quota_error: Optional[QuotaExceeded] = None
        with self._tx.transaction():
            self._require_employee(employee_id)

            track = leave_type.track
            if track is not None:
                # The bootstrap row is kept even when the quota check fails below.
                allocation = self._bootstrap_allocation(int(employee_id), start_date.year)
                available = allocation.remaining_for(track)
                if duration_units > available:
                    quota_error = QuotaExceeded(
                        requested=duration_units,
                        available=available,
                        leave_type=leave_type.value,
                    )

            if quota_error is None:
                req = self._requests.create_request(
                    employee_id=int(employee_id),
                    request_type=leave_type,
                    start_date=start_date,
                    end_date=end_date,
                    duration_units=duration_units,
                    notes=(notes or "").strip(),
                    created_at=self._clock(),
                )

        if quota_error is not None:
            logger.info(
                "Rejected %s request for employee %s: requested %s, available %s",
                leave_type.value, employee_id, quota_error.requested, quota_error.available,
            )
            raise quota_error

        logger.info("Created %s request %s for employee %s", leave_type.value, req.request_id, employee_id)
        return req

    def set_request_status(self, request_id: int, new_status, notes: Optional[str] = None) -> LeaveRequest:
        new_status = _coerce_status(new_status)

        with self._tx.transaction():
            req = self._requests.get_request(int(request_id), for_update=True)
            if not req:
                raise NotFound(f"Time-off request not found: {request_id}")

            current = req.status
            if current.is_terminal and new_status != current:
                reversible = self._allow_reversal and current is RequestStatus.APPROVED
                if not reversible:
                    raise AlreadyProcessed(
                        request_id=req.request_id,
                        current=current.value,
                        requested=new_status.value,
                    )

            if new_status == current and notes is None:
                return req

            return self._transition(req, new_status, notes)

    def unapprove_request(self, request_id: int, notes: Optional[str] = None) -> LeaveRequest:
        """Move an approved request back to pending and credit its units."""
        with self._tx.transaction():
            req = self._requests.get_request(int(request_id), for_update=True)
            if not req:
                raise NotFound(f"Time-off request not found: {request_id}")
            if req.status is not RequestStatus.APPROVED:
                raise ValidationError("Only approved requests can be unapproved")
            return self._transition(req, RequestStatus.PENDING, notes)

    def delete_request(self, request_id: int) -> None:
        with self._tx.transaction():
            req = self._requests.get_request(int(request_id), for_update=True)
            if not req:
                raise NotFound(f"Time-off request not found: {request_id}")

            if req.status is RequestStatus.APPROVED:
                self._apply_units(req, +req.duration_units)
            self._requests.delete_request(req.request_id)

        logger.info("Deleted time-off request %s (was %s)", req.request_id, req.status.value)

    def _transition(self, req: LeaveRequest, new_status: RequestStatus, notes: Optional[str]) -> LeaveRequest:
        if new_status is RequestStatus.APPROVED and req.status is not RequestStatus.APPROVED:
            self._apply_units(req, -req.duration_units)
        elif req.status is RequestStatus.APPROVED and new_status is not RequestStatus.APPROVED:
            self._apply_units(req, +req.duration_units)

        updated = self._requests.update_request_status(
            req.request_id,
            status=new_status,
            notes=notes,
            updated_at=self._clock(),
        )
        logger.info("Request %s: %s -> %s", req.request_id, req.status.value, new_status.value)
        return updated

    def _apply_units(self, req: LeaveRequest, delta: int) -> None:
        track = req.request_type.track
        if track is None or delta == 0:
            return

        allocation = self._allocations.get_allocation(req.employee_id, req.allocation_year, for_update=True)
        if not allocation:
            logger.info(
                "No allocation for employee %s/%s; skipping balance change for request %s",
                req.employee_id, req.allocation_year, req.request_id,
            )
            return

        if track is LeaveTrack.PTO:
            updated = self._allocations.adjust_allocation(allocation.allocation_id, pto_remaining_delta=delta)
        else:
            updated = self._allocations.adjust_allocation(allocation.allocation_id, sick_remaining_delta=delta)

        remaining = updated.remaining_for(track)
        if remaining < 0:
            logger.warning(
                "%s balance for employee %s/%s is negative (%s) after request %s",
                track.value, req.employee_id, req.allocation_year, remaining, req.request_id,
            )
