from __future__ import annotations

import copy
import dataclasses
from contextlib import contextmanager
from datetime import date, datetime

import pytest

from src.timeclock.timeclock.core.enums import LeaveType, RequestStatus
from src.timeclock.timeclock.core.exceptions import (
    AlreadyProcessed,
    EmployeeNotFound,
    InvalidDateRange,
    NotFound,
    QuotaExceeded,
    StorageFailure,
    ValidationError,
)
from src.timeclock.timeclock.employees.model import Employee
from src.timeclock.timeclock.leave.ledger import LeaveLedger
from src.timeclock.timeclock.leave.model import LeaveAllocation, LeaveRequest

EMPLOYEE_ID = 1001
MON = date(2025, 3, 3)
WED = date(2025, 3, 5)
FRI = date(2025, 3, 7)


class InMemoryEmployees:
    def __init__(self, *ids: int):
        self._rows = {i: Employee(employee_id=i, name=f"E{i}", pay_rate=15.0) for i in ids}
        self.locked: list[int] = []

    def get_by_id(self, employee_id, *, for_update=False):
        if for_update:
            self.locked.append(int(employee_id))
        return self._rows.get(int(employee_id))


class InMemoryAllocations:
    def __init__(self):
        self.rows: dict[tuple[int, int], LeaveAllocation] = {}
        self.created = 0
        self.stale_reads = 0
        self._next_id = 1

    def get_allocation(self, employee_id, year, *, for_update=False):
        if self.stale_reads:
            self.stale_reads -= 1
            return None
        return self.rows.get((int(employee_id), int(year)))

    def create_allocation(self, *, employee_id, year, pto_total, sick_total):
        if (employee_id, year) in self.rows:
            return self.rows[(employee_id, year)]
        allocation = LeaveAllocation(
            allocation_id=self._next_id,
            employee_id=employee_id,
            year=year,
            pto_total=pto_total,
            pto_remaining=pto_total,
            sick_total=sick_total,
            sick_remaining=sick_total,
        )
        self._next_id += 1
        self.created += 1
        self.rows[(employee_id, year)] = allocation
        return allocation

    def adjust_allocation(
        self, allocation_id, *, pto_remaining_delta=0, sick_remaining_delta=0, pto_total=None, sick_total=None
    ):
        key = next(k for k, a in self.rows.items() if a.allocation_id == allocation_id)
        a = self.rows[key]
        self.rows[key] = dataclasses.replace(
            a,
            pto_remaining=a.pto_remaining + pto_remaining_delta,
            sick_remaining=a.sick_remaining + sick_remaining_delta,
            pto_total=a.pto_total if pto_total is None else pto_total,
            sick_total=a.sick_total if sick_total is None else sick_total,
        )
        return self.rows[key]

    def list_allocations(self, *, year, employee_id=None):
        return [a for a in self.rows.values() if a.year == year and employee_id in (None, a.employee_id)]


class InMemoryRequests:
    def __init__(self):
        self.rows: dict[int, LeaveRequest] = {}
        self.fail_on_update = False
        self._next_id = 1

    def get_request(self, request_id, *, for_update=False):
        return self.rows.get(int(request_id))

    def create_request(self, *, employee_id, request_type, start_date, end_date, duration_units, notes, created_at):
        req = LeaveRequest(
            request_id=self._next_id,
            employee_id=employee_id,
            request_type=request_type,
            start_date=start_date,
            end_date=end_date,
            duration_units=duration_units,
            status=RequestStatus.PENDING,
            created_at=created_at,
            notes=notes,
        )
        self._next_id += 1
        self.rows[req.request_id] = req
        return req

    def update_request_status(self, request_id, *, status, notes, updated_at):
        if self.fail_on_update:
            raise StorageFailure("disk full")
        req = self.rows[int(request_id)]
        self.rows[req.request_id] = dataclasses.replace(
            req, status=status, notes=req.notes if notes is None else notes, updated_at=updated_at
        )
        return self.rows[req.request_id]

    def delete_request(self, request_id):
        return self.rows.pop(int(request_id), None) is not None

    def list_requests(self, *, status=None, employee_id=None):
        return [
            r
            for r in self.rows.values()
            if status in (None, r.status) and employee_id in (None, r.employee_id)
        ]


class SnapshotTx:
    """Restores the stores' state when the outermost transaction raises."""

    def __init__(self, *stores):
        self._stores = stores
        self._depth = 0
        self.commits = 0

    @contextmanager
    def transaction(self):
        if self._depth:
            yield
            return
        snapshots = [copy.deepcopy(s.__dict__) for s in self._stores]
        self._depth += 1
        try:
            yield
            self.commits += 1
        except BaseException:
            for store, snap in zip(self._stores, snapshots):
                store.__dict__.clear()
                store.__dict__.update(snap)
            raise
        finally:
            self._depth -= 1


def make_ledger(*, allow_reversal=False):
    requests = InMemoryRequests()
    allocations = InMemoryAllocations()
    tx = SnapshotTx(requests, allocations)
    ledger = LeaveLedger(
        requests,
        allocations,
        InMemoryEmployees(EMPLOYEE_ID),
        tx,
        allow_reversal=allow_reversal,
        clock=lambda: datetime(2025, 3, 1, 9, 0),
    )
    return ledger, requests, allocations


def pto_remaining(allocations, year=2025):
    return allocations.rows[(EMPLOYEE_ID, year)].pto_remaining


def test_full_request_lifecycle_debits_on_approval_and_credits_on_delete():
    ledger, requests, allocations = make_ledger()
    ledger.upsert_allocation(EMPLOYEE_ID, 2025, pto_total=10)

    req = ledger.create_request(EMPLOYEE_ID, LeaveType.PTO, MON, FRI)
    assert req.duration_units == 5
    assert req.status == RequestStatus.PENDING
    assert pto_remaining(allocations) == 10

    ledger.set_request_status(req.request_id, RequestStatus.APPROVED)
    assert pto_remaining(allocations) == 5

    with pytest.raises(AlreadyProcessed):
        ledger.set_request_status(req.request_id, RequestStatus.DENIED)
    assert pto_remaining(allocations) == 5

    ledger.delete_request(req.request_id)
    assert pto_remaining(allocations) == 10
    assert req.request_id not in requests.rows


def test_first_request_bootstraps_default_allocation_once():
    ledger, _, allocations = make_ledger()

    ledger.create_request(EMPLOYEE_ID, "PTO", MON, MON)
    ledger.create_request(EMPLOYEE_ID, "Sick", WED, WED)

    assert allocations.created == 1
    allocation = allocations.rows[(EMPLOYEE_ID, 2025)]
    assert (allocation.pto_total, allocation.sick_total) == (10, 5)


def test_bootstrap_locks_the_employee_row():
    employees = InMemoryEmployees(EMPLOYEE_ID)
    allocations = InMemoryAllocations()
    ledger = LeaveLedger(InMemoryRequests(), allocations, employees, SnapshotTx(allocations))

    ledger.get_or_create_allocation(EMPLOYEE_ID, 2025)

    assert employees.locked == [EMPLOYEE_ID]


def test_bootstrap_reuses_row_inserted_by_a_concurrent_request():
    ledger, _, allocations = make_ledger()
    ledger.upsert_allocation(EMPLOYEE_ID, 2025, pto_total=10)
    allocations.adjust_allocation(allocations.rows[(EMPLOYEE_ID, 2025)].allocation_id, pto_remaining_delta=-4)
    allocations.stale_reads = 1

    allocation = ledger.get_or_create_allocation(EMPLOYEE_ID, 2025)

    assert allocations.created == 1
    assert allocation.pto_remaining == 6
    assert pto_remaining(allocations) == 6


def test_allocation_year_follows_start_date():
    ledger, _, allocations = make_ledger()

    ledger.create_request(EMPLOYEE_ID, LeaveType.PTO, date(2026, 1, 5), date(2026, 1, 5))

    assert (EMPLOYEE_ID, 2026) in allocations.rows
    assert (EMPLOYEE_ID, 2025) not in allocations.rows


def test_quota_exceeded_keeps_bootstrap_row_but_creates_no_request():
    ledger, requests, allocations = make_ledger()

    with pytest.raises(QuotaExceeded) as exc:
        ledger.create_request(EMPLOYEE_ID, LeaveType.SICK, MON, date(2025, 3, 14))

    assert exc.value.requested == 10
    assert exc.value.available == 5
    assert requests.rows == {}
    assert allocations.rows[(EMPLOYEE_ID, 2025)].sick_remaining == 5


def test_pending_requests_are_not_counted_against_quota():
    ledger, _, _ = make_ledger()

    ledger.create_request(EMPLOYEE_ID, LeaveType.PTO, MON, FRI)
    second = ledger.create_request(EMPLOYEE_ID, LeaveType.PTO, date(2025, 3, 10), date(2025, 3, 14))

    assert second.duration_units == 5


def test_explicit_duration_overrides_business_day_count():
    ledger, _, _ = make_ledger()

    req = ledger.create_request(EMPLOYEE_ID, LeaveType.PTO, MON, FRI, 2)

    assert req.duration_units == 2


def test_unpaid_and_other_requests_bypass_the_ledger():
    ledger, _, allocations = make_ledger()

    unpaid = ledger.create_request(EMPLOYEE_ID, LeaveType.UNPAID, MON, date(2025, 4, 30))
    other = ledger.create_request(EMPLOYEE_ID, LeaveType.OTHER, MON, FRI)
    ledger.set_request_status(unpaid.request_id, RequestStatus.APPROVED)
    ledger.delete_request(other.request_id)

    assert unpaid.duration_units > 10
    assert allocations.rows == {}


def test_start_after_end_is_rejected():
    ledger, requests, allocations = make_ledger()

    with pytest.raises(InvalidDateRange):
        ledger.create_request(EMPLOYEE_ID, LeaveType.PTO, FRI, MON)

    assert requests.rows == {} and allocations.rows == {}


def test_unknown_employee_is_rejected():
    ledger, _, allocations = make_ledger()

    with pytest.raises(EmployeeNotFound):
        ledger.create_request(9999, LeaveType.PTO, MON, FRI)

    assert allocations.rows == {}


def test_unknown_request_type_is_a_validation_error():
    ledger, _, _ = make_ledger()

    with pytest.raises(ValidationError):
        ledger.create_request(EMPLOYEE_ID, "Vacation", MON, FRI)


def test_approve_then_unapprove_nets_to_zero():
    ledger, requests, allocations = make_ledger()
    req = ledger.create_request(EMPLOYEE_ID, LeaveType.PTO, MON, WED)

    ledger.set_request_status(req.request_id, "approved")
    assert pto_remaining(allocations) == 7

    reverted = ledger.unapprove_request(req.request_id)
    assert reverted.status == RequestStatus.PENDING
    assert pto_remaining(allocations) == 10


def test_direct_reversal_credits_back_when_enabled():
    ledger, _, allocations = make_ledger(allow_reversal=True)
    req = ledger.create_request(EMPLOYEE_ID, LeaveType.SICK, MON, WED)

    ledger.set_request_status(req.request_id, RequestStatus.APPROVED)
    denied = ledger.set_request_status(req.request_id, RequestStatus.DENIED, "changed plans")

    assert denied.status == RequestStatus.DENIED
    assert denied.notes == "changed plans"
    assert allocations.rows[(EMPLOYEE_ID, 2025)].sick_remaining == 5


def test_denied_request_cannot_be_approved_even_with_reversal_enabled():
    ledger, _, allocations = make_ledger(allow_reversal=True)
    req = ledger.create_request(EMPLOYEE_ID, LeaveType.PTO, MON, WED)
    ledger.set_request_status(req.request_id, RequestStatus.DENIED)

    with pytest.raises(AlreadyProcessed):
        ledger.set_request_status(req.request_id, RequestStatus.APPROVED)
    assert pto_remaining(allocations) == 10


def test_confirming_same_status_does_not_debit_twice():
    ledger, _, allocations = make_ledger()
    req = ledger.create_request(EMPLOYEE_ID, LeaveType.PTO, MON, WED)

    ledger.set_request_status(req.request_id, RequestStatus.APPROVED)
    again = ledger.set_request_status(req.request_id, RequestStatus.APPROVED)

    assert again.status == RequestStatus.APPROVED
    assert pto_remaining(allocations) == 7


def test_pending_to_denied_leaves_balance_untouched():
    ledger, _, allocations = make_ledger()
    req = ledger.create_request(EMPLOYEE_ID, LeaveType.PTO, MON, WED)

    ledger.set_request_status(req.request_id, RequestStatus.DENIED)
    ledger.delete_request(req.request_id)

    assert pto_remaining(allocations) == 10


def test_approval_without_allocation_row_skips_debit():
    ledger, requests, allocations = make_ledger()
    req = ledger.create_request(EMPLOYEE_ID, LeaveType.PTO, MON, WED)
    allocations.rows.clear()

    approved = ledger.set_request_status(req.request_id, RequestStatus.APPROVED)

    assert approved.status == RequestStatus.APPROVED
    assert allocations.rows == {}


def test_balance_may_go_negative_after_allocation_shrinks():
    ledger, _, allocations = make_ledger()
    req = ledger.create_request(EMPLOYEE_ID, LeaveType.PTO, MON, FRI)
    ledger.upsert_allocation(EMPLOYEE_ID, 2025, pto_total=2)

    ledger.set_request_status(req.request_id, RequestStatus.APPROVED)

    assert pto_remaining(allocations) == -3


def test_failed_status_write_rolls_back_the_debit():
    ledger, requests, allocations = make_ledger()
    req = ledger.create_request(EMPLOYEE_ID, LeaveType.PTO, MON, FRI)
    requests.fail_on_update = True

    with pytest.raises(StorageFailure):
        ledger.set_request_status(req.request_id, RequestStatus.APPROVED)

    assert pto_remaining(allocations) == 10
    assert requests.rows[req.request_id].status == RequestStatus.PENDING


def test_unknown_request_id_raises_not_found():
    ledger, _, _ = make_ledger()

    with pytest.raises(NotFound):
        ledger.set_request_status(42, RequestStatus.APPROVED)
    with pytest.raises(NotFound):
        ledger.delete_request(42)


def test_raising_total_preserves_used_units():
    ledger, _, allocations = make_ledger()
    ledger.upsert_allocation(EMPLOYEE_ID, 2025, pto_total=10, sick_total=5)
    req = ledger.create_request(EMPLOYEE_ID, LeaveType.PTO, MON, WED)
    ledger.set_request_status(req.request_id, RequestStatus.APPROVED)
    assert pto_remaining(allocations) == 7

    updated = ledger.upsert_allocation(EMPLOYEE_ID, 2025, pto_total=12)

    assert updated.pto_total == 12
    assert updated.pto_remaining == 9
    assert (updated.sick_total, updated.sick_remaining) == (5, 5)


def test_new_allocation_starts_full():
    ledger, _, _ = make_ledger()

    allocation = ledger.upsert_allocation(EMPLOYEE_ID, 2025, pto_total=15, sick_total=8)

    assert (allocation.pto_remaining, allocation.sick_remaining) == (15, 8)


def test_negative_totals_are_rejected():
    ledger, _, _ = make_ledger()

    with pytest.raises(ValidationError):
        ledger.upsert_allocation(EMPLOYEE_ID, 2025, pto_total=-1)
