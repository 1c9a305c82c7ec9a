from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from ..core.enums import LeaveType, RequestStatus
from ..core.exceptions import NotFound
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import LeaveAllocation, LeaveRequest
from .repository import AllocationRepository, LeaveRequestRepository

_ALLOCATION_COLUMNS = "allocation_id, employee_id, year, pto_total, pto_remaining, sick_total, sick_remaining"
_REQUEST_COLUMNS = (
    "request_id, employee_id, request_type, start_date, end_date, duration_units, "
    "notes, status, created_at, updated_at"
)


def _to_allocation(r: dict) -> LeaveAllocation:
    return LeaveAllocation(
        allocation_id=int(r["allocation_id"]),
        employee_id=int(r["employee_id"]),
        year=int(r["year"]),
        pto_total=int(r["pto_total"]),
        pto_remaining=int(r["pto_remaining"]),
        sick_total=int(r["sick_total"]),
        sick_remaining=int(r["sick_remaining"]),
    )


def _to_request(r: dict) -> LeaveRequest:
    return LeaveRequest(
        request_id=int(r["request_id"]),
        employee_id=int(r["employee_id"]),
        request_type=LeaveType(r["request_type"]),
        start_date=r["start_date"],
        end_date=r["end_date"],
        duration_units=int(r["duration_units"]),
        status=RequestStatus(r["status"]),
        created_at=r["created_at"],
        notes=r.get("notes") or "",
        updated_at=r.get("updated_at"),
    )


class MySQLAllocationRepository(AllocationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _get_by_id(self, cur, allocation_id: int) -> LeaveAllocation:
        cur.execute(
            f"SELECT {_ALLOCATION_COLUMNS} FROM leave_allocations WHERE allocation_id=%s",
            (int(allocation_id),),
        )
        r = fetchone(cur)
        if not r:
            raise NotFound(f"Allocation not found: {allocation_id}")
        return _to_allocation(r)

    def get_allocation(self, employee_id: int, year: int, *, for_update: bool = False) -> Optional[LeaveAllocation]:
        lock = " FOR UPDATE" if for_update else ""
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_ALLOCATION_COLUMNS} FROM leave_allocations WHERE employee_id=%s AND year=%s{lock}",
                (int(employee_id), int(year)),
            )
            r = fetchone(cur)
            return _to_allocation(r) if r else None

    def create_allocation(self, *, employee_id: int, year: int, pto_total: int, sick_total: int) -> LeaveAllocation:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO leave_allocations(employee_id, year, pto_total, pto_remaining, sick_total, sick_remaining)
                VALUES(%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE allocation_id=allocation_id
                """,
                (int(employee_id), int(year), int(pto_total), int(pto_total), int(sick_total), int(sick_total)),
            )
            cur.execute(
                f"SELECT {_ALLOCATION_COLUMNS} FROM leave_allocations WHERE employee_id=%s AND year=%s FOR UPDATE",
                (int(employee_id), int(year)),
            )
            return _to_allocation(fetchone(cur))

    def adjust_allocation(
        self,
        allocation_id: int,
        *,
        pto_remaining_delta: int = 0,
        sick_remaining_delta: int = 0,
        pto_total: Optional[int] = None,
        sick_total: Optional[int] = None,
    ) -> LeaveAllocation:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE leave_allocations
                SET pto_remaining = pto_remaining + %s,
                    sick_remaining = sick_remaining + %s,
                    pto_total = COALESCE(%s, pto_total),
                    sick_total = COALESCE(%s, sick_total)
                WHERE allocation_id=%s
                """,
                (int(pto_remaining_delta), int(sick_remaining_delta), pto_total, sick_total, int(allocation_id)),
            )
            return self._get_by_id(cur, allocation_id)

    def list_allocations(self, *, year: int, employee_id: Optional[int] = None) -> Sequence[LeaveAllocation]:
        clauses = ["year=%s"]
        params: list[object] = [int(year)]
        if employee_id is not None:
            clauses.append("employee_id=%s")
            params.append(int(employee_id))

        where = " AND ".join(clauses)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_ALLOCATION_COLUMNS} FROM leave_allocations WHERE {where} ORDER BY employee_id",
                tuple(params),
            )
            return [_to_allocation(r) for r in fetchall(cur)]


class MySQLLeaveRequestRepository(LeaveRequestRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_request(self, request_id: int, *, for_update: bool = False) -> Optional[LeaveRequest]:
        lock = " FOR UPDATE" if for_update else ""
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_REQUEST_COLUMNS} FROM leave_requests WHERE request_id=%s{lock}",
                (int(request_id),),
            )
            r = fetchone(cur)
            return _to_request(r) if r else None

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO leave_requests(
                    employee_id, request_type, start_date, end_date, duration_units, notes, status, created_at
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(employee_id),
                    request_type.value,
                    start_date,
                    end_date,
                    int(duration_units),
                    notes,
                    RequestStatus.PENDING.value,
                    created_at,
                ),
            )
            return LeaveRequest(
                request_id=int(cur.lastrowid),
                employee_id=int(employee_id),
                request_type=request_type,
                start_date=start_date,
                end_date=end_date,
                duration_units=int(duration_units),
                status=RequestStatus.PENDING,
                created_at=created_at,
                notes=notes,
            )

    def update_request_status(
        self,
        request_id: int,
        *,
        status: RequestStatus,
        notes: Optional[str],
        updated_at: datetime,
    ) -> LeaveRequest:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE leave_requests
                SET status=%s, updated_at=%s, notes=COALESCE(%s, notes)
                WHERE request_id=%s
                """,
                (status.value, updated_at, notes, int(request_id)),
            )
            cur.execute(f"SELECT {_REQUEST_COLUMNS} FROM leave_requests WHERE request_id=%s", (int(request_id),))
            r = fetchone(cur)
            if not r:
                raise NotFound(f"Time-off request not found: {request_id}")
            return _to_request(r)

    def delete_request(self, request_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM leave_requests WHERE request_id=%s", (int(request_id),))
            return cur.rowcount > 0

    def list_requests(
        self,
        *,
        status: Optional[RequestStatus] = None,
        employee_id: Optional[int] = None,
    ) -> Sequence[LeaveRequest]:
        clauses = ["1=1"]
        params: list[object] = []

        if status is not None:
            clauses.append("status=%s")
            params.append(status.value)
        if employee_id is not None:
            clauses.append("employee_id=%s")
            params.append(int(employee_id))

        where = " AND ".join(clauses)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_REQUEST_COLUMNS} FROM leave_requests WHERE {where} ORDER BY created_at DESC",
                tuple(params),
            )
            return [_to_request(r) for r in fetchall(cur)]
